"""html_parser.py のテスト（テキスト正規化）。"""

import pytest

from services.html_parser import normalize_html, normalize_text


def test_noise_tags_are_removed():
    html = """
    <html><body>
      <script>var offer = "financing";</script>
      <style>.financing { color: red; }</style>
      <noscript>Apply now for credit</noscript>
      <p>Welcome to our shop</p>
    </body></html>
    """
    assert normalize_html(html) == "welcome to our shop"


def test_head_content_is_excluded():
    html = """
    <html>
      <head>
        <title>Financing Options</title>
        <meta name="description" content="Get a quote today">
      </head>
      <body><h1>Garden Supplies</h1></body>
    </html>
    """
    assert normalize_html(html) == "garden supplies"


def test_em_dash_and_case_are_normalized():
    html = "<html><body><p>Apply Now \u2014 financing available</p></body></html>"
    assert normalize_html(html) == "apply now - financing available"


def test_en_dash_becomes_hyphen():
    assert normalize_text("0\u20135 years") == "0-5 years"


def test_unicode_spaces_become_ascii_space():
    text = "Buy\u00a0Now\u2003Pay\u202fLater\u3000Today"
    assert normalize_text(text) == "buy now pay later today"


def test_compatibility_characters_are_folded():
    # 全角英字は NFKD で ASCII に落ちる
    assert normalize_text("ＦＩＮＡＮＣＩＮＧ") == "financing"


def test_whitespace_is_collapsed_and_trimmed():
    html = "<body>\n\n   Get \t a\n   Quote   </body>"
    assert normalize_html(html) == "get a quote"


def test_fragment_without_body():
    assert normalize_html("<p>Hello <b>World</b></p>") == "hello world"


def test_malformed_markup_is_tolerated():
    html = "<div><p>Get a Quote</span></b><td>Monthly Payment"
    text = normalize_html(html)
    assert "get a quote" in text
    assert "monthly payment" in text


@pytest.mark.parametrize("raw", ["", None])
def test_empty_input_gives_empty_string(raw):
    assert normalize_html(raw) == ""
    assert normalize_text(raw) == ""


@pytest.mark.parametrize(
    "html",
    [
        "<body><p>Apply Now \u2014 Financing\u00a0Available</p></body>",
        "<p>  Special   FINANCING \u2013 0% APR  </p>",
        "<html><head><title>x</title></head><body>Café １００</body></html>",
        "plain text without markup",
    ],
)
def test_normalization_is_idempotent(html):
    once = normalize_html(html)
    assert normalize_html(once) == once
    assert normalize_text(once) == once
