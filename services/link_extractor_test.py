"""link_extractor.py のテスト（同一 origin のクロール候補抽出）。"""

from services.link_extractor import (
    extract_links,
    is_asset_url,
    is_denied_path,
    normalize_url,
    same_origin,
)

DENY = ["blog", "news", "about", "privacy", "terms", "career", "admin", "login", "cart", "wp-content"]

PAGE_HTML = """
<html><body>
  <a href="/financing">Financing</a>
  <a href="services/plan">Plans</a>
  <a href="https://other.com/financing">Partner</a>
  <a href="https://shop.example.com/">Shop</a>
  <a href="http://example.com/insecure">Insecure</a>
  <a href="/logo.png">Logo</a>
  <a href="/brochure.PDF">Brochure</a>
  <a href="/blog/post-1">Blog</a>
  <a href="/about-us">About</a>
  <a href="/financing#rates">Rates</a>
  <a href="mailto:sales@example.com">Mail</a>
  <a href="javascript:void(0)">JS</a>
  <a href="">Empty</a>
  <a>No href</a>
  <map><area href="/get-a-quote"></map>
</body></html>
"""


def test_extract_links_filters_and_resolves():
    links = extract_links(
        PAGE_HTML,
        page_url="https://example.com/home/",
        seed_url="https://example.com/",
        deny_keywords=DENY,
    )
    assert links == [
        "https://example.com/financing",
        "https://example.com/home/services/plan",
        "https://example.com/get-a-quote",
    ]


def test_extract_links_never_leaves_seed_origin():
    links = extract_links(PAGE_HTML, "https://example.com/", "https://example.com/")
    assert links
    assert all(same_origin(link, "https://example.com/") for link in links)


def test_extract_links_without_deny_list_keeps_blog():
    links = extract_links(PAGE_HTML, "https://example.com/", "https://example.com/")
    assert "https://example.com/blog/post-1" in links


def test_extract_links_empty_html():
    assert extract_links("", "https://example.com/", "https://example.com/") == []


def test_same_origin():
    assert same_origin("https://example.com/a", "https://EXAMPLE.com/b")
    assert same_origin("https://example.com:443/a", "https://example.com/")
    assert not same_origin("https://example.com/", "http://example.com/")
    assert not same_origin("https://example.com/", "https://example.com:8443/")
    assert not same_origin("https://www.example.com/", "https://example.com/")
    assert not same_origin("mailto:a@example.com", "https://example.com/")


def test_is_asset_url():
    assert is_asset_url("https://example.com/img/hero.JPG")
    assert is_asset_url("https://example.com/files/archive.zip")
    assert not is_asset_url("https://example.com/financing")
    assert not is_asset_url("https://example.com/page.html")


def test_is_denied_path():
    assert is_denied_path("https://example.com/careers/open", DENY)
    assert is_denied_path("https://example.com/about-us", DENY)
    assert not is_denied_path("https://example.com/financing", DENY)
    assert not is_denied_path("https://example.com/", DENY)
    # host 名は対象外
    assert not is_denied_path("https://blog.example.com/financing", DENY)


def test_normalize_url():
    assert normalize_url("HTTPS://Example.COM") == "https://example.com/"
    assert normalize_url("https://example.com/a#frag") == "https://example.com/a"
    assert normalize_url("https://example.com/a?x=1") == "https://example.com/a?x=1"


def test_is_denied_path_matches_leading_word_only():
    assert is_denied_path("https://example.com/terms-of-service", DENY)
    assert is_denied_path("https://example.com/privacy_policy", DENY)
    assert is_denied_path("https://example.com/login.php", DENY)
    assert is_denied_path("https://example.com/wp-content/uploads/x", DENY)

    # 語の一部や後半に含まれるだけなら除外しない
    assert not is_denied_path("https://example.com/financing-terms", DENY)
    assert not is_denied_path("https://example.com/newsletter", DENY)
    assert not is_denied_path("https://example.com/shop/cartridges", DENY)


def test_extract_links_keeps_financing_terms_page():
    html = '<a href="/financing-terms">Terms</a><a href="/terms">Site terms</a>'
    links = extract_links(html, "https://example.com/", "https://example.com/", DENY)
    assert links == ["https://example.com/financing-terms"]
