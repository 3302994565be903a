"""config.py のテスト（環境変数による設定）。"""

from app.config import DEFAULT_DENY_PATH_KEYWORDS, Settings


def test_defaults(monkeypatch):
    for name in ("MAX_PAGES", "REQUEST_TIMEOUT_SECONDS", "MIN_DISTINCT_MATCHES"):
        monkeypatch.delenv(name, raising=False)

    s = Settings(_env_file=None)

    assert s.max_pages == 5
    assert 8.0 <= s.request_timeout_seconds <= 10.0
    assert s.crawl_delay_seconds == 0.1
    assert s.high_confidence_weight == 0.4
    assert s.standard_weight == 0.15
    assert s.min_distinct_matches == 2
    assert s.keyword_word_boundaries is False
    assert s.deny_path_keywords == DEFAULT_DENY_PATH_KEYWORDS
    assert "Scanner" in s.user_agent


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MAX_PAGES", "8")
    monkeypatch.setenv("KEYWORD_WORD_BOUNDARIES", "true")
    monkeypatch.setenv("DENY_PATH_KEYWORDS", '["blog", "shop"]')

    s = Settings(_env_file=None)

    assert s.max_pages == 8
    assert s.keyword_word_boundaries is True
    assert s.deny_path_keywords == ["blog", "shop"]
