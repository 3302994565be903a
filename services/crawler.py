# services/crawler.py

from __future__ import annotations

import logging
from typing import Optional

import requests
from bs4 import UnicodeDammit

from app.config import settings

logger = logging.getLogger(__name__)

# HTML として扱う Content-Type（未指定の場合も本文を読む）
_TEXT_CONTENT_TYPES = ("text/html", "application/xhtml+xml", "text/plain")


def fetch_html(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> str:
    """
    単純な GET。並列もリトライも入れていない。

    タイムアウト・DNS 失敗・TLS エラー・非 2xx などはすべて空文字として返す。
    1 ページ取れないだけでサイト全体のスキャンを止めないため、
    ネットワーク起因の例外はここで握る。
    """
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5",
    }
    timeout = settings.request_timeout_seconds if timeout is None else timeout
    getter = session.get if session is not None else requests.get

    try:
        resp = getter(url, headers=headers, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.warning("[crawler] Fetch failed: url=%s error=%s", url, e)
        return ""

    content_type = (resp.headers.get("Content-Type") or "").split(";", 1)[0].strip().lower()
    if content_type and content_type not in _TEXT_CONTENT_TYPES:
        logger.info("[crawler] Skip non-HTML: url=%s content_type=%s", url, content_type)
        return ""

    # charset 無しの text/html は requests が ISO-8859-1 扱いにして文字化けするので、
    # <meta charset> → UTF-8 → 推定 の順でバイト列をデコードする
    if "charset=" not in (resp.headers.get("Content-Type") or "").lower():
        decoded = UnicodeDammit(resp.content, user_encodings=["utf-8"], is_html=True).unicode_markup
        if decoded is not None:
            return decoded

    return resp.text or ""
