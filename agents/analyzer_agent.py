# agents/analyzer_agent.py

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional, Sequence
from urllib.parse import urlparse

import requests

from app.config import settings
from agents.keyword_scorer_agent import score_text
from models.analysis_models import AnalysisResult, ClassificationPolicy, PageResult
from models.keyword_models import FINANCING_KEYWORDS, KeywordEntry
from models.site_models import CrawlState
from services.crawler import fetch_html
from services.html_parser import normalize_html
from services.link_extractor import extract_links, normalize_url

logger = logging.getLogger(__name__)

# URL -> 生 HTML（失敗時は空文字）。例外は投げない前提
FetchFunc = Callable[[str], str]


class InvalidUrlError(ValueError):
    """シード URL が解析できない場合のエラー。ネットワークアクセス前に投げる。"""


# ============================================================
# ユーティリティ
# ============================================================

def validate_seed_url(url: str) -> str:
    """
    http(s) のスキームとホストを持つ URL だけを受け付ける。
    重複判定のため正規化（フラグメント除去など）して返す。
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("url is required")

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ("http", "https"):
        raise InvalidUrlError(f"unsupported url scheme: {url!r}")
    if not parsed.hostname:
        raise InvalidUrlError(f"url has no host: {url!r}")
    try:
        parsed.port
    except ValueError as e:
        raise InvalidUrlError(f"invalid port in url: {url!r}") from e

    return normalize_url(url)


def _joined_text(pages: List[PageResult]) -> Optional[str]:
    text = " ".join(p.normalized_text for p in pages if p.normalized_text)
    return text or None


def _content_length(pages: List[PageResult]) -> int:
    return sum(len(p.normalized_text) for p in pages)


def _analyze_page(
    url: str,
    html: str,
    keywords: Sequence[KeywordEntry],
    policy: ClassificationPolicy,
):
    """1 ページ分: 正規化 → スコアリング。"""
    text = normalize_html(html)
    score = score_text(text, keywords, policy=policy)
    page = PageResult(
        url=url,
        normalized_text=text,
        matches=score.matches,
        confidence=score.confidence,
    )
    return page, score.is_proactive


def _non_user_result(
    crawled_pages: List[str],
    pages: List[PageResult],
    analysis_method: str,
) -> AnalysisResult:
    """根拠なし。失敗ではなく「見つからなかった」という通常の結果。"""
    return AnalysisResult(
        classification="NonUser",
        confidence=0.0,
        matched_keywords=[],
        crawled_pages=crawled_pages,
        triggered_url=None,
        full_text=_joined_text(pages),
        pages=pages,
        analysis_method=analysis_method,
        content_length=_content_length(pages),
    )


def _proactive_result(
    page: PageResult,
    crawled_pages: List[str],
    pages: List[PageResult],
    analysis_method: str,
) -> AnalysisResult:
    return AnalysisResult(
        classification="Proactive",
        confidence=page.confidence,
        matched_keywords=page.matches,
        crawled_pages=crawled_pages,
        triggered_url=page.url,
        full_text=_joined_text(pages),
        pages=pages,
        analysis_method=analysis_method,
        content_length=_content_length(pages),
    )


# ============================================================
# メインロジック
# ============================================================

def _crawl(
    seed: str,
    fetch: FetchFunc,
    max_pages: int,
    delay_seconds: float,
    policy: ClassificationPolicy,
    keywords: Sequence[KeywordEntry],
    deny_keywords: Sequence[str],
    cancel_event: Optional[threading.Event],
) -> AnalysisResult:
    state = CrawlState(max_pages=max_pages, queue=[seed])
    pages: List[PageResult] = []

    state.status = "Crawling"
    while state.has_budget():
        # キャンセルはページ間でのみ確認する（フェッチ途中では止めない）
        if cancel_event is not None and cancel_event.is_set():
            logger.info("[analyzer] Cancelled: seed=%s visited=%s", seed, state.pages_visited)
            break

        url = state.pop_next()
        if state.is_visited(url):
            continue
        state.mark_visited(url)

        logger.info("[analyzer] Fetching (%s/%s): %s", state.pages_visited, max_pages, url)
        html = fetch(url)
        page, is_proactive = _analyze_page(url, html, keywords, policy)
        pages.append(page)

        if is_proactive:
            state.status = "Found"
            logger.info(
                "[analyzer] Found: seed=%s url=%s keywords=%s confidence=%s",
                seed,
                url,
                [m.keyword for m in page.matches],
                page.confidence,
            )
            return _proactive_result(page, list(state.visited), pages, "crawl")

        added = state.enqueue(extract_links(html, url, seed, deny_keywords))
        logger.debug("[analyzer] url=%s enqueued=%s queue=%s", url, added, len(state.queue))

        if delay_seconds > 0 and state.has_budget():
            time.sleep(delay_seconds)

    state.status = "Exhausted"
    logger.info("[analyzer] Exhausted: seed=%s visited=%s", seed, state.pages_visited)
    return _non_user_result(list(state.visited), pages, "crawl")


def analyze_website(
    url: str,
    *,
    max_pages: Optional[int] = None,
    delay_seconds: Optional[float] = None,
    policy: ClassificationPolicy = ClassificationPolicy.IMMEDIATE,
    fetch: Optional[FetchFunc] = None,
    cancel_event: Optional[threading.Event] = None,
    keywords: Sequence[KeywordEntry] = FINANCING_KEYWORDS,
) -> AnalysisResult:
    """
    シード URL から同一 origin 内を幅優先で浅くクロールし、
    融資・見積もりを打ち出しているサイトか判定する。

    - 最初に Proactive 判定されたページでクロールを打ち切る
      （policy は 1 ページ単位で適用。ページ間でのスコア集計はしない）
    - 訪問ページ数は max_pages を超えない
    - フェッチ失敗は空ページ扱いで、例外にはしない
    - 例外になるのは不正なシード URL（InvalidUrlError）のみ

    fetch を渡さない場合は、呼び出しごとに requests.Session を作って閉じる。
    """
    seed = validate_seed_url(url)
    max_pages = settings.max_pages if max_pages is None else max_pages
    delay_seconds = settings.crawl_delay_seconds if delay_seconds is None else delay_seconds
    if max_pages < 1:
        raise ValueError(f"max_pages must be >= 1: {max_pages}")

    logger.info(
        "[analyzer] analyze_website start url=%s max_pages=%s policy=%s",
        seed,
        max_pages,
        policy.value,
    )

    session: Optional[requests.Session] = None
    if fetch is None:
        session = requests.Session()

        def fetch(page_url: str) -> str:
            return fetch_html(page_url, session=session)

    try:
        return _crawl(
            seed=seed,
            fetch=fetch,
            max_pages=max_pages,
            delay_seconds=delay_seconds,
            policy=policy,
            keywords=keywords,
            deny_keywords=settings.deny_path_keywords,
            cancel_event=cancel_event,
        )
    finally:
        if session is not None:
            session.close()


def analyze_single_page(
    url: str,
    *,
    fetch: Optional[FetchFunc] = None,
    keywords: Sequence[KeywordEntry] = FINANCING_KEYWORDS,
) -> AnalysisResult:
    """
    シード URL 1 ページだけを THRESHOLD ポリシーで判定する。
    リンクはたどらない。
    """
    seed = validate_seed_url(url)
    fetch = fetch or fetch_html

    logger.info("[analyzer] analyze_single_page url=%s", seed)
    html = fetch(seed)
    page, is_proactive = _analyze_page(seed, html, keywords, ClassificationPolicy.THRESHOLD)

    if is_proactive:
        return _proactive_result(page, [seed], [page], "single-page")
    return _non_user_result([seed], [page], "single-page")
