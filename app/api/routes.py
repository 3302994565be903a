# app/api/routes.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from agents.analyzer_agent import InvalidUrlError, analyze_single_page, analyze_website
from app.config import settings
from models.analysis_models import AnalysisResult, ClassificationType, MatchRecord
from models.keyword_models import FINANCING_KEYWORDS, KeywordEntry

logger = logging.getLogger(__name__)

router = APIRouter()


# --------- Request / Response モデル ---------


class AnalyzeRequest(BaseModel):
    url: str
    # True のとき抽出テキストも返す（デバッグ用）
    include_text: bool = False


class AnalyzeResponse(BaseModel):
    url: str
    classification: ClassificationType
    confidence: float
    matched_keywords: List[MatchRecord] = []
    crawled_pages: List[str] = []
    triggered_url: Optional[str] = None
    analysis_method: str
    content_length: int = 0
    javascript_rendered: bool = False
    full_text: Optional[str] = None
    # 切り詰め前の full_text の文字数（include_text のときのみ）
    text_length: Optional[int] = None
    timestamp: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str


# --------- ヘルパ ---------


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ensure_scheme(url: str) -> str:
    """"example.com" のようにスキーム無しで渡されたら https を補う。"""
    url = (url or "").strip()
    if url and "://" not in url:
        return f"https://{url}"
    return url


def _truncate(text: Optional[str], limit: int) -> Optional[str]:
    if text is None or limit <= 0:
        return text
    return text[:limit]


def _to_response(
    url: str,
    result: AnalysisResult,
    include_text: bool,
) -> AnalyzeResponse:
    """コアの結果にタイムスタンプ等を足してレスポンスに整形する。"""
    return AnalyzeResponse(
        url=url,
        classification=result.classification,
        confidence=result.confidence,
        matched_keywords=result.matched_keywords,
        crawled_pages=result.crawled_pages,
        triggered_url=result.triggered_url,
        analysis_method=result.analysis_method,
        content_length=result.content_length,
        full_text=_truncate(result.full_text, settings.debug_text_max_chars)
        if include_text
        else None,
        text_length=len(result.full_text or "") if include_text else None,
        timestamp=_utc_now(),
    )


# --------- エンドポイント ---------


@router.get("/health", response_model=HealthResponse)
def api_health() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=_utc_now())


@router.get("/keywords", response_model=List[KeywordEntry])
def api_keywords() -> List[KeywordEntry]:
    """スキャンに使うキーワード分類表（読み取り専用）。"""
    return list(FINANCING_KEYWORDS)


def _run_analyze(raw_url: str, include_text: bool) -> AnalyzeResponse:
    """POST / GET の /analyze 共通処理。"""
    url = _ensure_scheme(raw_url)
    logger.info(
        "[api.analyze] start url=%s include_text=%s",
        url,
        "YES" if include_text else "NO",
    )

    try:
        result = analyze_website(url)
    except InvalidUrlError as e:
        logger.info("[api.analyze] invalid url=%s error=%s", raw_url, e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    logger.info(
        "[api.analyze] done url=%s classification=%s confidence=%s pages=%s",
        url,
        result.classification,
        result.confidence,
        len(result.crawled_pages),
    )
    return _to_response(url, result, include_text)


@router.post("/analyze", response_model=AnalyzeResponse)
def api_analyze(payload: AnalyzeRequest) -> AnalyzeResponse:
    """
    シード URL から同一ドメイン内を浅くクロールして判定するメインAPI。
    最初にマッチしたページで打ち切る。
    """
    return _run_analyze(payload.url, payload.include_text)


@router.get("/analyze", response_model=AnalyzeResponse)
def api_analyze_query(
    url: str,
    include_text: bool = False,
    debug: bool = False,
) -> AnalyzeResponse:
    """
    ブラウザから叩いて確認するための GET 版。
    例: /api/analyze?url=https://example.com&debug=true
    """
    return _run_analyze(url, include_text or debug)


@router.post("/analyze-page", response_model=AnalyzeResponse)
def api_analyze_page(payload: AnalyzeRequest) -> AnalyzeResponse:
    """シード URL 1 ページだけを判定する API（リンクはたどらない）。"""
    url = _ensure_scheme(payload.url)
    logger.info("[api.analyze-page] start url=%s", url)

    try:
        result = analyze_single_page(url)
    except InvalidUrlError as e:
        logger.info("[api.analyze-page] invalid url=%s error=%s", payload.url, e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    logger.info(
        "[api.analyze-page] done url=%s classification=%s confidence=%s",
        url,
        result.classification,
        result.confidence,
    )
    return _to_response(url, result, payload.include_text)
