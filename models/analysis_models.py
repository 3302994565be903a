# models/analysis_models.py

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


ClassificationType = Literal[
    "Proactive",  # 融資・見積もりを積極的に打ち出している
    "NonUser",    # 十分な根拠が見つからなかった
]


class ClassificationPolicy(str, Enum):
    """
    マッチ結果から Proactive 判定するときのポリシー。

    - IMMEDIATE: 1 件でもマッチすれば Proactive（複数ページのクロール用）
    - THRESHOLD: 高信頼キーワードが 1 件以上、または distinct マッチ数が閾値以上
    """
    IMMEDIATE = "immediate"
    THRESHOLD = "threshold"


class MatchRecord(BaseModel):
    """1 ページ内で見つかった 1 キーワード分のマッチ情報。"""

    model_config = ConfigDict(frozen=True)

    keyword: str
    count: int = Field(..., ge=1)
    is_high_confidence: bool = False


class ScoreResult(BaseModel):
    """テキスト 1 件に対するスコアリング結果。"""

    matches: List[MatchRecord] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    is_proactive: bool = False


class PageResult(BaseModel):
    """
    取得した 1 ページ分の解析結果。
    集計後は基本的に不要だが、診断用に AnalysisResult.pages に残す。
    """

    url: str
    normalized_text: str = ""
    matches: List[MatchRecord] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class AnalysisResult(BaseModel):
    """
    1 回の解析の最終出力。生成後は変更しない。
    タイムスタンプは付けない（API 層で付与する）。
    """

    model_config = ConfigDict(frozen=True)

    classification: ClassificationType
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    matched_keywords: List[MatchRecord] = Field(default_factory=list)

    # 訪問した URL（訪問順）
    crawled_pages: List[str] = Field(default_factory=list)

    # Proactive の場合のみ、判定のきっかけになったページ
    triggered_url: Optional[str] = None

    # 正規化済みテキスト（全ページ分を連結）。整形・切り詰めは呼び出し側の責務
    full_text: Optional[str] = None

    pages: List[PageResult] = Field(default_factory=list)
    analysis_method: str = "requests"
    content_length: int = 0

    @property
    def is_proactive(self) -> bool:
        return self.classification == "Proactive"
