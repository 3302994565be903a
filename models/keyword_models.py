# models/keyword_models.py

from __future__ import annotations

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------
# キーワードの重み区分
# -----------------------------------------
class KeywordWeight(str, Enum):
    HIGH = "high"          # 単体で融資・見積もりの意図を強く示す
    STANDARD = "standard"  # 弱いシグナル


class KeywordEntry(BaseModel):
    """スキャン対象キーワード 1 件。

    Attributes:
        phrase (str): 小文字 ASCII のフレーズ（リテラルとして扱う）。
        weight (KeywordWeight): スコアへの寄与区分。
    """

    model_config = ConfigDict(frozen=True)

    phrase: str = Field(..., min_length=1)
    weight: KeywordWeight = KeywordWeight.STANDARD

    @property
    def is_high_confidence(self) -> bool:
        return self.weight is KeywordWeight.HIGH


def _high(phrase: str) -> KeywordEntry:
    return KeywordEntry(phrase=phrase, weight=KeywordWeight.HIGH)


def _std(phrase: str) -> KeywordEntry:
    return KeywordEntry(phrase=phrase, weight=KeywordWeight.STANDARD)


# -----------------------------------------
# キーワード分類表
# → 起動時に 1 度だけ作られ、以後は読み取り専用
# → 並び順 = マッチ結果の並び順
# -----------------------------------------
FINANCING_KEYWORDS: Tuple[KeywordEntry, ...] = (
    # Financing
    _std("finance"),
    _high("financing"),
    _high("apply now"),
    _std("credit"),
    _std("loan"),
    _high("payment plan"),
    _std("installment"),
    _high("monthly payment"),
    _std("deferred payment"),
    _std("no credit check"),
    _std("bad credit"),
    _high("credit approval"),
    _std("instant credit"),
    _std("pre-qualify"),
    _high("get approved"),
    _high("buy now pay later"),
    _std("bnpl"),
    _std("0% apr"),
    _std("interest free"),
    _std("special financing"),
    _high("finance options"),
    _std("payment options"),
    _high("affirm"),
    _high("klarna"),
    _high("afterpay"),
    _std("sezzle"),
    _std("paypal credit"),
    _std("finance available"),

    # Quote
    _high("instant quote"),
    _high("get a quote"),
    _high("request a quote"),
    _high("quote now"),
    _std("free quote"),
    _std("get pricing"),
    _std("request estimate"),
    _std("get estimate"),
)
