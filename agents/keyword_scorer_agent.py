# agents/keyword_scorer_agent.py

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import List, Optional, Sequence

from app.config import settings
from models.analysis_models import ClassificationPolicy, MatchRecord, ScoreResult
from models.keyword_models import FINANCING_KEYWORDS, KeywordEntry

logger = logging.getLogger(__name__)


# ============================================================
# マッチング
# ============================================================

@lru_cache(maxsize=256)
def _compile(phrase: str, word_boundaries: bool) -> re.Pattern:
    """
    キーワードはパターンではなくリテラルとして扱う（メタ文字はエスケープ）。
    word_boundaries=True のときだけ前後に英数字が続かないことを要求する。
    """
    escaped = re.escape(phrase)
    if word_boundaries:
        escaped = rf"(?<!\w){escaped}(?!\w)"
    return re.compile(escaped)


def count_occurrences(text: str, phrase: str, word_boundaries: bool = False) -> int:
    """重ならない出現回数。text は正規化（小文字化）済みの前提。"""
    if not text or not phrase:
        return 0
    return len(_compile(phrase, word_boundaries).findall(text))


def find_matches(
    text: str,
    keywords: Sequence[KeywordEntry] = FINANCING_KEYWORDS,
    word_boundaries: Optional[bool] = None,
) -> List[MatchRecord]:
    """
    分類表の順にキーワードを走査し、見つかったものを MatchRecord で返す。

    デフォルトは単語境界なしの部分一致（"refinancing" 中の "financing" も拾う）。
    取りこぼしより誤検知を許容する方針。
    """
    if word_boundaries is None:
        word_boundaries = settings.keyword_word_boundaries

    matches: List[MatchRecord] = []
    for entry in keywords:
        count = count_occurrences(text, entry.phrase, word_boundaries)
        if count > 0:
            matches.append(
                MatchRecord(
                    keyword=entry.phrase,
                    count=count,
                    is_high_confidence=entry.is_high_confidence,
                )
            )
    return matches


# ============================================================
# スコア・判定
# ============================================================

def compute_confidence(
    matches: Sequence[MatchRecord],
    high_weight: Optional[float] = None,
    standard_weight: Optional[float] = None,
) -> float:
    """weight × 出現回数 の合計を [0, 1] にクランプし、小数 3 桁に丸める。"""
    high_weight = settings.high_confidence_weight if high_weight is None else high_weight
    standard_weight = settings.standard_weight if standard_weight is None else standard_weight

    score = 0.0
    for m in matches:
        score += (high_weight if m.is_high_confidence else standard_weight) * m.count

    score = min(max(score, 0.0), 1.0)
    return round(score, 3)


def classify(
    matches: Sequence[MatchRecord],
    policy: ClassificationPolicy = ClassificationPolicy.THRESHOLD,
    min_distinct_matches: Optional[int] = None,
) -> bool:
    """
    Proactive なら True。

    - IMMEDIATE: マッチが 1 件でもあれば True
    - THRESHOLD: 高信頼キーワードのマッチがある、
      または distinct マッチ数が min_distinct_matches 以上
    """
    if not matches:
        return False
    if policy is ClassificationPolicy.IMMEDIATE:
        return True

    if min_distinct_matches is None:
        min_distinct_matches = settings.min_distinct_matches
    has_high = any(m.is_high_confidence for m in matches)
    return has_high or len(matches) >= min_distinct_matches


def score_text(
    text: str,
    keywords: Sequence[KeywordEntry] = FINANCING_KEYWORDS,
    policy: ClassificationPolicy = ClassificationPolicy.THRESHOLD,
    min_distinct_matches: Optional[int] = None,
    word_boundaries: Optional[bool] = None,
) -> ScoreResult:
    """正規化済みテキスト 1 件をスコアリングするショートカット。"""
    matches = find_matches(text, keywords, word_boundaries=word_boundaries)
    confidence = compute_confidence(matches)
    is_proactive = classify(matches, policy, min_distinct_matches)

    if matches:
        logger.debug(
            "[keyword_scorer] matches=%s confidence=%s proactive=%s",
            [m.keyword for m in matches],
            confidence,
            is_proactive,
        )

    return ScoreResult(matches=matches, confidence=confidence, is_proactive=is_proactive)
