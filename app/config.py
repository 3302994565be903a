# app/config.py

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DENY_PATH_KEYWORDS: List[str] = [
    "blog",
    "news",
    "about",
    "privacy",
    "terms",
    "career",
    "jobs",
    "admin",
    "login",
    "signin",
    "account",
    "cart",
    "wp-content",
    "wp-json",
]


class Settings(BaseSettings):
    """
    スキャナ全体で使う設定クラス。
    .env / 環境変数から読み込み、属性として参照できるようにする。
    """

    # ---------- クロール ----------
    # 1 回の解析で取得する最大ページ数（レイテンシと送信リクエスト数の上限）
    max_pages: int = Field(5, ge=1)

    # 1 リクエストあたりのタイムアウト秒数
    request_timeout_seconds: float = 10.0

    # ページ間の待ち時間（相手サイトへの配慮）
    crawl_delay_seconds: float = 0.1

    # スキャン対象サイトの運営者がトラフィックを識別・ブロックできる UA
    user_agent: str = "Mozilla/5.0 (compatible; FinancingSiteScanner/0.1; +https://example.com/scanner)"

    # クロールしても意味のないパス（パスセグメントに含まれていたら除外）
    deny_path_keywords: List[str] = Field(
        default_factory=lambda: list(DEFAULT_DENY_PATH_KEYWORDS)
    )

    # ---------- スコアリング ----------
    high_confidence_weight: float = 0.4
    standard_weight: float = 0.15

    # THRESHOLD ポリシーで Proactive と判定する distinct キーワード数の下限
    min_distinct_matches: int = Field(2, ge=1)

    # True にすると単語境界を要求する（精度寄り）。デフォルトは再現率寄り
    keyword_word_boundaries: bool = False

    # ---------- API / ログ ----------
    # include_text=true のときに返す本文の最大文字数
    debug_text_max_chars: int = 5000

    log_level: str = "INFO"

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
