# services/html_parser.py

from __future__ import annotations

import re
import unicodedata
import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# 解析に混ぜたくないタグ（キーワードの誤検知源になりやすい）
NOISE_TAGS = ["script", "style", "noscript"]

# NBSP / em・en スペース / 細い NBSP / 和文スペースなど
_UNICODE_SPACES = re.compile(r"[\u00a0\u1680\u2000-\u200a\u202f\u205f\u3000]")

# en dash / em dash
_DASHES = re.compile(r"[\u2013\u2014]")

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """
    プレーンテキストを比較可能な正規形に変換する。

    1) NFKD でダイアクリティカルマークや互換文字を分解
    2) 小文字化
    3) Unicode の各種スペースを ASCII スペースへ
    4) en/em dash をハイフンへ
    5) 連続空白を 1 つにまとめて前後を trim

    キーワードは ASCII で書かれているので、"Apply—Now" や NBSP 入りの
    テキストもここで揃えておかないとリテラル一致しない。
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKD", text)
    text = text.lower()
    text = _UNICODE_SPACES.sub(" ", text)
    text = _DASHES.sub("-", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def _extract_body_text(soup: BeautifulSoup) -> str:
    """script/style 等を除去して body の可視テキストを抽出する。"""
    for tag in soup(NOISE_TAGS):
        tag.decompose()

    body = soup.body
    if body is None:
        # body タグが無い断片 HTML の場合は head だけ落として全体を使う
        if soup.head is not None:
            soup.head.decompose()
        body = soup

    return body.get_text(separator=" ")


def normalize_html(html: str) -> str:
    """
    HTML 文字列を正規化済みテキストに変換する。
    ※ ここではネットワークアクセスは行わない（fetch_html で取得済み前提）

    壊れたマークアップも html.parser のベストエフォートで読むだけで、
    例外にはしない。
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    text = _extract_body_text(soup)
    return normalize_text(text)
