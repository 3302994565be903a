# services/link_extractor.py

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# 画像・PDF・アーカイブなど、HTML ではないアセット
ASSET_EXTENSIONS = {
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".svg",
    ".ico",
    ".bmp",
    ".tif",
    ".tiff",
    ".pdf",
    ".zip",
    ".gz",
    ".tgz",
    ".rar",
    ".7z",
    ".tar",
    ".mp3",
    ".mp4",
    ".mov",
    ".avi",
    ".webm",
    ".css",
    ".js",
    ".woff",
    ".woff2",
    ".ttf",
    ".eot",
    ".xml",
    ".json",
}

_DEFAULT_PORTS = {"http": 80, "https": 443}

_TOKEN_SEPARATORS = re.compile(r"[-_.]")


def normalize_url(raw_url: str) -> str:
    """
    重複判定用に URL を正規化する。

    - scheme と host を小文字化
    - フラグメントを落とす
    - 空パスは "/" にそろえる
    """
    parsed = urlparse(raw_url)
    parsed = parsed._replace(
        scheme=(parsed.scheme or "").lower(),
        netloc=(parsed.netloc or "").lower(),
        path=parsed.path or "/",
        fragment="",
    )
    return urlunparse(parsed)


def _origin(url: str) -> Optional[tuple]:
    parsed = urlparse(url)
    scheme = (parsed.scheme or "").lower()
    host = (parsed.hostname or "").lower()
    if scheme not in _DEFAULT_PORTS or not host:
        return None
    try:
        port = parsed.port or _DEFAULT_PORTS[scheme]
    except ValueError:
        return None
    return scheme, host, port


def same_origin(url: str, other: str) -> bool:
    """scheme + host + port が一致するか。"""
    origin = _origin(url)
    return origin is not None and origin == _origin(other)


def is_asset_url(url: str) -> bool:
    path = urlparse(url).path.lower()
    return any(path.endswith(ext) for ext in ASSET_EXTENSIONS)


def _leading_token(segment: str) -> str:
    return _TOKEN_SEPARATORS.split(segment, 1)[0]


def is_denied_path(url: str, deny_keywords: Iterable[str]) -> bool:
    """
    パスセグメントが deny キーワードで始まる語なら True。

    - セグメント全体が一致（"wp-content"）
    - "-" "_" "." で区切った先頭の語が一致、または複数形（"about-us", "careers"）

    "/newsletter" や "/financing-terms" のように語の一部・後半に
    含まれるだけのものは除外しない。
    """
    segments = [s for s in urlparse(url).path.lower().split("/") if s]
    keywords = [k.lower() for k in deny_keywords if k]
    for segment in segments:
        head = _leading_token(segment)
        for k in keywords:
            if segment == k or head == k or head == k + "s":
                return True
    return False


def extract_links(
    html: str,
    page_url: str,
    seed_url: str,
    deny_keywords: Iterable[str] = (),
) -> List[str]:
    """
    ページ内の href を集めて、クロール候補の絶対 URL を返す。

    - 相対パスは page_url 基準で解決
    - フラグメントは落とす
    - シードと origin が異なるものは除外（他ドメインには行かない）
    - アセットと deny キーワードを含むパスは除外
    - 重複は除き、最初に出現した順を保つ
    """
    if not html:
        return []

    deny = list(deny_keywords)
    soup = BeautifulSoup(html, "html.parser")

    links: List[str] = []
    seen = set()
    for tag in soup.find_all(["a", "area"], href=True):
        href = (tag.get("href") or "").strip()
        if not href:
            continue

        absolute = normalize_url(urljoin(page_url, href))
        if absolute in seen:
            continue
        seen.add(absolute)

        if not same_origin(absolute, seed_url):
            continue
        if is_asset_url(absolute):
            continue
        if deny and is_denied_path(absolute, deny):
            continue

        links.append(absolute)

    logger.debug("[link_extractor] page=%s candidates=%s", page_url, len(links))
    return links
