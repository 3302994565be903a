# models/site_models.py

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field


CrawlStatus = Literal[
    "Pending",    # シード URL 未訪問
    "Crawling",   # キューが残っていて、ページ予算もある
    "Found",      # 終端: マッチあり
    "Exhausted",  # 終端: 予算 or キューを使い切った
]


class CrawlState(BaseModel):
    """
    1 回の analyze_website 呼び出しが専有するクロール状態。
    別の解析と共有しないこと。

    - visited: 訪問済み URL（訪問順を保つためリストで持つ）
    - queue: これから訪問する URL（先頭から取り出す）
    """

    max_pages: int = Field(5, ge=1)
    visited: List[str] = Field(default_factory=list)
    queue: List[str] = Field(default_factory=list)
    status: CrawlStatus = "Pending"

    @property
    def pages_visited(self) -> int:
        return len(self.visited)

    def has_budget(self) -> bool:
        return bool(self.queue) and len(self.visited) < self.max_pages

    def is_visited(self, url: str) -> bool:
        return url in self.visited

    def mark_visited(self, url: str) -> None:
        if url not in self.visited:
            self.visited.append(url)

    def pop_next(self) -> str:
        return self.queue.pop(0)

    def enqueue(self, urls: List[str]) -> int:
        """
        未訪問かつ未キューの URL を追加する。
        キュー容量は max_pages まで。追加できた件数を返す。
        """
        added = 0
        for url in urls:
            if len(self.queue) >= self.max_pages:
                break
            if url in self.visited or url in self.queue:
                continue
            self.queue.append(url)
            added += 1
        return added
