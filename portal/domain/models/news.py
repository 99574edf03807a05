from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from ...utils.datetime import format_datetime, parse_datetime


class NewsStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


@dataclass(slots=True)
class NewsArticle:
    id: str
    title: str
    slug: str
    excerpt: str
    content: str
    category: str
    author: str
    author_title: str
    date: str
    read_time: str
    image: str
    featured: bool
    status: NewsStatus
    views: int
    created_at: datetime
    updated_at: datetime
    tags: List[str] = field(default_factory=list)

    @property
    def is_published(self) -> bool:
        return self.status is NewsStatus.PUBLISHED

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "NewsArticle":
        return cls(
            id=str(document["id"]),
            title=document["title"],
            slug=document.get("slug", ""),
            excerpt=document.get("excerpt", ""),
            content=document.get("content", ""),
            category=document.get("category", ""),
            author=document.get("author", ""),
            author_title=document.get("author_title", ""),
            date=document.get("date", ""),
            read_time=document.get("read_time") or document.get("readTime", ""),
            image=document.get("image", ""),
            featured=bool(document.get("featured", False)),
            status=NewsStatus(document.get("status", NewsStatus.DRAFT.value)),
            views=int(document.get("views") or 0),
            created_at=parse_datetime(document["created_at"]),
            updated_at=parse_datetime(document["updated_at"]),
            tags=list(document.get("tags") or []),
        )

    def to_public(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["created_at"] = format_datetime(self.created_at)
        data["updated_at"] = format_datetime(self.updated_at)
        return data
