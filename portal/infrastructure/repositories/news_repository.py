"""Repository for news articles."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ..persistence.document_store import DocumentStore
from ..security import Clock
from ...domain.errors import ConflictError, NotFoundError, ValidationError
from ...domain.models import NewsArticle, NewsStatus
from ...utils.datetime import format_datetime, utc_now

_NEWS_FIELDS = (
    "title",
    "slug",
    "excerpt",
    "content",
    "category",
    "author",
    "author_title",
    "date",
    "read_time",
    "image",
    "featured",
    "status",
    "tags",
)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "article"


class NewsRepository:
    def __init__(self, store: DocumentStore, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._clock = clock or utc_now

    def list_published(
        self,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[NewsArticle]:
        articles = [article for article in self.list_all() if article.is_published]
        if category:
            articles = [article for article in articles if article.category == category]
        if featured is not None:
            articles = [article for article in articles if article.featured is featured]
        if limit and limit > 0:
            articles = articles[:limit]
        return articles

    def list_all(self, status: Optional[str] = None) -> List[NewsArticle]:
        articles = [NewsArticle.from_document(doc) for doc in self._store.read_all()]
        if status:
            wanted = _parse_status(status)
            articles = [article for article in articles if article.status is wanted]
        articles.sort(key=lambda article: article.created_at, reverse=True)
        return articles

    def get(self, article_id: str) -> NewsArticle:
        try:
            return NewsArticle.from_document(self._store.find_by_id(article_id))
        except NotFoundError as exc:
            raise NotFoundError("News article not found") from exc

    def get_by_slug(self, slug: str) -> NewsArticle:
        try:
            return NewsArticle.from_document(self._store.find_one(lambda doc: doc.get("slug") == slug))
        except NotFoundError as exc:
            raise NotFoundError("News article not found") from exc

    def resolve(self, id_or_slug: str) -> NewsArticle:
        try:
            return self.get(id_or_slug)
        except NotFoundError:
            return self.get_by_slug(id_or_slug)

    def create(self, data: Dict[str, Any]) -> NewsArticle:
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationError("Missing required fields: title")
        slug = data.get("slug") or slugify(title)
        now = self._clock()
        document = {key: data.get(key) for key in _NEWS_FIELDS if data.get(key) is not None}
        document.update(
            {
                "title": title,
                "slug": slug,
                "status": _parse_status(data.get("status") or NewsStatus.DRAFT.value).value,
                "featured": bool(data.get("featured", False)),
                "tags": list(data.get("tags") or []),
                "views": 0,
                "created_at": format_datetime(now),
                "updated_at": format_datetime(now),
            }
        )
        with self._store.write_lock():
            self._ensure_slug_free(slug)
            created = self._store.create(document, data.get("id"))
        return NewsArticle.from_document(created)

    def update(self, article_id: str, data: Dict[str, Any]) -> NewsArticle:
        changes = {key: value for key, value in data.items() if key in _NEWS_FIELDS and value is not None}
        if "status" in changes:
            changes["status"] = _parse_status(changes["status"]).value
        changes["updated_at"] = format_datetime(self._clock())
        try:
            with self._store.write_lock():
                if "slug" in changes:
                    self._ensure_slug_free(changes["slug"], exclude_id=article_id)
                updated = self._store.update(article_id, changes)
        except NotFoundError as exc:
            raise NotFoundError("News article not found") from exc
        return NewsArticle.from_document(updated)

    def delete(self, article_id: str) -> bool:
        try:
            return self._store.delete(article_id)
        except NotFoundError as exc:
            raise NotFoundError("News article not found") from exc

    def increment_views(self, article_id: str) -> NewsArticle:
        stamp = format_datetime(self._clock())

        def bump(document: Dict[str, Any]) -> Dict[str, Any]:
            return {"views": int(document.get("views") or 0) + 1, "updated_at": stamp}

        try:
            return NewsArticle.from_document(self._store.modify(article_id, bump))
        except NotFoundError as exc:
            raise NotFoundError("News article not found") from exc

    def _ensure_slug_free(self, slug: str, exclude_id: Optional[str] = None) -> None:
        if self._store.count(lambda doc: doc.get("slug") == slug and doc.get("id") != exclude_id):
            raise ConflictError("A news article with this slug already exists")


def _parse_status(value: Any) -> NewsStatus:
    try:
        return NewsStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid news status: {value}") from exc
