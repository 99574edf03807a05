from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....core.dependencies import get_news_repository
from ....domain.errors import NotFoundError
from ....domain.models import Account, Permission
from ....infrastructure.repositories.news_repository import NewsRepository
from ...api.dependencies import optional_account, require_permission
from ...api.schemas.news_schemas import NewsCreateRequest, NewsUpdateRequest

router = APIRouter(prefix="/api/news", tags=["News"])


@router.get("")
def list_news(
    category: Optional[str] = Query(default=None),
    featured: Optional[bool] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    news: NewsRepository = Depends(get_news_repository),
) -> Dict[str, Any]:
    items = news.list_published(category=category, featured=featured, limit=limit)
    return {"success": True, "news": [item.to_public() for item in items], "count": len(items)}


# Declared before /{id_or_slug} so "admin" is not read as a slug.
@router.get("/admin/all")
def list_all_news(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    _: Account = Depends(require_permission(Permission.NEWS)),
    news: NewsRepository = Depends(get_news_repository),
) -> Dict[str, Any]:
    items = news.list_all(status=status_filter)
    return {"success": True, "news": [item.to_public() for item in items], "count": len(items)}


@router.get("/{id_or_slug}")
def get_news(
    id_or_slug: str,
    account: Optional[Account] = Depends(optional_account),
    news: NewsRepository = Depends(get_news_repository),
) -> Dict[str, Any]:
    article = news.resolve(id_or_slug)
    if not article.is_published and not (account and account.has_permission(Permission.NEWS)):
        raise NotFoundError("News article not found")
    if article.is_published:
        article = news.increment_views(article.id)
    return {"success": True, "news": article.to_public()}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_news(
    payload: NewsCreateRequest,
    _: Account = Depends(require_permission(Permission.NEWS)),
    news: NewsRepository = Depends(get_news_repository),
) -> Dict[str, Any]:
    article = news.create(payload.model_dump())
    return {"success": True, "message": "News article created successfully", "news": article.to_public()}


@router.put("/{article_id}")
def update_news(
    article_id: str,
    payload: NewsUpdateRequest,
    _: Account = Depends(require_permission(Permission.NEWS)),
    news: NewsRepository = Depends(get_news_repository),
) -> Dict[str, Any]:
    article = news.update(article_id, payload.model_dump(exclude_none=True))
    return {"success": True, "message": "News article updated successfully", "news": article.to_public()}


@router.delete("/{article_id}")
def delete_news(
    article_id: str,
    _: Account = Depends(require_permission(Permission.NEWS)),
    news: NewsRepository = Depends(get_news_repository),
) -> Dict[str, Any]:
    news.delete(article_id)
    return {"success": True, "message": "News article deleted successfully"}
