"""
Articles Router - marketplace listings.

Reads need an authenticated account; writes additionally pass the Access
Guard (active, unexpired membership). Owners only for mutations.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Path, Query

from app.api.responses import ok, paginated
from app.api.schemas.article import ArticleCreate, ArticleOut, ArticleStatusUpdate, ArticleUpdate
from app.core.auth import CurrentUser, get_current_user, require_active_membership
from app.core.pagination import PageParams
from app.core.services.article_service import ArticleService
from app.database.repositories.article_repository import ArticleFilters

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_articles(
    category: Optional[str] = Query(None),
    condition: Optional[Literal["new", "like_new", "good", "fair"]] = Query(None),
    min_price: Optional[int] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[int] = Query(None, alias="maxPrice", ge=0),
    seller_id: Optional[str] = Query(None, alias="sellerId"),
    params: PageParams = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    service: ArticleService = Depends(ArticleService.instance),
):
    """Active articles, newest first."""
    filters = ArticleFilters(
        category=category,
        condition=condition,
        min_price=min_price,
        max_price=max_price,
        seller_id=seller_id,
    )
    items, total = await service.list_articles(filters, params)
    return paginated([ArticleOut.from_model(a) for a in items], total, params)


@router.get("/my-listings")
async def my_listings(
    current_user: CurrentUser = Depends(get_current_user),
    service: ArticleService = Depends(ArticleService.instance),
):
    articles = await service.my_listings(current_user.uid)
    return ok([ArticleOut.from_model(a) for a in articles])


@router.get("/{article_id}")
async def get_article(
    article_id: int = Path(...),
    current_user: CurrentUser = Depends(get_current_user),
    service: ArticleService = Depends(ArticleService.instance),
):
    article = await service.get_article(article_id)
    return ok(ArticleOut.from_model(article))


@router.post("", status_code=201)
async def create_article(
    data: ArticleCreate,
    member: CurrentUser = Depends(require_active_membership),
    service: ArticleService = Depends(ArticleService.instance),
):
    article = await service.create_article(member.uid, data)
    return ok(ArticleOut.from_model(article))


@router.put("/{article_id}")
async def update_article(
    data: ArticleUpdate,
    article_id: int = Path(...),
    member: CurrentUser = Depends(require_active_membership),
    service: ArticleService = Depends(ArticleService.instance),
):
    article = await service.update_article(article_id, member.uid, data)
    return ok(ArticleOut.from_model(article))


@router.delete("/{article_id}")
async def delete_article(
    article_id: int = Path(...),
    member: CurrentUser = Depends(require_active_membership),
    service: ArticleService = Depends(ArticleService.instance),
):
    await service.delete_article(article_id, member.uid)
    return ok({"message": "Article deleted"})


@router.patch("/{article_id}/status")
async def update_article_status(
    data: ArticleStatusUpdate,
    article_id: int = Path(...),
    current_user: CurrentUser = Depends(get_current_user),
    service: ArticleService = Depends(ArticleService.instance),
):
    """Mark sold/reserved or deactivate. Allowed without an active membership."""
    article = await service.set_status(article_id, current_user.uid, data.status)
    return ok(ArticleOut.from_model(article))
