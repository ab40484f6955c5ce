"""Catalog routes: content items and categories."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...container import ServiceContext
from ...domain.entities import ContentKind
from ...domain.repositories import CatalogFilter, MAX_PAGE_SIZE
from ..dependencies import get_context

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/content")
async def list_content(
    category_id: Optional[int] = None,
    content_type: Optional[ContentKind] = None,
    is_premium: Optional[bool] = None,
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    telegram_id: Optional[int] = None,
    context: ServiceContext = Depends(get_context)
):
    """Active content visible to the caller; premium items need a subscription."""
    filters = CatalogFilter(
        category_id=category_id,
        content_type=content_type,
        is_premium=is_premium,
        limit=limit,
        offset=offset,
    )
    profile = await context.profiles.find(telegram_id) if telegram_id else None
    items = await context.catalog.list_visible(filters, profile)

    return {
        "success": True,
        "data": [item.to_dict() for item in items],
        "pagination": {"limit": filters.limit, "offset": filters.offset, "count": len(items)},
    }


@router.get("/content/{content_id}")
async def get_content(
    content_id: int,
    telegram_id: Optional[int] = None,
    context: ServiceContext = Depends(get_context)
):
    profile = await context.profiles.find(telegram_id) if telegram_id else None
    item = await context.catalog.get_item_for(content_id, profile)
    return {"success": True, "data": item.to_dict()}


@router.get("/categories")
async def list_categories(context: ServiceContext = Depends(get_context)):
    categories = await context.catalog.list_categories()
    return {"success": True, "data": [category.to_dict() for category in categories]}
