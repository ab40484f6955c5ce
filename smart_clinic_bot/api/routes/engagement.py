"""Engagement routes: favorites and progress."""

from fastapi import APIRouter, Depends

from ...container import ServiceContext
from ..dependencies import get_context
from ..schemas import FavoriteRequest, ProgressRequest

router = APIRouter(prefix="/api", tags=["engagement"])


@router.get("/favorites/{telegram_id}")
async def list_favorites(telegram_id: int, context: ServiceContext = Depends(get_context)):
    favorites = await context.engagement.list_favorites(telegram_id)
    return {"success": True, "data": [favorite.to_dict() for favorite in favorites]}


@router.post("/favorites")
async def add_favorite(request: FavoriteRequest, context: ServiceContext = Depends(get_context)):
    is_favorite = await context.engagement.toggle_favorite(request.telegram_id, request.content_id, add=True)
    return {"success": True, "data": {"content_id": request.content_id, "is_favorite": is_favorite}}


@router.delete("/favorites/{telegram_id}/{content_id}")
async def remove_favorite(telegram_id: int, content_id: int, context: ServiceContext = Depends(get_context)):
    is_favorite = await context.engagement.toggle_favorite(telegram_id, content_id, add=False)
    return {"success": True, "data": {"content_id": content_id, "is_favorite": is_favorite}}


@router.get("/progress/{telegram_id}")
async def list_progress(telegram_id: int, context: ServiceContext = Depends(get_context)):
    records = await context.engagement.list_progress(telegram_id)
    return {"success": True, "data": [record.to_dict() for record in records]}


@router.get("/progress/{telegram_id}/{content_id}")
async def get_progress(telegram_id: int, content_id: int, context: ServiceContext = Depends(get_context)):
    record = await context.engagement.get_progress(telegram_id, content_id)
    return {"success": True, "data": record.to_dict() if record else None}


@router.put("/progress/{telegram_id}/{content_id}")
async def update_progress(
    telegram_id: int,
    content_id: int,
    request: ProgressRequest,
    context: ServiceContext = Depends(get_context)
):
    record = await context.engagement.upsert_progress(telegram_id, content_id, request.to_update())
    return {"success": True, "data": record.to_dict()}
