"""
Catalog Service - каталог контента

- Список и фильтрация контента (новые сверху, offset-пагинация)
- Видимость премиум-контента по подписке
- Анонсы ближайших вебинаров с fallback при недоступности БД
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import List, Optional

from ..core.exceptions import AccessDeniedError, ContentNotFoundError, StorageError
from ..domain.entities import Category, ContentItem, ContentKind, Profile
from ..domain.repositories import CatalogFilter, IContentRepository
from ..domain.services import has_premium_access, is_visible_to
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)


@dataclass
class Announcements:
    """Ближайшие события; is_fallback - показать статичный список"""

    items: List[ContentItem] = field(default_factory=list)
    is_fallback: bool = False


class CatalogService:
    """Сервис каталога контента"""

    def __init__(
        self,
        content: IContentRepository,
        clock: Clock = utc_now,
        announcement_window_days: int = 7
    ):
        self.content = content
        self.clock = clock
        self.announcement_window_days = announcement_window_days

    async def list_items(self, filters: Optional[CatalogFilter] = None) -> List[ContentItem]:
        return await self.content.list_items(filters or CatalogFilter())

    async def list_visible(self, filters: Optional[CatalogFilter], profile: Optional[Profile]) -> List[ContentItem]:
        """Контент, доступный пользователю (премиум скрыт без подписки)

        Фильтр видимости применяется в запросе, чтобы страницы offset-пагинации
        не теряли доступные материалы.
        """
        filters = replace(filters or CatalogFilter(), hide_premium=not has_premium_access(profile, self.clock()))
        return await self.list_items(filters)

    async def list_categories(self) -> List[Category]:
        return await self.content.list_categories()

    async def get_item(self, content_id: int) -> ContentItem:
        item = await self.content.get_item(content_id)
        if item is None:
            raise ContentNotFoundError(content_id)
        return item

    async def get_item_for(self, content_id: int, profile: Optional[Profile]) -> ContentItem:
        item = await self.get_item(content_id)
        if not is_visible_to(item, profile, self.clock()):
            raise AccessDeniedError(content_id)
        return item

    async def get_upcoming(
        self,
        kind: ContentKind = ContentKind.WEBINAR,
        within_days: Optional[int] = None
    ) -> List[ContentItem]:
        """Контент, запланированный в окне [now, now + within_days]"""
        now = self.clock()
        window = timedelta(days=self.announcement_window_days if within_days is None else within_days)
        return await self.content.list_scheduled(kind, now, now + window)

    async def get_announcements(self) -> Announcements:
        """Ближайшие вебинары; ошибка хранилища не пробрасывается"""
        try:
            return Announcements(items=await self.get_upcoming())
        except StorageError as e:
            logger.error(f"❌ Announcements query failed, using fallback: {e}")
            return Announcements(is_fallback=True)

    async def list_promotions(self, limit: int = 5) -> List[ContentItem]:
        return await self.content.list_discounted(limit)
