"""
Content DAO - каталог контента

Работает с таблицами:
- content_items - курсы, вебинары, разборы, материалы
- content_categories - категории
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

from ..domain.entities import Category, ContentItem, ContentKind
from ..domain.repositories import CatalogFilter, IContentRepository
from .service import DatabaseService

logger = logging.getLogger(__name__)

ITEM_WITH_CATEGORY_SQL = """
SELECT
    ci.*,
    cc.name AS category_name,
    cc.icon AS category_icon,
    cc.color AS category_color
FROM content_items ci
JOIN content_categories cc ON ci.category_id = cc.id
"""


class ContentDAO(IContentRepository):
    """Data Access Object для каталога контента"""

    def __init__(self, db_service: DatabaseService):
        self.db = db_service

    async def list_items(self, filters: CatalogFilter) -> List[ContentItem]:
        """Список активного контента с фильтрами и пагинацией"""

        conditions = ['ci.is_active = true']
        params: List[Any] = []

        if filters.category_id is not None:
            params.append(filters.category_id)
            conditions.append(f'ci.category_id = ${len(params)}')

        if filters.content_type is not None:
            params.append(filters.content_type.value)
            conditions.append(f'ci.content_type = ${len(params)}')

        if filters.is_premium is not None:
            params.append(filters.is_premium)
            conditions.append(f'ci.is_premium = ${len(params)}')

        if filters.hide_premium:
            conditions.append('(ci.is_free OR NOT ci.is_premium)')

        query = (
            f"{ITEM_WITH_CATEGORY_SQL}"
            f"WHERE {' AND '.join(conditions)}\n"
            f"ORDER BY ci.created_at DESC, ci.id DESC\n"
            f"LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}"
        )

        rows = await self.db.fetch_all(query, *params, filters.limit, filters.offset)
        logger.debug(f"📚 Catalog query returned {len(rows)} items")
        return [ContentItem.from_record(row) for row in rows]

    async def get_item(self, content_id: int) -> Optional[ContentItem]:
        row = await self.db.fetch_one(
            f"{ITEM_WITH_CATEGORY_SQL}WHERE ci.id = $1 AND ci.is_active = true",
            content_id
        )
        return ContentItem.from_record(row) if row else None

    async def list_categories(self) -> List[Category]:
        rows = await self.db.fetch_all(
            """
            SELECT * FROM content_categories
            WHERE is_active = true
            ORDER BY sort_order, name
            """
        )
        return [Category.from_record(row) for row in rows]

    async def list_scheduled(self, kind: ContentKind, start: datetime, end: datetime) -> List[ContentItem]:
        """Запланированный контент в окне [start, end]"""

        rows = await self.db.fetch_all(
            f"""{ITEM_WITH_CATEGORY_SQL}
            WHERE ci.content_type = $1
            AND ci.schedule_time BETWEEN $2 AND $3
            AND ci.is_active = true
            ORDER BY ci.schedule_time
            """,
            kind.value,
            start,
            end
        )
        return [ContentItem.from_record(row) for row in rows]

    async def list_discounted(self, limit: int) -> List[ContentItem]:
        """Контент со скидкой (old_price > price)"""

        rows = await self.db.fetch_all(
            f"""{ITEM_WITH_CATEGORY_SQL}
            WHERE ci.is_active = true
            AND ci.old_price IS NOT NULL
            AND ci.old_price > ci.price
            ORDER BY (ci.old_price - ci.price) / ci.old_price DESC, ci.id
            LIMIT $1
            """,
            limit
        )
        return [ContentItem.from_record(row) for row in rows]
