"""
Engagement DAO - прогресс и избранное

Работает с таблицами:
- user_progress - прогресс просмотра (уникален по паре user/content)
- user_favorites - избранное (уникально по паре user/content)

Все записи - атомарные upsert'ы, повторные вызовы безопасны.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..domain.entities import ContentItem, EngagementRecord, Favorite, ProgressUpdate
from ..domain.repositories import IEngagementRepository
from .service import DatabaseService

logger = logging.getLogger(__name__)

# completed_at выставляется только при первом переходе completed false -> true
UPSERT_PROGRESS_SQL = """
INSERT INTO user_progress (
    user_id, content_id, progress_percent, watch_time_seconds,
    completed, last_position, rating, review, last_watched_at, completed_at
) VALUES (
    $1, $2,
    COALESCE($3::int, 0),
    COALESCE($4::int, 0),
    COALESCE($5::boolean, false),
    COALESCE($6::int, 0),
    $7::smallint,
    $8::text,
    $9,
    CASE WHEN $5::boolean THEN $9 END
)
ON CONFLICT (user_id, content_id)
DO UPDATE SET
    progress_percent = COALESCE($3::int, user_progress.progress_percent),
    watch_time_seconds = COALESCE($4::int, user_progress.watch_time_seconds),
    completed = COALESCE($5::boolean, user_progress.completed),
    last_position = COALESCE($6::int, user_progress.last_position),
    rating = COALESCE($7::smallint, user_progress.rating),
    review = COALESCE($8::text, user_progress.review),
    last_watched_at = $9,
    completed_at = COALESCE(
        user_progress.completed_at,
        CASE WHEN $5::boolean THEN $9 END
    )
RETURNING *
"""

PROGRESS_WITH_CONTENT_SQL = """
SELECT
    up.user_id, up.content_id, up.progress_percent, up.watch_time_seconds,
    up.completed, up.last_position, up.rating, up.review,
    up.last_watched_at, up.completed_at,
    ci.*,
    cc.name AS category_name,
    cc.icon AS category_icon,
    cc.color AS category_color
FROM user_progress up
JOIN content_items ci ON up.content_id = ci.id
JOIN content_categories cc ON ci.category_id = cc.id
WHERE up.user_id = $1
ORDER BY up.last_watched_at DESC NULLS LAST
"""

FAVORITES_WITH_CONTENT_SQL = """
SELECT
    uf.user_id, uf.content_id, uf.created_at AS favorited_at,
    ci.*,
    cc.name AS category_name,
    cc.icon AS category_icon,
    cc.color AS category_color
FROM user_favorites uf
JOIN content_items ci ON uf.content_id = ci.id
JOIN content_categories cc ON ci.category_id = cc.id
WHERE uf.user_id = $1
ORDER BY uf.created_at DESC
"""


class EngagementDAO(IEngagementRepository):
    """Data Access Object для прогресса и избранного"""

    def __init__(self, db_service: DatabaseService):
        self.db = db_service

    async def upsert_progress(
        self,
        telegram_id: int,
        content_id: int,
        update: ProgressUpdate,
        now: datetime
    ) -> EngagementRecord:
        """Вставка или обновление прогресса"""

        row = await self.db.fetch_one(
            UPSERT_PROGRESS_SQL,
            telegram_id,
            content_id,
            update.percent,
            update.seconds_watched,
            update.completed,
            update.last_position,
            update.rating,
            update.review,
            now
        )

        logger.debug(f"📈 Progress saved: user={telegram_id} content={content_id}")
        return EngagementRecord.from_record(row)

    async def get_progress(self, telegram_id: int, content_id: int) -> Optional[EngagementRecord]:
        row = await self.db.fetch_one(
            "SELECT * FROM user_progress WHERE user_id = $1 AND content_id = $2",
            telegram_id,
            content_id
        )
        return EngagementRecord.from_record(row) if row else None

    async def list_progress(self, telegram_id: int) -> List[EngagementRecord]:
        rows = await self.db.fetch_all(PROGRESS_WITH_CONTENT_SQL, telegram_id)
        return [
            EngagementRecord.from_record(row, content=ContentItem.from_record(row))
            for row in rows
        ]

    async def add_favorite(self, telegram_id: int, content_id: int, now: datetime) -> bool:
        """Добавить в избранное (повторная вставка - no-op)"""

        status = await self.db.execute(
            """
            INSERT INTO user_favorites (user_id, content_id, created_at)
            VALUES ($1, $2, $3)
            ON CONFLICT (user_id, content_id) DO NOTHING
            """,
            telegram_id,
            content_id,
            now
        )
        return _affected_rows(status) > 0

    async def remove_favorite(self, telegram_id: int, content_id: int) -> bool:
        """Удалить из избранного (удаление несуществующего - no-op)"""

        status = await self.db.execute(
            "DELETE FROM user_favorites WHERE user_id = $1 AND content_id = $2",
            telegram_id,
            content_id
        )
        return _affected_rows(status) > 0

    async def list_favorites(self, telegram_id: int) -> List[Favorite]:
        rows = await self.db.fetch_all(FAVORITES_WITH_CONTENT_SQL, telegram_id)
        return [
            Favorite(
                telegram_id=int(row['user_id']),
                content_id=row['content_id'],
                created_at=row['favorited_at'],
                content=ContentItem.from_record(row),
            )
            for row in rows
        ]


def _affected_rows(status: str) -> int:
    """'INSERT 0 1' / 'DELETE 1' -> число затронутых строк"""
    try:
        return int(status.split()[-1])
    except (AttributeError, IndexError, ValueError):
        return 0
