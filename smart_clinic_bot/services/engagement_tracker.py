"""
Engagement Tracker - прогресс и избранное

Идемпотентные операции над парой (пользователь, контент):
- upsert прогресса; completed_at фиксируется один раз
- добавление/удаление избранного без ошибок на повторах
"""

import logging
from typing import List, Optional

from ..core.exceptions import ContentNotFoundError, UserNotFoundError, ValidationError
from ..domain.entities import EngagementRecord, Favorite, ProgressUpdate
from ..domain.repositories import IContentRepository, IEngagementRepository, IProfileRepository
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)


def validate_progress(update: ProgressUpdate) -> None:
    if update.percent is not None and not 0 <= update.percent <= 100:
        raise ValidationError("percent", update.percent, "must be between 0 and 100")
    if update.seconds_watched is not None and update.seconds_watched < 0:
        raise ValidationError("seconds_watched", update.seconds_watched, "must not be negative")
    if update.last_position is not None and update.last_position < 0:
        raise ValidationError("last_position", update.last_position, "must not be negative")
    if update.rating is not None and not 1 <= update.rating <= 5:
        raise ValidationError("rating", update.rating, "must be between 1 and 5")


class EngagementTracker:
    """Трекер вовлечённости пользователя"""

    def __init__(
        self,
        engagement: IEngagementRepository,
        profiles: IProfileRepository,
        content: IContentRepository,
        clock: Clock = utc_now
    ):
        self.engagement = engagement
        self.profiles = profiles
        self.content = content
        self.clock = clock

    async def _ensure_pair(self, telegram_id: int, content_id: int) -> None:
        if await self.profiles.get(telegram_id) is None:
            raise UserNotFoundError(telegram_id)
        if await self.content.get_item(content_id) is None:
            raise ContentNotFoundError(content_id)

    async def upsert_progress(self, telegram_id: int, content_id: int, update: ProgressUpdate) -> EngagementRecord:
        validate_progress(update)
        await self._ensure_pair(telegram_id, content_id)

        record = await self.engagement.upsert_progress(telegram_id, content_id, update, self.clock())
        if update.completed and record.completed_at:
            logger.info(f"🏁 User {telegram_id} completed content {content_id} at {record.completed_at}")
        return record

    async def get_progress(self, telegram_id: int, content_id: int) -> Optional[EngagementRecord]:
        return await self.engagement.get_progress(telegram_id, content_id)

    async def list_progress(self, telegram_id: int) -> List[EngagementRecord]:
        return await self.engagement.list_progress(telegram_id)

    async def toggle_favorite(self, telegram_id: int, content_id: int, add: bool) -> bool:
        """Установить наличие в избранном; возвращает итоговое состояние"""
        if add:
            await self._ensure_pair(telegram_id, content_id)
            created = await self.engagement.add_favorite(telegram_id, content_id, self.clock())
            logger.debug(f"⭐ Favorite add user={telegram_id} content={content_id} created={created}")
            return True

        removed = await self.engagement.remove_favorite(telegram_id, content_id)
        logger.debug(f"⭐ Favorite remove user={telegram_id} content={content_id} removed={removed}")
        return False

    async def list_favorites(self, telegram_id: int) -> List[Favorite]:
        return await self.engagement.list_favorites(telegram_id)
