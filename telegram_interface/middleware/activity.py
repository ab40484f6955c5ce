"""
Activity Middleware - профиль и last_active на каждом апдейте

Upsert идентичности пользователя (имя, username), last_active = now,
архивный профиль снова становится активным.
"""

import logging
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from smart_clinic_bot.core.exceptions import StorageError
from smart_clinic_bot.domain.value_objects import TelegramIdentity
from smart_clinic_bot.services import ProfileService

logger = logging.getLogger(__name__)


class ActivityMiddleware(BaseMiddleware):
    """Обновление профиля перед обработкой апдейта"""

    def __init__(self, profiles: ProfileService):
        self.profiles = profiles

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        user = data.get("event_from_user")

        if user and not user.is_bot:
            try:
                await self.profiles.touch(TelegramIdentity.from_user(user))
            except StorageError as e:
                logger.warning(f"⚠️ Activity not recorded for {user.id}: {e}")

        return await handler(event, data)
