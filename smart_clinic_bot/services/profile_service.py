"""
Profile Service - профиль пользователя

Создание/слияние профиля по telegram_id, сохранение анкеты онбординга,
расчёт статуса подписки для отображения.
"""

import logging
from typing import Optional

from ..core.exceptions import UserNotFoundError
from ..domain.entities import Profile
from ..domain.repositories import IProfileRepository
from ..domain.services import SubscriptionStatus, subscription_status
from ..domain.value_objects import SurveyAnswers, TelegramIdentity
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)


class ProfileService:
    """Сервис профилей пользователей"""

    def __init__(self, profiles: IProfileRepository, clock: Clock = utc_now):
        self.profiles = profiles
        self.clock = clock

    async def touch(self, identity: TelegramIdentity) -> Profile:
        """Upsert идентичности и last_active при каждом сообщении"""
        return await self.profiles.upsert(identity, now=self.clock())

    async def save_survey(self, identity: TelegramIdentity, answers: SurveyAnswers) -> Profile:
        """Слить ответы анкеты в профиль (пропущенные ответы не затирают данные)"""
        fields = answers.as_profile_fields()
        profile = await self.profiles.upsert(identity, survey=fields, now=self.clock())
        logger.info(f"🎉 Survey saved for user {identity.telegram_id}: {sorted(fields) or 'all skipped'}")
        return profile

    async def find(self, telegram_id: int) -> Optional[Profile]:
        return await self.profiles.get(telegram_id)

    async def get(self, telegram_id: int) -> Profile:
        profile = await self.profiles.get(telegram_id)
        if profile is None:
            raise UserNotFoundError(telegram_id)
        return profile

    async def subscription(self, telegram_id: int) -> SubscriptionStatus:
        profile = await self.profiles.get(telegram_id)
        return subscription_status(profile, self.clock())
