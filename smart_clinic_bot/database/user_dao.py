"""
User DAO - операции с профилями пользователей

Работает ТОЛЬКО с таблицей users:
- upsert по telegram_id (идентичность обновляется всегда, анкета - через COALESCE)
- подписка
- архивация неактивных пользователей
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..domain.entities import Profile, SubscriptionTier
from ..domain.repositories import IProfileRepository
from ..domain.value_objects import TelegramIdentity
from .service import DatabaseService

logger = logging.getLogger(__name__)

UPSERT_USER_SQL = """
INSERT INTO users (
    telegram_id, username, first_name, last_name,
    specialty, city, email, last_active, is_active
) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, true)
ON CONFLICT (telegram_id)
DO UPDATE SET
    username = EXCLUDED.username,
    first_name = EXCLUDED.first_name,
    last_name = EXCLUDED.last_name,
    specialty = COALESCE(EXCLUDED.specialty, users.specialty),
    city = COALESCE(EXCLUDED.city, users.city),
    email = COALESCE(EXCLUDED.email, users.email),
    last_active = EXCLUDED.last_active,
    is_active = true
RETURNING *
"""


class UserDAO(IProfileRepository):
    """Data Access Object для работы с пользователями"""

    def __init__(self, db_service: DatabaseService):
        self.db = db_service

    async def get(self, telegram_id: int) -> Optional[Profile]:
        """Получение пользователя по Telegram ID"""

        row = await self.db.fetch_one(
            "SELECT * FROM users WHERE telegram_id = $1",
            telegram_id
        )

        if row:
            logger.debug(f"👤 User found: {telegram_id}")
            return Profile.from_record(row)

        logger.debug(f"👤 User not found: {telegram_id}")
        return None

    async def upsert(
        self,
        identity: TelegramIdentity,
        survey: Optional[Dict[str, str]] = None,
        now: Optional[datetime] = None
    ) -> Profile:
        """Создать пользователя или слить новые данные с существующими"""

        survey = survey or {}
        now = now or datetime.now(timezone.utc)

        row = await self.db.fetch_one(
            UPSERT_USER_SQL,
            identity.telegram_id,
            identity.username,
            identity.first_name,
            identity.last_name,
            survey.get('specialty'),
            survey.get('city'),
            survey.get('email'),
            now
        )

        if survey:
            logger.info(f"✅ Profile merged for {identity.telegram_id}: {sorted(survey)}")
        return Profile.from_record(row)

    async def update_subscription(
        self,
        telegram_id: int,
        tier: SubscriptionTier,
        ends_at: Optional[datetime],
        auto_renew: bool
    ) -> Optional[Profile]:
        """Обновление подписки"""

        row = await self.db.fetch_one(
            """
            UPDATE users
            SET subscription_tier = $1,
                subscription_ends_at = $2,
                auto_renew = $3
            WHERE telegram_id = $4
            RETURNING *
            """,
            tier.value,
            ends_at,
            auto_renew,
            telegram_id
        )

        if not row:
            return None

        logger.info(f"💳 Subscription updated for {telegram_id}: {tier.value} until {ends_at}")
        return Profile.from_record(row)

    async def list_active(self, active_since: datetime) -> List[Profile]:
        """Активные пользователи, заходившие после active_since"""

        rows = await self.db.fetch_all(
            "SELECT * FROM users WHERE is_active = true AND last_active > $1 ORDER BY telegram_id",
            active_since
        )
        return [Profile.from_record(row) for row in rows]

    async def archive_inactive(self, inactive_before: datetime) -> List[int]:
        """Архивация пользователей без активности"""

        rows = await self.db.fetch_all(
            """
            UPDATE users
            SET is_active = false
            WHERE last_active < $1
            AND is_active = true
            RETURNING telegram_id
            """,
            inactive_before
        )

        archived = [row['telegram_id'] for row in rows]
        if archived:
            logger.info(f"🗄 Archived {len(archived)} inactive users")
        return archived
