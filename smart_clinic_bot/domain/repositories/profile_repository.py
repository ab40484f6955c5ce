"""Profile repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from ..entities import Profile, SubscriptionTier
from ..value_objects import TelegramIdentity


class IProfileRepository(ABC):
    """Profile repository interface."""

    @abstractmethod
    async def get(self, telegram_id: int) -> Optional[Profile]:
        """Get profile by Telegram ID."""
        pass

    @abstractmethod
    async def upsert(
        self,
        identity: TelegramIdentity,
        survey: Optional[Dict[str, str]] = None,
        now: Optional[datetime] = None
    ) -> Profile:
        """Create or merge a profile.

        Identity fields are always refreshed, survey values only override
        when provided, ``last_active`` is set to ``now`` and the profile is
        reactivated.
        """
        pass

    @abstractmethod
    async def update_subscription(
        self,
        telegram_id: int,
        tier: SubscriptionTier,
        ends_at: Optional[datetime],
        auto_renew: bool
    ) -> Optional[Profile]:
        """Overwrite subscription fields."""
        pass

    @abstractmethod
    async def list_active(self, active_since: datetime) -> List[Profile]:
        """Active profiles seen after ``active_since``."""
        pass

    @abstractmethod
    async def archive_inactive(self, inactive_before: datetime) -> List[int]:
        """Clear the active flag of profiles last seen before the threshold."""
        pass
