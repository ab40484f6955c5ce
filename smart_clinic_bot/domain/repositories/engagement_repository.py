"""Engagement repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities import EngagementRecord, Favorite, ProgressUpdate


class IEngagementRepository(ABC):
    """Progress and favorites repository interface."""

    @abstractmethod
    async def upsert_progress(
        self,
        telegram_id: int,
        content_id: int,
        update: ProgressUpdate,
        now: datetime
    ) -> EngagementRecord:
        """Insert or update the record for the pair.

        ``completed_at`` is set only on the first false -> true flip.
        """
        pass

    @abstractmethod
    async def get_progress(self, telegram_id: int, content_id: int) -> Optional[EngagementRecord]:
        pass

    @abstractmethod
    async def list_progress(self, telegram_id: int) -> List[EngagementRecord]:
        """Records joined with content and category, latest first."""
        pass

    @abstractmethod
    async def add_favorite(self, telegram_id: int, content_id: int, now: datetime) -> bool:
        """True if the relation was created, False if it existed."""
        pass

    @abstractmethod
    async def remove_favorite(self, telegram_id: int, content_id: int) -> bool:
        """True if a relation was removed."""
        pass

    @abstractmethod
    async def list_favorites(self, telegram_id: int) -> List[Favorite]:
        """Favorites joined with content and category, newest first."""
        pass
