"""Content repository interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..entities import Category, ContentItem, ContentKind

MAX_PAGE_SIZE = 100


@dataclass
class CatalogFilter:
    """Catalog listing filter with offset pagination."""

    category_id: Optional[int] = None
    content_type: Optional[ContentKind] = None
    is_premium: Optional[bool] = None
    hide_premium: bool = False
    limit: int = 20
    offset: int = 0

    def __post_init__(self) -> None:
        self.limit = min(max(self.limit, 1), MAX_PAGE_SIZE)
        self.offset = max(self.offset, 0)


class IContentRepository(ABC):
    """Content repository interface."""

    @abstractmethod
    async def list_items(self, filters: CatalogFilter) -> List[ContentItem]:
        """Active items joined with category, newest first."""
        pass

    @abstractmethod
    async def get_item(self, content_id: int) -> Optional[ContentItem]:
        """Single active item joined with category."""
        pass

    @abstractmethod
    async def list_categories(self) -> List[Category]:
        """Active categories ordered by sort order and name."""
        pass

    @abstractmethod
    async def list_scheduled(self, kind: ContentKind, start: datetime, end: datetime) -> List[ContentItem]:
        """Active items of ``kind`` scheduled within ``[start, end]``, ascending."""
        pass

    @abstractmethod
    async def list_discounted(self, limit: int) -> List[ContentItem]:
        """Active items whose old price exceeds the current price."""
        pass
