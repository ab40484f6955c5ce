"""Content catalog entities."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ContentKind(Enum):
    """Kind of learning asset."""
    COURSE = "course"
    WEBINAR = "webinar"
    CASE_REVIEW = "case_review"
    MATERIAL = "material"


@dataclass
class Category:
    """Content category."""

    id: int
    name: str
    kind: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    sort_order: int = 0
    is_active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "icon": self.icon,
            "color": self.color,
            "sort_order": self.sort_order,
        }

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "Category":
        data = dict(row)
        return cls(
            id=data["id"],
            name=data["name"],
            kind=data.get("kind"),
            icon=data.get("icon"),
            color=data.get("color"),
            sort_order=data.get("sort_order") or 0,
            is_active=bool(data.get("is_active", True)),
        )


@dataclass
class ContentItem:
    """A single learning asset (course, webinar, case review, material)."""

    id: int
    category_id: int
    title: str
    kind: ContentKind
    description: Optional[str] = None
    duration: Optional[int] = None
    price: Decimal = Decimal("0")
    old_price: Optional[Decimal] = None
    is_premium: bool = False
    is_free: bool = False
    instructor: Optional[str] = None
    schedule_time: Optional[datetime] = None
    max_participants: Optional[int] = None
    current_participants: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    category: Optional[Category] = None

    def __post_init__(self) -> None:
        if self.is_free and self.is_premium:
            raise ValueError(f"Content item {self.id} cannot be both free and premium")

    @property
    def is_discounted(self) -> bool:
        return self.old_price is not None and self.old_price > self.price

    @property
    def seats_left(self) -> Optional[int]:
        if self.max_participants is None:
            return None
        return max(self.max_participants - self.current_participants, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category_id": self.category_id,
            "title": self.title,
            "description": self.description,
            "content_type": self.kind.value,
            "duration": self.duration,
            "price": str(self.price),
            "old_price": str(self.old_price) if self.old_price is not None else None,
            "is_premium": self.is_premium,
            "is_free": self.is_free,
            "instructor": self.instructor,
            "schedule_time": self.schedule_time.isoformat() if self.schedule_time else None,
            "max_participants": self.max_participants,
            "current_participants": self.current_participants,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "category_name": self.category.name if self.category else None,
            "category_icon": self.category.icon if self.category else None,
            "category_color": self.category.color if self.category else None,
        }

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "ContentItem":
        """Build from a content_items row, optionally joined with its category."""
        data = dict(row)
        category = None
        if data.get("category_name") is not None:
            category = Category(
                id=data["category_id"],
                name=data["category_name"],
                icon=data.get("category_icon"),
                color=data.get("category_color"),
            )
        return cls(
            id=data["id"],
            category_id=data["category_id"],
            title=data["title"],
            kind=ContentKind(data["content_type"]),
            description=data.get("description"),
            duration=data.get("duration"),
            price=Decimal(data.get("price") or 0),
            old_price=Decimal(data["old_price"]) if data.get("old_price") is not None else None,
            is_premium=bool(data.get("is_premium", False)),
            is_free=bool(data.get("is_free", False)),
            instructor=data.get("instructor"),
            schedule_time=data.get("schedule_time"),
            max_participants=data.get("max_participants"),
            current_participants=data.get("current_participants") or 0,
            is_active=bool(data.get("is_active", True)),
            created_at=data.get("created_at"),
            category=category,
        )
