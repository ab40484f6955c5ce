"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


class SubscriptionTier(Enum):
    """User subscription tier."""
    GUEST = "guest"
    PAID = "paid"


@dataclass
class Profile:
    """Persistent per-user record: identity, survey answers, subscription."""

    telegram_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None

    # Survey
    specialty: Optional[str] = None
    city: Optional[str] = None
    email: Optional[str] = None

    # Subscription
    tier: SubscriptionTier = SubscriptionTier.GUEST
    subscription_ends_at: Optional[datetime] = None
    auto_renew: bool = False

    # Activity
    is_active: bool = True
    last_active: Optional[datetime] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = field(default=None, compare=False)

    @property
    def display_name(self) -> str:
        """Get user's display name."""
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        elif self.first_name:
            return self.first_name
        elif self.username:
            return f"@{self.username}"
        else:
            return f"User {self.telegram_id}"

    @property
    def has_completed_survey(self) -> bool:
        return any((self.specialty, self.city, self.email))

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "Profile":
        data = dict(row)
        return cls(
            id=data.get("id"),
            telegram_id=int(data["telegram_id"]),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            username=data.get("username"),
            specialty=data.get("specialty"),
            city=data.get("city"),
            email=data.get("email"),
            tier=SubscriptionTier(data.get("subscription_tier") or SubscriptionTier.GUEST.value),
            subscription_ends_at=data.get("subscription_ends_at"),
            auto_renew=bool(data.get("auto_renew", False)),
            is_active=bool(data.get("is_active", True)),
            last_active=data.get("last_active"),
            created_at=data.get("created_at"),
        )
