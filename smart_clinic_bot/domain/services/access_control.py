"""Access control domain service.

Pure decisions over a profile and a reference time. Nothing here reads the
clock or touches storage; callers pass ``now`` explicitly.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..entities import ContentItem, Profile


def as_utc(moment: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def has_premium_access(profile: Optional[Profile], now: datetime) -> bool:
    """Subscription is valid iff its end is set and strictly in the future."""
    if profile is None or profile.subscription_ends_at is None:
        return False
    return as_utc(profile.subscription_ends_at) > as_utc(now)


def is_visible_to(item: ContentItem, profile: Optional[Profile], now: datetime) -> bool:
    """Free and non-premium items are open to everyone."""
    return item.is_free or not item.is_premium or has_premium_access(profile, now)


@dataclass(frozen=True)
class SubscriptionStatus:
    """Derived, never stored: computed from the subscription end at render time."""

    active: bool
    ends_at: Optional[datetime] = None
    auto_renew: bool = False

    @property
    def ends_at_display(self) -> str:
        return self.ends_at.strftime("%d.%m.%Y") if self.ends_at else ""


def subscription_status(profile: Optional[Profile], now: datetime) -> SubscriptionStatus:
    if not has_premium_access(profile, now):
        return SubscriptionStatus(active=False, auto_renew=bool(profile and profile.auto_renew))
    return SubscriptionStatus(
        active=True,
        ends_at=profile.subscription_ends_at,
        auto_renew=profile.auto_renew,
    )
