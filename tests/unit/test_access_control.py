"""
Unit Tests: Access Control

- premium доступ только при подписке, заканчивающейся строго в будущем
- видимость бесплатного / обычного / премиум контента
- статус подписки для отображения
"""

from datetime import datetime, timedelta, timezone

import pytest

from smart_clinic_bot.domain.entities import ContentItem, ContentKind, Profile, SubscriptionTier
from smart_clinic_bot.domain.services import (
    has_premium_access,
    is_visible_to,
    subscription_status,
)

NOW = datetime(2025, 12, 1, 12, 0, tzinfo=timezone.utc)


def profile_until(ends_at, auto_renew=False):
    return Profile(
        telegram_id=1,
        tier=SubscriptionTier.PAID if ends_at else SubscriptionTier.GUEST,
        subscription_ends_at=ends_at,
        auto_renew=auto_renew,
    )


def item(item_id, is_premium=False, is_free=False):
    return ContentItem(id=item_id, category_id=1, title=f"Item {item_id}", kind=ContentKind.COURSE,
                       is_premium=is_premium, is_free=is_free)


# ============================================================================
# PREMIUM ACCESS
# ============================================================================

def test_no_profile_has_no_premium_access():
    assert has_premium_access(None, NOW) is False


def test_null_subscription_end_has_no_premium_access():
    assert has_premium_access(profile_until(None), NOW) is False


def test_future_subscription_end_grants_access():
    assert has_premium_access(profile_until(NOW + timedelta(seconds=1)), NOW) is True


def test_subscription_ending_exactly_now_is_expired():
    """Тест: граница не включается - окончание == now значит доступа нет"""
    assert has_premium_access(profile_until(NOW), NOW) is False


def test_past_subscription_end_has_no_access():
    assert has_premium_access(profile_until(NOW - timedelta(days=1)), NOW) is False


def test_naive_subscription_end_is_treated_as_utc():
    naive_future = (NOW + timedelta(hours=1)).replace(tzinfo=None)
    assert has_premium_access(profile_until(naive_future), NOW) is True


# ============================================================================
# VISIBILITY
# ============================================================================

@pytest.mark.parametrize("content, subscribed, visible", [
    (item(1, is_free=True), False, True),
    (item(2), False, True),
    (item(3, is_premium=True), False, False),
    (item(3, is_premium=True), True, True),
])
def test_visibility_depends_on_premium_flag_and_subscription(content, subscribed, visible):
    profile = profile_until(NOW + timedelta(days=30) if subscribed else None)
    assert is_visible_to(content, profile, NOW) is visible


def test_free_and_premium_together_is_rejected():
    with pytest.raises(ValueError):
        item(1, is_premium=True, is_free=True)


# ============================================================================
# SUBSCRIPTION STATUS
# ============================================================================

def test_subscription_status_active():
    ends_at = NOW + timedelta(days=30)

    status = subscription_status(profile_until(ends_at, auto_renew=True), NOW)

    assert status.active is True
    assert status.ends_at == ends_at
    assert status.auto_renew is True
    assert status.ends_at_display == "31.12.2025"


def test_subscription_status_expired_hides_end_date():
    status = subscription_status(profile_until(NOW - timedelta(days=1)), NOW)

    assert status.active is False
    assert status.ends_at is None
    assert status.ends_at_display == ""
