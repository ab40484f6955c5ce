"""
Unit Tests: Housekeeping

- архивация профилей без активности > INACTIVITY_DAYS
- рассылка анонсов вебинаров на ближайшие сутки
- планировщик: время следующего запуска, ошибки не пробрасываются
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from smart_clinic_bot.domain.value_objects import TelegramIdentity
from smart_clinic_bot.services import HousekeepingScheduler

from conftest import NOW


async def seed_users(context, clock):
    """1 - активен, 2 - заходил 61 день назад"""
    profiles = context.repositories.profiles
    await profiles.upsert(TelegramIdentity(2), now=NOW - timedelta(days=61))
    await profiles.upsert(TelegramIdentity(1), now=NOW - timedelta(days=1))


@pytest.mark.asyncio
async def test_archive_inactive_profiles(context, clock, store):
    await seed_users(context, clock)

    archived = await context.housekeeping.archive_inactive()

    assert archived == [2]
    assert store.users[2].is_active is False
    assert store.users[1].is_active is True


@pytest.mark.asyncio
async def test_archived_profile_reactivates_on_contact(context, clock, store):
    await seed_users(context, clock)
    await context.housekeeping.archive_inactive()

    await context.profiles.touch(TelegramIdentity(2))

    assert store.users[2].is_active is True


@pytest.mark.asyncio
async def test_sweep_notifies_active_users_about_next_day_webinars(context, clock):
    await seed_users(context, clock)
    notifier = AsyncMock(return_value=True)

    report = await context.housekeeping.sweep_upcoming_webinars(notifier)

    assert report.webinars == 1
    assert report.notified == 1
    telegram_id, webinars = notifier.await_args.args
    assert telegram_id == 1
    assert [w.id for w in webinars] == [3]


@pytest.mark.asyncio
async def test_sweep_counts_undelivered_as_skipped(context, clock):
    await context.profiles.touch(TelegramIdentity(1))
    await context.profiles.touch(TelegramIdentity(3))
    notifier = AsyncMock(side_effect=[True, False])

    report = await context.housekeeping.sweep_upcoming_webinars(notifier)

    assert (report.notified, report.skipped) == (1, 1)


@pytest.mark.asyncio
async def test_sweep_without_webinars_sends_nothing(context, clock):
    await context.profiles.touch(TelegramIdentity(1))
    clock.advance(days=20)
    notifier = AsyncMock()

    report = await context.housekeeping.sweep_upcoming_webinars(notifier)

    assert report.webinars == 0
    notifier.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_daily_combines_both_tasks(context, clock):
    await seed_users(context, clock)

    report = await context.housekeeping.run_daily(AsyncMock(return_value=True))

    assert report.archived == [2]
    assert report.notified == 1


# ============================================================================
# SCHEDULER
# ============================================================================

def test_next_run_later_today(context):
    scheduler = HousekeepingScheduler(context.housekeeping, hour=18)

    assert scheduler.seconds_until_next_run(NOW) == 6 * 3600


def test_next_run_tomorrow_when_hour_passed(context):
    scheduler = HousekeepingScheduler(context.housekeeping, hour=6)

    assert scheduler.seconds_until_next_run(NOW) == 18 * 3600


def test_next_run_exactly_at_hour_waits_a_day(context):
    scheduler = HousekeepingScheduler(context.housekeeping, hour=6)
    at_six = datetime(2025, 12, 1, 6, 0, tzinfo=timezone.utc)

    assert scheduler.seconds_until_next_run(at_six) == 24 * 3600


@pytest.mark.asyncio
async def test_run_once_swallows_errors():
    service = AsyncMock()
    service.run_daily.side_effect = RuntimeError("db down")
    scheduler = HousekeepingScheduler(service)

    assert await scheduler.run_once() is None


@pytest.mark.asyncio
async def test_scheduler_start_and_stop(context):
    scheduler = HousekeepingScheduler(context.housekeeping, hour=6, clock=context.clock)

    task = scheduler.start()
    assert scheduler.start() is task

    await scheduler.stop()
    assert task.cancelled() or task.done()
