"""
Unit Tests: Engagement Tracker

- upsert прогресса: частичное обновление, completed_at один раз
- валидация процентов и оценки
- избранное: идемпотентное добавление и удаление
"""

import pytest

from smart_clinic_bot.core.exceptions import ContentNotFoundError, UserNotFoundError, ValidationError
from smart_clinic_bot.domain.entities import ProgressUpdate
from smart_clinic_bot.domain.value_objects import TelegramIdentity
from smart_clinic_bot.services import validate_progress

from conftest import USER_ID


@pytest.fixture
async def tracker(context):
    await context.profiles.touch(TelegramIdentity(USER_ID, first_name="Анна"))
    return context.engagement


# ============================================================================
# PROGRESS
# ============================================================================

@pytest.mark.asyncio
async def test_first_update_creates_record(tracker, clock):
    record = await tracker.upsert_progress(USER_ID, 1, ProgressUpdate(percent=30, seconds_watched=600))

    assert record.progress_percent == 30
    assert record.watch_time_seconds == 600
    assert record.completed is False
    assert record.last_watched_at == clock()


@pytest.mark.asyncio
async def test_partial_update_keeps_other_fields(tracker):
    await tracker.upsert_progress(USER_ID, 1, ProgressUpdate(percent=30, last_position=120))

    record = await tracker.upsert_progress(USER_ID, 1, ProgressUpdate(rating=5))

    assert record.progress_percent == 30
    assert record.last_position == 120
    assert record.rating == 5


@pytest.mark.asyncio
async def test_completed_at_is_set_once(tracker, clock):
    first = await tracker.upsert_progress(USER_ID, 1, ProgressUpdate(percent=100, completed=True))
    completed_at = first.completed_at

    clock.advance(days=1)
    second = await tracker.upsert_progress(USER_ID, 1, ProgressUpdate(completed=True))

    assert completed_at is not None
    assert second.completed_at == completed_at
    assert second.last_watched_at == clock()


@pytest.mark.asyncio
async def test_progress_listed_with_content(tracker):
    await tracker.upsert_progress(USER_ID, 1, ProgressUpdate(percent=10))

    records = await tracker.list_progress(USER_ID)

    assert len(records) == 1
    assert records[0].content.title == "Основы ЭКГ"


@pytest.mark.parametrize("update", [
    ProgressUpdate(percent=101),
    ProgressUpdate(percent=-1),
    ProgressUpdate(rating=0),
    ProgressUpdate(rating=6),
    ProgressUpdate(seconds_watched=-10),
])
def test_invalid_progress_is_rejected(update):
    with pytest.raises(ValidationError):
        validate_progress(update)


@pytest.mark.asyncio
async def test_unknown_user_is_not_found(context):
    with pytest.raises(UserNotFoundError):
        await context.engagement.upsert_progress(999, 1, ProgressUpdate(percent=10))


@pytest.mark.asyncio
async def test_inactive_content_is_not_found(tracker):
    with pytest.raises(ContentNotFoundError):
        await tracker.upsert_progress(USER_ID, 5, ProgressUpdate(percent=10))


# ============================================================================
# FAVORITES
# ============================================================================

@pytest.mark.asyncio
async def test_add_favorite_twice_keeps_one(tracker):
    assert await tracker.toggle_favorite(USER_ID, 3, add=True) is True
    assert await tracker.toggle_favorite(USER_ID, 3, add=True) is True

    favorites = await tracker.list_favorites(USER_ID)

    assert [favorite.content_id for favorite in favorites] == [3]
    assert favorites[0].content.title == "Антибиотики в практике"


@pytest.mark.asyncio
async def test_remove_missing_favorite_is_not_an_error(tracker):
    assert await tracker.toggle_favorite(USER_ID, 3, add=False) is False

    await tracker.toggle_favorite(USER_ID, 3, add=True)
    assert await tracker.toggle_favorite(USER_ID, 3, add=False) is False
    assert await tracker.list_favorites(USER_ID) == []


@pytest.mark.asyncio
async def test_favorite_for_unknown_content_is_not_found(tracker):
    with pytest.raises(ContentNotFoundError):
        await tracker.toggle_favorite(USER_ID, 404, add=True)
