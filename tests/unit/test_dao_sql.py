"""
Unit Tests: DAO SQL contracts

Проверяем запросы и параметры DAO с mocked DatabaseService,
а также перевод ошибок asyncpg в StorageError.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from smart_clinic_bot.core.exceptions import StorageError
from smart_clinic_bot.database import (
    BillingDAO,
    ContentDAO,
    DatabaseService,
    EngagementDAO,
    QuestionDAO,
    UserDAO,
    create_tables,
)
from smart_clinic_bot.domain.entities import ContentKind, Payment, ProgressUpdate, SubscriptionTier
from smart_clinic_bot.domain.repositories import CatalogFilter
from smart_clinic_bot.domain.value_objects import TelegramIdentity

NOW = datetime(2025, 12, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def db():
    """Mock DatabaseService"""
    db = AsyncMock(spec=DatabaseService)
    db.fetch_one.return_value = None
    db.fetch_all.return_value = []
    return db


def user_row(**overrides):
    row = {
        "id": 1, "telegram_id": 42, "username": "doc", "first_name": "Анна", "last_name": None,
        "specialty": None, "city": None, "email": None,
        "subscription_tier": "guest", "subscription_ends_at": None, "auto_renew": False,
        "is_active": True, "last_active": NOW, "created_at": NOW,
    }
    row.update(overrides)
    return row


# ============================================================================
# USER DAO
# ============================================================================

@pytest.mark.asyncio
async def test_user_upsert_merges_survey_with_coalesce(db):
    db.fetch_one.return_value = user_row(specialty="Терапия")

    profile = await UserDAO(db).upsert(TelegramIdentity(42, username="doc"), survey={"specialty": "Терапия"}, now=NOW)

    query, *params = db.fetch_one.await_args.args
    assert "ON CONFLICT (telegram_id)" in query
    assert "COALESCE(EXCLUDED.specialty, users.specialty)" in query
    assert params == [42, "doc", None, None, "Терапия", None, None, NOW]
    assert profile.specialty == "Терапия"


@pytest.mark.asyncio
async def test_user_get_missing_returns_none(db):
    assert await UserDAO(db).get(42) is None


@pytest.mark.asyncio
async def test_update_subscription_params(db):
    db.fetch_one.return_value = user_row(subscription_tier="paid", subscription_ends_at=NOW)

    profile = await UserDAO(db).update_subscription(42, SubscriptionTier.PAID, NOW, True)

    _, *params = db.fetch_one.await_args.args
    assert params == ["paid", NOW, True, 42]
    assert profile.tier is SubscriptionTier.PAID


@pytest.mark.asyncio
async def test_archive_inactive_returns_ids(db):
    db.fetch_all.return_value = [{"telegram_id": 7}, {"telegram_id": 9}]

    archived = await UserDAO(db).archive_inactive(NOW)

    query = db.fetch_all.await_args.args[0]
    assert "SET is_active = false" in query
    assert archived == [7, 9]


# ============================================================================
# CONTENT DAO
# ============================================================================

@pytest.mark.asyncio
async def test_list_items_builds_numbered_params(db):
    await ContentDAO(db).list_items(CatalogFilter(category_id=3, content_type=ContentKind.WEBINAR, limit=10, offset=20))

    query, *params = db.fetch_all.await_args.args
    assert "ci.category_id = $1" in query
    assert "ci.content_type = $2" in query
    assert "LIMIT $3 OFFSET $4" in query
    assert "ORDER BY ci.created_at DESC" in query
    assert params == [3, "webinar", 10, 20]


@pytest.mark.asyncio
async def test_list_items_hides_premium_before_pagination(db):
    await ContentDAO(db).list_items(CatalogFilter(hide_premium=True, limit=2, offset=2))

    query, *params = db.fetch_all.await_args.args
    assert "(ci.is_free OR NOT ci.is_premium)" in query
    assert query.index("(ci.is_free OR NOT ci.is_premium)") < query.index("LIMIT")
    assert params == [2, 2]


@pytest.mark.asyncio
async def test_list_items_maps_joined_category(db):
    db.fetch_all.return_value = [{
        "id": 1, "category_id": 2, "title": "ЭКГ", "content_type": "course", "price": Decimal("0"),
        "is_free": True, "category_name": "Курсы", "category_icon": "📚", "category_color": "#fff",
    }]

    items = await ContentDAO(db).list_items(CatalogFilter())

    assert items[0].kind is ContentKind.COURSE
    assert items[0].category.name == "Курсы"


# ============================================================================
# ENGAGEMENT DAO
# ============================================================================

@pytest.mark.asyncio
async def test_progress_upsert_sets_completed_at_once(db):
    db.fetch_one.return_value = {"user_id": 42, "content_id": 1, "completed": True, "completed_at": NOW}

    await EngagementDAO(db).upsert_progress(42, 1, ProgressUpdate(percent=100, completed=True), NOW)

    query, *params = db.fetch_one.await_args.args
    assert "ON CONFLICT (user_id, content_id)" in query
    assert "user_progress.completed_at," in query
    assert params == [42, 1, 100, None, True, None, None, None, NOW]


@pytest.mark.asyncio
@pytest.mark.parametrize("status, expected", [("INSERT 0 1", True), ("INSERT 0 0", False)])
async def test_add_favorite_reports_insert(db, status, expected):
    db.execute.return_value = status

    assert await EngagementDAO(db).add_favorite(42, 1, NOW) is expected
    assert "ON CONFLICT (user_id, content_id) DO NOTHING" in db.execute.await_args.args[0]


# ============================================================================
# QUESTION & BILLING DAO
# ============================================================================

@pytest.mark.asyncio
async def test_question_not_found_on_response(db):
    assert await QuestionDAO(db).set_response(5, "ответ", NOW) is None


@pytest.mark.asyncio
async def test_redeem_promo_is_single_conditional_update(db):
    result = await BillingDAO(db).redeem_promo(" welcome20 ", NOW)

    query, *params = db.fetch_one.await_args.args
    assert query.strip().startswith("UPDATE promo_codes")
    assert "used_count < max_uses" in query
    assert params == ["WELCOME20", NOW]
    assert result is None


@pytest.mark.asyncio
async def test_create_payment(db):
    db.fetch_one.return_value = {
        "id": 3, "user_id": 42, "plan_months": 1, "amount": Decimal("792.00"),
        "promo_code": "WELCOME20", "status": "pending", "created_at": NOW,
    }

    payment = await BillingDAO(db).create_payment(
        Payment(telegram_id=42, plan_months=1, amount=Decimal("792.00"), promo_code="WELCOME20"), NOW
    )

    assert payment.id == 3
    assert db.fetch_one.await_args.args[1:] == (42, 1, Decimal("792.00"), "WELCOME20", "pending", NOW)


# ============================================================================
# DATABASE SERVICE
# ============================================================================

@pytest.mark.asyncio
async def test_connection_errors_become_storage_errors():
    service = DatabaseService("postgresql://localhost/test")
    service.pool = MagicMock()
    service.pool.acquire.return_value.__aenter__.side_effect = OSError("connection reset")

    with pytest.raises(StorageError):
        await service.fetch_one("SELECT 1")


@pytest.mark.asyncio
async def test_health_check_without_pool_is_false():
    service = DatabaseService("postgresql://localhost/test")

    assert await service.health_check() is False


@pytest.mark.asyncio
async def test_create_tables_runs_in_transaction():
    conn = AsyncMock()
    db = MagicMock()
    db.transaction.return_value.__aenter__.return_value = conn

    await create_tables(db)

    statements = [call.args[0] for call in conn.execute.await_args_list]
    assert all("IF NOT EXISTS" in statement for statement in statements)
    assert any("CREATE TABLE IF NOT EXISTS promo_codes" in statement for statement in statements)
