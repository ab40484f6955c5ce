"""
Integration Tests: Web Catalog API

FastAPI приложение поверх in-memory ServiceContext:
каталог с доступом по подписке, избранное, прогресс, промокоды, health.
"""

import pytest
from fastapi.testclient import TestClient

from smart_clinic_bot.api.app import create_app
from smart_clinic_bot.domain.value_objects import TelegramIdentity

from conftest import USER_ID

SUBSCRIBER_ID = 777


@pytest.fixture
async def users(context):
    """USER_ID - гость, SUBSCRIBER_ID - с активной подпиской"""
    await context.profiles.touch(TelegramIdentity(USER_ID))
    await context.profiles.touch(TelegramIdentity(SUBSCRIBER_ID))
    await context.billing.activate_subscription(SUBSCRIBER_ID, 1)


@pytest.fixture
def client(context, users):
    with TestClient(create_app(context)) as client:
        yield client


def ids(response):
    return [item["id"] for item in response.json()["data"]]


# ============================================================================
# SYSTEM
# ============================================================================

def test_root(client):
    assert client.get("/").json()["status"] == "running"


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "OK"
    assert body["checks"] == {"messages": True, "database": True}


# ============================================================================
# CATALOG
# ============================================================================

def test_guest_sees_active_non_premium_newest_first(client):
    response = client.get("/api/content")

    assert response.status_code == 200
    assert ids(response) == [4, 3, 6, 1]
    assert response.json()["pagination"] == {"limit": 20, "offset": 0, "count": 4}


def test_subscriber_sees_premium(client):
    response = client.get("/api/content", params={"telegram_id": SUBSCRIBER_ID})

    assert ids(response) == [4, 3, 6, 2, 1]


def test_filters_and_pagination(client):
    webinars = client.get("/api/content", params={"content_type": "webinar"})
    page = client.get("/api/content", params={"limit": 2, "offset": 1})

    assert ids(webinars) == [3, 6]
    assert ids(page) == [3, 6]


@pytest.mark.parametrize("telegram_id, expected", [
    (None, [4, 3, 6, 1]),
    (SUBSCRIBER_ID, [4, 3, 6, 2, 1]),
])
def test_paging_walks_whole_visible_catalog(client, telegram_id, expected):
    """
    Тест: постраничный обход по 2 до короткой страницы

    Скрытый премиум не укорачивает страницы и не прячет следующие материалы.
    """
    seen, offset = [], 0
    while True:
        params = {"limit": 2, "offset": offset}
        if telegram_id:
            params["telegram_id"] = telegram_id
        body = client.get("/api/content", params=params).json()
        seen.extend(item["id"] for item in body["data"])
        if body["pagination"]["count"] < 2:
            break
        offset += 2

    assert seen == expected


def test_invalid_query_is_400(client):
    response = client.get("/api/content", params={"limit": 0})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_premium_item_requires_subscription(client):
    assert client.get("/api/content/2").status_code == 403
    assert client.get("/api/content/2", params={"telegram_id": USER_ID}).status_code == 403

    response = client.get("/api/content/2", params={"telegram_id": SUBSCRIBER_ID})
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Клинические разборы"


def test_inactive_item_is_404(client):
    response = client.get("/api/content/5")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_categories(client):
    names = [category["name"] for category in client.get("/api/categories").json()["data"]]

    assert names == ["Курсы", "Вебинары"]


# ============================================================================
# ENGAGEMENT
# ============================================================================

def test_favorites_add_is_idempotent_and_remove(client):
    payload = {"telegram_id": USER_ID, "content_id": 1}

    assert client.post("/api/favorites", json=payload).json()["data"]["is_favorite"] is True
    assert client.post("/api/favorites", json=payload).status_code == 200

    favorites = client.get(f"/api/favorites/{USER_ID}").json()["data"]
    assert [favorite["content_id"] for favorite in favorites] == [1]

    response = client.delete(f"/api/favorites/{USER_ID}/1")
    assert response.json()["data"]["is_favorite"] is False
    assert client.delete(f"/api/favorites/{USER_ID}/1").status_code == 200
    assert client.get(f"/api/favorites/{USER_ID}").json()["data"] == []


def test_favorite_unknown_user_is_404(client):
    response = client.post("/api/favorites", json={"telegram_id": 999, "content_id": 1})

    assert response.status_code == 404


def test_progress_update_and_completion(client):
    first = client.put(f"/api/progress/{USER_ID}/1", json={"progress_percent": 40, "last_position": 120})
    assert first.status_code == 200
    assert first.json()["data"]["completed_at"] is None

    done = client.put(f"/api/progress/{USER_ID}/1", json={"progress_percent": 100, "completed": True})
    completed_at = done.json()["data"]["completed_at"]
    assert completed_at is not None
    assert done.json()["data"]["last_position"] == 120

    again = client.put(f"/api/progress/{USER_ID}/1", json={"completed": True, "rating": 5})
    assert again.json()["data"]["completed_at"] == completed_at

    stored = client.get(f"/api/progress/{USER_ID}/1").json()["data"]
    assert stored["rating"] == 5


@pytest.mark.parametrize("payload", [
    {"progress_percent": 101},
    {"rating": 0},
    {"watch_time_seconds": -1},
])
def test_progress_validation(client, payload):
    response = client.put(f"/api/progress/{USER_ID}/1", json=payload)

    assert response.status_code == 400


def test_progress_for_missing_content_is_404(client):
    assert client.put(f"/api/progress/{USER_ID}/5", json={"progress_percent": 10}).status_code == 404


# ============================================================================
# PROMO
# ============================================================================

def test_valid_promo_with_quote(client, store):
    data = client.get("/api/promo/welcome20", params={"plan_months": 1}).json()["data"]

    assert data["valid"] is True
    assert data["code"] == "WELCOME20"
    assert data["quote"]["amount"].startswith("792")
    assert store.promo_codes["WELCOME20"].used_count == 0


@pytest.mark.parametrize("code, rejection", [
    ("NOPE", "not_found"),
    ("OFF", "inactive"),
    ("ONCE", "exhausted"),
    ("OLD", "expired"),
])
def test_rejected_promo(client, code, rejection):
    response = client.get(f"/api/promo/{code}")

    assert response.status_code == 200
    assert response.json()["data"]["valid"] is False
    assert response.json()["data"]["rejection"] == rejection
