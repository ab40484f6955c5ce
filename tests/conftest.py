"""
Общие фикстуры тестов

- фиксированные часы (FakeClock) вместо datetime.now
- in-memory хранилище с каталогом и промокодами
- ServiceContext поверх in-memory бэкенда
- фабрики aiogram-объектов: пользователь, сообщение, FSMContext
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import User

from smart_clinic_bot.container import ServiceContext
from smart_clinic_bot.core.config import Settings
from smart_clinic_bot.database import InMemoryStore
from smart_clinic_bot.domain.entities import Category, ContentItem, ContentKind, PromoCode
from smart_clinic_bot.messages import MessageService

NOW = datetime(2025, 12, 1, 12, 0, tzinfo=timezone.utc)

ADMIN_ID = 1000
USER_ID = 12345


class FakeClock:
    """Часы, которые двигаются только вручную"""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


# ============================================================================
# FIXTURES: STORAGE & SERVICES
# ============================================================================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_backend="memory",
        fsm_storage="memory",
        admin_ids=str(ADMIN_ID),
        webapp_url="https://clinic.example.com",
    )


@pytest.fixture
def store():
    """Каталог: курсы, премиум, вебинары, акция; промокоды"""
    store = InMemoryStore()

    store.add_category(Category(id=1, name="Курсы", kind="course", icon="📚", sort_order=1))
    store.add_category(Category(id=2, name="Вебинары", kind="webinar", icon="🎤", sort_order=2))

    store.add_item(ContentItem(
        id=1, category_id=1, title="Основы ЭКГ", kind=ContentKind.COURSE,
        is_free=True, created_at=NOW - timedelta(days=10),
    ))
    store.add_item(ContentItem(
        id=2, category_id=1, title="Клинические разборы", kind=ContentKind.COURSE,
        is_premium=True, price=Decimal("2990"), created_at=NOW - timedelta(days=5),
    ))
    store.add_item(ContentItem(
        id=3, category_id=2, title="Антибиотики в практике", kind=ContentKind.WEBINAR,
        instructor="Д-р Петров", schedule_time=NOW + timedelta(hours=6),
        max_participants=100, current_participants=40, created_at=NOW - timedelta(days=3),
    ))
    store.add_item(ContentItem(
        id=4, category_id=1, title="Фармакология для терапевтов", kind=ContentKind.COURSE,
        price=Decimal("700"), old_price=Decimal("1000"), created_at=NOW - timedelta(days=2),
    ))
    store.add_item(ContentItem(
        id=5, category_id=1, title="Снятый с публикации курс", kind=ContentKind.COURSE,
        is_active=False, created_at=NOW - timedelta(days=1),
    ))
    store.add_item(ContentItem(
        id=6, category_id=2, title="Вебинар через неделю", kind=ContentKind.WEBINAR,
        schedule_time=NOW + timedelta(days=5), created_at=NOW - timedelta(days=4),
    ))

    store.add_promo(PromoCode(code="WELCOME20", discount_percent=20))
    store.add_promo(PromoCode(code="FLAT500", discount_amount=Decimal("500")))
    store.add_promo(PromoCode(code="ONCE", discount_percent=50, max_uses=1, used_count=1))
    store.add_promo(PromoCode(code="OLD", discount_percent=10, valid_until=NOW - timedelta(days=1)))
    store.add_promo(PromoCode(code="OFF", discount_percent=10, is_active=False))

    return store


@pytest.fixture
def messages():
    return MessageService(locale="ru")


@pytest.fixture
def context(settings, store, clock, messages):
    context = ServiceContext.in_memory(settings, store=store, clock=clock)
    context.messages = messages
    return context


# ============================================================================
# FIXTURES: AIOGRAM OBJECTS
# ============================================================================

@pytest.fixture
def make_user():
    def factory(user_id: int = USER_ID, first_name: str = "Анна", **kwargs) -> User:
        return User(id=user_id, is_bot=False, first_name=first_name, **kwargs)
    return factory


@pytest.fixture
def make_message(make_user):
    """Mock сообщения: только нужные handler'ам поля, answer - AsyncMock"""

    def factory(text=None, user=None, caption=None, photo=None, document=None) -> Mock:
        message = Mock()
        message.text = text
        message.caption = caption
        message.photo = photo
        message.document = document
        message.from_user = user or make_user()
        message.answer = AsyncMock()
        message.edit_text = AsyncMock()
        return message

    return factory


@pytest.fixture
def make_callback(make_user, make_message):
    def factory(data: str, user=None) -> Mock:
        user = user or make_user()
        callback = Mock()
        callback.data = data
        callback.from_user = user
        callback.message = make_message(user=user)
        callback.answer = AsyncMock()
        return callback

    return factory


@pytest.fixture
def fsm_storage():
    return MemoryStorage()


@pytest.fixture
def make_state(fsm_storage):
    """Настоящий FSMContext поверх MemoryStorage"""

    def factory(user_id: int = USER_ID) -> FSMContext:
        key = StorageKey(bot_id=1, chat_id=user_id, user_id=user_id)
        return FSMContext(storage=fsm_storage, key=key)

    return factory


@pytest.fixture
def bot():
    bot = AsyncMock()
    bot.send_message = AsyncMock()
    bot.send_photo = AsyncMock()
    bot.send_document = AsyncMock()
    return bot
