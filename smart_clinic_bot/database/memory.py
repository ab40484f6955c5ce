"""
In-memory storage - бэкенд без PostgreSQL

Используется для локальной разработки (DATABASE_BACKEND=memory) и тестов.
Повторяет семантику SQL-запросов DAO: COALESCE-слияние анкеты, upsert по
паре user/content, однократный completed_at, атомарное погашение промокода.
Возвращает копии, а не внутренние объекты.
"""

import copy
import itertools
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from ..domain.entities import (
    Category,
    ContentItem,
    ContentKind,
    EngagementRecord,
    Favorite,
    Payment,
    PaymentStatus,
    Profile,
    ProgressUpdate,
    PromoCode,
    QuestionStatus,
    SubscriptionTier,
    SupportQuestion,
)
from ..domain.repositories import (
    CatalogFilter,
    IBillingRepository,
    IContentRepository,
    IEngagementRepository,
    IProfileRepository,
    IQuestionRepository,
)
from ..domain.services import as_utc
from ..domain.value_objects import TelegramIdentity

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryStore:
    """Общее хранилище для всех in-memory репозиториев"""

    def __init__(self):
        self.users: Dict[int, Profile] = {}
        self.categories: Dict[int, Category] = {}
        self.items: Dict[int, ContentItem] = {}
        self.progress: Dict[Tuple[int, int], EngagementRecord] = {}
        self.favorites: Dict[Tuple[int, int], datetime] = {}
        self.questions: Dict[int, SupportQuestion] = {}
        self.promo_codes: Dict[str, PromoCode] = {}
        self.payments: Dict[int, Payment] = {}
        self._ids = {name: itertools.count(1) for name in ("users", "categories", "items", "questions", "promo", "payments")}

    def next_id(self, name: str) -> int:
        return next(self._ids[name])

    # Seed helpers (каталог и промокоды наполняются внешним процессом)

    def add_category(self, category: Category) -> Category:
        self.categories[category.id] = copy.deepcopy(category)
        return category

    def add_item(self, item: ContentItem) -> ContentItem:
        self.items[item.id] = copy.deepcopy(item)
        return item

    def add_promo(self, promo: PromoCode) -> PromoCode:
        stored = replace(promo, code=PromoCode.normalize(promo.code), id=promo.id or self.next_id("promo"))
        self.promo_codes[stored.code] = stored
        return stored

    def item_with_category(self, item_id: int) -> Optional[ContentItem]:
        item = self.items.get(item_id)
        if item is None:
            return None
        joined = copy.deepcopy(item)
        category = self.categories.get(item.category_id)
        joined.category = copy.deepcopy(category) if category else None
        return joined


class InMemoryProfileRepository(IProfileRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get(self, telegram_id: int) -> Optional[Profile]:
        profile = self.store.users.get(telegram_id)
        return copy.deepcopy(profile) if profile else None

    async def upsert(
        self,
        identity: TelegramIdentity,
        survey: Optional[Dict[str, str]] = None,
        now: Optional[datetime] = None
    ) -> Profile:
        survey = survey or {}
        now = now or datetime.now(timezone.utc)
        profile = self.store.users.get(identity.telegram_id)

        if profile is None:
            profile = Profile(
                id=self.store.next_id("users"),
                telegram_id=identity.telegram_id,
                created_at=now,
            )
            self.store.users[identity.telegram_id] = profile

        profile.username = identity.username
        profile.first_name = identity.first_name
        profile.last_name = identity.last_name
        for name in ("specialty", "city", "email"):
            if survey.get(name) is not None:
                setattr(profile, name, survey[name])
        profile.last_active = now
        profile.is_active = True

        return copy.deepcopy(profile)

    async def update_subscription(
        self,
        telegram_id: int,
        tier: SubscriptionTier,
        ends_at: Optional[datetime],
        auto_renew: bool
    ) -> Optional[Profile]:
        profile = self.store.users.get(telegram_id)
        if profile is None:
            return None
        profile.tier = tier
        profile.subscription_ends_at = ends_at
        profile.auto_renew = auto_renew
        return copy.deepcopy(profile)

    async def list_active(self, active_since: datetime) -> List[Profile]:
        return [
            copy.deepcopy(profile)
            for _, profile in sorted(self.store.users.items())
            if profile.is_active and profile.last_active and as_utc(profile.last_active) > as_utc(active_since)
        ]

    async def archive_inactive(self, inactive_before: datetime) -> List[int]:
        archived = []
        for telegram_id, profile in self.store.users.items():
            if profile.is_active and profile.last_active and as_utc(profile.last_active) < as_utc(inactive_before):
                profile.is_active = False
                archived.append(telegram_id)
        return archived


class InMemoryContentRepository(IContentRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    def _active_items(self) -> List[ContentItem]:
        return [
            self.store.item_with_category(item.id)
            for item in self.store.items.values()
            if item.is_active
        ]

    async def list_items(self, filters: CatalogFilter) -> List[ContentItem]:
        items = [
            item for item in self._active_items()
            if (filters.category_id is None or item.category_id == filters.category_id)
            and (filters.content_type is None or item.kind is filters.content_type)
            and (filters.is_premium is None or item.is_premium == filters.is_premium)
            and (not filters.hide_premium or item.is_free or not item.is_premium)
        ]
        items.sort(key=lambda item: (as_utc(item.created_at) if item.created_at else _EPOCH, item.id), reverse=True)
        return items[filters.offset:filters.offset + filters.limit]

    async def get_item(self, content_id: int) -> Optional[ContentItem]:
        item = self.store.items.get(content_id)
        if item is None or not item.is_active:
            return None
        return self.store.item_with_category(content_id)

    async def list_categories(self) -> List[Category]:
        categories = [copy.deepcopy(c) for c in self.store.categories.values() if c.is_active]
        return sorted(categories, key=lambda c: (c.sort_order, c.name))

    async def list_scheduled(self, kind: ContentKind, start: datetime, end: datetime) -> List[ContentItem]:
        items = [
            item for item in self._active_items()
            if item.kind is kind
            and item.schedule_time is not None
            and as_utc(start) <= as_utc(item.schedule_time) <= as_utc(end)
        ]
        return sorted(items, key=lambda item: as_utc(item.schedule_time))

    async def list_discounted(self, limit: int) -> List[ContentItem]:
        items = [item for item in self._active_items() if item.is_discounted]
        items.sort(key=lambda item: (-(item.old_price - item.price) / item.old_price, item.id))
        return items[:limit]


class InMemoryEngagementRepository(IEngagementRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def upsert_progress(
        self,
        telegram_id: int,
        content_id: int,
        update: ProgressUpdate,
        now: datetime
    ) -> EngagementRecord:
        key = (telegram_id, content_id)
        record = self.store.progress.get(key)
        if record is None:
            record = EngagementRecord(telegram_id=telegram_id, content_id=content_id)
            self.store.progress[key] = record

        if update.percent is not None:
            record.progress_percent = update.percent
        if update.seconds_watched is not None:
            record.watch_time_seconds = update.seconds_watched
        if update.completed is not None:
            record.completed = update.completed
        if update.last_position is not None:
            record.last_position = update.last_position
        if update.rating is not None:
            record.rating = update.rating
        if update.review is not None:
            record.review = update.review

        record.last_watched_at = now
        if record.completed_at is None and update.completed:
            record.completed_at = now

        return copy.deepcopy(record)

    async def get_progress(self, telegram_id: int, content_id: int) -> Optional[EngagementRecord]:
        record = self.store.progress.get((telegram_id, content_id))
        return copy.deepcopy(record) if record else None

    async def list_progress(self, telegram_id: int) -> List[EngagementRecord]:
        records = []
        for (user_id, content_id), record in self.store.progress.items():
            if user_id != telegram_id:
                continue
            joined = copy.deepcopy(record)
            joined.content = self.store.item_with_category(content_id)
            records.append(joined)
        records.sort(
            key=lambda r: as_utc(r.last_watched_at) if r.last_watched_at else _EPOCH,
            reverse=True,
        )
        return records

    async def add_favorite(self, telegram_id: int, content_id: int, now: datetime) -> bool:
        key = (telegram_id, content_id)
        if key in self.store.favorites:
            return False
        self.store.favorites[key] = now
        return True

    async def remove_favorite(self, telegram_id: int, content_id: int) -> bool:
        return self.store.favorites.pop((telegram_id, content_id), None) is not None

    async def list_favorites(self, telegram_id: int) -> List[Favorite]:
        favorites = [
            Favorite(
                telegram_id=user_id,
                content_id=content_id,
                created_at=created_at,
                content=self.store.item_with_category(content_id),
            )
            for (user_id, content_id), created_at in self.store.favorites.items()
            if user_id == telegram_id
        ]
        favorites.sort(key=lambda f: as_utc(f.created_at), reverse=True)
        return favorites


class InMemoryQuestionRepository(IQuestionRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create(self, question: SupportQuestion, now: datetime) -> SupportQuestion:
        saved = replace(
            question,
            id=self.store.next_id("questions"),
            status=QuestionStatus.NEW,
            created_at=now,
        )
        self.store.questions[saved.id] = saved
        return copy.deepcopy(saved)

    async def get(self, question_id: int) -> Optional[SupportQuestion]:
        question = self.store.questions.get(question_id)
        return copy.deepcopy(question) if question else None

    async def list_by_status(self, status: QuestionStatus, limit: int = 20) -> List[SupportQuestion]:
        questions = [copy.deepcopy(q) for q in self.store.questions.values() if q.status is status]
        questions.sort(key=lambda q: (as_utc(q.created_at), q.id))
        return questions[:limit]

    async def set_response(self, question_id: int, response: str, now: datetime) -> Optional[SupportQuestion]:
        question = self.store.questions.get(question_id)
        if question is None:
            return None
        question.admin_response = response
        question.responded_at = now
        question.status = QuestionStatus.ANSWERED
        return copy.deepcopy(question)

    async def set_status(self, question_id: int, status: QuestionStatus) -> Optional[SupportQuestion]:
        question = self.store.questions.get(question_id)
        if question is None:
            return None
        question.status = status
        return copy.deepcopy(question)


class InMemoryBillingRepository(IBillingRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get_promo(self, code: str) -> Optional[PromoCode]:
        promo = self.store.promo_codes.get(PromoCode.normalize(code))
        return copy.deepcopy(promo) if promo else None

    async def redeem_promo(self, code: str, now: datetime) -> Optional[PromoCode]:
        promo = self.store.promo_codes.get(PromoCode.normalize(code))
        if promo is None or promo.rejection_reason(now) is not None:
            return None
        promo.used_count += 1
        return copy.deepcopy(promo)

    async def create_payment(self, payment: Payment, now: datetime) -> Payment:
        saved = replace(
            payment,
            id=self.store.next_id("payments"),
            status=PaymentStatus.PENDING,
            created_at=now,
        )
        self.store.payments[saved.id] = saved
        logger.info(f"💳 Payment #{saved.id} created (memory): user={saved.telegram_id} amount={saved.amount}")
        return copy.deepcopy(saved)
