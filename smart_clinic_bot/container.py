"""Service context: every collaborator of the bot and the API, built once."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .core.config import Settings
from .core.exceptions import StorageError
from .database import (
    BillingDAO,
    ContentDAO,
    DatabaseService,
    EngagementDAO,
    InMemoryBillingRepository,
    InMemoryContentRepository,
    InMemoryEngagementRepository,
    InMemoryProfileRepository,
    InMemoryQuestionRepository,
    InMemoryStore,
    QuestionDAO,
    UserDAO,
    create_tables,
)
from .domain.repositories import (
    IBillingRepository,
    IContentRepository,
    IEngagementRepository,
    IProfileRepository,
    IQuestionRepository,
)
from .domain.services import OnboardingStateMachine
from .messages import ButtonAction, MessageService
from .services import (
    BillingService,
    CatalogService,
    Clock,
    EngagementTracker,
    HousekeepingService,
    ProfileService,
    SupportIntake,
    utc_now,
)

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    profiles: IProfileRepository
    content: IContentRepository
    engagement: IEngagementRepository
    questions: IQuestionRepository
    billing: IBillingRepository


@dataclass
class ServiceContext:
    """Explicit dependency container passed to handlers and routes."""

    settings: Settings
    repositories: Repositories
    messages: MessageService
    onboarding: OnboardingStateMachine
    profiles: ProfileService
    catalog: CatalogService
    engagement: EngagementTracker
    support: SupportIntake
    billing: BillingService
    housekeeping: HousekeepingService
    db_service: Optional[DatabaseService] = None
    memory_store: Optional[InMemoryStore] = None
    clock: Clock = field(default=utc_now)

    @classmethod
    def build(
        cls,
        settings: Settings,
        repositories: Repositories,
        clock: Clock = utc_now,
        messages: Optional[MessageService] = None,
        db_service: Optional[DatabaseService] = None,
        memory_store: Optional[InMemoryStore] = None
    ) -> "ServiceContext":
        messages = messages or MessageService(locale=settings.locale, debug_mode=settings.debug)

        return cls(
            settings=settings,
            repositories=repositories,
            messages=messages,
            onboarding=OnboardingStateMachine(skip_tokens=messages.action_labels(ButtonAction.SKIP)),
            profiles=ProfileService(repositories.profiles, clock),
            catalog=CatalogService(repositories.content, clock, settings.announcement_window_days),
            engagement=EngagementTracker(repositories.engagement, repositories.profiles, repositories.content, clock),
            support=SupportIntake(repositories.questions, clock, settings.support_sla_hours),
            billing=BillingService(repositories.billing, repositories.profiles, clock),
            housekeeping=HousekeepingService(repositories.profiles, repositories.content, clock, settings.inactivity_days),
            db_service=db_service,
            memory_store=memory_store,
            clock=clock,
        )

    @classmethod
    def in_memory(
        cls,
        settings: Settings,
        store: Optional[InMemoryStore] = None,
        clock: Clock = utc_now
    ) -> "ServiceContext":
        store = store or InMemoryStore()
        repositories = Repositories(
            profiles=InMemoryProfileRepository(store),
            content=InMemoryContentRepository(store),
            engagement=InMemoryEngagementRepository(store),
            questions=InMemoryQuestionRepository(store),
            billing=InMemoryBillingRepository(store),
        )
        logger.info("🧪 Using in-memory storage backend")
        return cls.build(settings, repositories, clock, memory_store=store)

    @classmethod
    async def create(cls, settings: Settings, clock: Clock = utc_now) -> "ServiceContext":
        """Build the context for the configured backend.

        Failure to reach PostgreSQL is fatal.
        """
        if settings.database_backend == "memory":
            return cls.in_memory(settings, clock=clock)

        db_service = DatabaseService(settings.database_url, schema=settings.db_schema)
        if not await db_service.initialize(settings.db_pool_min, settings.db_pool_max):
            raise StorageError("connect", f"cannot connect to database (schema {settings.db_schema})")

        await create_tables(db_service)

        repositories = Repositories(
            profiles=UserDAO(db_service),
            content=ContentDAO(db_service),
            engagement=EngagementDAO(db_service),
            questions=QuestionDAO(db_service),
            billing=BillingDAO(db_service),
        )
        logger.info(f"✅ Service context ready (postgres, schema {settings.db_schema})")
        return cls.build(settings, repositories, clock, db_service=db_service)

    async def health_check(self) -> Dict[str, bool]:
        health = {"messages": bool(self.messages.get_available_locales())}
        if self.db_service is not None:
            health["database"] = await self.db_service.health_check()
        else:
            health["database"] = self.memory_store is not None
        return health

    async def close(self) -> None:
        if self.db_service is not None:
            await self.db_service.close()
        logger.info("Service context closed")
