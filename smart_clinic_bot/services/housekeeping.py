"""
Housekeeping - ежедневное обслуживание

1. Архивация профилей без активности дольше INACTIVITY_DAYS
2. Рассылка анонсов вебинаров на ближайшие сутки активным пользователям

HousekeepingScheduler запускает обслуживание раз в день в заданный час UTC.
Ошибки логируются и не останавливают бота.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Awaitable, Callable, List, Optional, Sequence

from ..domain.entities import ContentItem, ContentKind
from ..domain.repositories import IContentRepository, IProfileRepository
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)

# (telegram_id, вебинары) -> доставлено ли сообщение
WebinarNotifier = Callable[[int, Sequence[ContentItem]], Awaitable[bool]]

SWEEP_WINDOW = timedelta(days=1)


@dataclass
class HousekeepingReport:
    archived: List[int] = field(default_factory=list)
    webinars: int = 0
    notified: int = 0
    skipped: int = 0


class HousekeepingService:
    """Ежедневные задачи обслуживания"""

    def __init__(
        self,
        profiles: IProfileRepository,
        content: IContentRepository,
        clock: Clock = utc_now,
        inactivity_days: int = 60
    ):
        self.profiles = profiles
        self.content = content
        self.clock = clock
        self.inactivity_days = inactivity_days

    async def archive_inactive(self, now: Optional[datetime] = None) -> List[int]:
        now = now or self.clock()
        threshold = now - timedelta(days=self.inactivity_days)
        archived = await self.profiles.archive_inactive(threshold)

        if archived:
            logger.info(f"🗄 Archived {len(archived)} inactive profiles (last active before {threshold:%Y-%m-%d})")
        return archived

    async def sweep_upcoming_webinars(
        self,
        notifier: Optional[WebinarNotifier],
        now: Optional[datetime] = None
    ) -> HousekeepingReport:
        """Анонсы вебинаров ближайших 24 часов"""
        now = now or self.clock()
        report = HousekeepingReport()

        webinars = await self.content.list_scheduled(ContentKind.WEBINAR, now, now + SWEEP_WINDOW)
        report.webinars = len(webinars)
        if not webinars or notifier is None:
            return report

        recipients = await self.profiles.list_active(now - timedelta(days=self.inactivity_days))
        for profile in recipients:
            delivered = await notifier(profile.telegram_id, webinars)
            if delivered:
                report.notified += 1
            else:
                report.skipped += 1

        logger.info(
            f"📅 Webinar sweep: {report.webinars} webinars, "
            f"{report.notified} notified, {report.skipped} skipped"
        )
        return report

    async def run_daily(self, notifier: Optional[WebinarNotifier] = None) -> HousekeepingReport:
        now = self.clock()
        archived = await self.archive_inactive(now)
        report = await self.sweep_upcoming_webinars(notifier, now)
        report.archived = archived
        return report


class HousekeepingScheduler:
    """Фоновая задача: run_daily раз в сутки в hour:00 UTC"""

    def __init__(
        self,
        service: HousekeepingService,
        notifier: Optional[WebinarNotifier] = None,
        hour: int = 6,
        clock: Clock = utc_now
    ):
        self.service = service
        self.notifier = notifier
        self.hour = hour
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    def seconds_until_next_run(self, now: Optional[datetime] = None) -> float:
        now = now or self.clock()
        next_run = now.replace(hour=self.hour, minute=0, second=0, microsecond=0)
        if next_run <= now:
            next_run += timedelta(days=1)
        return (next_run - now).total_seconds()

    async def run_once(self) -> Optional[HousekeepingReport]:
        """Один прогон; любая ошибка логируется и не пробрасывается"""
        try:
            return await self.service.run_daily(self.notifier)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"❌ Housekeeping run failed: {e}", exc_info=True)
            return None

    async def _loop(self):
        while True:
            delay = self.seconds_until_next_run()
            logger.info(f"⏰ Next housekeeping run in {delay / 3600:.1f}h")
            await asyncio.sleep(delay)
            await self.run_once()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop())
            logger.info(f"⏰ Housekeeping scheduler started (daily at {self.hour:02d}:00 UTC)")
        return self._task

    async def stop(self):
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            logger.info("✅ Housekeeping scheduler stopped")
        self._task = None
