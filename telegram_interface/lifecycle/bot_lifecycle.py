"""
Bot Lifecycle Manager - управление жизненным циклом бота

Отвечает за:
- Инициализацию сервисов (ServiceContext: база, сервисы, шаблоны)
- Запуск polling с graceful shutdown
- Ежедневный housekeeping в фоне
- Обработку сигналов (SIGINT, SIGTERM)
- Корректное освобождение ресурсов
"""

import asyncio
import logging
import signal
from typing import Callable, Optional

from aiogram import Bot, Dispatcher

from smart_clinic_bot.container import ServiceContext
from smart_clinic_bot.core.config import Settings
from smart_clinic_bot.services import HousekeepingScheduler

from ..utilities import make_webinar_notifier

logger = logging.getLogger(__name__)


class BotLifecycle:
    """
    Управление жизненным циклом Telegram бота

    Координирует инициализацию, запуск и остановку всех компонентов системы.
    """

    def __init__(
        self,
        bot: Bot,
        dispatcher: Dispatcher,
        settings: Settings,
        on_services_ready: Optional[Callable[[ServiceContext], None]] = None
    ):
        """
        Args:
            bot: Aiogram Bot instance
            dispatcher: Aiogram Dispatcher instance
            settings: Настройки приложения
            on_services_ready: Вызывается с готовым ServiceContext (регистрация handlers)
        """
        self.bot = bot
        self.dp = dispatcher
        self.settings = settings
        self.on_services_ready = on_services_ready

        # Сервисы - инициализируются при старте
        self.context: Optional[ServiceContext] = None
        self.scheduler: Optional[HousekeepingScheduler] = None

        # Shutdown event для graceful shutdown
        self._shutdown_event = asyncio.Event()

    async def setup_signal_handlers(self):
        """Настроить обработчики сигналов для graceful shutdown"""
        loop = asyncio.get_running_loop()

        def signal_handler(sig):
            logger.info(f"🛑 Received signal {sig}, initiating graceful shutdown...")
            self._shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: signal_handler(s))

        logger.info("📡 Signal handlers configured (SIGINT, SIGTERM)")

    async def initialize_services(self):
        """
        Инициализировать все сервисы бота

        Ошибка подключения к PostgreSQL фатальна и пробрасывается.
        """
        self.context = await ServiceContext.create(self.settings)
        logger.info(f"✅ Services initialized (backend: {self.settings.database_backend})")

        if self.on_services_ready:
            self.on_services_ready(self.context)

        self.scheduler = HousekeepingScheduler(
            self.context.housekeeping,
            notifier=make_webinar_notifier(self.bot, self.context.messages),
            hour=self.settings.housekeeping_hour,
            clock=self.context.clock
        )

    async def start_polling(self):
        """Запуск бота с graceful shutdown"""
        try:
            await self.setup_signal_handlers()
            await self.initialize_services()

            self._log_startup_banner()

            self.scheduler.start()
            polling_task = asyncio.create_task(self.dp.start_polling(self.bot, handle_signals=False))
            shutdown_task = asyncio.create_task(self._shutdown_event.wait())

            # Ждем сигнала shutdown (или падения polling)
            done, _ = await asyncio.wait({polling_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)

            logger.info("🛑 Initiating graceful shutdown...")
            shutdown_task.cancel()

            if polling_task in done:
                polling_task.result()
            else:
                await self.dp.stop_polling()
                try:
                    await polling_task
                except asyncio.CancelledError:
                    logger.info("✅ Polling task cancelled")

        except KeyboardInterrupt:
            logger.info("Bot stopped by user (Ctrl+C)")
        except Exception as e:
            logger.error(f"Bot error: {e}", exc_info=True)
            raise
        finally:
            # Всегда освобождаем ресурсы
            await self.stop()

    async def stop(self):
        """Graceful остановка бота с освобождением всех ресурсов"""
        logger.info("🛑 Stopping bot gracefully...")

        try:
            if self.scheduler:
                await self.scheduler.stop()

            await self.bot.session.close()
            logger.info("✅ Bot session closed")

            if self.context:
                await self.context.close()
                logger.info("✅ Database connection closed")

            await self.dp.storage.close()

            logger.info("🎉 Bot stopped successfully")

        except Exception as e:
            logger.error(f"❌ Error during shutdown: {e}", exc_info=True)

    def _log_startup_banner(self):
        messages = self.context.messages

        logger.info("🚀 Smart Clinic Bot")
        logger.info(f"✅ Storage backend: {self.settings.database_backend} (schema {self.settings.db_schema})")
        logger.info(f"✅ FSM storage: {self.settings.fsm_storage}")
        logger.info(f"✅ Available locales: {messages.get_available_locales()}")
        logger.info(f"✅ Available categories: {messages.get_available_categories()}")
        logger.info(f"✅ Admins: {len(self.settings.admin_id_list)}")
        logger.info("🔗 Ready for users!")
