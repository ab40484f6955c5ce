"""
Smart Clinic Bot Controller - координатор

Только координация и композиция, без бизнес-логики.

Архитектура:
- lifecycle: Управление жизненным циклом бота
- handlers: Обработчики команд и сообщений
- middleware: Промежуточные слои
- utilities: Вспомогательные функции
"""

import logging
from typing import Optional

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.base import BaseStorage
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.storage.redis import RedisStorage

from smart_clinic_bot.container import ServiceContext
from smart_clinic_bot.core.config import Settings, get_settings

from .handler_registry import HandlerRegistry
from .lifecycle import BotLifecycle

logger = logging.getLogger(__name__)


def create_fsm_storage(settings: Settings) -> BaseStorage:
    """Redis для персистентности FSM, memory для разработки"""
    if settings.fsm_storage == "redis":
        return RedisStorage.from_url(settings.redis_url)
    return MemoryStorage()


class SmartClinicController:
    """
    Контроллер Smart Clinic бота

    Ответственность:
    - Композиция всех компонентов
    - Инициализация Bot и Dispatcher
    - Регистрация handlers через HandlerRegistry
    - Запуск через BotLifecycle
    """

    def __init__(self, settings: Optional[Settings] = None):
        logger.info("🤖 Initializing Smart Clinic Controller...")
        self.settings = settings or get_settings()

        self.bot = Bot(token=self.settings.telegram_bot_token)
        self.dp = Dispatcher(storage=create_fsm_storage(self.settings))
        logger.info(f"✅ Bot and Dispatcher created (FSM: {self.settings.fsm_storage})")

        self.handler_registry: Optional[HandlerRegistry] = None

        # Handlers регистрируются после инициализации сервисов
        self.lifecycle = BotLifecycle(
            bot=self.bot,
            dispatcher=self.dp,
            settings=self.settings,
            on_services_ready=self.register_handlers
        )

    def register_handlers(self, context: ServiceContext):
        self.handler_registry = HandlerRegistry(dp=self.dp, context=context)
        self.handler_registry.register_all()

    async def start(self):
        """Запуск бота (lifecycle: сервисы → handlers → polling → shutdown)"""
        logger.info("🚀 Starting Smart Clinic Bot...")
        await self.lifecycle.start_polling()

    async def stop(self):
        logger.info("🛑 Stopping Smart Clinic Bot...")
        await self.lifecycle.stop()
