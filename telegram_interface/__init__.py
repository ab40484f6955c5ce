"""
Telegram Interface - модульная структура Telegram бота

Архитектура:
- controller: Главный координатор
- lifecycle: Управление жизненным циклом бота
- handlers: Обработчики команд, меню, callbacks
- middleware: Активность пользователей, логирование FSM
- filters: Интенты меню, права администратора
- utilities: Главное меню, уведомления
- handler_registry: Регистрация handlers с DI
- states: FSM состояния
"""

from .controller import SmartClinicController, create_fsm_storage
from .lifecycle import BotLifecycle
from .handler_registry import HandlerRegistry
from .states import OnboardingStates, SubscriptionStates, SupportStates
from .handlers import (
    AdminHandlers,
    CommandHandlers,
    MenuHandlers,
    OnboardingHandlers,
    SubscriptionHandlers,
    SupportHandlers,
)
from .middleware import ActivityMiddleware, StateLoggerMiddleware
from .utilities import make_webinar_notifier, notify_admins, notify_user, show_main_menu

__all__ = [
    # Main controller
    "SmartClinicController",
    "create_fsm_storage",

    # Lifecycle
    "BotLifecycle",

    # Registry
    "HandlerRegistry",

    # States
    "OnboardingStates",
    "SupportStates",
    "SubscriptionStates",

    # Handlers
    "CommandHandlers",
    "OnboardingHandlers",
    "MenuHandlers",
    "SubscriptionHandlers",
    "SupportHandlers",
    "AdminHandlers",

    # Middleware
    "ActivityMiddleware",
    "StateLoggerMiddleware",

    # Utilities
    "show_main_menu",
    "notify_user",
    "notify_admins",
    "make_webinar_notifier",
]
