"""
Handlers - обработчики команд и сообщений Telegram бота

Модули:
- command_handlers: Базовые команды (/help, /menu, /cancel, /profile)
- onboarding_handlers: Анкета знакомства (/start)
- menu_handlers: Разделы главного меню
- subscription_handlers: Подписка и промокоды
- support_handlers: Вопросы в поддержку
- admin_handlers: Административные команды
"""

from .command_handlers import CommandHandlers
from .onboarding_handlers import OnboardingHandlers
from .menu_handlers import MenuHandlers
from .subscription_handlers import SubscriptionHandlers
from .support_handlers import SupportHandlers
from .admin_handlers import AdminHandlers

__all__ = [
    "CommandHandlers",
    "OnboardingHandlers",
    "MenuHandlers",
    "SubscriptionHandlers",
    "SupportHandlers",
    "AdminHandlers",
]
