"""
Lifecycle Management - управление жизненным циклом бота

Модули:
- bot_lifecycle: Инициализация, запуск, housekeeping, graceful shutdown
"""

from .bot_lifecycle import BotLifecycle

__all__ = ["BotLifecycle"]
