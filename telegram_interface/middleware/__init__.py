"""
Middleware - промежуточные слои обработки

Модули:
- activity: Upsert профиля и last_active
- state_logger: Логирование FSM state transitions
"""

from .activity import ActivityMiddleware
from .state_logger import StateLoggerMiddleware

__all__ = ["ActivityMiddleware", "StateLoggerMiddleware"]
