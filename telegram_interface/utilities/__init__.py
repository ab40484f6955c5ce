"""
Utilities - вспомогательные функции

Модули:
- menu_builder: Построение главного меню
- notifications: Исходящие сообщения (ответы поддержки, анонсы)
"""

from .menu_builder import show_main_menu
from .notifications import notify_user, notify_admins, make_webinar_notifier

__all__ = [
    "show_main_menu",
    "notify_user",
    "notify_admins",
    "make_webinar_notifier",
]
