"""
Smart Clinic Messages System

Централизованная система сообщений:
- JSON шаблоны по локалям + Jinja2
- HTML форматирование для Telegram
- Клавиатуры (reply / inline / удаление) из шаблонов
- Интенты меню и действия кнопок по метаданным, а не по тексту
"""

from .service import MessageService, KeyboardMarkup
from .commands import MenuCommand, ButtonAction, CANCEL_COMMAND
from .formatters import (
    escape_html,
    format_amount,
    format_date,
    format_datetime,
    months_label,
)

__all__ = [
    'MessageService',
    'KeyboardMarkup',
    'MenuCommand',
    'ButtonAction',
    'CANCEL_COMMAND',
    'escape_html',
    'format_amount',
    'format_date',
    'format_datetime',
    'months_label',
]
