"""
Telegram Formatters

Safe formatting utilities for Telegram HTML messages and Jinja2 filters
"""

import html
import re
from datetime import datetime
from decimal import Decimal
from typing import Optional

MAX_MESSAGE_LENGTH = 4096

MONTH_NAMES = (
    "января", "февраля", "марта", "апреля", "мая", "июня",
    "июля", "августа", "сентября", "октября", "ноября", "декабря",
)


def escape_html(text) -> str:
    """Экранирование пользовательского текста для HTML parse mode"""
    if text is None:
        return ""
    return html.escape(str(text), quote=False)


def clean_telegram_text(text: str) -> str:
    """Очистка текста для Telegram"""
    if not text:
        return ""

    # Удаляем лишние переносы строк
    text = re.sub(r'\n{3,}', '\n\n', text)

    # Пробелы в конце строк (отступы в начале сохраняем)
    lines = [line.rstrip() for line in text.split('\n')]
    return '\n'.join(lines).strip()


def truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH, suffix: str = "...") -> str:
    """Обрезка сообщения до максимальной длины"""
    if len(text) <= max_length:
        return text

    truncated = text[:max_length - len(suffix)]

    # Обрезаем по границе слова, если она недалеко
    last_space = truncated.rfind(' ')
    if last_space > max_length * 0.8:
        truncated = truncated[:last_space]

    return truncated + suffix


def format_date(value: Optional[datetime]) -> str:
    """15.12.2025"""
    if value is None:
        return ""
    return value.strftime("%d.%m.%Y")


def format_datetime(value: Optional[datetime]) -> str:
    """15 декабря, 19:00"""
    if value is None:
        return ""
    return f"{value.day} {MONTH_NAMES[value.month - 1]}, {value:%H:%M}"


def format_amount(amount) -> str:
    """990.00 -> '990', 792.50 -> '792.50'"""
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return str(amount)


def months_label(months: int) -> str:
    """1 месяц, 3 месяца, 12 месяцев"""
    if months % 10 == 1 and months % 100 != 11:
        word = "месяц"
    elif months % 10 in (2, 3, 4) and months % 100 not in (12, 13, 14):
        word = "месяца"
    else:
        word = "месяцев"
    return f"{months} {word}"


def progress_bar(percent: int, width: int = 10, filled: str = '█', empty: str = '░') -> str:
    """Форматирование прогресс-бара"""
    percent = max(0, min(int(percent or 0), 100))
    filled_width = percent * width // 100
    return f"{filled * filled_width}{empty * (width - filled_width)} {percent}%"
