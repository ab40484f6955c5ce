"""
Filters - фильтры aiogram

- MenuCommandFilter: кнопка главного меню по метаданным шаблона
- AdminFilter: команды администратора (ADMIN_IDS)
"""

from typing import Any, Dict, Iterable, Optional, Union

from aiogram.filters import BaseFilter
from aiogram.types import Message

from smart_clinic_bot.messages import MenuCommand, MessageService


class MenuCommandFilter(BaseFilter):
    """Текст сообщения - кнопка меню с заданным интентом (или любым)"""

    def __init__(self, messages: MessageService, command: Optional[MenuCommand] = None):
        self.messages = messages
        self.command = command

    async def __call__(self, message: Message) -> Union[bool, Dict[str, Any]]:
        resolved = self.messages.resolve_command(message.text)
        if resolved is None:
            return False
        if self.command is not None and resolved is not self.command:
            return False
        return {"menu_command": resolved}


class AdminFilter(BaseFilter):
    """Сообщение от администратора"""

    def __init__(self, admin_ids: Iterable[int]):
        self.admin_ids = frozenset(admin_ids)

    async def __call__(self, message: Message) -> bool:
        return bool(message.from_user) and message.from_user.id in self.admin_ids
