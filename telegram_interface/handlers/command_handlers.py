"""
Command Handlers - базовые команды бота

Обработчики для:
- /help - справка по боту
- /menu - главное меню
- /cancel - выход из анкеты или режима ожидания
- /profile - профиль пользователя
- /favorites - избранное
- /progress - прогресс по материалам
"""

import logging
from aiogram.types import Message
from aiogram.fsm.context import FSMContext

from smart_clinic_bot.messages import MessageService
from smart_clinic_bot.services import EngagementTracker, ProfileService

from ..utilities import show_main_menu

logger = logging.getLogger(__name__)


class CommandHandlers:
    """
    Обработчики базовых команд бота

    Все методы статические - зависимости приходят через параметры.
    """

    @staticmethod
    async def cmd_help(message: Message, messages: MessageService):
        """Команда /help - справка по боту"""
        await message.answer(messages.get_message('help', 'general'), parse_mode='HTML')

    @staticmethod
    async def cmd_menu(message: Message, state: FSMContext, profiles: ProfileService, messages: MessageService):
        """Команда /menu - главное меню"""
        await state.set_state(None)
        await show_main_menu(message, profiles, messages)

    @staticmethod
    async def cmd_cancel(message: Message, state: FSMContext, profiles: ProfileService, messages: MessageService):
        """Команда /cancel - отмена текущего режима без записи"""
        current_state = await state.get_state()
        await state.clear()

        logger.info(f"↩️ User {message.from_user.id} cancelled state {current_state or 'None'}")
        await message.answer(messages.get_message('cancelled', 'support'), parse_mode='HTML')
        await show_main_menu(message, profiles, messages)

    @staticmethod
    async def cmd_profile(message: Message, profiles: ProfileService, messages: MessageService):
        """Команда /profile - профиль пользователя"""
        telegram_id = message.from_user.id
        logger.info(f"📊 Profile requested by user {telegram_id}")

        profile = await profiles.find(telegram_id)
        if profile is None:
            await message.answer(messages.get_message('profile_missing', 'general'), parse_mode='HTML')
            return

        subscription = await profiles.subscription(telegram_id)
        text = messages.get_message('profile', 'general', profile=profile, subscription=subscription)
        await message.answer(text, parse_mode='HTML')

    @staticmethod
    async def cmd_favorites(message: Message, engagement: EngagementTracker, messages: MessageService):
        """Команда /favorites - избранные материалы"""
        favorites = await engagement.list_favorites(message.from_user.id)

        if favorites:
            text = messages.get_message('favorites', 'general', favorites=favorites)
        else:
            text = messages.get_message('favorites_empty', 'general')
        await message.answer(text, parse_mode='HTML')

    @staticmethod
    async def cmd_progress(message: Message, engagement: EngagementTracker, messages: MessageService):
        """Команда /progress - прогресс по материалам"""
        records = await engagement.list_progress(message.from_user.id)

        if records:
            text = messages.get_message('progress', 'general', records=records)
        else:
            text = messages.get_message('progress_empty', 'general')
        await message.answer(text, parse_mode='HTML')
