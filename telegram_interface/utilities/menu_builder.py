"""
Menu Builder - построение главного меню

Главное меню показывает статус подписки, вычисленный в момент отрисовки.
"""

import logging
from typing import Optional

from aiogram.types import Message

from smart_clinic_bot.messages import MessageService
from smart_clinic_bot.services import ProfileService

logger = logging.getLogger(__name__)


async def show_main_menu(message: Message, profiles: ProfileService, messages: MessageService, telegram_id: Optional[int] = None):
    """
    Показать главное меню бота

    Args:
        message: Aiogram Message (ответ отправляется в его чат)
        profiles: ProfileService для статуса подписки
        messages: MessageService для получения текстов и клавиатур
        telegram_id: ID пользователя, если message отправлен ботом (callback)
    """
    telegram_id = telegram_id or message.from_user.id
    subscription = await profiles.subscription(telegram_id)

    text = messages.get_message('main_menu', 'general', subscription=subscription)
    keyboard = messages.get_keyboard('main_menu')

    await message.answer(text, reply_markup=keyboard, parse_mode='HTML')
    logger.info(f"📋 Main menu shown to user: {telegram_id}")
