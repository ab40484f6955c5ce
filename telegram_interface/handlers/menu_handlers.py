"""
Menu Handlers - разделы главного меню

Кнопка меню определяется по интенту (MenuCommand), а не по надписи.
Раздел "Подписка" обслуживает SubscriptionHandlers.
"""

import logging
from typing import Optional

from aiogram.types import Message
from aiogram.fsm.context import FSMContext

from smart_clinic_bot.messages import MessageService
from smart_clinic_bot.services import CatalogService

from ..states import SupportStates

logger = logging.getLogger(__name__)


class MenuHandlers:
    """Обработчики кнопок главного меню"""

    @staticmethod
    async def show_navigation(message: Message, messages: MessageService, webapp_url: Optional[str]):
        """📱 Навигация - кнопка WebApp каталога"""
        text = messages.get_message('navigation', 'general')
        keyboard = messages.get_keyboard('navigation', webapp_url=(webapp_url or '').rstrip('/'))
        await message.answer(text, reply_markup=keyboard, parse_mode='HTML')

    @staticmethod
    async def show_promotions(message: Message, catalog: CatalogService, messages: MessageService):
        """🎁 Акции - материалы со скидкой"""
        items = await catalog.list_promotions()

        if items:
            text = messages.get_message('promotions', 'general', items=items)
        else:
            text = messages.get_message('promotions_empty', 'general')
        await message.answer(text, parse_mode='HTML')

    @staticmethod
    async def show_announcements(message: Message, catalog: CatalogService, messages: MessageService):
        """📅 Анонсы - ближайшие вебинары (статичный список при сбое БД)"""
        announcements = await catalog.get_announcements()

        if announcements.is_fallback:
            text = messages.get_message('announcements_fallback', 'general')
        elif announcements.items:
            text = messages.get_message('announcements', 'general', webinars=announcements.items)
        else:
            text = messages.get_message('announcements_empty', 'general')
        await message.answer(text, parse_mode='HTML')

    @staticmethod
    async def show_support(message: Message, messages: MessageService, sla_hours: int):
        """🆘 Поддержка - как связаться"""
        text = messages.get_message('support_info', 'general', sla_hours=sla_hours)
        await message.answer(text, parse_mode='HTML')

    @staticmethod
    async def ask_question(message: Message, state: FSMContext, messages: MessageService):
        """❓ Задать вопрос - режим ожидания вопроса"""
        await state.set_state(SupportStates.awaiting_question)

        text = messages.get_message('ask_prompt', 'support')
        await message.answer(text, reply_markup=messages.get_keyboard('cancel'), parse_mode='HTML')
        logger.info(f"❓ User {message.from_user.id} is asking a question")
