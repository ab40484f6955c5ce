"""
Support Handlers - вопросы в поддержку

- handle_question - сообщение в режиме "Задать вопрос" (topic=question)
- handle_free_text - любой текст вне меню и анкеты (topic=general)

Принимаются текст, подпись к фото или документу и само вложение.
"""

import logging
from typing import Iterable, Optional, Tuple

from aiogram import Bot
from aiogram.types import Message
from aiogram.fsm.context import FSMContext

from smart_clinic_bot.core.exceptions import ValidationError
from smart_clinic_bot.domain.entities import AttachmentKind
from smart_clinic_bot.messages import ButtonAction, MessageService
from smart_clinic_bot.services import TOPIC_GENERAL, TOPIC_QUESTION, ProfileService, SupportIntake

from ..utilities import notify_admins, show_main_menu

logger = logging.getLogger(__name__)


def extract_question(message: Message) -> Tuple[Optional[str], Optional[str], Optional[AttachmentKind]]:
    """(текст, file_id вложения, тип вложения) из сообщения"""
    body = message.text or message.caption

    if message.photo:
        return body, message.photo[-1].file_id, AttachmentKind.PHOTO
    if message.document:
        return body, message.document.file_id, AttachmentKind.DOCUMENT
    return body, None, None


class SupportHandlers:
    """Приём вопросов пользователей"""

    @staticmethod
    async def handle_question(
        message: Message,
        state: FSMContext,
        bot: Bot,
        support: SupportIntake,
        profiles: ProfileService,
        messages: MessageService,
        admin_ids: Iterable[int]
    ):
        """Сообщение в режиме ожидания вопроса"""
        if messages.is_action(message.text, ButtonAction.CANCEL):
            await state.clear()
            await message.answer(messages.get_message('cancelled', 'support'), parse_mode='HTML')
            await show_main_menu(message, profiles, messages)
            return

        submitted = await SupportHandlers.submit_question(message, bot, support, messages, admin_ids, TOPIC_QUESTION)
        if not submitted:
            return

        await state.clear()
        await show_main_menu(message, profiles, messages)

    @staticmethod
    async def handle_free_text(
        message: Message,
        bot: Bot,
        support: SupportIntake,
        profiles: ProfileService,
        messages: MessageService,
        admin_ids: Iterable[int]
    ):
        """Сообщение вне меню - тоже вопрос в поддержку"""
        if messages.is_action(message.text, ButtonAction.CANCEL):
            await show_main_menu(message, profiles, messages)
            return

        if message.text and message.text.startswith('/'):
            await message.answer(messages.get_message('help', 'general'), parse_mode='HTML')
            return

        await SupportHandlers.submit_question(message, bot, support, messages, admin_ids, TOPIC_GENERAL)

    @staticmethod
    async def submit_question(
        message: Message,
        bot: Bot,
        support: SupportIntake,
        messages: MessageService,
        admin_ids: Iterable[int],
        topic: str
    ) -> bool:
        body, attachment_id, attachment_kind = extract_question(message)

        try:
            question = await support.submit(
                message.from_user.id,
                body,
                attachment_id=attachment_id,
                attachment_kind=attachment_kind,
                topic=topic,
            )
        except ValidationError:
            await message.answer(messages.get_message('question_empty', 'support'), parse_mode='HTML')
            return False

        text = messages.get_message('question_received', 'support', question_id=question.id, sla_hours=support.sla_hours)
        await message.answer(text, parse_mode='HTML')

        await notify_admins(bot, admin_ids, question, message.from_user.full_name, messages)
        return True
