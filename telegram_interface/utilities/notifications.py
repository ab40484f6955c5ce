"""
Notifications - исходящие сообщения вне ответа на апдейт

Ответы поддержки, уведомления администраторов, анонсы вебинаров.
Пользователи, заблокировавшие бота, пропускаются.
"""

import logging
from typing import Iterable, Optional, Sequence

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError

from smart_clinic_bot.domain.entities import AttachmentKind, ContentItem, SupportQuestion
from smart_clinic_bot.messages import KeyboardMarkup, MessageService
from smart_clinic_bot.services import WebinarNotifier

logger = logging.getLogger(__name__)


async def notify_user(bot: Bot, telegram_id: int, text: str, reply_markup: Optional[KeyboardMarkup] = None) -> bool:
    """Отправить сообщение; False если пользователь недоступен"""
    try:
        await bot.send_message(telegram_id, text, reply_markup=reply_markup, parse_mode='HTML')
        return True
    except TelegramForbiddenError:
        logger.info(f"🚫 User {telegram_id} blocked the bot, message skipped")
        return False
    except TelegramBadRequest as e:
        logger.warning(f"⚠️ Cannot deliver message to {telegram_id}: {e}")
        return False


async def notify_admins(bot: Bot, admin_ids: Iterable[int], question: SupportQuestion, name: str, messages: MessageService):
    """Сообщить администраторам о новом вопросе"""
    text = messages.get_message('admin_new_question', 'support', question=question, name=name)
    for admin_id in admin_ids:
        delivered = await notify_user(bot, admin_id, text)
        if delivered and question.attachment_id:
            await forward_attachment(bot, admin_id, question)


async def forward_attachment(bot: Bot, chat_id: int, question: SupportQuestion):
    caption = f"📎 #{question.id}"
    try:
        if question.attachment_kind is AttachmentKind.PHOTO:
            await bot.send_photo(chat_id, question.attachment_id, caption=caption)
        else:
            await bot.send_document(chat_id, question.attachment_id, caption=caption)
    except (TelegramForbiddenError, TelegramBadRequest) as e:
        logger.warning(f"⚠️ Attachment of question #{question.id} not forwarded: {e}")


def make_webinar_notifier(bot: Bot, messages: MessageService) -> WebinarNotifier:
    """Notifier для ежедневной рассылки анонсов"""

    async def notify(telegram_id: int, webinars: Sequence[ContentItem]) -> bool:
        text = messages.get_message('webinar_reminder', 'general', webinars=webinars)
        return await notify_user(bot, telegram_id, text)

    return notify
