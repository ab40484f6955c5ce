"""
Admin Handlers - административные команды

Команды (только для ADMIN_IDS, проверяет AdminFilter):
- /questions - новые вопросы в поддержку
- /reply <id> <текст> - ответить на вопрос
- /close <id> - закрыть вопрос
- /grant <telegram_id> <months> - выдать подписку
"""

import logging
from typing import Optional

from aiogram import Bot
from aiogram.filters import CommandObject
from aiogram.types import Message

from smart_clinic_bot.core.exceptions import PlanNotFoundError, QuestionNotFoundError, UserNotFoundError, ValidationError
from smart_clinic_bot.messages import MessageService
from smart_clinic_bot.services import BillingService, SupportIntake

from ..utilities import notify_user

logger = logging.getLogger(__name__)


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class AdminHandlers:
    """Обработчики административных команд"""

    @staticmethod
    async def cmd_questions(message: Message, support: SupportIntake, messages: MessageService):
        """Список новых вопросов"""
        questions = await support.list_new()

        if questions:
            text = messages.get_message('questions', 'admin', questions=questions)
        else:
            text = messages.get_message('questions_empty', 'admin')
        await message.answer(text, parse_mode='HTML')

    @staticmethod
    async def cmd_reply(message: Message, command: CommandObject, bot: Bot, support: SupportIntake, messages: MessageService):
        """Ответ на вопрос: сохраняем и отправляем пользователю"""
        parts = (command.args or '').split(maxsplit=1)
        question_id = _parse_int(parts[0]) if parts else None

        if question_id is None or len(parts) < 2:
            await message.answer(messages.get_message('usage', 'admin', usage='/reply <id> <текст>'), parse_mode='HTML')
            return

        try:
            question = await support.answer(question_id, parts[1])
        except QuestionNotFoundError:
            await message.answer(messages.get_message('question_not_found', 'admin', question_id=question_id), parse_mode='HTML')
            return
        except ValidationError:
            await message.answer(messages.get_message('usage', 'admin', usage='/reply <id> <текст>'), parse_mode='HTML')
            return

        text = messages.get_message('admin_response', 'support', question_id=question.id, response=question.admin_response)
        delivered = await notify_user(bot, question.telegram_id, text)

        logger.info(f"💬 Admin {message.from_user.id} answered question #{question.id} (delivered={delivered})")
        await message.answer(
            messages.get_message('reply_sent', 'admin', question_id=question.id, delivered=delivered),
            parse_mode='HTML'
        )

    @staticmethod
    async def cmd_close(message: Message, command: CommandObject, support: SupportIntake, messages: MessageService):
        question_id = _parse_int((command.args or '').strip())
        if question_id is None:
            await message.answer(messages.get_message('usage', 'admin', usage='/close <id>'), parse_mode='HTML')
            return

        try:
            await support.close(question_id)
        except QuestionNotFoundError:
            await message.answer(messages.get_message('question_not_found', 'admin', question_id=question_id), parse_mode='HTML')
            return

        await message.answer(messages.get_message('question_closed', 'admin', question_id=question_id), parse_mode='HTML')

    @staticmethod
    async def cmd_grant(message: Message, command: CommandObject, bot: Bot, billing: BillingService, messages: MessageService):
        """Выдать подписку вручную (оплата прошла вне бота)"""
        usage = messages.get_message('usage', 'admin', usage='/grant <telegram_id> <months>')
        args = (command.args or '').split()
        if len(args) != 2:
            await message.answer(usage, parse_mode='HTML')
            return

        telegram_id, months = _parse_int(args[0]), _parse_int(args[1])
        if telegram_id is None or months is None:
            await message.answer(usage, parse_mode='HTML')
            return

        try:
            profile = await billing.activate_subscription(telegram_id, months)
        except UserNotFoundError:
            await message.answer(messages.get_message('user_not_found', 'admin', telegram_id=telegram_id), parse_mode='HTML')
            return
        except PlanNotFoundError:
            await message.answer(messages.get_message('plan_unknown', 'billing'), parse_mode='HTML')
            return

        logger.info(f"🎁 Admin {message.from_user.id} granted {months}m to {telegram_id}")
        await notify_user(
            bot, telegram_id,
            messages.get_message('subscription_activated', 'billing', ends_at=profile.subscription_ends_at)
        )
        await message.answer(
            messages.get_message('subscription_granted', 'admin', telegram_id=telegram_id, ends_at=profile.subscription_ends_at),
            parse_mode='HTML'
        )
