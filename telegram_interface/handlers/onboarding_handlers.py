"""
Onboarding Handlers - обработчики анкеты знакомства

- /start - новая анкета (открытая анкета начинается заново)
- handle_survey_answer - ответ на текущий шаг: специализация → город → email

Шаг анкеты и ответы хранятся в данных FSM (ключ "onboarding").
"""

import logging
from aiogram.types import Message
from aiogram.fsm.context import FSMContext

from smart_clinic_bot.domain.services import (
    OnboardingSession,
    OnboardingStateMachine,
    OnboardingStep,
    TransitionOutcome,
)
from smart_clinic_bot.domain.value_objects import TelegramIdentity
from smart_clinic_bot.messages import MessageService
from smart_clinic_bot.services import ProfileService

from ..states import OnboardingStates
from ..utilities import show_main_menu

logger = logging.getLogger(__name__)

SESSION_KEY = "onboarding"


class OnboardingHandlers:
    """Обработчики процесса онбординга"""

    @staticmethod
    async def cmd_start(
        message: Message,
        state: FSMContext,
        onboarding: OnboardingStateMachine,
        messages: MessageService
    ):
        """Команда /start - точка входа, анкета с первого шага"""
        telegram_id = message.from_user.id
        logger.info(f"👤 User started: {message.from_user.full_name} (ID: {telegram_id})")

        session = onboarding.start(telegram_id)

        await state.clear()
        await state.set_state(OnboardingStates.survey)
        await state.update_data({SESSION_KEY: session.to_dict()})

        text = messages.get_message('start', 'onboarding', first_name=message.from_user.first_name or '')
        await message.answer(text, reply_markup=messages.get_keyboard('specialty'), parse_mode='HTML')

    @staticmethod
    async def handle_survey_answer(
        message: Message,
        state: FSMContext,
        onboarding: OnboardingStateMachine,
        profiles: ProfileService,
        messages: MessageService
    ):
        """Обработка ответа на текущий шаг анкеты"""
        telegram_id = message.from_user.id

        data = await state.get_data()
        raw_session = data.get(SESSION_KEY)
        session = OnboardingSession.from_dict(raw_session) if raw_session else onboarding.start(telegram_id)

        if message.text is None:
            await message.answer(messages.get_message('text_required', 'onboarding'), parse_mode='HTML')
            return

        transition = onboarding.advance(session, message.text)
        logger.info(
            f"📝 Survey step {session.step.value} → {transition.session.step.value} "
            f"for user {telegram_id} ({transition.outcome.value})"
        )

        if transition.outcome is TransitionOutcome.REJECTED:
            text = messages.get_message(transition.error, 'onboarding')
            await message.answer(text, reply_markup=messages.get_keyboard('email'), parse_mode='HTML')
            return

        if transition.completed:
            await OnboardingHandlers.complete_survey(message, state, transition.session, profiles, messages)
            return

        await state.update_data({SESSION_KEY: transition.session.to_dict()})
        answers = transition.session.answers

        if transition.session.step is OnboardingStep.CITY:
            text = messages.get_message('ask_city', 'onboarding', specialty=answers.specialty.value if answers.specialty else '')
            await message.answer(text, reply_markup=messages.get_keyboard('remove'), parse_mode='HTML')
        else:
            text = messages.get_message('ask_email', 'onboarding', city=answers.city.value if answers.city else '')
            await message.answer(text, reply_markup=messages.get_keyboard('email'), parse_mode='HTML')

    @staticmethod
    async def complete_survey(
        message: Message,
        state: FSMContext,
        session: OnboardingSession,
        profiles: ProfileService,
        messages: MessageService
    ):
        """Сохранить анкету в профиль, закрыть сессию, показать меню"""
        identity = TelegramIdentity.from_user(message.from_user)
        await profiles.save_survey(identity, session.answers)
        await state.clear()

        text = messages.get_message('completed', 'onboarding')
        await message.answer(text, reply_markup=messages.get_keyboard('remove'), parse_mode='HTML')
        await show_main_menu(message, profiles, messages)
