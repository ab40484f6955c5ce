"""
Subscription Handlers - подписка и промокоды

Callbacks:
- subscription - экран подписки (кнопка "Назад")
- subscribe_N - цена плана на N месяцев
- promo_N - ввод промокода для плана
- checkout_N - заявка на оплату (с применённым промокодом)
- toggle_auto_renew - автопродление
"""

import logging
from typing import Optional

from aiogram.types import CallbackQuery, Message
from aiogram.fsm.context import FSMContext

from smart_clinic_bot.core.exceptions import PlanNotFoundError
from smart_clinic_bot.domain.entities import Quote, get_plan
from smart_clinic_bot.messages import ButtonAction, MessageService
from smart_clinic_bot.services import BillingService, ProfileService

from ..states import SubscriptionStates
from ..utilities import show_main_menu

logger = logging.getLogger(__name__)

PROMO_CODE_KEY = "promo_code"
PROMO_MONTHS_KEY = "promo_months"


def parse_plan_months(data: Optional[str], prefix: str) -> Optional[int]:
    """subscribe_3 → 3; None для неизвестного плана"""
    if not data or not data.startswith(prefix):
        return None
    try:
        return get_plan(int(data[len(prefix):])).months
    except (ValueError, PlanNotFoundError):
        return None


class SubscriptionHandlers:
    """Обработчики раздела "Подписка" """

    @staticmethod
    async def show_subscription(message: Message, profiles: ProfileService, messages: MessageService, telegram_id: Optional[int] = None):
        """💳 Подписка - статус и выбор плана"""
        telegram_id = telegram_id or message.from_user.id
        subscription = await profiles.subscription(telegram_id)

        text = messages.get_message('subscription', 'billing', subscription=subscription)
        await message.answer(text, reply_markup=messages.get_keyboard('plans'), parse_mode='HTML')

    @staticmethod
    async def callback_subscription(callback: CallbackQuery, profiles: ProfileService, messages: MessageService):
        subscription = await profiles.subscription(callback.from_user.id)

        text = messages.get_message('subscription', 'billing', subscription=subscription)
        await callback.message.edit_text(text, reply_markup=messages.get_keyboard('plans'), parse_mode='HTML')
        await callback.answer()

    @staticmethod
    async def callback_subscribe(callback: CallbackQuery, state: FSMContext, billing: BillingService, messages: MessageService):
        """Цена плана; промокод, введённый для этого плана, учитывается"""
        months = parse_plan_months(callback.data, "subscribe_")
        if months is None:
            await callback.answer(messages.get_message('plan_unknown', 'billing'), show_alert=True)
            return

        data = await state.get_data()
        promo_code = data.get(PROMO_CODE_KEY) if data.get(PROMO_MONTHS_KEY) == months else None
        quote = await billing.quote(months, promo_code)

        await SubscriptionHandlers._show_quote(callback.message, quote, messages, edit=True)
        await callback.answer()

    @staticmethod
    async def callback_promo(callback: CallbackQuery, state: FSMContext, messages: MessageService):
        """Режим ввода промокода"""
        months = parse_plan_months(callback.data, "promo_")
        if months is None:
            await callback.answer(messages.get_message('plan_unknown', 'billing'), show_alert=True)
            return

        await state.set_state(SubscriptionStates.awaiting_promo_code)
        await state.update_data({PROMO_MONTHS_KEY: months, PROMO_CODE_KEY: None})

        text = messages.get_message('promo_prompt', 'billing', months=months)
        await callback.message.answer(text, reply_markup=messages.get_keyboard('cancel'), parse_mode='HTML')
        await callback.answer()

    @staticmethod
    async def handle_promo_code(
        message: Message,
        state: FSMContext,
        billing: BillingService,
        profiles: ProfileService,
        messages: MessageService
    ):
        """Промокод введён: проверяем и показываем новую цену"""
        if messages.is_action(message.text, ButtonAction.CANCEL):
            await state.clear()
            await message.answer(messages.get_message('cancelled', 'support'), parse_mode='HTML')
            await show_main_menu(message, profiles, messages)
            return

        if not message.text:
            await message.answer(messages.get_message('text_required', 'onboarding'), parse_mode='HTML')
            return

        data = await state.get_data()
        months = data.get(PROMO_MONTHS_KEY) or 1
        quote = await billing.quote(months, message.text)

        if not quote.is_accepted:
            logger.info(f"🎟 Promo {quote.promo_code} rejected for {message.from_user.id}: {quote.rejection.value}")
            text = messages.get_message('promo_rejected', 'billing', code=quote.promo_code, reason=quote.rejection.value)
            await message.answer(text, reply_markup=messages.get_keyboard('cancel'), parse_mode='HTML')
            return

        await state.set_state(None)
        await state.update_data({PROMO_CODE_KEY: quote.promo_code, PROMO_MONTHS_KEY: months})
        logger.info(f"🎟 Promo {quote.promo_code} applied by {message.from_user.id} for {months}m")

        text = messages.get_message('promo_applied', 'billing', code=quote.promo_code)
        await message.answer(text, reply_markup=messages.get_keyboard('main_menu'), parse_mode='HTML')
        await SubscriptionHandlers._show_quote(message, quote, messages)

    @staticmethod
    async def callback_checkout(callback: CallbackQuery, state: FSMContext, billing: BillingService, messages: MessageService):
        """Заявка на оплату; промокод погашается здесь"""
        months = parse_plan_months(callback.data, "checkout_")
        if months is None:
            await callback.answer(messages.get_message('plan_unknown', 'billing'), show_alert=True)
            return

        data = await state.get_data()
        promo_code = data.get(PROMO_CODE_KEY) if data.get(PROMO_MONTHS_KEY) == months else None

        quote = await billing.checkout(callback.from_user.id, months, promo_code)
        await state.update_data({PROMO_CODE_KEY: None, PROMO_MONTHS_KEY: None})

        if not quote.is_accepted:
            text = messages.get_message('promo_rejected', 'billing', code=quote.promo_code, reason=quote.rejection.value)
            await callback.message.answer(text, parse_mode='HTML')
            await SubscriptionHandlers._show_quote(callback.message, await billing.quote(months), messages)
            await callback.answer()
            return

        text = messages.get_message(
            'checkout_created', 'billing',
            payment_id=quote.payment_id, months=months, amount=quote.amount
        )
        await callback.message.edit_text(text, parse_mode='HTML')
        await callback.answer()

    @staticmethod
    async def callback_toggle_auto_renew(callback: CallbackQuery, billing: BillingService, messages: MessageService):
        profile = await billing.toggle_auto_renew(callback.from_user.id)
        logger.info(f"⚙️ Auto-renew for {callback.from_user.id}: {profile.auto_renew}")

        text = messages.get_message('auto_renew_toggled', 'billing', enabled=profile.auto_renew)
        await callback.answer(text, show_alert=True)

    @staticmethod
    async def _show_quote(message: Message, quote: Quote, messages: MessageService, edit: bool = False):
        text = messages.get_message('quote', 'billing', quote=quote)
        keyboard = messages.get_keyboard('quote', amount=quote.amount, months=quote.plan.months)

        if edit:
            await message.edit_text(text, reply_markup=keyboard, parse_mode='HTML')
        else:
            await message.answer(text, reply_markup=keyboard, parse_mode='HTML')
