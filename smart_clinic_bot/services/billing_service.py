"""
Billing Service - подписка и промокоды

Ответственность заканчивается на сумме к оплате: сервис считает цену
плана с промокодом, погашает промокод и создаёт заявку на оплату.
Проведение платежа - внешняя система.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.exceptions import UserNotFoundError
from ..domain.entities import (
    Payment,
    Profile,
    PromoCode,
    PromoRejection,
    Quote,
    SubscriptionPlan,
    SubscriptionTier,
    get_plan,
)
from ..domain.repositories import IBillingRepository, IProfileRepository
from ..domain.services import as_utc
from .clock import Clock, utc_now

logger = logging.getLogger(__name__)


@dataclass
class PromoValidation:
    """Результат проверки промокода (без погашения)"""

    code: str
    valid: bool
    rejection: Optional[PromoRejection] = None
    promo: Optional[PromoCode] = None
    quote: Optional[Quote] = None


class BillingService:
    """Сервис подписки"""

    def __init__(self, billing: IBillingRepository, profiles: IProfileRepository, clock: Clock = utc_now):
        self.billing = billing
        self.profiles = profiles
        self.clock = clock

    async def validate_promo(self, code: str, plan_months: Optional[int] = None) -> PromoValidation:
        code = PromoCode.normalize(code)
        promo = await self.billing.get_promo(code)

        if promo is None:
            return PromoValidation(code=code, valid=False, rejection=PromoRejection.NOT_FOUND)

        rejection = promo.rejection_reason(self.clock())
        quote = None
        if plan_months is not None and rejection is None:
            quote = self._price(get_plan(plan_months), promo)

        return PromoValidation(code=code, valid=rejection is None, rejection=rejection, promo=promo, quote=quote)

    async def quote(self, plan_months: int, promo_code: Optional[str] = None) -> Quote:
        """Цена плана с промокодом; счётчик использований не меняется"""
        plan = get_plan(plan_months)
        if not promo_code:
            return Quote(plan=plan, base_amount=plan.price)

        validation = await self.validate_promo(promo_code)
        if not validation.valid:
            return Quote(plan=plan, base_amount=plan.price, promo_code=validation.code, rejection=validation.rejection)
        return self._price(plan, validation.promo)

    async def checkout(self, telegram_id: int, plan_months: int, promo_code: Optional[str] = None) -> Quote:
        """Погасить промокод и создать заявку на оплату

        Отклонённый промокод - ничего не записывается.
        """
        plan = get_plan(plan_months)
        if await self.profiles.get(telegram_id) is None:
            raise UserNotFoundError(telegram_id)

        now = self.clock()
        quote = Quote(plan=plan, base_amount=plan.price)

        if promo_code:
            promo = await self.billing.redeem_promo(promo_code, now)
            if promo is None:
                validation = await self.validate_promo(promo_code)
                rejection = validation.rejection or PromoRejection.EXHAUSTED
                logger.info(f"🎟 Checkout rejected for {telegram_id}: promo {promo_code} ({rejection.value})")
                return Quote(plan=plan, base_amount=plan.price, promo_code=validation.code, rejection=rejection)
            quote = self._price(plan, promo)

        payment = await self.billing.create_payment(
            Payment(
                telegram_id=telegram_id,
                plan_months=plan.months,
                amount=quote.amount,
                promo_code=quote.promo_code,
            ),
            now
        )
        quote.payment_id = payment.id
        logger.info(f"💳 Checkout for {telegram_id}: {plan.months}m, amount {quote.amount}, payment #{payment.id}")
        return quote

    async def activate_subscription(self, telegram_id: int, plan_months: int) -> Profile:
        """Продлить подписку на срок плана от max(now, текущее окончание)"""
        plan = get_plan(plan_months)
        profile = await self.profiles.get(telegram_id)
        if profile is None:
            raise UserNotFoundError(telegram_id)

        ends_at = self._extend(profile, plan, self.clock())
        updated = await self.profiles.update_subscription(
            telegram_id, SubscriptionTier.PAID, ends_at, profile.auto_renew
        )
        logger.info(f"✅ Subscription activated for {telegram_id} until {ends_at}")
        return updated

    async def toggle_auto_renew(self, telegram_id: int) -> Profile:
        profile = await self.profiles.get(telegram_id)
        if profile is None:
            raise UserNotFoundError(telegram_id)

        return await self.profiles.update_subscription(
            telegram_id, profile.tier, profile.subscription_ends_at, not profile.auto_renew
        )

    @staticmethod
    def _price(plan: SubscriptionPlan, promo: PromoCode) -> Quote:
        return Quote(
            plan=plan,
            base_amount=plan.price,
            discount=promo.discount_for(plan.price),
            promo_code=promo.code,
        )

    @staticmethod
    def _extend(profile: Profile, plan: SubscriptionPlan, now: datetime) -> datetime:
        start = now
        if profile.subscription_ends_at and as_utc(profile.subscription_ends_at) > as_utc(now):
            start = as_utc(profile.subscription_ends_at)
        return start + plan.duration
