"""
Billing DAO - промокоды и платежи

Работает с таблицами:
- promo_codes - промокоды (погашение атомарным UPDATE)
- payments - заявки на оплату для внешней платежной системы
"""

import logging
from datetime import datetime
from typing import Optional

from ..domain.entities import Payment, PaymentStatus, PromoCode
from ..domain.repositories import IBillingRepository
from .service import DatabaseService

logger = logging.getLogger(__name__)

# Все условия применимости проверяются в одном UPDATE: гонка двух погашений
# не может превысить max_uses
REDEEM_PROMO_SQL = """
UPDATE promo_codes
SET used_count = used_count + 1
WHERE code = $1
AND is_active = true
AND (max_uses IS NULL OR used_count < max_uses)
AND (valid_from IS NULL OR valid_from <= $2)
AND (valid_until IS NULL OR valid_until >= $2)
RETURNING *
"""


class BillingDAO(IBillingRepository):
    """Data Access Object для промокодов и платежей"""

    def __init__(self, db_service: DatabaseService):
        self.db = db_service

    async def get_promo(self, code: str) -> Optional[PromoCode]:
        row = await self.db.fetch_one(
            "SELECT * FROM promo_codes WHERE code = $1",
            PromoCode.normalize(code)
        )
        return PromoCode.from_record(row) if row else None

    async def redeem_promo(self, code: str, now: datetime) -> Optional[PromoCode]:
        row = await self.db.fetch_one(REDEEM_PROMO_SQL, PromoCode.normalize(code), now)

        if not row:
            logger.info(f"🎟 Promo code not redeemed: {code}")
            return None

        promo = PromoCode.from_record(row)
        logger.info(f"🎟 Promo code redeemed: {promo.code} ({promo.used_count}/{promo.max_uses or '∞'})")
        return promo

    async def create_payment(self, payment: Payment, now: datetime) -> Payment:
        row = await self.db.fetch_one(
            """
            INSERT INTO payments (user_id, plan_months, amount, promo_code, status, created_at)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
            """,
            payment.telegram_id,
            payment.plan_months,
            payment.amount,
            payment.promo_code,
            PaymentStatus.PENDING.value,
            now
        )

        saved = Payment.from_record(row)
        logger.info(f"💳 Payment #{saved.id} created: user={saved.telegram_id} amount={saved.amount}")
        return saved
