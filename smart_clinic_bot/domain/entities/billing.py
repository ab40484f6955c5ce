"""Billing entities: subscription plans, promo codes, payments."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ...core.exceptions import PlanNotFoundError

CENTS = Decimal("0.01")
DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class SubscriptionPlan:
    """Fixed subscription duration tier."""

    months: int
    price: Decimal

    @property
    def duration(self) -> timedelta:
        return timedelta(days=DAYS_PER_MONTH * self.months)


SUBSCRIPTION_PLANS: Tuple[SubscriptionPlan, ...] = (
    SubscriptionPlan(months=1, price=Decimal("990")),
    SubscriptionPlan(months=3, price=Decimal("2490")),
    SubscriptionPlan(months=12, price=Decimal("8990")),
)


def get_plan(months: int) -> SubscriptionPlan:
    for plan in SUBSCRIPTION_PLANS:
        if plan.months == months:
            return plan
    raise PlanNotFoundError(months)


class PromoRejection(Enum):
    """Why a promo code cannot be applied."""
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    EXHAUSTED = "exhausted"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"


@dataclass
class PromoCode:
    """Discount token with a usage cap and a validity window."""

    code: str
    discount_percent: Optional[int] = None
    discount_amount: Optional[Decimal] = None
    max_uses: Optional[int] = None
    used_count: int = 0
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.discount_percent is None) == (self.discount_amount is None):
            raise ValueError(f"Promo code {self.code} needs exactly one of discount percent or amount")
        if self.discount_percent is not None and not 0 < self.discount_percent <= 100:
            raise ValueError(f"Promo code {self.code} has invalid percent {self.discount_percent}")
        if self.discount_amount is not None and self.discount_amount <= 0:
            raise ValueError(f"Promo code {self.code} has invalid amount {self.discount_amount}")

    @staticmethod
    def normalize(code: str) -> str:
        return code.strip().upper()

    def rejection_reason(self, now: datetime) -> Optional[PromoRejection]:
        """None when the code can be applied at ``now``."""
        if not self.is_active:
            return PromoRejection.INACTIVE
        if self.max_uses is not None and self.used_count >= self.max_uses:
            return PromoRejection.EXHAUSTED
        if self.valid_from is not None and now < self.valid_from:
            return PromoRejection.NOT_STARTED
        if self.valid_until is not None and now > self.valid_until:
            return PromoRejection.EXPIRED
        return None

    def discount_for(self, amount: Decimal) -> Decimal:
        """Discount this code gives on ``amount`` (never more than the amount)."""
        if self.discount_percent is not None:
            discount = amount * Decimal(self.discount_percent) / Decimal(100)
        else:
            discount = self.discount_amount
        return min(discount, amount).quantize(CENTS, rounding=ROUND_HALF_UP)

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "PromoCode":
        data = dict(row)
        return cls(
            id=data.get("id"),
            code=data["code"],
            discount_percent=data.get("discount_percent"),
            discount_amount=data.get("discount_amount"),
            max_uses=data.get("max_uses"),
            used_count=data.get("used_count") or 0,
            valid_from=data.get("valid_from"),
            valid_until=data.get("valid_until"),
            is_active=bool(data.get("is_active", True)),
        )


@dataclass
class Quote:
    """Amount to charge for a plan, after an optional promo code."""

    plan: SubscriptionPlan
    base_amount: Decimal
    discount: Decimal = Decimal("0")
    promo_code: Optional[str] = None
    rejection: Optional[PromoRejection] = None
    payment_id: Optional[int] = None

    @property
    def amount(self) -> Decimal:
        return (self.base_amount - self.discount).quantize(CENTS, rounding=ROUND_HALF_UP)

    @property
    def is_accepted(self) -> bool:
        return self.rejection is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plan_months": self.plan.months,
            "base_amount": str(self.base_amount),
            "discount": str(self.discount),
            "amount": str(self.amount),
            "promo_code": self.promo_code,
            "rejection": self.rejection.value if self.rejection else None,
            "payment_id": self.payment_id,
        }


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class Payment:
    """Payment request handed over to the external payment process."""

    telegram_id: int
    plan_months: int
    amount: Decimal
    promo_code: Optional[str] = None
    status: PaymentStatus = PaymentStatus.PENDING
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "Payment":
        data = dict(row)
        return cls(
            id=data.get("id"),
            telegram_id=int(data["user_id"]),
            plan_months=data["plan_months"],
            amount=Decimal(data["amount"]),
            promo_code=data.get("promo_code"),
            status=PaymentStatus(data.get("status") or PaymentStatus.PENDING.value),
            created_at=data.get("created_at"),
        )
