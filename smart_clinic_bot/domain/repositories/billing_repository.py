"""Billing repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..entities import Payment, PromoCode


class IBillingRepository(ABC):
    """Promo codes and payments repository interface."""

    @abstractmethod
    async def get_promo(self, code: str) -> Optional[PromoCode]:
        """Promo code by normalized text."""
        pass

    @abstractmethod
    async def redeem_promo(self, code: str, now: datetime) -> Optional[PromoCode]:
        """Atomically increment the usage counter of an applicable code.

        Returns the updated code, or None when the code is unknown, inactive,
        exhausted or outside its validity window.
        """
        pass

    @abstractmethod
    async def create_payment(self, payment: Payment, now: datetime) -> Payment:
        pass
