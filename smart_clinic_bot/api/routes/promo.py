"""Promo code validation for the web checkout."""

from typing import Optional

from fastapi import APIRouter, Depends

from ...container import ServiceContext
from ..dependencies import get_context

router = APIRouter(prefix="/api", tags=["billing"])


@router.get("/promo/{code}")
async def validate_promo(code: str, plan_months: Optional[int] = None, context: ServiceContext = Depends(get_context)):
    """Check a code without redeeming it; a rejection is a normal result."""
    validation = await context.billing.validate_promo(code, plan_months)

    data = {
        "code": validation.code,
        "valid": validation.valid,
        "rejection": validation.rejection.value if validation.rejection else None,
    }
    if validation.promo is not None:
        data["discount_percent"] = validation.promo.discount_percent
        data["discount_amount"] = (
            str(validation.promo.discount_amount) if validation.promo.discount_amount is not None else None
        )
    if validation.quote is not None:
        data["quote"] = validation.quote.to_dict()

    return {"success": True, "data": data}
