"""Domain entities module."""

from .profile import Profile, SubscriptionTier
from .content import Category, ContentItem, ContentKind
from .engagement import EngagementRecord, Favorite, ProgressUpdate
from .support import SupportQuestion, QuestionStatus, AttachmentKind
from .billing import (
    SubscriptionPlan,
    SUBSCRIPTION_PLANS,
    get_plan,
    PromoCode,
    PromoRejection,
    Quote,
    Payment,
    PaymentStatus,
)

__all__ = [
    "Profile",
    "SubscriptionTier",
    "Category",
    "ContentItem",
    "ContentKind",
    "EngagementRecord",
    "Favorite",
    "ProgressUpdate",
    "SupportQuestion",
    "QuestionStatus",
    "AttachmentKind",
    "SubscriptionPlan",
    "SUBSCRIPTION_PLANS",
    "get_plan",
    "PromoCode",
    "PromoRejection",
    "Quote",
    "Payment",
    "PaymentStatus",
]
