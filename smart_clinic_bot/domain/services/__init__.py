"""Domain services module."""

from .access_control import (
    as_utc,
    has_premium_access,
    is_visible_to,
    SubscriptionStatus,
    subscription_status,
)
from .onboarding import (
    OnboardingStep,
    OnboardingSession,
    OnboardingStateMachine,
    Transition,
    TransitionOutcome,
    sanitize_specialty,
    is_valid_email,
    SKIP_COMMAND,
)

__all__ = [
    "as_utc",
    "has_premium_access",
    "is_visible_to",
    "SubscriptionStatus",
    "subscription_status",
    "OnboardingStep",
    "OnboardingSession",
    "OnboardingStateMachine",
    "Transition",
    "TransitionOutcome",
    "sanitize_specialty",
    "is_valid_email",
    "SKIP_COMMAND",
]
