"""
Application services - сценарии поверх доменной модели и репозиториев
"""

from .clock import Clock, utc_now
from .profile_service import ProfileService
from .catalog_service import CatalogService, Announcements
from .engagement_tracker import EngagementTracker, validate_progress
from .support_intake import SupportIntake, TOPIC_GENERAL, TOPIC_QUESTION
from .billing_service import BillingService, PromoValidation
from .housekeeping import (
    HousekeepingService,
    HousekeepingScheduler,
    HousekeepingReport,
    WebinarNotifier,
)

__all__ = [
    'Clock',
    'utc_now',
    'ProfileService',
    'CatalogService',
    'Announcements',
    'EngagementTracker',
    'validate_progress',
    'SupportIntake',
    'TOPIC_GENERAL',
    'TOPIC_QUESTION',
    'BillingService',
    'PromoValidation',
    'HousekeepingService',
    'HousekeepingScheduler',
    'HousekeepingReport',
    'WebinarNotifier',
]
