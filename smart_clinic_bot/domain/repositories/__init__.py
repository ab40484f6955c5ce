"""Domain repository interfaces."""

from .profile_repository import IProfileRepository
from .content_repository import IContentRepository, CatalogFilter, MAX_PAGE_SIZE
from .engagement_repository import IEngagementRepository
from .question_repository import IQuestionRepository
from .billing_repository import IBillingRepository

__all__ = [
    "IProfileRepository",
    "IContentRepository",
    "CatalogFilter",
    "MAX_PAGE_SIZE",
    "IEngagementRepository",
    "IQuestionRepository",
    "IBillingRepository",
]
