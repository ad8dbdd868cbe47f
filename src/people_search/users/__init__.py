"""User profiles and the service that extracts, stores and matches them."""

from .models import ExtractedUser, PersonMatch, RelevancyJudgment, UserProfile, UserRelevancy
from .service import UserService

__all__ = [
    "ExtractedUser",
    "PersonMatch",
    "RelevancyJudgment",
    "UserProfile",
    "UserRelevancy",
    "UserService",
]
