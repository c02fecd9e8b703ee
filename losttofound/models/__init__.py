"""Import all models so SQLModel.metadata picks them up."""

from losttofound.models.auth_session import AuthSession
from losttofound.models.finder_message import FinderMessage, FinderMessageRead, ReportKind
from losttofound.models.pet import (
    LostBoardCard,
    Pet,
    PetContactUpdate,
    PetCreate,
    PetPublicRead,
    PetRead,
    PetStatus,
    PetTravelUpdate,
    PetUpdate,
    PosterRead,
    TravelInfo,
)
from losttofound.models.user import User, UserRead
from losttofound.models.user_profile import Plan, PlanFeatures, UserProfile, UserProfileRead

__all__ = [
    "AuthSession",
    "FinderMessage",
    "FinderMessageRead",
    "LostBoardCard",
    "Pet",
    "PetContactUpdate",
    "PetCreate",
    "PetPublicRead",
    "PetRead",
    "PetStatus",
    "PetTravelUpdate",
    "PetUpdate",
    "Plan",
    "PlanFeatures",
    "PosterRead",
    "ReportKind",
    "TravelInfo",
    "User",
    "UserProfile",
    "UserProfileRead",
    "UserRead",
]
