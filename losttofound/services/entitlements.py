"""Plan entitlement rules: what each subscription tier may do.

All functions are pure: they take the plan (and, for pet creation, the
current pet count) and return an ``Entitlement``. Rejecting the request or
persisting the change is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

from losttofound.core.errors import EntitlementError
from losttofound.models.user_profile import Plan, PlanFeatures

FREE_PET_LIMIT = 1

FREE_PET_LIMIT_REASON = "free plan limited to one pet"
CONTACT_FIELDS_REASON = "contact fields require the plus plan"
TRAVEL_MODE_REASON = "travel mode requires the plus plan"
POSTER_REASON = "lost posters require the plus plan"


@dataclass(frozen=True)
class Entitlement:
    """Outcome of an entitlement check."""
    allowed: bool
    reason: str | None = None

    def require(self) -> None:
        """Raise ``EntitlementError`` with the deny reason if not allowed."""
        if not self.allowed:
            raise EntitlementError(self.reason or "not permitted on this plan")


ALLOW = Entitlement(allowed=True)


def _deny(reason: str) -> Entitlement:
    return Entitlement(allowed=False, reason=reason)


def can_create_pet(plan: Plan, current_pet_count: int) -> Entitlement:
    if plan == Plan.FREE and current_pet_count >= FREE_PET_LIMIT:
        return _deny(FREE_PET_LIMIT_REASON)
    return ALLOW


def can_edit_contact_fields(plan: Plan) -> Entitlement:
    return ALLOW if plan == Plan.PLUS else _deny(CONTACT_FIELDS_REASON)


def can_edit_travel_mode(plan: Plan) -> Entitlement:
    return ALLOW if plan == Plan.PLUS else _deny(TRAVEL_MODE_REASON)


def can_generate_poster(plan: Plan) -> Entitlement:
    return ALLOW if plan == Plan.PLUS else _deny(POSTER_REASON)


def plan_features(plan: Plan) -> PlanFeatures:
    """Summarize every plan-gated feature for display."""
    return PlanFeatures(
        unlimited_pets=plan == Plan.PLUS,
        contact_fields=can_edit_contact_fields(plan).allowed,
        travel_mode=can_edit_travel_mode(plan).allowed,
        posters=can_generate_poster(plan).allowed,
    )
