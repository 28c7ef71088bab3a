"""
Plan entitlements.

Pure lookups over the static tables in ``billing.constants``: no database
access, no state. Callers supply the plan identifier and, for countable
resources, the current count. Enforcing the result at write time is the
caller's job (see ``billing.utils.enforce_count_limit``).
"""

from dataclasses import dataclass
from typing import Optional

from .constants import (
    PLAN_DESCRIPTIONS,
    PLAN_FEATURES,
    PLAN_LIMITS,
    PLANS,
    RESOURCE_LIMIT_KEYS,
    UNLIMITED,
)


class EntitlementError(Exception):
    code = "entitlement_error"


class UnknownPlan(EntitlementError):
    code = "unknown_plan"

    def __init__(self, plan):
        self.plan = plan
        super().__init__(f"Unknown plan '{plan}'. Expected one of: {', '.join(PLANS)}.")


class UnknownResource(EntitlementError):
    code = "unknown_resource"

    def __init__(self, resource_type):
        self.resource_type = resource_type
        super().__init__(
            f"Unknown resource '{resource_type}'. Expected one of: {', '.join(RESOURCE_LIMIT_KEYS)}."
        )


@dataclass(frozen=True)
class PlanLimits:
    max_clients: Optional[int]
    max_pets: Optional[int]
    max_users: Optional[int]
    max_photos: Optional[int]

    def as_dict(self):
        return {
            "max_clients": self.max_clients,
            "max_pets": self.max_pets,
            "max_users": self.max_users,
            "max_photos": self.max_photos,
        }


@dataclass(frozen=True)
class CountLimit:
    """Outcome of a count check. ``limit``/``remaining`` are UNLIMITED (None) when uncapped."""
    current: int
    limit: Optional[int]
    can_add: bool
    remaining: Optional[int]

    @property
    def is_unlimited(self):
        return self.limit is UNLIMITED

    def as_dict(self):
        return {
            "current": self.current,
            "limit": self.limit,
            "can_add": self.can_add,
            "remaining": self.remaining,
            "unlimited": self.is_unlimited,
        }


def is_unlimited(value):
    return value is UNLIMITED


def _plan_key(plan):
    if plan not in PLAN_LIMITS:
        raise UnknownPlan(plan)
    return plan


def limits_for(plan) -> PlanLimits:
    """Numeric limits of ``plan``. Raises UnknownPlan."""
    return PlanLimits(**PLAN_LIMITS[_plan_key(plan)])


def plan_features(plan) -> frozenset:
    return PLAN_FEATURES[_plan_key(plan)]


def can_access_feature(plan, feature: str) -> bool:
    """True iff ``feature`` is enabled on ``plan``. Unknown feature names are simply not enabled."""
    return feature in plan_features(plan)


def check_count_limit(plan, resource_type: str, current_count: int) -> CountLimit:
    """Whether one more ``resource_type`` record fits in ``plan`` given ``current_count``."""
    limits = limits_for(plan)
    try:
        limit_key = RESOURCE_LIMIT_KEYS[resource_type]
    except KeyError:
        raise UnknownResource(resource_type) from None

    limit = getattr(limits, limit_key)

    if is_unlimited(limit):
        return CountLimit(current=current_count, limit=UNLIMITED, can_add=True, remaining=UNLIMITED)

    return CountLimit(
        current=current_count,
        limit=limit,
        can_add=current_count < limit,
        remaining=max(0, limit - current_count),
    )


def available_plans():
    """Plan catalogue: name, description, limits and features of every plan."""
    return [
        {
            "name": plan,
            "description": PLAN_DESCRIPTIONS.get(plan, ""),
            "limits": limits_for(plan).as_dict(),
            "features": sorted(plan_features(plan)),
        }
        for plan in PLANS
    ]
