import logging

from rest_framework.exceptions import PermissionDenied

from billing.constants import PLAN_FREE, RESOURCE_LIMIT_KEYS
from billing.entitlements import can_access_feature, check_count_limit, plan_features
from core.exceptions import DomainRuleViolation

logger = logging.getLogger(__name__)


def get_company_plan(company):
    """
    Return the plan that governs ``company`` right now.
    Premium companies whose subscription lapsed fall back to 'free'.
    No company (global superuser access) gets 'premium' privileges.
    """
    if company is None:
        return "premium"

    if not company.has_active_subscription():
        return PLAN_FREE

    return company.plan_type or PLAN_FREE


def has_feature(company, feature: str) -> bool:
    """Check if the company's plan includes a feature."""
    return can_access_feature(get_company_plan(company), feature)


def require_feature(company, feature: str):
    """Raise PermissionDenied if company does not have the feature."""
    if company is None:
        return

    if not has_feature(company, feature):
        logger.info("Feature '%s' denied for company %s (plan=%s)", feature, company.slug, get_company_plan(company))
        raise PermissionDenied(
            detail=f"Your current plan does not include '{feature}'. Upgrade to access this feature.",
            code="feature_not_available",
        )


def enforce_count_limit(company, resource_type: str, current_count: int):
    """
    Raise DomainRuleViolation if one more ``resource_type`` does not fit the company's plan.
    Example usage: enforce_count_limit(company, 'clients', Client.objects.filter(company=company).count())
    """
    result = check_count_limit(get_company_plan(company), resource_type, current_count)
    if not result.can_add:
        logger.info(
            "Plan limit reached for company %s: %s (%s/%s)",
            company.slug, resource_type, result.current, result.limit,
        )
        raise DomainRuleViolation(
            detail=f"You've reached your plan limit for {resource_type} ({result.limit}). "
                   f"Upgrade to premium to add more.",
            code="plan_limit_reached",
        )
    return result


def company_usage(company, counts: dict):
    """Plan, features and one count check per resource, for the usage endpoint."""
    plan = get_company_plan(company)
    return {
        "plan": plan,
        "plan_type": company.plan_type,
        "subscription_status": company.subscription_status,
        "features": sorted(plan_features(plan)),
        "limits": {
            resource: check_count_limit(plan, resource, counts.get(resource, 0)).as_dict()
            for resource in RESOURCE_LIMIT_KEYS
        },
    }
