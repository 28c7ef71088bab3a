"""Subscription housekeeping shared by the Celery tasks and the management command."""

import logging
from datetime import timedelta

from django.utils import timezone

from companies.models import Company
from notifications.models import NotificationType
from notifications.utils import notify_company_managers

logger = logging.getLogger(__name__)


def expire_trials(now=None):
    """Mark trials past ``trial_ends_at`` as inactive. Returns the expired companies."""
    now = now or timezone.now()
    expired = list(Company.objects.filter(
        subscription_status=Company.STATUS_TRIAL,
        trial_ends_at__lt=now,
    ))

    for company in expired:
        company.subscription_status = Company.STATUS_INACTIVE
        company.save(update_fields=["subscription_status", "updated_at"])
        logger.info("Trial expired for company '%s'.", company.slug)
        notify_company_managers(
            company,
            title="Your trial has ended",
            message=(
                f"The trial of {company.name} ended on {timezone.localtime(company.trial_ends_at):%d/%m/%Y}. "
                "Your data is safe; upgrade to premium to keep adding records."
            ),
            notification_type=NotificationType.TRIAL_EXPIRED,
        )

    return expired


def expire_subscriptions(now=None):
    """Active subscriptions past ``subscription_ends_at`` become inactive."""
    now = now or timezone.now()
    updated = Company.objects.filter(
        subscription_status=Company.STATUS_ACTIVE,
        subscription_ends_at__lt=now,
    ).update(subscription_status=Company.STATUS_INACTIVE, updated_at=now)
    if updated:
        logger.info("%s subscription(s) marked inactive after their end date.", updated)
    return updated


def notify_ending_trials(days_before=3, now=None):
    """Warn managers of trials ending within ``days_before`` days. Returns the companies notified."""
    now = now or timezone.now()
    ending = list(Company.objects.filter(
        subscription_status=Company.STATUS_TRIAL,
        trial_ends_at__gte=now,
        trial_ends_at__lte=now + timedelta(days=days_before),
    ))

    for company in ending:
        days_left = max((company.trial_ends_at - now).days, 0)
        notify_company_managers(
            company,
            title=f"Your trial ends in {days_left} day(s)",
            message=(
                f"The trial of {company.name} ends on {timezone.localtime(company.trial_ends_at):%d/%m/%Y}. "
                "Upgrade to premium to keep unlimited clients, pets and users."
            ),
            notification_type=NotificationType.TRIAL_ENDING,
        )

    logger.info("Trial ending notices sent to %s company(ies).", len(ending))
    return ending
