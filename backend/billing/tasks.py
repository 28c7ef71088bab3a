import logging

from celery import shared_task
from django.conf import settings

from .subscriptions import expire_subscriptions, expire_trials, notify_ending_trials

logger = logging.getLogger(__name__)


@shared_task
def expire_trials_task():
    """
    Daily: close trials and paid periods that have ended.
    """
    expired = expire_trials()
    lapsed = expire_subscriptions()
    logger.info("Housekeeping: %s trial(s) expired, %s subscription(s) lapsed", len(expired), lapsed)
    return {"trials_expired": len(expired), "subscriptions_lapsed": lapsed}


@shared_task
def notify_ending_trials_task(days_before=None):
    days_before = days_before or settings.TRIAL_ENDING_NOTICE_DAYS
    return len(notify_ending_trials(days_before=days_before))
