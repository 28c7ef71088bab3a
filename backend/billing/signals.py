import logging
from datetime import timedelta

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone

from companies.models import Company

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Company)
def start_trial(sender, instance, created, **kwargs):
    """New companies on trial get a trial end date of now + TRIAL_DAYS."""
    if not created or instance.subscription_status != Company.STATUS_TRIAL or instance.trial_ends_at:
        return

    trial_ends_at = timezone.now() + timedelta(days=settings.TRIAL_DAYS)
    Company.objects.filter(pk=instance.pk).update(trial_ends_at=trial_ends_at)
    instance.trial_ends_at = trial_ends_at
    logger.info("Trial started for company '%s' (ends %s).", instance.slug, trial_ends_at)
