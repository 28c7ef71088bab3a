import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from .models import Notification
from .services.whatsapp import WhatsAppError, WhatsAppService

logger = logging.getLogger(__name__)


@shared_task(bind=True, autoretry_for=(Exception,), retry_backoff=True, retry_kwargs={"max_retries": 3})
def send_notification_email(self, notification_id):
    """
    Send an email for a stored notification.
    """
    try:
        notification = Notification.objects.select_related("recipient").get(
            id=notification_id
        )
    except Notification.DoesNotExist:
        logger.warning("Notification %s not found, email skipped", notification_id)
        return

    recipient = notification.recipient

    if not recipient.email:
        return

    send_mail(
        subject=notification.title,
        message=notification.message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient.email],
        fail_silently=False,
    )
    logger.info("Notification %s emailed to user %s", notification.id, recipient.id)


@shared_task
def send_plain_email(to_email, subject, message):
    """Email someone who is not a user (e.g. a pet owner)."""
    send_mail(
        subject=subject,
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to_email],
        fail_silently=False,
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_whatsapp_message_task(self, phone, message):
    try:
        WhatsAppService.send_text_message(phone, message)
    except WhatsAppError as exc:
        logger.exception("WhatsApp message to %s failed: %s", phone, exc)
        raise self.retry(exc=exc)
