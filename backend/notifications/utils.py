import logging

from users.roles import MANAGER_ROLES
from .models import Notification, NotificationType
from .tasks import send_notification_email

logger = logging.getLogger(__name__)


def notify_user(*, company, recipient, title, message, notification_type, appointment=None, send_email=True):
    """
    Create in-app notification and optionally send email
    """

    notification = Notification.objects.create(
        company=company,
        recipient=recipient,
        title=title,
        message=message,
        notification_type=notification_type,
        appointment=appointment,
    )

    if send_email and recipient.email:
        send_notification_email.delay(notification.id)

    return notification


def notify_company_managers(
    company,
    title,
    message,
    notification_type=NotificationType.GENERAL,
    appointment=None,
    send_email=True,
):
    """Notify every active owner and admin of ``company``. Returns the created notifications."""
    recipients = company.users.filter(role__in=MANAGER_ROLES, is_active=True)

    notifications = [
        notify_user(
            company=company,
            recipient=user,
            title=title,
            message=message,
            notification_type=notification_type,
            appointment=appointment,
            send_email=send_email,
        )
        for user in recipients
    ]

    if not notifications:
        logger.warning("No managers to notify for company %s", company.slug)
    else:
        logger.info("'%s' sent to %s manager(s) of %s", title, len(notifications), company.slug)

    return notifications
