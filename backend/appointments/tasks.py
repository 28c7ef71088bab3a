import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from billing.utils import has_feature
from notifications.tasks import send_plain_email, send_whatsapp_message_task
from .models import Appointment
from .transitions import AppointmentStatus

logger = logging.getLogger(__name__)


def reminder_message(appointment):
    when = timezone.localtime(appointment.date_time)
    pet = f" with {appointment.pet.name}" if appointment.pet else ""
    return (
        f"Hello {appointment.client.name}! This is a reminder of your {appointment.service.name} "
        f"appointment{pet} at {appointment.company.name} on {when:%d/%m/%Y} at {when:%H:%M}."
    )


def reminder_channel(appointment):
    """'whatsapp', 'email' or None when the client cannot be reached."""
    company = appointment.company
    prefs = company.notification_settings()
    client = appointment.client

    if client.phone and prefs.get("whatsapp", False) and has_feature(company, "whatsapp_integration"):
        return "whatsapp"
    if client.email and prefs.get("email", True):
        return "email"
    return None


@shared_task
def send_appointment_reminders_task(hours_ahead=None):
    """
    Remind clients of scheduled/confirmed appointments starting within ``hours_ahead``.
    Each appointment is reminded once; ``reminder_sent_at`` records it.
    """
    hours_ahead = hours_ahead or settings.APPOINTMENT_REMINDER_HOURS
    now = timezone.now()

    due = Appointment.objects.select_related("company", "client", "pet", "service").filter(
        status__in=[AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED],
        date_time__gt=now,
        date_time__lte=now + timedelta(hours=hours_ahead),
        reminder_sent_at__isnull=True,
    )

    sent = 0
    for appointment in due:
        channel = reminder_channel(appointment)
        if channel is None:
            logger.info("Appointment %s: client has no reachable contact, reminder skipped", appointment.id)
            continue

        message = reminder_message(appointment)
        if channel == "whatsapp":
            send_whatsapp_message_task.delay(appointment.client.phone, message)
        else:
            send_plain_email.delay(appointment.client.email, "Appointment reminder", message)

        Appointment.objects.filter(pk=appointment.pk).update(reminder_sent_at=now)
        sent += 1

    logger.info("Sent %s appointment reminder(s)", sent)
    return sent
