from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import CompanyScopedModel


class NotificationType(models.TextChoices):
    APPOINTMENT_CANCELLED = "appointment_cancelled", "Appointment cancelled"
    APPOINTMENT_NO_SHOW = "appointment_no_show", "Client did not show up"
    PLAN_CHANGED = "plan_changed", "Plan changed"
    TRIAL_ENDING = "trial_ending", "Trial ending soon"
    TRIAL_EXPIRED = "trial_expired", "Trial expired"
    ROLE_CHANGED = "role_changed", "Role changed"
    GENERAL = "general", "General"


BILLING_TYPES = (NotificationType.PLAN_CHANGED, NotificationType.TRIAL_ENDING, NotificationType.TRIAL_EXPIRED)
APPOINTMENT_TYPES = (NotificationType.APPOINTMENT_CANCELLED, NotificationType.APPOINTMENT_NO_SHOW)


class Notification(CompanyScopedModel):
    """In-app message for one staff member, optionally about one appointment."""

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    notification_type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    appointment = models.ForeignKey(
        "appointments.Appointment",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="notifications",
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = [models.Index(fields=["recipient", "is_read"])]

    def __str__(self):
        return f"{self.get_notification_type_display()}: {self.title}"

    def mark_read(self, now=None):
        if self.is_read:
            return
        self.is_read = True
        self.read_at = now or timezone.now()
        self.save(update_fields=["is_read", "read_at", "updated_at"])
