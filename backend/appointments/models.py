from decimal import Decimal

from django.conf import settings
from django.db import models

from core.models import CompanyScopedModel
from .transitions import AppointmentStatus


class Appointment(CompanyScopedModel):
    PRIORITY_CHOICES = [
        ("low", "Low"),
        ("normal", "Normal"),
        ("high", "High"),
        ("urgent", "Urgent"),
    ]
    PAYMENT_STATUS_CHOICES = [
        ("pending", "Pending"),
        ("paid", "Paid"),
        ("partial", "Partial"),
        ("refunded", "Refunded"),
    ]

    client = models.ForeignKey("clients.Client", on_delete=models.CASCADE, related_name="appointments")
    pet = models.ForeignKey(
        "pets.Pet", on_delete=models.SET_NULL, null=True, blank=True, related_name="appointments"
    )
    service = models.ForeignKey("services.Service", on_delete=models.PROTECT, related_name="appointments")
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_appointments",
    )

    date_time = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=AppointmentStatus.choices, default=AppointmentStatus.SCHEDULED)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="normal")
    notes = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)

    service_price = models.DecimalField(max_digits=10, decimal_places=2)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default="pending")

    cancellation_reason = models.TextField(blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    reminder_sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["date_time"]
        indexes = [
            models.Index(fields=["company", "date_time"]),
            models.Index(fields=["company", "status"]),
        ]

    def __str__(self):
        return f"{self.service} for {self.client} at {self.date_time:%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):
        if self.duration_minutes is None and self.service_id:
            self.duration_minutes = self.service.duration_minutes
        if self.service_price is None and self.service_id:
            self.service_price = self.service.price
        self.total_amount = max(Decimal(self.service_price) - Decimal(self.discount_amount or 0), Decimal("0.00"))
        super().save(*args, **kwargs)


class AppointmentStatusChange(models.Model):
    """History row written for every status transition."""

    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name="status_changes")
    from_status = models.CharField(max_length=20, choices=AppointmentStatus.choices)
    to_status = models.CharField(max_length=20, choices=AppointmentStatus.choices)
    changed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="+")
    reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.from_status} -> {self.to_status}"
