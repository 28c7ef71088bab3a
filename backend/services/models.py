import re

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models, transaction

from core.models import CompanyScopedModel
from . import pricing

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_available_days(value):
    if not isinstance(value, list) or any(not isinstance(d, int) or not 1 <= d <= 7 for d in value):
        raise ValidationError("available_days must be a list of weekday numbers from 1 (Monday) to 7 (Sunday).")


def validate_available_hours(value):
    if not value:
        return
    start, end = value.get("start"), value.get("end")
    if not (isinstance(start, str) and TIME_RE.match(start) and isinstance(end, str) and TIME_RE.match(end)):
        raise ValidationError("available_hours needs 'start' and 'end' in HH:MM format.")
    if start >= end:
        raise ValidationError("available_hours 'start' must be before 'end'.")


def default_available_days():
    return [1, 2, 3, 4, 5, 6]


def default_available_hours():
    return {"start": "08:00", "end": "18:00"}


class Service(CompanyScopedModel):
    CATEGORY_CHOICES = [
        ("banho", "Banho"),
        ("tosa", "Tosa"),
        ("banho-e-tosa", "Banho e Tosa"),
        ("veterinario", "Veterinário"),
        ("consulta", "Consulta"),
        ("vacina", "Vacina"),
        ("cirurgia", "Cirurgia"),
        ("estetica", "Estética"),
        ("spa", "SPA"),
        ("hotel", "Hotel"),
        ("daycare", "Day Care"),
        ("adestramento", "Adestramento"),
        ("outros", "Outros"),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES, default="outros")
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    duration_minutes = models.PositiveIntegerField(default=60, validators=[MinValueValidator(1)])
    color = models.CharField(
        max_length=7,
        default="#10B981",
        validators=[RegexValidator(HEX_COLOR_RE, "Color must be a hex value like #10B981.")],
    )
    is_active = models.BooleanField(default=True)
    requires_appointment = models.BooleanField(default=True)
    max_pets_per_session = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(10)]
    )
    available_days = models.JSONField(default=default_available_days, validators=[validate_available_days])
    available_hours = models.JSONField(default=default_available_hours, validators=[validate_available_hours])

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="unique_service_name_per_company"),
        ]

    def __str__(self):
        return self.name


class ServicePackage(CompanyScopedModel):
    DISCOUNT_TYPE_CHOICES = [
        (pricing.DISCOUNT_PERCENTAGE, "Percentage"),
        (pricing.DISCOUNT_FIXED, "Fixed amount"),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    discount_type = models.CharField(max_length=20, choices=DISCOUNT_TYPE_CHOICES, default=pricing.DISCOUNT_PERCENTAGE)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    final_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)
    valid_until = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name

    def recalculate(self):
        """Refresh total/final price from the package items. Caller saves."""
        self.total_price = pricing.items_total(
            (item.quantity, item.unit_price) for item in self.items.all()
        )
        self.final_price = pricing.apply_discount(self.total_price, self.discount_type, self.discount_value)


class ServicePhoto(CompanyScopedModel):
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="photos")
    photo_url = models.URLField()
    caption = models.CharField(max_length=255, blank=True)
    is_primary = models.BooleanField(default=False)

    class Meta:
        ordering = ["-is_primary", "created_at"]

    def __str__(self):
        return f"Photo of {self.service.name}"

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.is_primary:
                ServicePhoto.objects.filter(service_id=self.service_id, is_primary=True).exclude(pk=self.pk).update(
                    is_primary=False
                )
            super().save(*args, **kwargs)


class PackageItem(models.Model):
    package = models.ForeignKey(ServicePackage, on_delete=models.CASCADE, related_name="items")
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name="package_items")
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        unique_together = ("package", "service")

    def __str__(self):
        return f"{self.quantity} x {self.service.name}"

    @property
    def total_price(self):
        return self.quantity * self.unit_price
