from django.db import models
from django.utils import timezone
from django.utils.text import slugify


class Company(models.Model):
    """
    Company is the tenant: every client, pet, service, appointment and
    financial record belongs to exactly one company.
    """

    PLAN_FREE = "free"
    PLAN_PREMIUM = "premium"
    PLAN_CHOICES = [
        (PLAN_FREE, "Free"),
        (PLAN_PREMIUM, "Premium"),
    ]

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_TRIAL = "trial"
    STATUS_CANCELLED = "cancelled"
    SUBSCRIPTION_STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
        (STATUS_TRIAL, "Trial"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    name = models.CharField(max_length=200, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    address = models.TextField(blank=True)
    logo_url = models.URLField(blank=True)
    plan_type = models.CharField(max_length=20, choices=PLAN_CHOICES, default=PLAN_FREE)
    subscription_status = models.CharField(
        max_length=20, choices=SUBSCRIPTION_STATUS_CHOICES, default=STATUS_TRIAL
    )
    trial_ends_at = models.DateTimeField(null=True, blank=True)
    subscription_ends_at = models.DateTimeField(null=True, blank=True)
    settings = models.JSONField(default=dict, blank=True, help_text="Business hours, notifications and branding.")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Companies"

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

    def has_active_subscription(self, now=None):
        """Active, or on a trial that has not ended yet."""
        now = now or timezone.now()
        if self.subscription_status == self.STATUS_ACTIVE:
            return self.subscription_ends_at is None or self.subscription_ends_at > now
        if self.subscription_status == self.STATUS_TRIAL:
            return self.trial_ends_at is None or self.trial_ends_at > now
        return False

    def notification_settings(self):
        return (self.settings or {}).get("notifications", {})
