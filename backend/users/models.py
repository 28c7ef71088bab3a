from django.contrib.auth.models import AbstractUser
from django.db import models

from .roles import Role, MANAGER_ROLES


class User(AbstractUser):
    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="users",
        null=True,
        blank=True,
    )

    role = models.CharField(max_length=20, choices=Role.choices, default=Role.EMPLOYEE)
    phone = models.CharField(max_length=30, blank=True)
    avatar_url = models.URLField(blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["company", "email"],
                name="unique_company_email",
            ),
        ]

    def __str__(self):
        return f"{self.username} ({self.company})" if self.company else self.username

    @property
    def is_company_manager(self):
        return self.role in MANAGER_ROLES

    @property
    def display_username(self):
        """Username without the company prefix used for storage."""
        prefix = f"{self.company_id}__"
        if self.company_id and self.username.startswith(prefix):
            return self.username[len(prefix):]
        return self.username
