from django.db import models
from .managers import CompanyManager


class CompanyScopedModel(models.Model):
    """Base for every record that belongs to exactly one company."""

    company = models.ForeignKey("companies.Company", on_delete=models.CASCADE, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CompanyManager()

    class Meta:
        abstract = True
