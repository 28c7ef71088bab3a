from django.contrib import admin

from core.admin import CompanySafeAdmin
from .models import Client


@admin.register(Client)
class ClientAdmin(CompanySafeAdmin):
    list_display = ("name", "email", "phone", "company", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "email", "phone")
