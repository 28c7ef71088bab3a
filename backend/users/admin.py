from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'company', 'role', 'is_active')
    list_filter = ('role', 'is_active', 'company')
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Company", {"fields": ("company", "role", "phone", "avatar_url")}),
    )
