from django.contrib import admin
from django.utils import timezone

from core.admin import CompanySafeAdmin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(CompanySafeAdmin):
    list_display = ("title", "notification_type", "recipient", "appointment", "is_read", "created_at")
    list_filter = ("notification_type", "is_read")
    list_select_related = ("recipient", "appointment")
    search_fields = ("title", "message", "recipient__email", "appointment__client__name")
    raw_id_fields = ("appointment",)
    readonly_fields = ("read_at",)
    date_hierarchy = "created_at"
    actions = ["mark_as_read"]

    @admin.action(description="Mark as read")
    def mark_as_read(self, request, queryset):
        now = timezone.now()
        updated = queryset.filter(is_read=False).update(is_read=True, read_at=now, updated_at=now)
        self.message_user(request, f"{updated} notification(s) marked as read.")
