from django.contrib import admin

from core.admin import CompanySafeAdmin
from .models import Appointment, AppointmentStatusChange


class AppointmentStatusChangeInline(admin.TabularInline):
    model = AppointmentStatusChange
    extra = 0
    can_delete = False
    readonly_fields = ("from_status", "to_status", "changed_by", "reason", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Appointment)
class AppointmentAdmin(CompanySafeAdmin):
    list_display = ("date_time", "client", "pet", "service", "status", "payment_status", "company")
    list_filter = ("status", "priority", "payment_status")
    search_fields = ("client__name", "pet__name", "service__name")
    date_hierarchy = "date_time"
    # Status changes go through the API so every move is validated and recorded
    readonly_fields = ("status", "total_amount", "cancelled_by", "cancelled_at", "reminder_sent_at")
    inlines = [AppointmentStatusChangeInline]
