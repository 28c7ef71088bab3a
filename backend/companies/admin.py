from django.contrib import admin
from .models import Company


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'plan_type', 'subscription_status', 'trial_ends_at', 'created_at')
    list_filter = ('plan_type', 'subscription_status')
    search_fields = ('name', 'slug', 'email')
