from django.contrib import admin

from core.admin import CompanySafeAdmin
from .models import FinancialAccount, FinancialCategory, FinancialTransaction, FinancialTransfer


@admin.register(FinancialAccount)
class FinancialAccountAdmin(CompanySafeAdmin):
    list_display = ("name", "account_type", "initial_balance", "company", "is_active")
    list_filter = ("account_type", "is_active")


@admin.register(FinancialCategory)
class FinancialCategoryAdmin(CompanySafeAdmin):
    list_display = ("name", "category_type", "company", "is_default", "is_active")
    list_filter = ("category_type", "is_active")


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(CompanySafeAdmin):
    list_display = ("transaction_date", "transaction_type", "amount", "account", "category", "company")
    list_filter = ("transaction_type", "reference_type")
    search_fields = ("description", "notes")
    date_hierarchy = "transaction_date"


@admin.register(FinancialTransfer)
class FinancialTransferAdmin(CompanySafeAdmin):
    list_display = ("transfer_date", "from_account", "to_account", "amount", "company")
