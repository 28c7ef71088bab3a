from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from core.managers import CompanyQuerySet
from core.models import CompanyScopedModel

INCOME = "income"
EXPENSE = "expense"
TYPE_CHOICES = [
    (INCOME, "Income"),
    (EXPENSE, "Expense"),
]

ZERO = Decimal("0.00")


def _sum_of(transaction_type, prefix="transactions__"):
    return Coalesce(
        Sum(f"{prefix}amount", filter=Q(**{f"{prefix}transaction_type": transaction_type})),
        Value(ZERO),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


class FinancialAccountQuerySet(CompanyQuerySet):
    def with_balance(self):
        """Annotate ``total_income``, ``total_expense`` and ``balance``."""
        return self.annotate(
            total_income=_sum_of(INCOME),
            total_expense=_sum_of(EXPENSE),
        ).annotate(balance=models.F("initial_balance") + models.F("total_income") - models.F("total_expense"))


class FinancialAccount(CompanyScopedModel):
    ACCOUNT_TYPE_CHOICES = [
        ("bank", "Bank"),
        ("cash", "Cash"),
        ("credit", "Credit"),
        ("savings", "Savings"),
    ]

    name = models.CharField(max_length=100)
    account_type = models.CharField(max_length=10, choices=ACCOUNT_TYPE_CHOICES, default="cash")
    initial_balance = models.DecimalField(max_digits=12, decimal_places=2, default=ZERO)
    bank_name = models.CharField(max_length=100, blank=True)
    account_number = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True)

    objects = models.Manager.from_queryset(FinancialAccountQuerySet)()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def current_balance(self):
        totals = self.transactions.aggregate(
            income=_sum_of(INCOME, prefix=""),
            expense=_sum_of(EXPENSE, prefix=""),
        )
        return self.initial_balance + totals["income"] - totals["expense"]


class FinancialCategory(CompanyScopedModel):
    name = models.CharField(max_length=100)
    category_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    color = models.CharField(max_length=7, default="#6B7280")
    icon = models.CharField(max_length=50, blank=True)
    is_default = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["category_type", "name"]
        verbose_name_plural = "Financial categories"

    def __str__(self):
        return f"{self.name} ({self.category_type})"


class FinancialTransfer(CompanyScopedModel):
    from_account = models.ForeignKey(FinancialAccount, on_delete=models.PROTECT, related_name="outgoing_transfers")
    to_account = models.ForeignKey(FinancialAccount, on_delete=models.PROTECT, related_name="incoming_transfers")
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))])
    description = models.CharField(max_length=255, blank=True)
    transfer_date = models.DateField()
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="+")

    class Meta:
        ordering = ["-transfer_date", "-created_at"]

    def __str__(self):
        return f"{self.from_account} -> {self.to_account}: {self.amount}"


class FinancialTransaction(CompanyScopedModel):
    REFERENCE_CHOICES = [
        ("manual", "Manual"),
        ("appointment", "Appointment"),
        ("transfer", "Transfer"),
    ]

    account = models.ForeignKey(FinancialAccount, on_delete=models.PROTECT, related_name="transactions")
    category = models.ForeignKey(
        FinancialCategory, on_delete=models.PROTECT, null=True, blank=True, related_name="transactions"
    )
    transaction_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))])
    description = models.CharField(max_length=255, blank=True)
    transaction_date = models.DateField()
    reference_type = models.CharField(max_length=20, choices=REFERENCE_CHOICES, default="manual")
    appointment = models.ForeignKey(
        "appointments.Appointment", on_delete=models.SET_NULL, null=True, blank=True, related_name="transactions"
    )
    # Deleting a transfer removes both of its legs
    transfer = models.ForeignKey(
        FinancialTransfer, on_delete=models.CASCADE, null=True, blank=True, related_name="transactions"
    )
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name="+")

    class Meta:
        ordering = ["-transaction_date", "-created_at"]
        indexes = [
            models.Index(fields=["company", "transaction_date"]),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.amount} on {self.transaction_date}"
