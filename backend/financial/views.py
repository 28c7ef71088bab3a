from datetime import date

from django.db.models import Count, Q, Sum
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.utils import require_feature
from core.mixins import CompanyFilteredViewSet
from users.permissions import IsCompanyMember
from . import reports
from .models import (
    EXPENSE,
    INCOME,
    FinancialAccount,
    FinancialCategory,
    FinancialTransaction,
    FinancialTransfer,
)
from .serializers import (
    FinancialAccountSerializer,
    FinancialCategorySerializer,
    FinancialTransactionSerializer,
    FinancialTransferSerializer,
)


def _date_param(params, name, default=None):
    value = params.get(name)
    if not value:
        return default
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError({name: "Use the YYYY-MM-DD format."})
    return parsed


class FinancialAccountViewSet(CompanyFilteredViewSet):
    queryset = FinancialAccount.objects.all()
    serializer_class = FinancialAccountSerializer
    required_feature = "financial_management"

    def get_queryset(self):
        qs = super().get_queryset().with_balance()
        is_active = self.request.query_params.get("is_active")
        if is_active is not None:
            qs = qs.filter(is_active=is_active.lower() in ("1", "true"))
        return qs

    def destroy(self, request, *args, **kwargs):
        account = self.get_object()
        if account.transactions.exists():
            raise ValidationError("Accounts with transactions cannot be deleted; deactivate them instead.")
        return super().destroy(request, *args, **kwargs)


class FinancialCategoryViewSet(CompanyFilteredViewSet):
    queryset = FinancialCategory.objects.all()
    serializer_class = FinancialCategorySerializer
    required_feature = "financial_management"

    def get_queryset(self):
        qs = super().get_queryset()
        category_type = self.request.query_params.get("type")
        if category_type:
            qs = qs.filter(category_type=category_type)
        return qs

    def destroy(self, request, *args, **kwargs):
        category = self.get_object()
        if category.transactions.exists():
            raise ValidationError("Categories in use cannot be deleted; deactivate them instead.")
        return super().destroy(request, *args, **kwargs)


class FinancialTransactionViewSet(CompanyFilteredViewSet):
    queryset = FinancialTransaction.objects.select_related("account", "category")
    serializer_class = FinancialTransactionSerializer
    required_feature = "financial_management"

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        if params.get("type"):
            qs = qs.filter(transaction_type=params["type"])
        if params.get("account"):
            qs = qs.filter(account_id=params["account"])
        if params.get("category"):
            qs = qs.filter(category_id=params["category"])

        date_from = _date_param(params, "date_from")
        if date_from:
            qs = qs.filter(transaction_date__gte=date_from)
        date_to = _date_param(params, "date_to")
        if date_to:
            qs = qs.filter(transaction_date__lte=date_to)

        search = params.get("search")
        if search:
            qs = qs.filter(Q(description__icontains=search) | Q(notes__icontains=search))

        return qs

    def perform_create(self, serializer):
        serializer.save(company=self.get_company(), created_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        if self.get_object().transfer_id:
            raise ValidationError("Transfer entries cannot be deleted; delete the transfer instead.")
        return super().destroy(request, *args, **kwargs)

    @action(detail=False, methods=["get"])
    def summary(self, request):
        """Totals for the transactions matching the current filters."""
        qs = self.get_queryset().exclude(reference_type="transfer")
        income = qs.filter(transaction_type=INCOME).aggregate(v=Sum("amount"))["v"] or 0
        expenses = qs.filter(transaction_type=EXPENSE).aggregate(v=Sum("amount"))["v"] or 0
        return Response({
            "total_income": income,
            "total_expenses": expenses,
            "net": income - expenses,
            "count": qs.aggregate(v=Count("id"))["v"],
        })


class FinancialTransferViewSet(CompanyFilteredViewSet):
    """Transfers are created and deleted, never edited."""

    queryset = FinancialTransfer.objects.select_related("from_account", "to_account")
    serializer_class = FinancialTransferSerializer
    required_feature = "financial_management"
    http_method_names = ["get", "post", "delete", "head", "options"]

    def perform_create(self, serializer):
        serializer.save(company=self.get_company(), created_by=self.request.user)


class FinancialReportViewSet(viewsets.ViewSet):
    """
    Period reports. ``start``/``end`` (YYYY-MM-DD) default to the current
    month for the summary and to the last twelve months otherwise.
    """

    permission_classes = [IsAuthenticated, IsCompanyMember]

    def _company(self, request, feature):
        company = getattr(request.user, "company", None)
        if company is None:
            raise PermissionDenied("Company context not found.")
        require_feature(company, feature)
        return company

    def _period(self, request, months_back):
        today = timezone.localdate()
        if months_back:
            year, month = divmod(today.year * 12 + today.month - 1 - months_back, 12)
            default_start = date(year, month + 1, 1)
        else:
            default_start = today.replace(day=1)
        start = _date_param(request.query_params, "start", default_start)
        end = _date_param(request.query_params, "end", today)
        if start > end:
            raise ValidationError({"start": "The start date must not be after the end date."})
        return start, end

    @action(detail=False, methods=["get"])
    def summary(self, request):
        company = self._company(request, "basic_reports")
        start, end = self._period(request, 0)
        return Response(reports.financial_summary(company, start, end), status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def monthly(self, request):
        company = self._company(request, "advanced_reports")
        start, end = self._period(request, 11)
        return Response(reports.monthly_report(company, start, end))

    @action(detail=False, methods=["get"])
    def categories(self, request):
        company = self._company(request, "advanced_reports")
        start, end = self._period(request, 11)
        transaction_type = request.query_params.get("type")
        if transaction_type not in (None, INCOME, EXPENSE):
            raise ValidationError({"type": "Use 'income' or 'expense'."})
        return Response(reports.category_report(company, start, end, transaction_type))
