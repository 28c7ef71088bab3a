import logging

from django.db import transaction
from rest_framework import viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from billing.utils import enforce_count_limit, require_feature
from companies.permissions import IsCompanyActiveOrReadOnly
from users.permissions import IsCompanyMember

logger = logging.getLogger(__name__)


class CompanyFilteredViewSet(viewsets.ModelViewSet):
    """Base ViewSet for company-scoped resources.

    - Queries are restricted to the requesting user's company. Superusers
      without a company act on the company named by the X-Company header,
      or on every company when no header is sent.
    - ``required_feature`` is checked against the company's plan on every action.
    - ``limited_resource`` ("clients", "pets", ...) is enforced on create; the
      count and the insert run in one transaction with the company row locked.
    """

    permission_classes = [IsAuthenticated, IsCompanyMember, IsCompanyActiveOrReadOnly]
    required_feature = None
    limited_resource = None

    def _acts_globally(self):
        user = self.request.user
        return user.is_superuser and not getattr(user, "company_id", None)

    def get_company(self):
        user = self.request.user
        header_company = getattr(self.request, "company", None)

        if self._acts_globally():
            company = header_company
        else:
            company = getattr(user, "company", None)
            if header_company is not None and company is not None and header_company.pk != company.pk:
                raise PermissionDenied("You do not belong to this company.")

        if company is None:
            raise PermissionDenied("Company context not found.")
        return company

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        if self._acts_globally():
            return
        company = self.get_company()
        if self.required_feature:
            require_feature(company, self.required_feature)

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user

        if not user.is_authenticated:
            return qs.none()

        if self._acts_globally():
            return qs.for_current_company()

        return qs.for_user(user)

    def get_limit_count(self, company, serializer):
        """Current number of records counted against ``limited_resource``."""
        return self.get_queryset().model.objects.filter(company=company).count()

    def perform_create(self, serializer):
        company = self.get_company()

        if not self.limited_resource:
            serializer.save(company=company)
            return

        from companies.models import Company

        with transaction.atomic():
            # Serialises concurrent creates for the same company
            Company.objects.select_for_update().get(pk=company.pk)
            enforce_count_limit(company, self.limited_resource, self.get_limit_count(company, serializer))
            serializer.save(company=company)

        logger.info("Created %s for company %s", self.limited_resource, company.slug)
