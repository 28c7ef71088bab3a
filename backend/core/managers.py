from django.db import models
from core.company_context import get_current_company, CompanyNotSetError


class CompanyQuerySet(models.QuerySet):
    def for_company(self, company):
        if company is None:
            return self.none()
        return self.filter(company=company)

    def for_current_company(self):
        try:
            return self.for_company(get_current_company())
        except CompanyNotSetError:
            # No request context (shell, celery, management commands)
            return self

    def for_user(self, user):
        """Superusers without a company see everything; everyone else only their company."""
        if user.is_superuser and not getattr(user, "company_id", None):
            return self
        return self.for_company(getattr(user, "company", None))


class CompanyManager(models.Manager.from_queryset(CompanyQuerySet)):
    pass
