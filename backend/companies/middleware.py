import logging

from django.http import HttpResponseForbidden

from companies.models import Company
from core import company_context

logger = logging.getLogger(__name__)


class CompanyMiddleware:
    """
    Resolve the current company for each request.

    Resolution order:
    1) X-Company header (company slug)
    2) Authenticated user's company (filled later by CompanyAttachAfterAuthMiddleware)
    3) None (public route)

    Stores the company on request.company and in core.company_context.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        company = None

        company_header = request.headers.get("X-Company")
        if company_header:
            try:
                company = Company.objects.get(slug=company_header)
                logger.debug("CompanyMiddleware: resolved from header -> %s", company.slug)
            except Company.DoesNotExist:
                return HttpResponseForbidden("Invalid company")

        request.company = company
        if company is not None:
            company_context.set_current_company(company)

        try:
            return self.get_response(request)
        finally:
            company_context.clear_current_company()
