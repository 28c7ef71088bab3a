import logging

from django.utils.deprecation import MiddlewareMixin

from core import company_context

logger = logging.getLogger(__name__)


class CompanyAttachAfterAuthMiddleware(MiddlewareMixin):
    """
    Ensures request.company is set from the session-authenticated user when
    the client did not send the X-Company header.
    """

    def process_request(self, request):
        if getattr(request, "company", None):
            return

        user = getattr(request, "user", None)
        if user and getattr(user, "is_authenticated", False):
            company = getattr(user, "company", None)
            request.company = company
            if company is not None:
                company_context.set_current_company(company)
                logger.debug("CompanyAttachAfterAuthMiddleware: resolved from user -> %s", company.slug)
