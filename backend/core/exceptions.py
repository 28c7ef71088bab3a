"""
Project-wide DRF exception handling.

Errors that carry a single ``detail`` message also expose its machine-readable
``code`` so clients can branch without parsing text:

    {"detail": "Only owner, admin may move an appointment from cancelled.", "code": "forbidden_role"}
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class DomainRuleViolation(APIException):
    """A business rule rejected the request (plan limit, illegal status change, ...)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request violates a business rule."
    default_code = "rule_violation"

    def __init__(self, detail=None, code=None, status_code=None):
        if status_code is not None:
            self.status_code = status_code
        super().__init__(detail=detail, code=code)


def exception_handler(exc, context):
    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(response.data, dict) and "detail" in response.data and "code" not in response.data:
        detail = response.data["detail"]
        code = getattr(detail, "code", None)
        if code:
            response.data["code"] = code

    if response.status_code >= 500:
        logger.error("API error %s in %s: %s", response.status_code, context.get("view"), exc)

    return response
