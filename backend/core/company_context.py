"""
Thread-local storage for the current company.
Used by CompanyManager.for_current_company() and the request middleware.
"""

import threading


class CompanyNotSetError(Exception):
    """Raised when no current company is set in thread-local storage."""
    def __init__(self, message=None):
        super().__init__(
            message
            or "No current company is set for this thread. "
            "Call core.company_context.set_current_company(request.company) "
            "before touching company-scoped data outside a request."
        )


_thread_locals = threading.local()


def set_current_company(company):
    """Assign the current company to the current thread."""
    _thread_locals.company = company


def get_current_company():
    """Retrieve the company bound to this thread, or raise CompanyNotSetError."""
    company = getattr(_thread_locals, "company", None)
    if company is None:
        raise CompanyNotSetError()
    return company


def clear_current_company():
    """Clear the company from the current thread context."""
    if hasattr(_thread_locals, "company"):
        delattr(_thread_locals, "company")
