from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsCompanyActiveOrReadOnly(BasePermission):
    """
    Allow safe methods for everyone (GET, HEAD, OPTIONS).
    For unsafe methods, only allow if the company's subscription is active
    or its trial has not ended.
    """

    message = "Your company's subscription is inactive or its trial has ended. Write operations are disabled."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True

        user = request.user
        if user and user.is_authenticated and user.is_superuser:
            return True

        company = getattr(user, "company", None) or getattr(request, "company", None)
        if company is None:
            return False

        return company.has_active_subscription()
