from rest_framework import serializers


class CompanyScopedRelatedField(serializers.PrimaryKeyRelatedField):
    """
    Primary-key field that only resolves rows of the requesting user's company,
    so an id from another company fails validation as "does not exist".
    """

    def get_queryset(self):
        qs = super().get_queryset()
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return qs.none()
        if user.is_superuser and not user.company_id:
            return qs
        return qs.filter(company_id=user.company_id)
