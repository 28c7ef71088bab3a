from django.db.models import Q

from core.mixins import CompanyFilteredViewSet
from .models import Client
from .serializers import ClientSerializer


class ClientViewSet(CompanyFilteredViewSet):
    """Company clients. ``max_clients`` of the plan is enforced on create."""

    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    required_feature = "client_management"
    limited_resource = "clients"

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        search = params.get("search")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search))

        is_active = params.get("is_active")
        if is_active is not None:
            qs = qs.filter(is_active=is_active.lower() in ("1", "true"))

        return qs
