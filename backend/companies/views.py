from rest_framework import status, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.generics import RetrieveUpdateAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from users.permissions import IsCompanyMember, IsOwnerOrAdmin
from .permissions import IsCompanyActiveOrReadOnly
from .serializers import CompanyRegistrationSerializer, CompanySerializer


class CompanyRegistrationViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]
    serializer_class = CompanyRegistrationSerializer

    def create(self, request):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = serializer.save()

        return Response({
            "message": "Company and owner user created successfully.",
            "company": result["company"].slug,
            "owner": result["owner"].id,
            "plan_type": result["company"].plan_type,
        }, status=status.HTTP_201_CREATED)


class CompanyProfileView(RetrieveUpdateAPIView):
    """The requesting user's company. Everyone reads; owners and admins edit."""

    serializer_class = CompanySerializer

    def get_permissions(self):
        if self.request.method in ("PUT", "PATCH"):
            return [IsAuthenticated(), IsOwnerOrAdmin(), IsCompanyActiveOrReadOnly()]
        return [IsAuthenticated(), IsCompanyMember()]

    def get_object(self):
        company = getattr(self.request.user, "company", None)
        if company is None:
            raise PermissionDenied("Company context not found.")
        return company
