import logging

from django.contrib.auth import get_user_model
from django.db.models import Count, Max
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from clients.models import Client
from companies.models import Company
from notifications.models import NotificationType
from notifications.utils import notify_company_managers
from pets.models import Pet
from services.models import Service
from users.permissions import IsCompanyMember, IsCompanyOwner
from .entitlements import available_plans
from .serializers import ChangePlanSerializer
from .utils import company_usage

User = get_user_model()
logger = logging.getLogger(__name__)


def _request_company(request):
    company = getattr(request.user, "company", None)
    if company is None:
        raise PermissionDenied("Company context not found.")
    return company


@extend_schema(tags=["Billing"])
class PlanCatalogView(APIView):
    """Public list of plans with their limits and features."""
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(available_plans())


@extend_schema(tags=["Billing"])
class UsageView(APIView):
    """Effective plan of the company and how much of each limit is used."""
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        company = _request_company(request)

        # Photos are limited per gallery; report the fullest one
        busiest_gallery = max(
            model.objects.filter(company=company).annotate(photo_count=Count("photos"))
            .aggregate(v=Max("photo_count"))["v"] or 0
            for model in (Pet, Service)
        )

        counts = {
            "clients": Client.objects.filter(company=company).count(),
            "pets": Pet.objects.filter(company=company).count(),
            "users": User.objects.filter(company=company).count(),
            "photos": busiest_gallery,
        }
        return Response(company_usage(company, counts))


@extend_schema(tags=["Billing"])
class ChangePlanView(APIView):
    """
    Switch the company between plans. Payment collection is handled outside
    this service, so the change takes effect immediately.
    """
    permission_classes = [IsAuthenticated, IsCompanyOwner]

    @extend_schema(request=ChangePlanSerializer)
    def post(self, request):
        company = _request_company(request)
        serializer = ChangePlanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        previous = company.plan_type
        company.plan_type = serializer.validated_data["plan_type"]
        company.subscription_status = Company.STATUS_ACTIVE
        # A lapsed end date would keep the company on free entitlements
        company.subscription_ends_at = None
        company.save(update_fields=["plan_type", "subscription_status", "subscription_ends_at", "updated_at"])

        logger.info("Company '%s' changed plan %s -> %s", company.slug, previous, company.plan_type)

        if previous != company.plan_type:
            notify_company_managers(
                company,
                title="Plan changed",
                message=f"{company.name} is now on the {company.plan_type} plan (was {previous}).",
                notification_type=NotificationType.PLAN_CHANGED,
            )

        return Response(
            {"plan_type": company.plan_type, "subscription_status": company.subscription_status},
            status=status.HTTP_200_OK,
        )
