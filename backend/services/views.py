import logging

from django.db import transaction
from django.db.models import Avg, Count, Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from billing.utils import enforce_count_limit, require_feature
from companies.models import Company
from core.mixins import CompanyFilteredViewSet
from .models import Service, ServicePackage, ServicePhoto
from .serializers import (
    ServicePackageSerializer,
    ServicePhotoSerializer,
    ServicePhotoUpdateSerializer,
    ServiceSerializer,
    ServiceTemplateSerializer,
)
from .templates import get_template, search_templates, service_data_from_template

logger = logging.getLogger(__name__)


def _apply_status_filter(qs, params):
    status_param = params.get("status")
    if status_param in ("active", "inactive"):
        qs = qs.filter(is_active=status_param == "active")
    return qs


class ServiceViewSet(CompanyFilteredViewSet):
    queryset = Service.objects.all()
    serializer_class = ServiceSerializer
    required_feature = "service_management"

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        search = params.get("search")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))

        category = params.get("category")
        if category and category != "all":
            qs = qs.filter(category=category)

        if params.get("min_price"):
            qs = qs.filter(price__gte=params["min_price"])
        if params.get("max_price"):
            qs = qs.filter(price__lte=params["max_price"])

        return _apply_status_filter(qs, params)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        qs = Service.objects.for_user(request.user)
        averages = qs.aggregate(average_price=Avg("price"), average_duration=Avg("duration_minutes"))
        active = qs.filter(is_active=True).count()
        total = qs.count()

        return Response({
            "total": total,
            "active": active,
            "inactive": total - active,
            "by_category": {
                row["category"]: row["total"]
                for row in qs.values("category").annotate(total=Count("id")).order_by("category")
            },
            "average_price": round(averages["average_price"] or 0, 2),
            "average_duration": round(averages["average_duration"] or 0, 1),
        })

    @action(detail=False, methods=["get"])
    def templates(self, request):
        """Ready-made services, filtered by `search` and `category`."""
        params = request.query_params
        found = search_templates(params.get("search"), params.get("category"))
        return Response(ServiceTemplateSerializer(found, many=True).data)

    @action(detail=False, methods=["post"], url_path="from-template")
    def from_template(self, request):
        template_id = request.data.get("template")
        template = get_template(template_id)
        if template is None:
            raise ValidationError({"template": [f"Unknown service template '{template_id}'."]})

        data = service_data_from_template(template, request.data)
        serializer = self.get_serializer(data=data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)

        logger.info("Service '%s' created from template %s", serializer.instance.name, template_id)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get", "post"])
    def photos(self, request, pk=None):
        """List a service's photos, primary first, or add one."""
        service = self.get_object()
        company = service.company
        require_feature(company, "photo_gallery")

        if request.method == "GET":
            return Response(ServicePhotoSerializer(service.photos.all(), many=True).data)

        serializer = ServicePhotoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            Company.objects.select_for_update().get(pk=company.pk)
            enforce_count_limit(company, "photos", service.photos.count())
            photo = serializer.save(service=service, company=company)

        logger.info("Photo %s added to service %s (company %s)", photo.id, service.id, company.slug)
        return Response(ServicePhotoSerializer(photo).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch", "delete"], url_path=r"photos/(?P<photo_id>\d+)")
    def photo_detail(self, request, pk=None, photo_id=None):
        service = self.get_object()
        require_feature(service.company, "photo_gallery")
        photo = get_object_or_404(ServicePhoto, pk=photo_id, service=service)

        if request.method == "DELETE":
            photo.delete()
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = ServicePhotoUpdateSerializer(photo, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(ServicePhotoSerializer(photo).data)


class ServicePackageViewSet(CompanyFilteredViewSet):
    queryset = ServicePackage.objects.prefetch_related("items__service")
    serializer_class = ServicePackageSerializer
    required_feature = "service_management"

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        search = params.get("search")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))

        return _apply_status_filter(qs, params)
