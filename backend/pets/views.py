import logging

from django.db import transaction
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from billing.utils import enforce_count_limit, require_feature
from companies.models import Company
from core.mixins import CompanyFilteredViewSet
from .models import Pet, PetPhoto
from .serializers import PetPhotoSerializer, PetSerializer

logger = logging.getLogger(__name__)


class PetViewSet(CompanyFilteredViewSet):
    queryset = Pet.objects.select_related("client")
    serializer_class = PetSerializer
    required_feature = "pet_management"
    limited_resource = "pets"

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params

        if params.get("client"):
            qs = qs.filter(client_id=params["client"])
        if params.get("species"):
            qs = qs.filter(species=params["species"])

        is_active = params.get("is_active")
        if is_active is not None:
            qs = qs.filter(is_active=is_active.lower() in ("1", "true"))

        search = params.get("search")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(breed__icontains=search) | Q(client__name__icontains=search))

        return qs

    @action(detail=False, methods=["get"])
    def stats(self, request):
        qs = Pet.objects.for_user(request.user)
        today = timezone.localdate()

        by_species = {
            row["species"]: row["total"]
            for row in qs.values("species").annotate(total=Count("id")).order_by("species")
        }
        ages = [age for age in (p.age_in_years(today) for p in qs.exclude(birth_date=None)) if age is not None]

        return Response({
            "total": qs.count(),
            "active": qs.filter(is_active=True).count(),
            "by_species": by_species,
            "average_age": round(sum(ages) / len(ages), 1) if ages else None,
            "added_this_month": qs.filter(created_at__year=today.year, created_at__month=today.month).count(),
        })

    @action(detail=True, methods=["get", "post"])
    def photos(self, request, pk=None):
        """List a pet's photos, or add one (photo gallery plans only)."""
        pet = self.get_object()
        company = pet.company
        require_feature(company, "photo_gallery")

        if request.method == "GET":
            return Response(PetPhotoSerializer(pet.photos.all(), many=True).data)

        serializer = PetPhotoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            Company.objects.select_for_update().get(pk=company.pk)
            enforce_count_limit(company, "photos", pet.photos.count())
            photo = serializer.save(pet=pet, company=company)

        logger.info("Photo %s added to pet %s (company %s)", photo.id, pet.id, company.slug)
        return Response(PetPhotoSerializer(photo).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["delete"], url_path=r"photos/(?P<photo_id>\d+)")
    def delete_photo(self, request, pk=None, photo_id=None):
        pet = self.get_object()
        require_feature(pet.company, "photo_gallery")
        photo = get_object_or_404(PetPhoto, pk=photo_id, pet=pet)
        photo.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
