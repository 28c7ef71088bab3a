from django.db import transaction
from rest_framework import serializers

from billing.utils import has_feature
from users.roles import Role
from .models import Company


class CompanyRegistrationSerializer(serializers.Serializer):
    company_name = serializers.CharField(max_length=200)
    company_email = serializers.EmailField(required=False, allow_blank=True)
    company_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)

    def validate_company_name(self, value):
        if Company.objects.filter(name__iexact=value).exists():
            raise serializers.ValidationError("A company with this name already exists.")
        return value

    @transaction.atomic
    def create(self, validated_data):
        from users.serializers import UserCreateSerializer

        company = Company.objects.create(
            name=validated_data["company_name"],
            email=validated_data.get("company_email", "") or validated_data["email"],
            phone=validated_data.get("company_phone", ""),
        )

        user_data = {
            "username": validated_data["username"],
            "email": validated_data["email"],
            "password": validated_data["password"],
            "first_name": validated_data.get("first_name", ""),
            "last_name": validated_data.get("last_name", ""),
            "role": Role.OWNER,
        }

        user_serializer = UserCreateSerializer(data=user_data, context={"company": company})
        user_serializer.is_valid(raise_exception=True)
        owner = user_serializer.save()

        return {"company": company, "owner": owner}


class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = [
            "id", "name", "slug", "email", "phone", "address", "logo_url",
            "plan_type", "subscription_status", "trial_ends_at", "subscription_ends_at",
            "settings", "created_at", "updated_at",
        ]
        read_only_fields = [
            "slug", "plan_type", "subscription_status", "trial_ends_at",
            "subscription_ends_at", "created_at", "updated_at",
        ]

    def validate_settings(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Settings must be an object.")

        company = self.instance
        if company is not None and "branding" in value and value["branding"] != company.settings.get("branding"):
            if not has_feature(company, "custom_branding"):
                raise serializers.ValidationError("Custom branding requires the premium plan.")
        return value
