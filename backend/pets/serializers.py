from rest_framework import serializers

from clients.models import Client
from core.serializers import CompanyScopedRelatedField
from .models import Pet, PetPhoto


class PetPhotoSerializer(serializers.ModelSerializer):
    class Meta:
        model = PetPhoto
        fields = ["id", "pet", "photo_url", "caption", "is_profile_photo", "created_at"]
        read_only_fields = ["pet", "created_at"]


class PetSerializer(serializers.ModelSerializer):
    client = CompanyScopedRelatedField(queryset=Client.objects.all())
    client_name = serializers.CharField(source="client.name", read_only=True)
    age = serializers.SerializerMethodField()
    profile_photo_url = serializers.SerializerMethodField()

    class Meta:
        model = Pet
        fields = [
            "id", "client", "client_name", "name", "species", "breed", "gender",
            "birth_date", "age", "weight", "color", "size", "medical_history",
            "allergies", "medications", "veterinarian_contact", "temperament",
            "notes", "is_active", "profile_photo_url", "created_at", "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_age(self, obj):
        return obj.age_in_years()

    def get_profile_photo_url(self, obj):
        photo = obj.photos.filter(is_profile_photo=True).first()
        return photo.photo_url if photo else None

    def validate_weight(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("Weight must be greater than zero.")
        return value
