from rest_framework import serializers

from .models import Client


class ClientSerializer(serializers.ModelSerializer):
    pets_count = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            "id", "name", "email", "phone", "address", "notes", "avatar_url",
            "is_active", "pets_count", "created_at", "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_pets_count(self, obj):
        return obj.pets.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name cannot be blank.")
        return value
