from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from companies.models import Company
from .roles import Role
from .tokens import CustomTokenObtainPairSerializer

User = get_user_model()


def stored_username_for(company, username):
    """Usernames are unique per company; storage prefixes them with the company id."""
    if company is None:
        return username
    return f"{company.id}__{username}"


# ===========================
# USER SERIALIZERS
# ===========================

class UserSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="display_username", read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'role',
            'phone',
            'avatar_url',
            'is_active',
        ]
        read_only_fields = ['id', 'role']


class UserCreateSerializer(serializers.ModelSerializer):
    # Override to avoid DRF global uniqueness validator
    username = serializers.CharField(max_length=150, validators=[])
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password]
    )
    role = serializers.ChoiceField(choices=Role.choices, default=Role.EMPLOYEE)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'password',
            'first_name',
            'last_name',
            'role',
            'phone',
        ]

    def _resolve_company(self):
        company = self.context.get('company', None)
        request = self.context.get('request', None)

        if (
            company is None
            and request is not None
            and getattr(request, "user", None)
            and request.user.is_authenticated
        ):
            company = getattr(request.user, "company", None)

        return company

    def validate(self, attrs):
        company = self._resolve_company()
        stored_username = stored_username_for(company, attrs.get("username"))

        if User.objects.filter(username=stored_username).exists():
            raise serializers.ValidationError(
                {"username": "A user with that username already exists in this company."}
            )

        if User.objects.filter(email=attrs.get("email"), company=company).exists():
            raise serializers.ValidationError(
                {"email": "A user with that email already exists in this company."}
            )

        attrs['_stored_username'] = stored_username
        return attrs

    def create(self, validated_data):
        stored_username = validated_data.pop('_stored_username')
        password = validated_data.pop('password')
        validated_data.pop('username', None)
        validated_data.pop('company', None)

        user = User(username=stored_username, company=self._resolve_company(), **validated_data)
        user.set_password(password)
        user.save()
        return user

    def to_representation(self, instance):
        return UserSerializer(instance, context=self.context).data


# ===========================
# AUTH / LOGIN SERIALIZER
# ===========================

class CompanyAwareTokenObtainPairSerializer(serializers.Serializer):
    company = serializers.CharField(required=True, help_text="Company slug")
    username = serializers.CharField(required=True)
    password = serializers.CharField(required=True, write_only=True)

    def validate(self, attrs):
        try:
            company = Company.objects.get(slug__iexact=attrs["company"])
        except Company.DoesNotExist:
            raise serializers.ValidationError({"company": "Invalid company"})

        try:
            user = User.objects.get(
                username=stored_username_for(company, attrs["username"]),
                company=company,
            )
        except User.DoesNotExist:
            raise serializers.ValidationError({"detail": "Invalid credentials"})

        if not user.check_password(attrs["password"]):
            raise serializers.ValidationError({"detail": "Invalid credentials"})

        if not user.is_active:
            raise serializers.ValidationError({"detail": "User account is inactive"})

        refresh = CustomTokenObtainPairSerializer.get_token(user)

        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "user": {
                "id": user.id,
                "username": attrs["username"],
                "company": company.slug,
                "role": user.role,
                "plan_type": company.plan_type,
            },
        }


# ===========================
# ROLES
# ===========================

class AssignRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(
        choices=Role.choices,
        help_text="Role to assign ('owner', 'admin' or 'employee').",
    )
