# users/tokens.py
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


def add_company_claims(token, user):
    company = getattr(user, "company", None)
    if company:
        token["company_id"] = company.id
        token["company_slug"] = company.slug
        token["plan_type"] = company.plan_type
    token["role"] = getattr(user, "role", None)
    return token


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        return add_company_claims(token, user)

    def validate(self, attrs):
        data = super().validate(attrs)
        company = getattr(self.user, "company", None)
        if company:
            data["company_id"] = company.id
            data["company_slug"] = company.slug
        data["role"] = self.user.role
        return data
