from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from clients.models import Client
from companies.models import Company
from pets.models import Pet
from services.models import Service
from users.models import User
from users.roles import Role

PASSWORD = "Banho-e-Tosa!2024"


@pytest.fixture(autouse=True)
def eager_celery():
    from pet_connect.celery import app

    app.conf.update(CELERY_TASK_ALWAYS_EAGER=True, CELERY_TASK_EAGER_PROPAGATES=True)
    yield


@pytest.fixture
def make_company(db):
    def _make(name="Pet Shop Central", plan_type=Company.PLAN_FREE, status=Company.STATUS_ACTIVE, **extra):
        return Company.objects.create(name=name, plan_type=plan_type, subscription_status=status, **extra)
    return _make


@pytest.fixture
def make_user(db):
    def _make(company, role=Role.EMPLOYEE, username=None):
        username = username or f"{role}{User.objects.count() + 1}"
        return User.objects.create_user(
            username=f"{company.id}__{username}",
            email=f"{username}@{company.slug}.example.com",
            password=PASSWORD,
            company=company,
            role=role,
        )
    return _make


@pytest.fixture
def company(make_company):
    return make_company()


@pytest.fixture
def premium_company(make_company):
    return make_company(name="Premium Pets", plan_type=Company.PLAN_PREMIUM)


@pytest.fixture
def owner(company, make_user):
    return make_user(company, Role.OWNER, "owner")


@pytest.fixture
def admin_user(company, make_user):
    return make_user(company, Role.ADMIN, "admin")


@pytest.fixture
def employee(company, make_user):
    return make_user(company, Role.EMPLOYEE, "employee")


@pytest.fixture
def premium_owner(premium_company, make_user):
    return make_user(premium_company, Role.OWNER, "owner")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        api = APIClient()
        api.force_authenticate(user=user)
        return api
    return _client


@pytest.fixture
def make_pet_owner(db):
    def _make(company, name="Maria Silva", **extra):
        extra.setdefault("email", "maria@example.com")
        extra.setdefault("phone", "11987654321")
        return Client.objects.create(company=company, name=name, **extra)
    return _make


@pytest.fixture
def make_pet(db):
    def _make(pet_owner, name="Rex", species="dog", **extra):
        return Pet.objects.create(company=pet_owner.company, client=pet_owner, name=name, species=species, **extra)
    return _make


@pytest.fixture
def make_service(db):
    def _make(company, name="Banho", price="50.00", duration_minutes=60, category="banho", **extra):
        return Service.objects.create(
            company=company,
            name=name,
            price=Decimal(price),
            duration_minutes=duration_minutes,
            category=category,
            **extra,
        )
    return _make


@pytest.fixture
def make_appointment(db):
    from appointments.models import Appointment

    def _make(pet_owner, service, pet=None, hours_from_now=48, **extra):
        return Appointment.objects.create(
            company=pet_owner.company,
            client=pet_owner,
            pet=pet,
            service=service,
            date_time=timezone.now() + timedelta(hours=hours_from_now),
            **extra,
        )
    return _make
