from companies.models import Company
from notifications.models import Notification
from tests.conftest import PASSWORD
from users.models import User
from users.roles import Role


def register(api_client, **overrides):
    payload = {
        "company_name": "Cão Feliz",
        "username": "joana",
        "email": "joana@caofeliz.example.com",
        "password": PASSWORD,
        "first_name": "Joana",
    }
    payload.update(overrides)
    return api_client.post("/api/companies/register/", payload, format="json")


def test_registration_creates_company_and_owner(api_client, db):
    response = register(api_client)

    assert response.status_code == 201
    company = Company.objects.get(slug=response.json()["company"])
    assert company.plan_type == Company.PLAN_FREE
    assert company.subscription_status == Company.STATUS_TRIAL
    assert company.trial_ends_at is not None

    owner = User.objects.get(company=company)
    assert owner.role == Role.OWNER
    assert owner.display_username == "joana"


def test_duplicate_company_name_is_rejected(api_client, db):
    register(api_client)
    response = register(api_client, company_name="cão feliz", email="other@example.com")
    assert response.status_code == 400
    assert "company_name" in response.json()


def test_login_with_company_slug(api_client, db):
    slug = register(api_client).json()["company"]

    response = api_client.post(
        "/api/auth/login/",
        {"company": slug, "username": "joana", "password": PASSWORD},
        format="json",
    )

    assert response.status_code == 200
    data = response.json()
    assert data["access"]
    assert data["user"]["role"] == "owner"
    assert data["user"]["plan_type"] == "free"


def test_login_rejects_wrong_password(api_client, db):
    slug = register(api_client).json()["company"]
    response = api_client.post(
        "/api/auth/login/",
        {"company": slug, "username": "joana", "password": "wrong-password"},
        format="json",
    )
    assert response.status_code == 400


def test_me_returns_display_username(client_for, employee):
    response = client_for(employee).get("/api/users/me/")
    assert response.status_code == 200
    assert response.json()["username"] == "employee"


def test_free_plan_allows_a_single_user(client_for, owner):
    response = client_for(owner).post(
        "/api/users/",
        {"username": "ana", "email": "ana@example.com", "password": PASSWORD, "role": "employee"},
        format="json",
    )
    assert response.status_code == 400
    assert response.json()["code"] == "plan_limit_reached"


def test_premium_owner_adds_users(client_for, premium_owner):
    response = client_for(premium_owner).post(
        "/api/users/",
        {"username": "ana", "email": "ana@example.com", "password": PASSWORD, "role": "employee"},
        format="json",
    )
    assert response.status_code == 201
    created = User.objects.get(pk=response.json()["id"])
    assert created.company == premium_owner.company
    assert created.display_username == "ana"


def test_employee_cannot_create_users(client_for, employee):
    response = client_for(employee).post(
        "/api/users/",
        {"username": "ana", "email": "ana@example.com", "password": PASSWORD},
        format="json",
    )
    assert response.status_code == 403


def test_users_are_listed_per_company(client_for, owner, employee, premium_owner):
    response = client_for(owner).get("/api/users/")
    ids = {row["id"] for row in response.json()["results"]}
    assert ids == {owner.id, employee.id}


def test_owner_assigns_role_and_user_is_notified(client_for, owner, employee):
    response = client_for(owner).post(f"/api/users/{employee.id}/assign-role/", {"role": "admin"}, format="json")

    assert response.status_code == 200
    employee.refresh_from_db()
    assert employee.role == Role.ADMIN
    assert Notification.objects.filter(recipient=employee, notification_type="role_changed").exists()


def test_branding_requires_premium(client_for, owner, premium_owner):
    payload = {"settings": {"branding": {"primary_color": "#FF0000"}}}

    assert client_for(owner).patch("/api/company/", payload, format="json").status_code == 400
    assert client_for(premium_owner).patch("/api/company/", payload, format="json").status_code == 200


def test_employee_cannot_edit_company(client_for, employee):
    response = client_for(employee).patch("/api/company/", {"phone": "1133334444"}, format="json")
    assert response.status_code == 403


def test_foreign_company_header_is_refused(client_for, owner, premium_company):
    response = client_for(owner).get("/api/clients/", HTTP_X_COMPANY=premium_company.slug)
    assert response.status_code == 403
