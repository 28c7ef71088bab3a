from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.utils import timezone

from billing.subscriptions import expire_trials, notify_ending_trials
from billing.tasks import expire_trials_task
from billing.utils import get_company_plan
from clients.models import Client
from companies.models import Company
from notifications.models import Notification
from users.roles import Role


def test_plan_catalogue_is_public(api_client, db):
    response = api_client.get("/api/billing/plans/")
    assert response.status_code == 200
    assert {plan["name"] for plan in response.json()} == {"free", "premium"}


def test_usage_reports_counts_against_limits(client_for, owner, make_pet_owner, make_pet):
    pet_owner = make_pet_owner(owner.company)
    make_pet(pet_owner)
    make_pet(pet_owner, name="Mia", species="cat")

    response = client_for(owner).get("/api/billing/usage/")

    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "free"
    assert data["limits"]["clients"] == {
        "current": 1, "limit": 20, "can_add": True, "remaining": 19, "unlimited": False,
    }
    assert data["limits"]["pets"]["current"] == 2
    assert data["limits"]["users"]["can_add"] is False
    assert "photo_gallery" not in data["features"]


def test_client_limit_is_enforced_on_create(client_for, owner):
    Client.objects.bulk_create(
        Client(company=owner.company, name=f"Client {i}") for i in range(20)
    )

    response = client_for(owner).post("/api/clients/", {"name": "One too many"}, format="json")

    assert response.status_code == 400
    assert response.json()["code"] == "plan_limit_reached"
    assert Client.objects.filter(company=owner.company).count() == 20


def test_premium_has_no_client_limit(client_for, premium_owner):
    Client.objects.bulk_create(
        Client(company=premium_owner.company, name=f"Client {i}") for i in range(25)
    )

    response = client_for(premium_owner).post("/api/clients/", {"name": "Client 26"}, format="json")

    assert response.status_code == 201


def test_lapsed_premium_falls_back_to_free(make_company):
    company = make_company(
        plan_type=Company.PLAN_PREMIUM,
        subscription_ends_at=timezone.now() - timedelta(days=1),
    )
    assert get_company_plan(company) == "free"


def test_inactive_company_is_read_only(client_for, make_company, make_user):
    company = make_company(status=Company.STATUS_INACTIVE)
    user = make_user(company, Role.OWNER)
    api = client_for(user)

    assert api.get("/api/clients/").status_code == 200
    assert api.post("/api/clients/", {"name": "Blocked"}, format="json").status_code == 403


def test_only_owner_changes_plan(client_for, owner, admin_user):
    denied = client_for(admin_user).post("/api/billing/change-plan/", {"plan_type": "premium"}, format="json")
    assert denied.status_code == 403

    response = client_for(owner).post("/api/billing/change-plan/", {"plan_type": "premium"}, format="json")
    assert response.status_code == 200

    owner.company.refresh_from_db()
    assert owner.company.plan_type == "premium"
    assert owner.company.subscription_status == Company.STATUS_ACTIVE
    assert Notification.objects.filter(recipient=admin_user, notification_type="plan_changed").exists()


def test_upgrade_after_lapse_restores_premium(client_for, make_company, make_user):
    company = make_company(
        plan_type=Company.PLAN_PREMIUM,
        status=Company.STATUS_INACTIVE,
        subscription_ends_at=timezone.now() - timedelta(days=5),
    )
    user = make_user(company, Role.OWNER)

    response = client_for(user).post("/api/billing/change-plan/", {"plan_type": "premium"}, format="json")
    assert response.status_code == 200

    company.refresh_from_db()
    assert company.subscription_ends_at is None
    assert get_company_plan(company) == "premium"


def test_new_trial_company_gets_trial_end(make_company, settings):
    company = make_company(status=Company.STATUS_TRIAL)
    company.refresh_from_db()
    expected = timezone.now() + timedelta(days=settings.TRIAL_DAYS)
    assert abs((company.trial_ends_at - expected).total_seconds()) < 60


def test_expire_trials_marks_company_inactive(make_company, make_user):
    company = make_company(status=Company.STATUS_TRIAL, trial_ends_at=timezone.now() - timedelta(hours=1))
    owner = make_user(company, Role.OWNER)
    still_running = make_company(name="Still Running", status=Company.STATUS_TRIAL)

    expired = expire_trials()

    assert [c.pk for c in expired] == [company.pk]
    company.refresh_from_db()
    still_running.refresh_from_db()
    assert company.subscription_status == Company.STATUS_INACTIVE
    assert still_running.subscription_status == Company.STATUS_TRIAL
    assert Notification.objects.filter(recipient=owner, notification_type="trial_expired").count() == 1


def test_expire_trials_task_reports_counts(make_company):
    make_company(status=Company.STATUS_TRIAL, trial_ends_at=timezone.now() - timedelta(days=2))
    make_company(
        name="Lapsed",
        status=Company.STATUS_ACTIVE,
        subscription_ends_at=timezone.now() - timedelta(days=1),
    )

    assert expire_trials_task() == {"trials_expired": 1, "subscriptions_lapsed": 1}


def test_ending_trials_are_notified(make_company, make_user, mailoutbox):
    company = make_company(status=Company.STATUS_TRIAL, trial_ends_at=timezone.now() + timedelta(days=2))
    owner = make_user(company, Role.OWNER)
    make_company(name="Far Away", status=Company.STATUS_TRIAL, trial_ends_at=timezone.now() + timedelta(days=10))

    notified = notify_ending_trials(days_before=3)

    assert [c.pk for c in notified] == [company.pk]
    assert Notification.objects.get(recipient=owner).title.startswith("Your trial ends in")
    assert mailoutbox[0].to == [owner.email]


def test_check_subscriptions_command(make_company):
    company = make_company(status=Company.STATUS_TRIAL, trial_ends_at=timezone.now() - timedelta(days=1))

    out = StringIO()
    call_command("check_subscriptions", "--no-notify", stdout=out)

    company.refresh_from_db()
    assert company.subscription_status == Company.STATUS_INACTIVE
    assert "Trials expired: 1" in out.getvalue()
