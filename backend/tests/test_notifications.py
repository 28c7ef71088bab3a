from unittest import mock

import pytest
import requests

from notifications.models import Notification
from notifications.services.whatsapp import WhatsAppError, WhatsAppService
from notifications.utils import notify_company_managers


def test_managers_are_notified_by_app_and_email(owner, admin_user, employee, mailoutbox):
    created = notify_company_managers(owner.company, "Heads up", "Something happened", notification_type="general")

    assert {n.recipient_id for n in created} == {owner.id, admin_user.id}
    assert sorted(m.to[0] for m in mailoutbox) == sorted([owner.email, admin_user.email])


def test_user_sees_only_own_notifications(client_for, owner, employee):
    Notification.objects.create(company=owner.company, recipient=owner, title="A", message="a", notification_type="general")
    Notification.objects.create(company=owner.company, recipient=employee, title="B", message="b", notification_type="general")

    response = client_for(employee).get("/api/notifications/")

    assert [n["title"] for n in response.json()["results"]] == ["B"]


def test_mark_read_and_mark_all_read(client_for, employee):
    first, second, third = (
        Notification.objects.create(
            company=employee.company, recipient=employee, title=t, message=t, notification_type="general"
        )
        for t in "abc"
    )
    api = client_for(employee)

    assert api.post(f"/api/notifications/{first.id}/mark_read/").status_code == 200
    first.refresh_from_db()
    assert first.is_read
    assert first.read_at is not None

    response = api.post("/api/notifications/mark_all_read/")
    assert response.json()["updated"] == 2
    assert api.get("/api/notifications/", {"is_read": "false"}).json()["count"] == 0


def test_inbox_groups_and_unread_count(client_for, employee):
    for notification_type in ("appointment_no_show", "trial_ending", "general"):
        Notification.objects.create(
            company=employee.company,
            recipient=employee,
            title=notification_type,
            message=notification_type,
            notification_type=notification_type,
        )
    api = client_for(employee)

    counts = api.get("/api/notifications/unread_count/").json()
    assert counts == {"unread": 3, "appointments": 1, "billing": 1}

    billing = api.get("/api/notifications/", {"group": "billing"}).json()["results"]
    assert [n["notification_type"] for n in billing] == ["trial_ending"]

    marked = api.post(f"/api/notifications/{billing[0]['id']}/mark_read/").json()
    assert marked["is_read"] is True
    assert api.get("/api/notifications/unread_count/").json()["billing"] == 0


def test_notifications_are_read_only(client_for, employee):
    response = client_for(employee).post("/api/notifications/", {"title": "x"}, format="json")
    assert response.status_code == 405


@pytest.mark.parametrize("raw,expected", [
    ("(11) 98765-4321", "5511987654321"),
    ("+55 11 98765-4321", "5511987654321"),
    ("", ""),
])
def test_phone_normalisation(raw, expected):
    assert WhatsAppService.normalize_phone(raw) == expected


def test_whatsapp_posts_text_message(settings):
    settings.WHATSAPP_ACCESS_TOKEN = "token"
    settings.WHATSAPP_PHONE_NUMBER_ID = "12345"
    settings.WHATSAPP_API_BASE_URL = "https://graph.example.com/v19.0"

    with mock.patch("notifications.services.whatsapp.requests.post") as post:
        post.return_value.json.return_value = {"messages": [{"id": "wamid.1"}]}
        WhatsAppService.send_text_message("11987654321", "Olá!")

    url = post.call_args.args[0]
    payload = post.call_args.kwargs["json"]
    assert url == "https://graph.example.com/v19.0/12345/messages"
    assert payload["to"] == "5511987654321"
    assert payload["text"] == {"body": "Olá!"}
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer token"


def test_whatsapp_errors_are_wrapped(settings):
    settings.WHATSAPP_ACCESS_TOKEN = "token"
    settings.WHATSAPP_PHONE_NUMBER_ID = "12345"

    with mock.patch(
        "notifications.services.whatsapp.requests.post",
        side_effect=requests.exceptions.ConnectionError("down"),
    ):
        with pytest.raises(WhatsAppError):
            WhatsAppService.send_text_message("11987654321", "Olá!")


def test_whatsapp_requires_credentials(settings):
    settings.WHATSAPP_ACCESS_TOKEN = ""
    with pytest.raises(WhatsAppError):
        WhatsAppService.send_text_message("11987654321", "Olá!")
