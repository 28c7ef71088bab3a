from decimal import Decimal

import pytest

from services import pricing
from services.models import Service, ServicePhoto


def test_items_total_multiplies_quantity():
    assert pricing.items_total([(2, Decimal("50.00")), (1, Decimal("35.50"))]) == Decimal("135.50")


def test_percentage_discount():
    assert pricing.apply_discount(Decimal("200.00"), "percentage", Decimal("15")) == Decimal("170.00")


def test_fixed_discount_never_goes_negative():
    assert pricing.apply_discount(Decimal("40.00"), "fixed", Decimal("60.00")) == Decimal("0.00")


@pytest.mark.parametrize("discount_type,value", [("percentage", Decimal("120")), ("fixed", Decimal("-1"))])
def test_invalid_discounts(discount_type, value):
    with pytest.raises(pricing.PricingError):
        pricing.apply_discount(Decimal("100.00"), discount_type, value)


def test_create_service_validates_fields(client_for, owner):
    api = client_for(owner)
    payload = {
        "name": "Tosa Higiênica",
        "category": "tosa",
        "price": "45.00",
        "duration_minutes": 40,
        "color": "#3B82F6",
        "max_pets_per_session": 2,
        "available_days": [1, 2, 3, 4, 5],
        "available_hours": {"start": "09:00", "end": "17:00"},
    }

    assert api.post("/api/services/", payload, format="json").status_code == 201

    duplicate = api.post("/api/services/", payload, format="json")
    assert duplicate.status_code == 400
    assert "name" in duplicate.json()

    bad = dict(payload, name="Outra", color="blue", max_pets_per_session=11, available_days=[0, 8])
    errors = api.post("/api/services/", bad, format="json").json()
    assert {"color", "max_pets_per_session", "available_days"} <= set(errors)

    bad_hours = dict(payload, name="Mais uma", available_hours={"start": "18:00", "end": "08:00"})
    assert api.post("/api/services/", bad_hours, format="json").status_code == 400


def test_service_filters_and_stats(client_for, owner, make_service):
    make_service(owner.company, name="Banho", price="50.00", duration_minutes=60)
    make_service(owner.company, name="Vacina V10", price="90.00", duration_minutes=20, category="vacina")
    make_service(owner.company, name="Hotel", price="100.00", category="hotel", is_active=False)
    api = client_for(owner)

    active = api.get("/api/services/", {"status": "active"}).json()["results"]
    assert {s["name"] for s in active} == {"Banho", "Vacina V10"}

    stats = api.get("/api/services/stats/").json()
    assert stats["total"] == 3
    assert stats["inactive"] == 1
    assert stats["by_category"]["vacina"] == 1
    assert stats["average_price"] == 80.0


def test_package_prices_are_computed(client_for, owner, make_service):
    banho = make_service(owner.company, name="Banho", price="50.00")
    tosa = make_service(owner.company, name="Tosa", price="70.00", category="tosa")

    response = client_for(owner).post(
        "/api/service-packages/",
        {
            "name": "Pacote Mensal",
            "items": [
                {"service": banho.id, "quantity": 4},
                {"service": tosa.id, "quantity": 1, "unit_price": "60.00"},
            ],
            "discount_type": "percentage",
            "discount_value": "10",
        },
        format="json",
    )

    assert response.status_code == 201
    data = response.json()
    assert data["total_price"] == "260.00"
    assert data["final_price"] == "234.00"


def test_package_rejects_percentage_over_100(client_for, owner, make_service):
    banho = make_service(owner.company)

    response = client_for(owner).post(
        "/api/service-packages/",
        {
            "name": "Impossível",
            "items": [{"service": banho.id, "quantity": 1}],
            "discount_type": "percentage",
            "discount_value": "150",
        },
        format="json",
    )

    assert response.status_code == 400


def test_package_needs_services_of_own_company(client_for, owner, premium_owner, make_service):
    foreign = make_service(premium_owner.company)

    response = client_for(owner).post(
        "/api/service-packages/",
        {"name": "X", "items": [{"service": foreign.id, "quantity": 1}], "discount_type": "fixed", "discount_value": "0"},
        format="json",
    )

    assert response.status_code == 400


def test_service_templates_catalogue(client_for, owner):
    api = client_for(owner)

    everything = api.get("/api/services/templates/").json()
    assert "banho-simples" in {t["id"] for t in everything}

    vaccines = api.get("/api/services/templates/", {"category": "vacina"}).json()
    assert [t["id"] for t in vaccines] == ["vacinacao"]

    found = api.get("/api/services/templates/", {"search": "filhotes"}).json()
    assert [t["id"] for t in found] == ["tosa-bebe"]


def test_create_service_from_template(client_for, owner):
    api = client_for(owner)

    response = api.post(
        "/api/services/from-template/", {"template": "day-care", "price": "45.00"}, format="json"
    )

    assert response.status_code == 201
    service = Service.objects.get(pk=response.json()["id"])
    assert service.company == owner.company
    assert service.name == "Day Care"
    assert service.category == "daycare"
    assert service.price == Decimal("45.00")
    assert service.duration_minutes == 480
    assert service.max_pets_per_session == 5

    again = api.post("/api/services/from-template/", {"template": "day-care"}, format="json")
    assert again.status_code == 400
    assert "name" in again.json()


def test_unknown_service_template(client_for, owner):
    response = client_for(owner).post("/api/services/from-template/", {"template": "spa-lunar"}, format="json")

    assert response.status_code == 400
    assert "template" in response.json()


def test_service_photos_need_premium(client_for, owner, make_service):
    service = make_service(owner.company)

    response = client_for(owner).post(
        f"/api/services/{service.id}/photos/", {"photo_url": "https://cdn.example.com/banho.jpg"}, format="json"
    )

    assert response.status_code == 403
    assert response.json()["code"] == "feature_not_available"


def test_single_primary_photo_per_service(client_for, premium_owner, make_service):
    service = make_service(premium_owner.company)
    api = client_for(premium_owner)
    url = f"/api/services/{service.id}/photos/"

    first = api.post(url, {"photo_url": "https://cdn.example.com/1.jpg", "is_primary": True}, format="json")
    second = api.post(url, {"photo_url": "https://cdn.example.com/2.jpg", "caption": "Depois"}, format="json")
    assert first.status_code == 201
    assert second.status_code == 201

    second_id = second.json()["id"]
    updated = api.patch(f"{url}{second_id}/", {"is_primary": True, "caption": "Resultado"}, format="json")
    assert updated.status_code == 200
    assert updated.json()["caption"] == "Resultado"

    primary = ServicePhoto.objects.filter(service=service, is_primary=True)
    assert [p.id for p in primary] == [second_id]
    assert api.get(url).json()[0]["id"] == second_id


def test_delete_service_photo(client_for, premium_owner, make_service):
    service = make_service(premium_owner.company)
    photo = ServicePhoto.objects.create(
        company=service.company, service=service, photo_url="https://cdn.example.com/1.jpg"
    )

    response = client_for(premium_owner).delete(f"/api/services/{service.id}/photos/{photo.id}/")

    assert response.status_code == 204
    assert not ServicePhoto.objects.filter(pk=photo.pk).exists()
