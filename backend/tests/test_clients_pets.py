from pets.models import PetPhoto


def test_create_and_search_clients(client_for, owner):
    api = client_for(owner)
    api.post("/api/clients/", {"name": "Maria Silva", "phone": "11999990000"}, format="json")
    api.post("/api/clients/", {"name": "João Souza", "email": "joao@example.com"}, format="json")

    response = api.get("/api/clients/", {"search": "maria"})

    assert response.status_code == 200
    assert [row["name"] for row in response.json()["results"]] == ["Maria Silva"]


def test_clients_are_isolated_between_companies(client_for, owner, premium_owner, make_pet_owner):
    foreign = make_pet_owner(premium_owner.company, name="Foreign Client")

    api = client_for(owner)
    assert api.get(f"/api/clients/{foreign.id}/").status_code == 404
    assert api.get("/api/clients/").json()["count"] == 0


def test_pet_requires_a_client_of_the_same_company(client_for, owner, premium_owner, make_pet_owner):
    foreign = make_pet_owner(premium_owner.company)

    response = client_for(owner).post(
        "/api/pets/", {"client": foreign.id, "name": "Bidu", "species": "dog"}, format="json"
    )

    assert response.status_code == 400
    assert "client" in response.json()


def test_create_pet_and_filter_by_species(client_for, owner, make_pet_owner):
    pet_owner = make_pet_owner(owner.company)
    api = client_for(owner)

    created = api.post(
        "/api/pets/",
        {"client": pet_owner.id, "name": "Bidu", "species": "dog", "birth_date": "2020-01-15"},
        format="json",
    )
    api.post("/api/pets/", {"client": pet_owner.id, "name": "Mimi", "species": "cat"}, format="json")

    assert created.status_code == 201
    assert created.json()["client_name"] == pet_owner.name
    cats = api.get("/api/pets/", {"species": "cat"}).json()["results"]
    assert [pet["name"] for pet in cats] == ["Mimi"]


def test_pet_stats(client_for, owner, make_pet_owner, make_pet):
    pet_owner = make_pet_owner(owner.company)
    make_pet(pet_owner, name="Rex")
    make_pet(pet_owner, name="Thor")
    make_pet(pet_owner, name="Mimi", species="cat", is_active=False)

    data = client_for(owner).get("/api/pets/stats/").json()

    assert data["total"] == 3
    assert data["active"] == 2
    assert data["by_species"] == {"cat": 1, "dog": 2}


def test_photo_gallery_needs_premium(client_for, owner, make_pet_owner, make_pet):
    pet = make_pet(make_pet_owner(owner.company))

    response = client_for(owner).post(
        f"/api/pets/{pet.id}/photos/", {"photo_url": "https://cdn.example.com/rex.jpg"}, format="json"
    )

    assert response.status_code == 403
    assert response.json()["code"] == "feature_not_available"


def test_single_profile_photo_per_pet(client_for, premium_owner, make_pet_owner, make_pet):
    pet = make_pet(make_pet_owner(premium_owner.company))
    api = client_for(premium_owner)

    first = api.post(
        f"/api/pets/{pet.id}/photos/",
        {"photo_url": "https://cdn.example.com/1.jpg", "is_profile_photo": True},
        format="json",
    )
    second = api.post(
        f"/api/pets/{pet.id}/photos/",
        {"photo_url": "https://cdn.example.com/2.jpg", "is_profile_photo": True},
        format="json",
    )

    assert first.status_code == 201
    assert second.status_code == 201
    profile = PetPhoto.objects.filter(pet=pet, is_profile_photo=True)
    assert [p.photo_url for p in profile] == ["https://cdn.example.com/2.jpg"]
    assert api.get(f"/api/pets/{pet.id}/").json()["profile_photo_url"] == "https://cdn.example.com/2.jpg"


def test_delete_photo(client_for, premium_owner, make_pet_owner, make_pet):
    pet = make_pet(make_pet_owner(premium_owner.company))
    photo = PetPhoto.objects.create(company=pet.company, pet=pet, photo_url="https://cdn.example.com/1.jpg")

    response = client_for(premium_owner).delete(f"/api/pets/{pet.id}/photos/{photo.id}/")

    assert response.status_code == 204
    assert not PetPhoto.objects.filter(pk=photo.pk).exists()
