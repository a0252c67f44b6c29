from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from pettrack.models.location_history import LocationHistoryEntry
from pettrack.models.pet import Pet
from pettrack.models.user import User
from pettrack.services.auth_service import auth_service


def create_test_user(db: Session, username: str = "testuser") -> User:
    """Helper function to create a test user"""
    user = User(username=username)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_auth_header(user_id: int) -> dict:
    """Helper function to generate authorization header with token"""
    token = auth_service.generate_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


def create_test_pet(db: Session, owner_id: int, name: str, **profile) -> Pet:
    """Helper function to create a test pet"""
    pet = Pet(owner_id=owner_id, name=name, **profile)
    db.add(pet)
    db.commit()
    db.refresh(pet)
    return pet


def test_get_pets_empty(db: Session, client: TestClient):
    """Test getting pets when user has none"""
    user = create_test_user(db)

    response = client.get("/api/v1/pets", headers=get_auth_header(user.id))

    assert response.status_code == 200
    assert response.json() == []


def test_get_pets(db: Session, client: TestClient):
    """Test getting pets sorted by name, without other owners' pets"""
    user = create_test_user(db)
    other = create_test_user(db, "otheruser")
    create_test_pet(db, user.id, "Whiskers", species="Cat")
    create_test_pet(db, user.id, "Bantay", species="Dog")
    create_test_pet(db, other.id, "Aso")

    response = client.get("/api/v1/pets", headers=get_auth_header(user.id))

    assert response.status_code == 200
    data = response.json()
    assert [pet["name"] for pet in data] == ["Bantay", "Whiskers"]
    assert data[0]["species"] == "Dog"
    assert data[0]["is_missing"] is False
    assert "created_at" in data[0]


def test_get_pets_unauthorized(client: TestClient):
    """Test accessing pets without authentication"""
    response = client.get("/api/v1/pets")

    assert response.status_code == 401


def test_get_pets_invalid_token(client: TestClient):
    """Test accessing pets with invalid token"""
    headers = {"Authorization": "Bearer invalidtoken123"}

    response = client.get("/api/v1/pets", headers=headers)

    assert response.status_code == 403


def test_get_pets_unknown_user(db: Session, client: TestClient):
    """Test a valid token for a user that does not exist"""
    response = client.get("/api/v1/pets", headers=get_auth_header(424242))

    assert response.status_code == 404


def test_create_pet(db: Session, client: TestClient):
    """Test creating a new pet"""
    user = create_test_user(db)
    pet_data = {
        "name": "Bantay",
        "species": "Dog",
        "breed": "Aspin",
        "gender": "Male",
        "age": 3,
        "profile_image_ref": "petImages/1/bantay.jpg",
        "owner_name": "Juan",
        "owner_phone": "+63 912 345 6789",
    }

    response = client.post("/api/v1/pets", json=pet_data, headers=get_auth_header(user.id))

    assert response.status_code == 201
    data = response.json()
    assert data["id"] is not None
    assert data["name"] == "Bantay"
    assert data["breed"] == "Aspin"
    assert data["is_missing"] is False
    assert data["last_seen_latitude"] is None

    db_pet = db.query(Pet).filter(Pet.id == data["id"]).first()
    assert db_pet is not None
    assert db_pet.owner_id == user.id


def test_create_pet_invalid(db: Session, client: TestClient):
    """Test validation of pet fields"""
    user = create_test_user(db)
    headers = get_auth_header(user.id)

    assert client.post("/api/v1/pets", json={}, headers=headers).status_code == 422
    assert client.post("/api/v1/pets", json={"name": ""}, headers=headers).status_code == 422
    assert client.post("/api/v1/pets", json={"name": "   "}, headers=headers).status_code == 400
    assert (
        client.post("/api/v1/pets", json={"name": "Rex", "age": -1}, headers=headers).status_code
        == 422
    )


def test_get_pet(db: Session, client: TestClient):
    user = create_test_user(db)
    pet = create_test_pet(db, user.id, "Bantay")

    response = client.get(f"/api/v1/pets/{pet.id}", headers=get_auth_header(user.id))

    assert response.status_code == 200
    assert response.json()["name"] == "Bantay"


def test_get_pet_of_other_user(db: Session, client: TestClient):
    """Test that another user's pet is reported as not found"""
    user = create_test_user(db)
    other = create_test_user(db, "otheruser")
    pet = create_test_pet(db, other.id, "Aso")

    response = client.get(f"/api/v1/pets/{pet.id}", headers=get_auth_header(user.id))

    assert response.status_code == 404


def test_update_pet(db: Session, client: TestClient):
    """Test editing a pet's profile"""
    user = create_test_user(db)
    pet = create_test_pet(db, user.id, "Bantay", breed="Aspin")

    response = client.patch(
        f"/api/v1/pets/{pet.id}",
        json={"breed": "Labrador", "tracker_device_id": "collar-7"},
        headers=get_auth_header(user.id),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["breed"] == "Labrador"
    assert data["tracker_device_id"] == "collar-7"
    assert data["name"] == "Bantay"


def test_update_pet_cannot_touch_missing_state(db: Session, client: TestClient):
    """Test that missing fields are ignored by the profile editor"""
    user = create_test_user(db)
    pet = create_test_pet(db, user.id, "Bantay")

    response = client.patch(
        f"/api/v1/pets/{pet.id}",
        json={"is_missing": True, "missing_notes": "sneaky"},
        headers=get_auth_header(user.id),
    )

    assert response.status_code == 200
    assert response.json()["is_missing"] is False
    assert response.json()["missing_notes"] is None


def test_delete_pet(db: Session, client: TestClient):
    """Test deleting a pet removes it and its history"""
    user = create_test_user(db)
    pet = create_test_pet(db, user.id, "Bantay")
    pet_id = pet.id
    db.add(LocationHistoryEntry(pet_id=pet_id, latitude=1.0, longitude=1.0, captured_at_ms=1))
    db.commit()

    response = client.delete(f"/api/v1/pets/{pet_id}", headers=get_auth_header(user.id))

    assert response.status_code == 204
    assert db.query(Pet).filter(Pet.id == pet_id).first() is None
    assert db.query(LocationHistoryEntry).count() == 0


def test_delete_pet_not_found(db: Session, client: TestClient):
    user = create_test_user(db)

    response = client.delete("/api/v1/pets/99999", headers=get_auth_header(user.id))

    assert response.status_code == 404


def test_update_pet_rejects_unsafe_device_id(db: Session, client: TestClient):
    """Test that a device id must be a plain token"""
    user = create_test_user(db)
    pet = create_test_pet(db, user.id, "Bantay")

    for device_id in ("../admin", "collar?debug=1#", "collar/7", ""):
        response = client.patch(
            f"/api/v1/pets/{pet.id}",
            json={"tracker_device_id": device_id},
            headers=get_auth_header(user.id),
        )
        assert response.status_code == 422

    db.refresh(pet)
    assert pet.tracker_device_id is None


def test_create_pet_rejects_unsafe_device_id(db: Session, client: TestClient):
    user = create_test_user(db)

    response = client.post(
        "/api/v1/pets",
        json={"name": "Bantay", "tracker_device_id": "x/../../admin"},
        headers=get_auth_header(user.id),
    )

    assert response.status_code == 422
