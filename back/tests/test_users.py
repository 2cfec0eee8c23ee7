# Standard library imports
import uuid

# Third-party imports
import pytest

# Local application imports
from samadhan.models.auth.permissions import UserRole

from conftest import auth_headers

API = "/api/v1"

COMPLAINT = {
    "title": "Overflowing drain",
    "description": "The drain outside the school overflows every evening.",
    "category": "sewage",
    "location": {"latitude": 28.6139, "longitude": 77.2090, "address": "Connaught Place, New Delhi"},
}


@pytest.fixture
def admin_user(create_user):
    return create_user(UserRole.ADMIN)


@pytest.fixture
def newcomer():
    """A token subject the service has never seen."""
    subject = uuid.uuid4()
    return subject, auth_headers(subject, email="Asha@Example.com", email_verified=True, name="Asha")


def test_provision_profile_from_token(client, newcomer):
    subject, headers = newcomer
    assert client.get(f"{API}/users/me", headers=headers).status_code == 401

    response = client.post(f"{API}/users/me", json={}, headers=headers)
    assert response.status_code == 201
    profile = response.json()
    assert profile["id"] == str(subject)
    assert profile["email"] == "asha@example.com"
    assert profile["name"] == "Asha"
    assert profile["role"] == "citizen"
    assert profile["is_email_verified"] is True

    assert client.get(f"{API}/users/me", headers=headers).json()["id"] == str(subject)
    assert client.post(f"{API}/complaints/", json=COMPLAINT, headers=headers).status_code == 201


def test_provision_twice_is_a_conflict(client, newcomer):
    _, headers = newcomer
    client.post(f"{API}/users/me", json={}, headers=headers)
    response = client.post(f"{API}/users/me", json={}, headers=headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "already_exists"


def test_provision_with_taken_email_is_a_conflict(client, create_user):
    create_user(UserRole.CITIZEN, email="taken@example.com")
    headers = auth_headers(uuid.uuid4(), email="taken@example.com")
    assert client.post(f"{API}/users/me", json={}, headers=headers).status_code == 409


def test_provision_needs_an_email(client):
    response = client.post(f"{API}/users/me", json={"name": "No Mail"}, headers=auth_headers(uuid.uuid4()))
    assert response.status_code == 400


def test_provision_needs_a_valid_token(client):
    assert client.post(f"{API}/users/me", json={"email": "x@example.com"}).status_code == 401


def test_unverified_profile_is_read_only_until_verified(client, admin_user):
    subject = uuid.uuid4()
    headers = auth_headers(subject, email="new@example.com")
    assert client.post(f"{API}/users/me", json={}, headers=headers).json()["is_email_verified"] is False
    assert client.post(f"{API}/complaints/", json=COMPLAINT, headers=headers).status_code == 403

    response = client.patch(
        f"{API}/users/{subject}", json={"is_email_verified": True}, headers=auth_headers(admin_user)
    )
    assert response.status_code == 200
    assert client.post(f"{API}/complaints/", json=COMPLAINT, headers=headers).status_code == 201


def test_update_own_name(client, create_user):
    user = create_user(UserRole.VOLUNTEER)
    response = client.patch(f"{API}/users/me", json={"name": "  Ravi K  "}, headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["name"] == "Ravi K"


def test_listing_users_needs_manage_users(client, create_user, admin_user):
    officer = create_user(UserRole.OFFICER)
    assert client.get(f"{API}/users/", headers=auth_headers(officer)).status_code == 403

    create_user(UserRole.CITIZEN)
    create_user(UserRole.CITIZEN)
    everyone = client.get(f"{API}/users/", headers=auth_headers(admin_user)).json()
    assert everyone["pagination"]["total"] == 4

    citizens = client.get(f"{API}/users/", params={"role": "citizen", "limit": 1}, headers=auth_headers(admin_user))
    data = citizens.json()
    assert data["pagination"]["total"] == 2
    assert data["pagination"]["has_next"] is True
    assert [u["role"] for u in data["items"]] == ["citizen"]


def test_get_user(client, create_user, admin_user):
    citizen = create_user(UserRole.CITIZEN)
    headers = auth_headers(admin_user)
    assert client.get(f"{API}/users/{citizen.id}", headers=headers).json()["email"] == citizen.email
    assert client.get(f"{API}/users/{uuid.uuid4()}", headers=headers).status_code == 404
    assert client.get(f"{API}/users/{admin_user.id}", headers=auth_headers(citizen)).status_code == 403


def test_promote_to_officer(client, create_user, admin_user):
    citizen = create_user(UserRole.CITIZEN)
    response = client.patch(
        f"{API}/users/{citizen.id}",
        json={"role": "officer", "department": "sanitation"},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "officer"
    assert data["department"] == "sanitation"
    assert "resolve-complaint" in data["permissions"]


def test_deactivated_user_cannot_write(client, create_user, admin_user):
    citizen = create_user(UserRole.CITIZEN)
    client.patch(f"{API}/users/{citizen.id}", json={"is_active": False}, headers=auth_headers(admin_user))
    response = client.post(f"{API}/complaints/", json=COMPLAINT, headers=auth_headers(citizen))
    assert response.status_code == 403


@pytest.mark.parametrize("change", [{"is_active": False}, {"role": "officer"}])
def test_admin_cannot_lock_themselves_out(client, admin_user, change):
    response = client.patch(f"{API}/users/{admin_user.id}", json=change, headers=auth_headers(admin_user))
    assert response.status_code == 400
    assert client.get(f"{API}/users/me", headers=auth_headers(admin_user)).json()["role"] == "admin"


def test_empty_or_null_updates_are_rejected(client, create_user, admin_user):
    citizen = create_user(UserRole.CITIZEN)
    headers = auth_headers(admin_user)
    assert client.patch(f"{API}/users/{citizen.id}", json={}, headers=headers).status_code == 400
    assert client.patch(f"{API}/users/{citizen.id}", json={"role": None}, headers=headers).status_code == 400
