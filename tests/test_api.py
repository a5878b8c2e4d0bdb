"""Integration tests for the HTTP surface.

Run with: pytest tests/test_api.py -v
"""

import pytest
from django.core import signing
from rest_framework.test import APIClient

from kermesses import models
from kermesses.domain import Role


def _error(response) -> dict:
    return response.json()["error"]


@pytest.mark.django_db
class TestAuthentication:
    """Tests for bearer-token handling."""

    def test_health_is_public(self, api_client: APIClient):
        response = api_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_missing_token(self, api_client: APIClient):
        response = api_client.get("/api/profile")
        assert response.status_code == 401
        assert _error(response)["code"] == "UNAUTHENTICATED"

    def test_tampered_token(self, api_client: APIClient):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = api_client.get("/api/profile")
        assert response.status_code == 401
        assert _error(response)["code"] == "UNAUTHENTICATED"

    def test_expired_token(self, api_client: APIClient, make_user, settings):
        user = make_user(Role.PARENT)
        token = signing.TimestampSigner(salt="kermesses.auth.token").sign_object(
            {"id": str(user.pk), "role": user.role}
        )
        settings.AUTH_TOKEN_MAX_AGE = -1
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get("/api/profile")

        assert response.status_code == 401

    def test_register_login_profile(self, api_client: APIClient):
        response = api_client.post(
            "/api/register",
            {"name": "Ada", "email": "ada@example.com", "password": "pw", "role": "PARENT"},
            format="json",
        )
        assert response.status_code == 201
        assert "password" not in response.json()

        response = api_client.post(
            "/api/login", {"email": "ada@example.com", "password": "pw"}, format="json"
        )
        assert response.status_code == 200
        token = response.json()["token"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = api_client.get("/api/profile")
        assert response.status_code == 200
        assert response.json()["email"] == "ada@example.com"
        assert response.json()["role"] == "PARENT"
        assert "token" not in response.json()

    def test_wrong_password_is_401(self, api_client: APIClient, make_user):
        make_user(Role.PARENT, email="p@example.com", password="right")
        response = api_client.post(
            "/api/login", {"email": "p@example.com", "password": "nope"}, format="json"
        )
        assert response.status_code == 401
        assert _error(response)["code"] == "INVALID_CREDENTIALS"


@pytest.mark.django_db
class TestErrorMapping:
    """Domain errors map to status codes with a stable envelope."""

    def test_validation_error(self, authenticate, fair):
        client = authenticate(fair.child)
        response = client.post("/api/interaction", {"quantity": 1}, format="json")
        assert response.status_code == 400
        assert _error(response)["code"] == "INVALID_INPUT"
        assert "stand_id" in _error(response)["fields"]

    def test_invalid_path_id(self, authenticate, fair):
        response = authenticate(fair.organizer).get("/api/kermesse/not-a-uuid")
        assert response.status_code == 400
        assert _error(response)["code"] == "INVALID_INPUT"

    def test_not_found(self, authenticate, fair):
        response = authenticate(fair.organizer).get(f"/api/kermesse/{fair.stand.pk}")
        assert response.status_code == 404
        assert _error(response)["code"] == "KERMESSE_NOT_FOUND"

    def test_forbidden_role(self, authenticate, fair):
        response = authenticate(fair.child).post(
            "/api/kermesse", {"name": "Mine", "description": ""}, format="json"
        )
        assert response.status_code == 403
        assert _error(response)["code"] == "FORBIDDEN"

    def test_business_rule(self, authenticate, fair):
        models.User.objects.filter(pk=fair.child.pk).update(credit=5)
        response = authenticate(fair.child).post(
            "/api/interaction",
            {"stand_id": str(fair.stand.pk), "quantity": 2},
            format="json",
        )
        assert response.status_code == 400
        assert _error(response) == {
            "code": "NOT_ENOUGH_CREDIT",
            "message": "Not enough credit",
        }


@pytest.mark.django_db
class TestFairFlow:
    """End-to-end flow across the main endpoints."""

    def test_purchase(self, authenticate, fair):
        response = authenticate(fair.child).post(
            "/api/interaction",
            {"stand_id": str(fair.stand.pk), "quantity": 2},
            format="json",
        )
        assert response.status_code == 201
        body = response.json()
        assert body["credit"] == 20
        assert body["type"] == "CONSUMPTION"
        assert body["status"] == "ENDED"

        response = authenticate(fair.holder).get("/api/stand/current")
        assert response.json()["stock"] == 1

    def test_renaming_a_stand_keeps_stock(self, authenticate, fair):
        response = authenticate(fair.holder).patch(
            "/api/stand", {"name": "Renamed", "price": 10}, format="json"
        )
        assert response.status_code == 202
        assert response.json()["name"] == "Renamed"
        assert response.json()["stock"] == 3

    def test_tombola_round(self, authenticate, fair):
        client = authenticate(fair.organizer)
        response = client.post(
            "/api/tombola",
            {
                "kermesse_id": str(fair.kermesse.pk),
                "name": "Raffle",
                "price": 5,
                "gift": "Bike",
            },
            format="json",
        )
        assert response.status_code == 201
        tombola_id = response.json()["id"]

        response = client.patch(f"/api/kermesse/{fair.kermesse.pk}/finish")
        assert response.status_code == 400
        assert _error(response)["code"] == "KERMESSE_HAS_OPEN_TOMBOLA"

        response = authenticate(fair.child).post(
            "/api/ticket", {"tombola_id": tombola_id}, format="json"
        )
        assert response.status_code == 201

        client = authenticate(fair.organizer)
        assert client.patch(f"/api/tombola/{tombola_id}/finish").status_code == 202
        response = client.patch(f"/api/tombola/{tombola_id}/finish")
        assert _error(response)["code"] == "TOMBOLA_NOT_STARTED"

        response = client.get("/api/tickets", {"tombola_id": tombola_id})
        assert [t["is_winner"] for t in response.json()] == [True]

        response = client.patch(f"/api/kermesse/{fair.kermesse.pk}/finish")
        assert response.status_code == 202
        assert response.json()["status"] == "ENDED"

    def test_invite_and_add_member(self, authenticate, fair, mailoutbox):
        response = authenticate(fair.parent).post(
            "/api/user/invite", {"name": "Lea", "email": "lea@example.com"}, format="json"
        )
        assert response.status_code == 201
        child_id = response.json()["id"]
        assert len(mailoutbox) == 1

        client = authenticate(fair.organizer)
        response = client.get(f"/api/kermesse/{fair.kermesse.pk}/users")
        assert [u["id"] for u in response.json()] == [child_id]

        response = client.patch(
            f"/api/kermesse/{fair.kermesse.pk}/adduser",
            {"user_id": child_id},
            format="json",
        )
        assert response.status_code == 202
        assert models.Membership.objects.filter(user_id=child_id).count() == 1

    def test_kermesse_detail_has_stats(self, authenticate, fair):
        response = authenticate(fair.organizer).get(f"/api/kermesse/{fair.kermesse.pk}")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Spring fair"
        assert body["stand_count"] == 1
        assert body["user_count"] == 2
