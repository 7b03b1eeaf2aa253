"""Integration tests for registration and profile endpoints."""

import base64


def _register(client, **overrides):
    payload = {
        "email": "ravi@chatstall.com",
        "name": "Ravi Patel",
        "phone": "+91 76543 21098",
        "location": "Connaught Place, Delhi",
        "role": "vendor",
        "stallName": "Ravi's Chat Corner",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


class TestRegisterEndpoint:
    def test_register_returns_201_with_profile(self, client):
        response = _register(client)
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registration successful"
        assert body["data"]["email"] == "ravi@chatstall.com"
        assert body["data"]["stallName"] == "Ravi's Chat Corner"
        assert body["data"]["totalRatings"] == 0

    def test_duplicate_email_returns_409(self, client):
        _register(client)
        response = _register(client, email="RAVI@chatstall.com")
        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "User with this email already exists"}

    def test_unknown_role_returns_400(self, client):
        response = _register(client, role="admin")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_missing_field_returns_400_envelope(self, client):
        response = client.post("/api/auth/register", json={"email": "x@example.com"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"]["name"] == ["name: Field required"]
        assert body["error"].endswith("Field required")


class TestProfileEndpoints:
    def test_profile_with_bearer_token(self, client, as_user):
        user_id = _register(client).json()["data"]["id"]
        response = client.get("/api/auth/profile", headers=as_user(user_id))
        assert response.status_code == 200
        assert response.json()["data"]["id"] == user_id

    def test_profile_with_user_id_header(self, client):
        user_id = _register(client).json()["data"]["id"]
        response = client.get("/api/auth/profile", headers={"X-User-Id": user_id})
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "vendor"

    def test_missing_credentials_returns_401(self, client):
        response = client.get("/api/auth/profile")
        assert response.status_code == 401
        assert response.json()["error"] == "Access token required"

    def test_token_for_unknown_user_returns_401(self, client, as_user):
        response = client.get("/api/auth/profile", headers=as_user("ghost"))
        assert response.status_code == 401
        assert response.json()["error"] == "User not found"

    def test_garbled_token_returns_401(self, client):
        response = client.get("/api/auth/profile", headers={"Authorization": "Bearer %%%"})
        assert response.status_code == 401

    def test_update_profile(self, client):
        user_id = _register(client).json()["data"]["id"]
        response = client.put(
            "/api/auth/profile",
            json={"phone": "+91 90000 00000", "stallName": "Ravi's Pani Puri"},
            headers={"X-User-Id": user_id},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone"] == "+91 90000 00000"
        assert data["stallName"] == "Ravi's Pani Puri"
        assert data["email"] == "ravi@chatstall.com"

    def test_token_issued_time_is_ignored(self, client):
        user_id = _register(client).json()["data"]["id"]
        token = base64.b64encode(f"{user_id}:0".encode()).decode()
        response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
