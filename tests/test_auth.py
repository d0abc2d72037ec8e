"""
Tests for authentication endpoints.
"""
from fastapi.testclient import TestClient
from sqlalchemy.orm import Query, Session

from menuboard.models.user import User

OWNER_EMAIL = "restaurant_owner@example.com"
PASSWORD = "testpassword123"


class TestRegister:
    """Tests for POST /auth/register."""

    def test_register_success(self, client: TestClient, db: Session):
        """Registration creates the owner and their restaurant."""
        response = client.post(
            "/auth/register",
            json={"email": "NewUser@Example.com", "password": "securepassword123", "restaurantName": "  Demo  "},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "newuser@example.com"
        restaurant = data["user"]["restaurant"]
        assert restaurant["name"] == "Demo"
        assert restaurant["owner"] == data["user"]["id"]
        assert restaurant["menus"] == [] and restaurant["items"] == [] and restaurant["displays"] == []

        db.expire_all()
        user = db.query(User).filter(User.email == "newuser@example.com").first()
        assert user is not None
        assert user.restaurant.name == "Demo"

    def test_register_duplicate_email(self, client: TestClient, test_user_with_restaurant):
        response = client.post(
            "/auth/register",
            json={"email": OWNER_EMAIL, "password": "somepassword123", "restaurantName": "Again"},
        )

        assert response.status_code == 409
        assert "already exists" in response.json()["error"]

    def test_register_duplicate_email_race(self, client: TestClient, db: Session, test_user_with_restaurant, monkeypatch):
        """A duplicate that slips past the lookup is still a 409 once the unique index rejects it."""
        monkeypatch.setattr(Query, "first", lambda self: None)

        response = client.post(
            "/auth/register",
            json={"email": OWNER_EMAIL, "password": "somepassword123", "restaurantName": "Again"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "User already exists"
        monkeypatch.undo()
        assert db.query(User).filter(User.email == OWNER_EMAIL).count() == 1

    def test_register_invalid_email(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"email": "not-an-email", "password": "securepassword123", "restaurantName": "X"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_register_short_password(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"email": "short@example.com", "password": "12345", "restaurantName": "X"},
        )

        assert response.status_code == 400

    def test_register_requires_restaurant_name(self, client: TestClient):
        response = client.post(
            "/auth/register",
            json={"email": "noname@example.com", "password": "securepassword123", "restaurantName": "   "},
        )

        assert response.status_code == 400


class TestLogin:
    """Tests for POST /auth/login."""

    def test_login_success(self, client: TestClient, test_user_with_restaurant):
        _, restaurant = test_user_with_restaurant
        response = client.post("/auth/login", json={"email": OWNER_EMAIL, "password": PASSWORD})

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"]["restaurant"]["id"] == str(restaurant.id)

    def test_login_wrong_password(self, client: TestClient, test_user_with_restaurant):
        response = client.post("/auth/login", json={"email": OWNER_EMAIL, "password": "wrongpassword"})

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    def test_login_nonexistent_user(self, client: TestClient):
        response = client.post("/auth/login", json={"email": "nobody@example.com", "password": "somepassword"})

        assert response.status_code == 401


class TestMe:
    """Tests for GET /auth/me."""

    def test_me_authenticated(self, client: TestClient, auth_headers: dict):
        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == OWNER_EMAIL

    def test_me_unauthenticated(self, client: TestClient):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "Access token required"

    def test_me_invalid_token(self, client: TestClient):
        response = client.get("/auth/me", headers={"Authorization": "Bearer invalid.token.here"})

        assert response.status_code == 401
