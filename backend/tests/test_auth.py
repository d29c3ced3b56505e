"""Tests for session authentication endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.password import verify_password
from app.models.user import User

TEST_USERNAME = "gardener"
TEST_PASSWORD = "secret123"


@pytest.mark.auth
@pytest.mark.asyncio
class TestAuthEndpoints:
    """Test login, registration and logout."""

    async def test_register_user(self, client: AsyncClient, db_session: AsyncSession):
        """Registration stores a bcrypt hash, never the password."""
        response = await client.post(
            "/api/auth/register",
            json={"username": "  newuser ", "password": "pw123456", "confirmPassword": "pw123456"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newuser"
        assert "password_hash" not in data

        user = await db_session.scalar(select(User).where(User.username == "newuser"))
        assert user.password_hash != "pw123456"
        assert verify_password("pw123456", user.password_hash)

    async def test_register_duplicate_username(self, auth_client: AsyncClient):
        """Test registration with a taken username."""
        response = await auth_client.post(
            "/api/auth/register",
            json={"username": TEST_USERNAME, "password": "another1"},
        )

        assert response.status_code == 400
        assert "already exists" in response.json()["error"]["message"]

    async def test_register_password_mismatch(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"username": "someone", "password": "abc123", "confirmPassword": "abc124"},
        )

        assert response.status_code == 400

    async def test_login_success(self, auth_client: AsyncClient):
        """Test successful login sets a session the admin routes accept."""
        response = await auth_client.get("/api/user")

        assert response.status_code == 200
        assert response.json()["user"]["username"] == TEST_USERNAME

    async def test_login_wrong_password(self, auth_client: AsyncClient):
        """Test login with an incorrect password."""
        await auth_client.post("/api/auth/logout")
        response = await auth_client.post(
            "/api/auth/login",
            json={"username": TEST_USERNAME, "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "HTTP_401"

    async def test_login_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"username": "x"})

        assert response.status_code == 400

    async def test_logout_clears_session(self, auth_client: AsyncClient):
        """After logout the session no longer authenticates."""
        response = await auth_client.post("/api/auth/logout")
        assert response.status_code == 200

        response = await auth_client.get("/api/user")
        assert response.status_code == 401


@pytest.mark.auth
@pytest.mark.asyncio
class TestProtectedEndpoints:
    """Admin routes reject anonymous requests."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/user"),
            ("get", "/api/categories"),
            ("get", "/api/harvest-records"),
            ("get", "/api/batches"),
            ("get", "/api/growth-logs"),
            ("get", "/api/personnel"),
            ("get", "/api/step-templates"),
            ("post", "/api/upload"),
        ],
    )
    async def test_requires_login(self, client: AsyncClient, method: str, path: str):
        response = await getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"

    async def test_public_routes_open(self, client: AsyncClient):
        """Public routes answer without a session."""
        response = await client.get("/api/public/adoption-plans")

        assert response.status_code == 200


@pytest.mark.auth
@pytest.mark.asyncio
class TestChangePassword:
    """Test password change for the logged-in user."""

    async def test_change_password(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/auth/change-password",
            json={"old_password": TEST_PASSWORD, "new_password": "newsecret"},
        )
        assert response.status_code == 200

        await auth_client.post("/api/auth/logout")
        response = await auth_client.post(
            "/api/auth/login",
            json={"username": TEST_USERNAME, "password": "newsecret"},
        )
        assert response.status_code == 200

    async def test_wrong_old_password(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/auth/change-password",
            json={"old_password": "nope-nope", "new_password": "newsecret"},
        )

        assert response.status_code == 400

    async def test_short_new_password(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/auth/change-password",
            json={"old_password": TEST_PASSWORD, "new_password": "abc"},
        )

        assert response.status_code == 400
        assert "at least 6" in response.json()["error"]["message"]

    async def test_requires_login(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/change-password",
            json={"old_password": "a", "new_password": "bbbbbbb"},
        )

        assert response.status_code == 401
