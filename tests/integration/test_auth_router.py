import pytest
from httpx import AsyncClient

AUTH_URL = "/api/v1/auth"


@pytest.mark.asyncio
async def test_signup_login_and_me(client: AsyncClient):
    signup = await client.post(
        f"{AUTH_URL}/signup/email",
        json={"email": "Neo@Example.com", "username": "neo", "password": "thereisnospoon"},
    )
    assert signup.status_code == 201
    assert signup.json()["token_type"] == "bearer"
    assert signup.json()["user"]["email"] == "neo@example.com"

    login = await client.post(
        f"{AUTH_URL}/login/email",
        json={"email": "neo@example.com", "password": "thereisnospoon"},
    )
    assert login.status_code == 200
    token = login.json()["access_token"]
    assert login.json()["user"]["last_login"] is not None

    me = await client.get(f"{AUTH_URL}/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "neo"
    assert me.json()["total_reviews"] == 0


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient, make_user):
    make_user("alice")

    response = await client.post(
        f"{AUTH_URL}/signup/email",
        json={"email": "alice@example.com", "username": "alice2", "password": "password123"},
    )

    assert response.status_code == 409
    assert response.json()["error"] == "Duplicate User"


@pytest.mark.asyncio
async def test_signup_rejects_invalid_username(client: AsyncClient):
    response = await client.post(
        f"{AUTH_URL}/signup/email",
        json={"email": "x@example.com", "username": "no spaces!", "password": "password123"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, make_user):
    make_user("alice")

    response = await client.post(
        f"{AUTH_URL}/login/email",
        json={"email": "alice@example.com", "password": "not-the-password"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_with_invalid_token(client: AsyncClient):
    response = await client.get(f"{AUTH_URL}/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthenticated"
