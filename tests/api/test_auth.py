"""
认证与个人资料 API 测试
"""
import pytest
from httpx import AsyncClient

from careers.models import UserRole
from tests.conftest import Actor, DataFactory


@pytest.mark.asyncio
async def test_register_login_me_logout(client: AsyncClient):
    """注册 -> 登录 -> 获取当前用户 -> 退出后令牌失效"""
    response = await client.post("/api/v1/auth/register", json={
        "email": "New.User@Example.com",
        "password": "password123",
        "first_name": "New",
        "last_name": "User",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["data"]["email"] == "new.user@example.com"
    assert data["data"]["role"] == "APPLICANT"
    assert "password_hash" not in data["data"]

    response = await client.post("/api/v1/auth/login", json={
        "email": "new.user@example.com", "password": "password123"
    })
    assert response.status_code == 200
    token = response.json()["data"]["token"]
    assert token.startswith("ST-")
    headers = {"Authorization": f"Bearer {token}"}

    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["first_name"] == "New"

    response = await client.post("/api/v1/auth/logout", headers=headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_validation(client: AsyncClient, applicant: Actor):
    base = {"email": "x@example.com", "password": "password123", "first_name": "A", "last_name": "B"}

    response = await client.post("/api/v1/auth/register", json={**base, "email": "bad-email"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid email format"

    response = await client.post("/api/v1/auth/register", json={**base, "password": "short"})
    assert response.status_code == 400
    assert "at least 8 characters" in response.json()["message"]

    response = await client.post("/api/v1/auth/register", json={**base, "email": applicant.email})
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_login_failures(client: AsyncClient, applicant: Actor):
    response = await client.post("/api/v1/auth/login", json={
        "email": applicant.email, "password": "wrong-password"
    })
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"

    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com", "password": "password123"
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_session_cookie_is_accepted(client: AsyncClient, applicant: Actor):
    response = await client.post("/api/v1/auth/login", json={
        "email": applicant.email, "password": applicant.password
    })
    token = response.json()["data"]["token"]

    response = await client.get("/api/v1/auth/me", cookies={"session_token": token})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == applicant.id


@pytest.mark.asyncio
async def test_invalid_token_is_unauthorized(client: AsyncClient):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer ST-nope"})
    assert response.status_code == 401
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_check_email(client: AsyncClient, applicant: Actor):
    response = await client.get("/api/v1/auth/check-email", params={"email": applicant.email})
    assert response.json()["data"] == {"exists": True}

    response = await client.get("/api/v1/auth/check-email", params={"email": "free@example.com"})
    assert response.json()["data"] == {"exists": False}

    response = await client.get("/api/v1/auth/check-email")
    assert response.status_code == 400
    assert response.json()["message"] == "Email parameter is required"


@pytest.mark.asyncio
async def test_inactive_user_cannot_login(client: AsyncClient, factory: DataFactory):
    hr = await factory.create_actor(UserRole.HR)
    admin = await factory.create_actor(UserRole.ADMIN)

    response = await client.put(
        f"/api/v1/admin/hr-users/{hr.id}", json={"is_active": False}, headers=admin.headers
    )
    assert response.status_code == 200

    # 停用后原会话失效，也无法重新登录
    response = await client.get("/api/v1/auth/me", headers=hr.headers)
    assert response.status_code == 401
    response = await client.post("/api/v1/auth/login", json={"email": hr.email, "password": hr.password})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_profile_get_and_update(client: AsyncClient, applicant: Actor):
    response = await client.get("/api/v1/users/me/profile", headers=applicant.headers)
    assert response.status_code == 200
    assert response.json()["data"]["email"] == applicant.email

    response = await client.patch("/api/v1/users/me/profile", json={
        "phone_number": "5551234",
        "linkedin_profile": "https://www.linkedin.com/in/test",
    }, headers=applicant.headers)
    assert response.status_code == 200
    assert response.json()["data"]["phone_number"] == "5551234"

    response = await client.patch("/api/v1/users/me/profile", json={
        "linkedin_profile": "https://example.com/me",
    }, headers=applicant.headers)
    assert response.status_code == 400
