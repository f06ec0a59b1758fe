"""
管理员 API 测试

HR 用户、管理员账号、HR 绩效、全局总览、系统设置
"""
import pytest
from httpx import AsyncClient

from careers.models import HRRequest, Job
from tests.conftest import Actor, DataFactory, Scenario, count_rows


@pytest.mark.asyncio
async def test_admin_routes_require_admin(client: AsyncClient, hr: Actor, applicant: Actor):
    for actor in (hr, applicant):
        response = await client.get("/api/v1/admin/hr-users", headers=actor.headers)
        assert response.status_code == 403
    response = await client.get("/api/v1/admin/hr-users")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_hr_links_department(client: AsyncClient, factory: DataFactory, admin: Actor):
    department = await factory.create_department(admin.headers, name="Finance")
    payload = {
        "first_name": "Fay",
        "last_name": "Ledger",
        "email": "fay@example.com",
        "password": "ledger-pass",
        "department": "Finance",
    }

    response = await client.post("/api/v1/admin/create-hr", json=payload, headers=admin.headers)
    assert response.status_code == 201
    hr_id = response.json()["data"]["id"]
    assert response.json()["data"]["role"] == "HR"

    assert await count_rows(Job, created_by_id=hr_id, department_id=department["id"], is_active=False) == 1

    response = await client.post("/api/v1/admin/create-hr", json=payload, headers=admin.headers)
    assert response.status_code == 400

    response = await client.post(
        "/api/v1/admin/create-hr", json={**payload, "email": "new@example.com", "department": ""},
        headers=admin.headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields: department"


@pytest.mark.asyncio
async def test_manage_hr_user(client: AsyncClient, factory: DataFactory, admin: Actor, hr: Actor):
    url = f"/api/v1/admin/hr-users/{hr.id}"

    response = await client.get("/api/v1/admin/hr-users", headers=admin.headers)
    assert [u["id"] for u in response.json()["data"]] == [hr.id]

    response = await client.put(url, json={"first_name": "Renamed"}, headers=admin.headers)
    assert response.status_code == 200
    assert response.json()["data"]["first_name"] == "Renamed"

    response = await client.put(url, json={"email": admin.email}, headers=admin.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Email already exists"

    # 重置密码后原会话失效
    response = await client.put(f"{url}/password", json={"password": "abc"}, headers=admin.headers)
    assert response.status_code == 400
    response = await client.put(f"{url}/password", json={"password": "newpass"}, headers=admin.headers)
    assert response.status_code == 200
    response = await client.get("/api/v1/auth/me", headers=hr.headers)
    assert response.status_code == 401
    await factory.login(hr.email, "newpass")

    # 管理员不是 HR 用户
    response = await client.get(f"/api/v1/admin/hr-users/{admin.id}", headers=admin.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_deactivate_hr_user(client: AsyncClient, admin: Actor, hr: Actor):
    response = await client.put(f"/api/v1/admin/hr-users/{hr.id}", json={"is_active": False}, headers=admin.headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False

    response = await client.get("/api/v1/auth/me", headers=hr.headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_delete_hr_user_removes_their_requests(client: AsyncClient, admin: Actor, hr: Actor):
    """删除经审批开通的 HR 时一并删除其账号申请记录"""
    response = await client.post("/api/v1/hr-requests", json={
        "first_name": "Re", "last_name": "Quest", "email": "pending@example.com", "department": "Ops",
    }, headers=hr.headers)
    request_id = response.json()["data"]["id"]
    response = await client.put(
        f"/api/v1/hr-requests/{request_id}",
        json={"action": "APPROVE", "password": "approved-1"},
        headers=admin.headers,
    )
    assert response.status_code == 200
    assert await count_rows(HRRequest, email="pending@example.com") == 1

    users = (await client.get("/api/v1/admin/hr-users", headers=admin.headers)).json()["data"]
    approved = next(u for u in users if u["email"] == "pending@example.com")

    response = await client.delete(f"/api/v1/admin/hr-users/{approved['id']}", headers=admin.headers)
    assert response.status_code == 200
    assert await count_rows(HRRequest, email="pending@example.com") == 0

    response = await client.get(f"/api/v1/admin/hr-users/{approved['id']}", headers=admin.headers)
    assert response.status_code == 404
    response = await client.get(f"/api/v1/admin/hr-users/{hr.id}", headers=admin.headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_manage_admins(client: AsyncClient, admin: Actor):
    response = await client.post("/api/v1/admin/admins", json={
        "first_name": "Second", "last_name": "Admin", "email": "second@example.com", "password": "second-pass",
    }, headers=admin.headers)
    assert response.status_code == 201
    second_id = response.json()["data"]["id"]

    response = await client.get("/api/v1/admin/admins", headers=admin.headers)
    assert len(response.json()["data"]) == 2

    response = await client.put(f"/api/v1/admin/admins/{admin.id}", json={
        "first_name": "Self", "last_name": "Admin", "email": admin.email, "is_active": False,
    }, headers=admin.headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is True

    response = await client.put(f"/api/v1/admin/admins/{second_id}", json={
        "first_name": "Second", "last_name": "Admin", "email": "second@example.com", "is_active": False,
    }, headers=admin.headers)
    assert response.json()["data"]["is_active"] is False

    response = await client.put(f"/api/v1/admin/admins/{second_id}", json={
        "first_name": "", "last_name": "Admin", "email": "second@example.com",
    }, headers=admin.headers)
    assert response.status_code == 400

    response = await client.delete(f"/api/v1/admin/admins/{admin.id}", headers=admin.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete your own account"

    response = await client.delete(f"/api/v1/admin/admins/{second_id}", headers=admin.headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_hr_performance(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    application_id = scenario.application["id"]
    await factory.change_status(scenario.hr.headers, application_id, "UNDER_REVIEW", "START_REVIEW")
    interview = await factory.schedule_interview(scenario.hr.headers, application_id)
    await factory.complete_interview(scenario.hr.headers, interview["id"])
    response = await client.post(f"/api/v1/interviews/{interview['id']}/evaluation", json={
        "technical_skills": 4, "communication": 4, "cultural_fit": 4, "overall_rating": 3,
        "comments": "OK", "recommendation": "NEUTRAL",
    }, headers=scenario.hr.headers)
    assert response.status_code == 201

    response = await client.get("/api/v1/admin/hr-performance", headers=scenario.admin.headers)
    assert response.status_code == 200
    metrics = response.json()["data"]
    assert len(metrics) == 1
    metric = metrics[0]
    assert metric["id"] == scenario.hr.id
    assert metric["jobs_posted"] == 1
    assert metric["applicants_reviewed"] == 1
    assert metric["average_review_time"] == 1
    assert metric["total_interviews"] == 1
    assert metric["average_rating"] == 3.0


@pytest.mark.asyncio
async def test_oversight(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    headers = scenario.admin.headers

    response = await client.get("/api/v1/admin/oversight/applications", headers=headers)
    assert response.json()["data"]["total"] == 1

    response = await client.get("/api/v1/admin/oversight/applicants", headers=headers)
    applicants = response.json()["data"]["items"]
    assert applicants[0]["email"] == scenario.applicant.email
    assert len(applicants[0]["applications"]) == 1

    response = await client.get("/api/v1/admin/oversight/hr-users", headers=headers)
    data = response.json()["data"]
    assert data["total"] == 1
    assert data["hr_users"][0]["jobs_posted"] == 1

    response = await client.get("/api/v1/admin/oversight/jobs", headers=headers)
    assert response.json()["data"]["items"][0]["application_count"] == 1

    response = await client.get(f"/api/v1/admin/oversight/jobs/{scenario.job['id']}", headers=headers)
    data = response.json()["data"]
    assert data["job"]["id"] == scenario.job["id"]
    assert [a["id"] for a in data["applications"]] == [scenario.application["id"]]

    response = await client.get("/api/v1/admin/oversight/interviews", headers=headers)
    assert response.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_system_settings(client: AsyncClient, admin: Actor):
    response = await client.put(
        "/api/v1/admin/settings/company_name",
        json={"value": "Acme Corp", "description": "显示在邮件中的公司名"},
        headers=admin.headers,
    )
    assert response.status_code == 200
    response = await client.put("/api/v1/admin/settings/company_name", json={"value": "Acme Inc"}, headers=admin.headers)
    assert response.json()["data"]["value"] == "Acme Inc"

    response = await client.get("/api/v1/admin/settings", headers=admin.headers)
    settings = response.json()["data"]
    assert [(s["key"], s["value"]) for s in settings] == [("company_name", "Acme Inc")]
