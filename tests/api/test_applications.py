"""
求职申请 API 测试
"""
import pytest
from httpx import AsyncClient

from careers.core.config import settings
from careers.core.exceptions import AppException
from careers.models import Application, EmailLog, UserRole
from careers.services import EmailService
from tests.conftest import Actor, DataFactory, Scenario, count_rows


@pytest.mark.asyncio
async def test_submit_application_with_files(
    client: AsyncClient, factory: DataFactory, hr: Actor, applicant: Actor, upload_dir
):
    job = await factory.create_job(hr.headers, title="QA Engineer")
    files = {
        "resume": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf"),
        "additionalFile_0": ("portfolio.png", b"\x89PNG", "image/png"),
        "additionalFile_1": ("letter.docx", b"docx-bytes", "application/octet-stream"),
    }
    application = await factory.apply(
        applicant.headers, job["id"], files=files,
        expected_salary="5000", employment_type="CONTRACT",
    )

    assert application["status"] == "PENDING"
    assert application["job_title"] == "QA Engineer"
    assert application["applicant_id"] == applicant.id
    assert application["employment_type"] == "CONTRACT"
    assert application["expected_salary"] == "5000"
    assert application["history"] == []

    resume_id = application["resume_url"]
    assert resume_id.startswith(f"{applicant.id}_") and resume_id.endswith("_resume.pdf")
    assert len(application["additional_files"]) == 2
    assert application["additional_files"][0].endswith("_additional_0.png")
    assert (upload_dir / resume_id).read_bytes() == b"%PDF-1.4 resume"

    # 投递确认邮件
    assert await count_rows(EmailLog, application_id=application["id"], email_type="SUBMISSION") == 1


@pytest.mark.asyncio
async def test_oversized_attachment_saves_nothing(
    client: AsyncClient, factory: DataFactory, hr: Actor, applicant: Actor, upload_dir, monkeypatch
):
    """任一附件超限时返回 413，简历也不落盘"""
    monkeypatch.setattr(settings, "max_upload_size_mb", 1)
    job = await factory.create_job(hr.headers)
    files = {
        "resume": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf"),
        "additionalFile_0": ("big.zip", b"x" * (1024 * 1024 + 1), "application/zip"),
    }
    response = await client.post(
        "/api/v1/applications", data={"job_id": job["id"]}, files=files, headers=applicant.headers
    )
    assert response.status_code == 413

    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []
    assert await count_rows(Application, applicant_id=applicant.id) == 0


@pytest.mark.asyncio
async def test_failed_submission_removes_saved_files(
    client: AsyncClient, factory: DataFactory, hr: Actor, applicant: Actor, upload_dir, monkeypatch
):
    """投递在写盘之后失败时清理已保存的文件"""
    async def broken_send(self, db, application):
        raise AppException(message="Mail gateway unavailable", code=502)

    monkeypatch.setattr(EmailService, "send_application_submission_email", broken_send)

    job = await factory.create_job(hr.headers)
    files = {
        "resume": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf"),
        "additionalFile_0": ("portfolio.png", b"\x89PNG", "image/png"),
    }
    response = await client.post(
        "/api/v1/applications", data={"job_id": job["id"]}, files=files, headers=applicant.headers
    )
    assert response.status_code == 502

    assert list(upload_dir.iterdir()) == []
    assert await count_rows(Application, applicant_id=applicant.id) == 0


@pytest.mark.asyncio
async def test_submit_defaults(client: AsyncClient, factory: DataFactory, hr: Actor, applicant: Actor):
    job = await factory.create_job(hr.headers)
    application = await factory.apply(applicant.headers, job["id"])
    assert application["expected_salary"] == "No base"
    assert application["employment_type"] == "FULL_TIME"
    assert application["resume_url"] is None


@pytest.mark.asyncio
async def test_submit_rules(client: AsyncClient, factory: DataFactory, hr: Actor, applicant: Actor):
    job = await factory.create_job(hr.headers)
    closed = await factory.create_job(hr.headers, is_active=False)

    response = await client.post("/api/v1/applications", data={}, headers=applicant.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields: job_id"

    response = await client.post("/api/v1/applications", data={"job_id": closed["id"]}, headers=applicant.headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Job not found or inactive"

    response = await client.post("/api/v1/applications", data={"job_id": job["id"]}, headers=hr.headers)
    assert response.status_code == 403

    await factory.apply(applicant.headers, job["id"])
    response = await client.post("/api/v1/applications", data={"job_id": job["id"]}, headers=applicant.headers)
    assert response.status_code == 409

    response = await client.post(
        "/api/v1/applications",
        data={"job_id": (await factory.create_job(hr.headers))["id"], "employment_type": "GIG"},
        headers=applicant.headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reapply_after_rejection(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    response = await factory.change_status(
        scenario.hr.headers, scenario.application["id"], "REJECTED", "REJECT_APPLICATION"
    )
    assert response.status_code == 200

    again = await factory.apply(scenario.applicant.headers, scenario.job["id"])
    assert again["id"] != scenario.application["id"]


@pytest.mark.asyncio
async def test_application_visibility(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    application_id = scenario.application["id"]
    other_hr = await factory.create_actor(UserRole.HR)
    other_applicant = await factory.create_actor(UserRole.APPLICANT)

    for actor in (scenario.admin, scenario.hr, scenario.applicant):
        response = await client.get(f"/api/v1/applications/{application_id}", headers=actor.headers)
        assert response.status_code == 200

    for actor in (other_hr, other_applicant):
        response = await client.get(f"/api/v1/applications/{application_id}", headers=actor.headers)
        assert response.status_code == 403

    async def listed(actor):
        response = await client.get("/api/v1/applications", headers=actor.headers)
        return response.json()["data"]["total"]

    assert await listed(scenario.admin) == 1
    assert await listed(scenario.hr) == 1
    assert await listed(scenario.applicant) == 1
    assert await listed(other_hr) == 0
    assert await listed(other_applicant) == 0

    response = await client.get("/api/v1/applications/missing", headers=scenario.admin.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_application_content(client: AsyncClient, scenario: Scenario):
    application_id = scenario.application["id"]

    response = await client.put(
        f"/api/v1/applications/{application_id}",
        data={"cover_letter": "Updated letter", "skills": ""},
        files={"additionalFile_0": ("extra.txt", b"extra", "text/plain")},
        headers=scenario.applicant.headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["cover_letter"] == "Updated letter"
    assert data["skills"] == scenario.application["skills"]
    assert len(data["additional_files"]) == 1

    response = await client.put(
        f"/api/v1/applications/{application_id}",
        data={"cover_letter": "HR edit"},
        headers=scenario.hr.headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_withdraw_application(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    application_id = scenario.application["id"]

    response = await client.delete(f"/api/v1/applications/{application_id}", headers=scenario.hr.headers)
    assert response.status_code == 403

    response = await client.delete(f"/api/v1/applications/{application_id}", headers=scenario.applicant.headers)
    assert response.status_code == 200

    response = await client.get(f"/api/v1/applications/{application_id}", headers=scenario.admin.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_processed_application_cannot_be_withdrawn(
    client: AsyncClient, factory: DataFactory, scenario: Scenario
):
    application_id = scenario.application["id"]
    await factory.change_status(scenario.hr.headers, application_id, "UNDER_REVIEW", "START_REVIEW")

    response = await client.delete(f"/api/v1/applications/{application_id}", headers=scenario.applicant.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete application that has been processed"


@pytest.mark.asyncio
async def test_applicant_details_for_staff(client: AsyncClient, scenario: Scenario):
    application_id = scenario.application["id"]

    response = await client.get(f"/api/v1/applications/{application_id}/applicant", headers=scenario.hr.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["applicant"]["email"] == scenario.applicant.email
    assert data["application"]["id"] == application_id
    assert data["interviews"] == []

    response = await client.get(
        f"/api/v1/applications/{application_id}/applicant", headers=scenario.applicant.headers
    )
    assert response.status_code == 403
