"""
面试 API 测试
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from careers.models import EmailLog, InterviewReview, Notification, UserRole
from tests.conftest import DataFactory, Scenario, TestSessionLocal, count_rows

EVALUATION = {
    "technical_skills": 4,
    "communication": 5,
    "cultural_fit": 4,
    "overall_rating": 4,
    "comments": "Solid candidate",
    "recommendation": "RECOMMEND",
}


async def reviewed(factory: DataFactory, scenario: Scenario) -> str:
    response = await factory.change_status(
        scenario.hr.headers, scenario.application["id"], "UNDER_REVIEW", "START_REVIEW"
    )
    assert response.status_code == 200
    return scenario.application["id"]


async def completed_interview(factory: DataFactory, scenario: Scenario) -> dict:
    application_id = await reviewed(factory, scenario)
    interview = await factory.schedule_interview(scenario.hr.headers, application_id)
    return await factory.complete_interview(scenario.hr.headers, interview["id"])


@pytest.mark.asyncio
async def test_schedule_interview(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    application_id = await reviewed(factory, scenario)

    interview = await factory.schedule_interview(scenario.hr.headers, application_id, notes="Bring laptop")
    assert interview["status"] == "SCHEDULED"
    assert interview["candidate_id"] == scenario.applicant.id
    assert interview["scheduled_by_id"] == scenario.hr.id
    assert interview["application"]["status"] == "INTERVIEW_SCHEDULED"

    response = await client.get(f"/api/v1/applications/{application_id}", headers=scenario.hr.headers)
    history = response.json()["data"]["history"]
    assert history[0]["action"] == "SCHEDULE_INTERVIEW"

    assert await count_rows(EmailLog, application_id=application_id, email_type="INTERVIEW") == 1


@pytest.mark.asyncio
async def test_schedule_interview_with_offset_is_stored_as_utc(factory: DataFactory, scenario: Scenario):
    """带时区偏移的面试时间按 UTC 存储，邮件中的时间与之一致"""
    application_id = await reviewed(factory, scenario)

    interview = await factory.schedule_interview(
        scenario.hr.headers, application_id, scheduled_at="2030-01-15T10:00:00+05:00"
    )
    assert interview["scheduled_at"].startswith("2030-01-15T05:00:00")

    async with TestSessionLocal() as session:
        result = await session.execute(
            select(EmailLog.body).where(
                EmailLog.application_id == application_id,
                EmailLog.email_type == "INTERVIEW",
            )
        )
        body = result.scalar_one()
    assert "- Time: 05:00 AM UTC" in body


@pytest.mark.asyncio
async def test_schedule_requires_reviewed_application(
    client: AsyncClient, factory: DataFactory, scenario: Scenario
):
    response = await client.post("/api/v1/interviews", json={
        "application_id": scenario.application["id"],
        "scheduled_at": "2030-01-15T10:00:00",
    }, headers=scenario.hr.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot schedule an interview for an application in PENDING status"

    response = await client.post("/api/v1/interviews", json={
        "application_id": scenario.application["id"],
        "scheduled_at": "2030-01-15T10:00:00",
    }, headers=scenario.applicant.headers)
    assert response.status_code == 403

    response = await client.post("/api/v1/interviews", json={
        "application_id": "missing",
        "scheduled_at": "2030-01-15T10:00:00",
    }, headers=scenario.hr.headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reschedule_cancels_previous(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    application_id = await reviewed(factory, scenario)
    first = await factory.schedule_interview(scenario.hr.headers, application_id)
    second = await factory.schedule_interview(
        scenario.hr.headers, application_id, scheduled_at="2030-01-20T14:00:00"
    )

    response = await client.get(f"/api/v1/interviews/{first['id']}", headers=scenario.hr.headers)
    assert response.json()["data"]["status"] == "CANCELLED"
    assert second["status"] == "SCHEDULED"

    # 改期不产生新的状态历史
    response = await client.get(f"/api/v1/applications/{application_id}/history", headers=scenario.hr.headers)
    assert len(response.json()["data"]) == 2


@pytest.mark.asyncio
async def test_complete_interview_advances_application(
    client: AsyncClient, factory: DataFactory, scenario: Scenario
):
    interview = await completed_interview(factory, scenario)
    assert interview["status"] == "COMPLETED"
    assert interview["application"]["status"] == "INTERVIEW_COMPLETED"

    response = await client.patch(
        f"/api/v1/interviews/{interview['id']}/status",
        json={"status": "CANCELLED"},
        headers=scenario.hr.headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Interview is already COMPLETED"


@pytest.mark.asyncio
async def test_interview_visibility(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    application_id = await reviewed(factory, scenario)
    interview = await factory.schedule_interview(scenario.hr.headers, application_id)
    other_applicant = await factory.create_actor(UserRole.APPLICANT)
    other_hr = await factory.create_actor(UserRole.HR)

    for actor in (scenario.admin, scenario.hr, scenario.applicant):
        response = await client.get(f"/api/v1/interviews/{interview['id']}", headers=actor.headers)
        assert response.status_code == 200
        response = await client.get("/api/v1/interviews", headers=actor.headers)
        assert response.json()["data"]["total"] == 1

    for actor in (other_applicant, other_hr):
        response = await client.get(f"/api/v1/interviews/{interview['id']}", headers=actor.headers)
        assert response.status_code == 403
        response = await client.get("/api/v1/interviews", headers=actor.headers)
        assert response.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_positive_evaluation_accepts_candidate(
    client: AsyncClient, factory: DataFactory, scenario: Scenario
):
    interview = await completed_interview(factory, scenario)

    response = await client.post(
        f"/api/v1/interviews/{interview['id']}/evaluation",
        json={**EVALUATION, "strengths": "Clear thinking", "areas_for_improvement": "System design"},
        headers=scenario.hr.headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["review"]["recommendation"] == "RECOMMEND"
    assert data["review"]["hr_reviewer_id"] == scenario.hr.id
    assert data["application"]["status"] == "ACCEPTED"
    assert data["application"]["history"][0]["action"] == "ACCEPT_CANDIDATE"

    response = await client.get(f"/api/v1/interviews/{interview['id']}", headers=scenario.hr.headers)
    notes = response.json()["data"]["notes"]
    assert "Strengths: Clear thinking" in notes
    assert "Areas for improvement: System design" in notes

    assert await count_rows(Notification, interview_id=interview["id"]) == 1

    # 同一评估人不能重复提交
    response = await client.post(
        f"/api/v1/interviews/{interview['id']}/evaluation", json=EVALUATION, headers=scenario.hr.headers
    )
    assert response.status_code == 409

    # 其他评估人可以补充评估，申请已不在 INTERVIEW_COMPLETED，不再变更
    response = await client.post(
        f"/api/v1/interviews/{interview['id']}/evaluation", json=EVALUATION, headers=scenario.admin.headers
    )
    assert response.status_code == 201
    assert response.json()["data"]["application"]["status"] == "ACCEPTED"
    assert await count_rows(InterviewReview, interview_id=interview["id"]) == 2


@pytest.mark.asyncio
async def test_neutral_evaluation_keeps_status(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    interview = await completed_interview(factory, scenario)
    response = await client.post(
        f"/api/v1/interviews/{interview['id']}/evaluation",
        json={**EVALUATION, "recommendation": "NEUTRAL"},
        headers=scenario.hr.headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["application"]["status"] == "INTERVIEW_COMPLETED"


@pytest.mark.asyncio
async def test_evaluation_rules(client: AsyncClient, factory: DataFactory, scenario: Scenario):
    application_id = await reviewed(factory, scenario)
    interview = await factory.schedule_interview(scenario.hr.headers, application_id)
    url = f"/api/v1/interviews/{interview['id']}/evaluation"

    response = await client.post(url, json=EVALUATION, headers=scenario.hr.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Interview must be completed before submitting evaluation"

    response = await client.post(url, json={**EVALUATION, "overall_rating": 6}, headers=scenario.hr.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "All ratings must be between 1 and 5"

    response = await client.post(url, json=EVALUATION, headers=scenario.applicant.headers)
    assert response.status_code == 403
