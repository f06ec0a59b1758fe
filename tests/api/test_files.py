"""
上传文件访问 API 测试
"""
import pytest
from httpx import AsyncClient

from careers.models import UserRole
from tests.conftest import Actor, DataFactory


@pytest.fixture
def resume_files():
    return {"resume": ("cv.pdf", b"%PDF-1.4 test resume", "application/pdf")}


@pytest.mark.asyncio
async def test_read_own_resume(
    client: AsyncClient, factory: DataFactory, hr: Actor, applicant: Actor, resume_files
):
    job = await factory.create_job(hr.headers)
    application = await factory.apply(applicant.headers, job["id"], files=resume_files)
    file_id = application["resume_url"]

    for actor in (applicant, hr):
        response = await client.get(f"/api/v1/files/{file_id}", headers=actor.headers)
        assert response.status_code == 200
        assert response.content == b"%PDF-1.4 test resume"
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == f'inline; filename="{file_id}"'
        assert response.headers["cache-control"] == "private, max-age=3600"

    response = await client.head(f"/api/v1/files/{file_id}", headers=applicant.headers)
    assert response.status_code == 200
    assert response.headers["content-length"] == str(len(b"%PDF-1.4 test resume"))


@pytest.mark.asyncio
async def test_file_access_rules(
    client: AsyncClient, factory: DataFactory, hr: Actor, applicant: Actor, resume_files
):
    job = await factory.create_job(hr.headers)
    application = await factory.apply(applicant.headers, job["id"], files=resume_files)
    file_id = application["resume_url"]

    stranger = await factory.create_actor(UserRole.APPLICANT)
    response = await client.get(f"/api/v1/files/{file_id}", headers=stranger.headers)
    assert response.status_code == 403

    response = await client.get(f"/api/v1/files/{file_id}")
    assert response.status_code == 401

    response = await client.get("/api/v1/files/..secret.pdf", headers=hr.headers)
    assert response.status_code == 400

    response = await client.get("/api/v1/files/missing_file.pdf", headers=hr.headers)
    assert response.status_code == 404
