"""
测试配置文件

提供测试用的 fixtures：内存数据库、测试客户端、按角色登录的用户、测试数据工厂等
"""
from dataclasses import dataclass, field
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from careers.core.config import settings
from careers.core.database import Base, get_db, enable_sqlite_foreign_keys
from careers.crud import user_crud
from careers.main import create_app
from careers.models import UserRole

DEFAULT_PASSWORD = "password123"


# ========== 测试数据库 ==========

# 使用内存 SQLite，StaticPool 让所有会话共享同一个连接
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine.sync_engine)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def count_rows(model, **filters) -> int:
    """直接查询数据库统计行数"""
    async with TestSessionLocal() as session:
        query = select(func.count()).select_from(model)
        for name, value in filters.items():
            query = query.where(getattr(model, name) == value)
        result = await session.execute(query)
        return result.scalar() or 0


# ========== 测试数据工厂 ==========

@dataclass
class Actor:
    """已登录的测试用户"""
    id: str
    email: str
    role: str
    password: str
    headers: dict


@dataclass
class DataFactory:
    """
    测试数据工厂类

    集中管理测试数据创建，避免各测试文件重复代码
    字段变更时只需修改此处
    """
    client: AsyncClient
    _counter: int = field(default=0, repr=False)

    def _next_id(self) -> str:
        """生成唯一后缀，避免数据冲突"""
        self._counter += 1
        return str(self._counter)

    async def login(self, email: str, password: str = DEFAULT_PASSWORD) -> dict:
        resp = await self.client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, f"登录失败: {resp.text}"
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['data']['token']}"}

    async def create_actor(self, role: UserRole, **overrides) -> Actor:
        """
        创建并登录用户

        HR / ADMIN 直接写库（没有公开注册入口），求职者走注册接口
        """
        suffix = self._next_id()
        email = overrides.pop("email", f"{role.value.lower()}{suffix}@example.com")
        password = overrides.pop("password", DEFAULT_PASSWORD)

        if role == UserRole.APPLICANT:
            resp = await self.client.post("/api/v1/auth/register", json={
                "email": email,
                "password": password,
                "first_name": overrides.pop("first_name", "Test"),
                "last_name": overrides.pop("last_name", f"Applicant{suffix}"),
                **overrides,
            })
            assert resp.status_code == 201, f"注册失败: {resp.text}"
            user_id = resp.json()["data"]["id"]
        else:
            async with TestSessionLocal() as session:
                user = await user_crud.create_user(
                    session,
                    email=email,
                    password=password,
                    first_name=overrides.pop("first_name", "Test"),
                    last_name=overrides.pop("last_name", f"{role.value.title()}{suffix}"),
                    role=role,
                    **overrides,
                )
                await session.commit()
                user_id = user.id

        headers = await self.login(email, password)
        return Actor(id=user_id, email=email, role=role.value, password=password, headers=headers)

    async def create_department(self, headers: dict, **overrides) -> dict:
        suffix = self._next_id()
        data = {"name": f"Department {suffix}", "description": "测试部门", **overrides}
        resp = await self.client.post("/api/v1/departments", json=data, headers=headers)
        assert resp.status_code == 201, f"创建部门失败: {resp.text}"
        return resp.json()["data"]

    async def create_job(self, headers: dict, department_id: Optional[str] = None, **overrides) -> dict:
        """创建岗位，未指定部门时自动创建"""
        if department_id is None:
            department_id = (await self.create_department(headers))["id"]
        suffix = self._next_id()
        data = {
            "title": f"Backend Engineer {suffix}",
            "summary": "Build APIs",
            "department_id": department_id,
            "employment_types": ["FULL_TIME"],
            "required_skills": ["Python", "SQL"],
            "salary_min": 1000,
            "salary_max": 2000,
            "description": {
                "description": "测试岗位描述",
                "responsibilities": ["Write code"],
                "requirements": ["Python"],
                "benefits": [],
                "location": "Remote",
                "remote_work": True,
            },
            **overrides,
        }
        resp = await self.client.post("/api/v1/jobs", json=data, headers=headers)
        assert resp.status_code == 201, f"创建岗位失败: {resp.text}"
        return resp.json()["data"]

    async def apply(self, headers: dict, job_id: str, files: Optional[dict] = None, **form) -> dict:
        """投递申请（multipart）"""
        data = {"job_id": job_id, "cover_letter": "I am interested", **form}
        resp = await self.client.post("/api/v1/applications", data=data, files=files, headers=headers)
        assert resp.status_code == 201, f"投递申请失败: {resp.text}"
        return resp.json()["data"]

    async def change_status(self, headers: dict, application_id: str, status: str, action: str, **extra):
        return await self.client.patch(
            f"/api/v1/applications/{application_id}/status",
            json={"status": status, "action": action, **extra},
            headers=headers,
        )

    async def schedule_interview(self, headers: dict, application_id: str, **overrides) -> dict:
        data = {
            "application_id": application_id,
            "scheduled_at": "2030-01-15T10:00:00",
            "duration_minutes": 45,
            "interview_type": "VIDEO",
            "meeting_link": "https://meet.example.com/abc",
            "interviewer": "Jane Lead",
            **overrides,
        }
        resp = await self.client.post("/api/v1/interviews", json=data, headers=headers)
        assert resp.status_code == 201, f"安排面试失败: {resp.text}"
        return resp.json()["data"]

    async def complete_interview(self, headers: dict, interview_id: str) -> dict:
        resp = await self.client.patch(
            f"/api/v1/interviews/{interview_id}/status",
            json={"status": "COMPLETED"},
            headers=headers,
        )
        assert resp.status_code == 200, f"完成面试失败: {resp.text}"
        return resp.json()["data"]


@dataclass
class Scenario:
    """一个 HR 岗位上的一份求职申请"""
    admin: Actor
    hr: Actor
    applicant: Actor
    job: dict
    application: dict


# ========== fixtures ==========

@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """上传文件写入临时目录"""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", path)
    return path


@pytest_asyncio.fixture(scope="function")
async def setup_database() -> AsyncGenerator[None, None]:
    """
    每个测试前创建表，测试后删除表，确保测试隔离
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(setup_database) -> AsyncGenerator[AsyncClient, None]:
    """
    提供测试用的 HTTP 客户端

    覆盖 get_db 依赖：每个请求一个独立会话，成功提交、异常回滚
    """
    app = create_app()

    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def factory(client: AsyncClient) -> DataFactory:
    """提供测试数据工厂实例"""
    return DataFactory(client=client)


@pytest_asyncio.fixture
async def admin(factory: DataFactory) -> Actor:
    return await factory.create_actor(UserRole.ADMIN)


@pytest_asyncio.fixture
async def hr(factory: DataFactory) -> Actor:
    return await factory.create_actor(UserRole.HR)


@pytest_asyncio.fixture
async def applicant(factory: DataFactory) -> Actor:
    return await factory.create_actor(UserRole.APPLICANT)


@pytest_asyncio.fixture
async def scenario(factory: DataFactory, admin: Actor, hr: Actor, applicant: Actor) -> Scenario:
    """HR 发布岗位，求职者投递一份申请"""
    job = await factory.create_job(hr.headers)
    application = await factory.apply(applicant.headers, job["id"])
    return Scenario(admin=admin, hr=hr, applicant=applicant, job=job, application=application)
