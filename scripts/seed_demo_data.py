"""
演示数据初始化脚本

创建演示用的管理员、HR、求职者、部门、岗位与申请。
已存在的账号（按邮箱）会被跳过，可重复执行。

用法：
    python scripts/seed_demo_data.py
"""
import asyncio
import sys
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from careers.core.database import AsyncSessionLocal, init_db, close_db
from careers.crud import application_crud, department_crud, job_crud, user_crud
from careers.models import ApplicationStatus, EmploymentType, UserRole, utc_now

DEMO_PASSWORD = "password123"

USERS = [
    ("admin@example.com", "Ada", "Admin", UserRole.ADMIN),
    ("hr@example.com", "Henry", "Recruiter", UserRole.HR),
    ("jane@example.com", "Jane", "Doe", UserRole.APPLICANT),
    ("john@example.com", "John", "Smith", UserRole.APPLICANT),
]

DEPARTMENTS = [
    ("Engineering", "Product and platform engineering"),
    ("Marketing", "Brand, growth and communications"),
    ("Operations", "Restaurant partner operations"),
]

JOBS = [
    {
        "title": "Backend Engineer",
        "summary": "Build and operate the APIs behind our ordering platform.",
        "department": "Engineering",
        "employment_types": [EmploymentType.FULL_TIME.value],
        "required_skills": ["Python", "SQL", "REST APIs"],
        "salary_min": 60000,
        "salary_max": 90000,
        "description": {
            "description": "Own services end to end, from design to production.",
            "responsibilities": ["Design APIs", "Write tests", "Review code"],
            "requirements": ["3+ years of backend experience"],
            "benefits": ["Remote friendly", "Learning budget"],
            "location": "Hyderabad",
            "remote_work": True,
        },
    },
    {
        "title": "Marketing Intern",
        "summary": "Support campaigns across social and email channels.",
        "department": "Marketing",
        "employment_types": [EmploymentType.INTERNSHIP.value],
        "required_skills": ["Copywriting", "Social Media"],
        "description": {"location": "Bangalore"},
    },
]


async def seed_users(db) -> dict:
    users = {}
    for email, first_name, last_name, role in USERS:
        user = await user_crud.get_by_email(db, email)
        if user is None:
            user = await user_crud.create_user(
                db,
                email=email,
                password=DEMO_PASSWORD,
                first_name=first_name,
                last_name=last_name,
                role=role,
            )
            print(f"  创建用户: {email} ({role.value})")
        else:
            print(f"  用户已存在，跳过: {email}")
        users[email] = user
    return users


async def seed_departments(db) -> dict:
    departments = {}
    for name, description in DEPARTMENTS:
        department = await department_crud.get_by_name(db, name)
        if department is None:
            department = await department_crud.create(db, obj_in={"name": name, "description": description})
            print(f"  创建部门: {name}")
        departments[name] = department
    return departments


async def seed_jobs(db, departments: dict, hr_user) -> list:
    existing = {job.title for job in await job_crud.get_multi(db, limit=1000)}
    jobs = []
    for item in JOBS:
        if item["title"] in existing:
            continue
        data = dict(item)
        data["department_id"] = departments[data.pop("department")].id
        data["application_deadline"] = utc_now() + timedelta(days=45)
        job = await job_crud.create_with_description(db, obj_in=data, created_by_id=hr_user.id)
        jobs.append(job)
        print(f"  创建岗位: {job.title}")
    return jobs


async def seed_applications(db, jobs: list, applicants: list) -> None:
    for job, applicant in zip(jobs, applicants):
        await application_crud.create(db, obj_in={
            "applicant_id": applicant.id,
            "job_id": job.id,
            "job_title": job.title,
            "employment_type": job.employment_types[0],
            "status": ApplicationStatus.PENDING.value,
            "additional_files": [],
            "cover_letter": f"I would love to join as {job.title}.",
            "expected_salary": "No base",
        })
        print(f"  创建申请: {applicant.email} -> {job.title}")


async def main():
    await init_db()
    async with AsyncSessionLocal() as db:
        try:
            print("用户:")
            users = await seed_users(db)
            print("部门:")
            departments = await seed_departments(db)
            print("岗位:")
            jobs = await seed_jobs(db, departments, users["hr@example.com"])
            print("申请:")
            await seed_applications(db, jobs, [users["jane@example.com"], users["john@example.com"]])
            await db.commit()
        except Exception:
            await db.rollback()
            raise
    await close_db()

    print(f"\n演示数据初始化完成，所有演示账号密码: {DEMO_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
