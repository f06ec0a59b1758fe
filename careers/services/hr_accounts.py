"""
HR 账号开通

审批 HR 账号申请与管理员直接创建 HR 共用：创建 HR 用户，
部门存在时为其创建一个未开放的占位岗位，使该 HR 与部门建立关联。
"""
from datetime import timedelta
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from careers.crud import department_crud, job_crud, user_crud
from careers.models import EmploymentType, Job, User, UserRole, utc_now

PLACEHOLDER_DEADLINE_DAYS = 30


async def create_department_placeholder_job(
    db: AsyncSession,
    hr_user: User,
    department_name: str
) -> Optional[Job]:
    """部门存在时创建占位岗位，不存在时返回 None"""
    department = await department_crud.get_by_name(db, department_name)
    if department is None:
        logger.warning(f"Department {department_name!r} not found, HR {hr_user.email} left unlinked")
        return None

    return await job_crud.create_with_description(
        db,
        obj_in={
            "title": f"HR Management - {department.name}",
            "summary": f"HR management role for {department.name} department",
            "department_id": department.id,
            "employment_types": [EmploymentType.FULL_TIME.value],
            "required_skills": ["HR Management", "Recruitment"],
            "application_deadline": utc_now() + timedelta(days=PLACEHOLDER_DEADLINE_DAYS),
            "is_active": False,
        },
        created_by_id=hr_user.id,
    )


async def create_hr_account(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    department: str,
    phone_number: Optional[str] = None
) -> User:
    """创建 HR 用户并关联部门"""
    user = await user_crud.create_user(
        db,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        role=UserRole.HR,
        phone_number=phone_number,
    )
    await create_department_placeholder_job(db, user, department)
    logger.info(f"HR account created: {user.email} ({department})")
    return user
