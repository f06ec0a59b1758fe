"""
部门管理 API 路由（HR / ADMIN）
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.database import get_db
from careers.core.exceptions import BadRequestException, ConflictException, NotFoundException
from careers.core.response import success_response, ResponseModel, MessageResponse
from careers.core.security import require_roles
from careers.crud import department_crud
from careers.models import UserRole
from careers.schemas.department import DepartmentCreate, DepartmentResponse, DepartmentUpdate

router = APIRouter(dependencies=[Depends(require_roles(UserRole.HR, UserRole.ADMIN))])


def _to_response(department, active_jobs_count: int = 0) -> dict:
    response = DepartmentResponse.model_validate(department)
    response.active_jobs_count = active_jobs_count
    return response.model_dump()


@router.get("", summary="获取部门列表", response_model=ResponseModel[list[DepartmentResponse]])
async def get_departments(db: AsyncSession = Depends(get_db)):
    """获取全部部门及各部门开放中的岗位数"""
    rows = await department_crud.get_multi_with_job_counts(db)
    return success_response(data=[_to_response(d, count) for d, count in rows])


@router.post(
    "",
    summary="创建部门",
    status_code=201,
    response_model=ResponseModel[DepartmentResponse],
)
async def create_department(
    data: DepartmentCreate,
    db: AsyncSession = Depends(get_db),
):
    if not data.name:
        raise BadRequestException("Department name is required")
    if await department_crud.get_by_name(db, data.name):
        raise ConflictException("Department with this name already exists")

    department = await department_crud.create(db, obj_in=data)
    return success_response(
        data=_to_response(department),
        message="Department created successfully",
        code=201
    )


@router.get("/{department_id}", summary="获取部门详情", response_model=ResponseModel[DepartmentResponse])
async def get_department(
    department_id: str,
    db: AsyncSession = Depends(get_db),
):
    department = await department_crud.get(db, department_id)
    if not department:
        raise NotFoundException("Department not found")
    count = await department_crud.count_active_jobs(db, department_id)
    return success_response(data=_to_response(department, count))


@router.put("/{department_id}", summary="更新部门", response_model=ResponseModel[DepartmentResponse])
async def update_department(
    department_id: str,
    data: DepartmentUpdate,
    db: AsyncSession = Depends(get_db),
):
    department = await department_crud.get(db, department_id)
    if not department:
        raise NotFoundException("Department not found")

    if data.name is not None:
        if not data.name:
            raise BadRequestException("Department name is required")
        if data.name.lower() != department.name.lower():
            if await department_crud.get_by_name(db, data.name):
                raise ConflictException("Department with this name already exists")

    department = await department_crud.update(db, db_obj=department, obj_in=data)
    count = await department_crud.count_active_jobs(db, department_id)
    return success_response(
        data=_to_response(department, count),
        message="Department updated successfully"
    )


@router.delete("/{department_id}", summary="删除部门", response_model=MessageResponse)
async def delete_department(
    department_id: str,
    db: AsyncSession = Depends(get_db),
):
    """
    删除部门

    部门下仍有开放中的岗位时返回 409
    """
    department = await department_crud.get(db, department_id)
    if not department:
        raise NotFoundException("Department not found")

    active_jobs_count = await department_crud.count_active_jobs(db, department_id)
    if active_jobs_count > 0:
        raise ConflictException(
            "Cannot delete department with active job postings. "
            "Please close or reassign all jobs in this department first.",
            data={"active_jobs_count": active_jobs_count}
        )

    await department_crud.delete(db, id=department_id)
    return success_response(message="Department deleted successfully")
