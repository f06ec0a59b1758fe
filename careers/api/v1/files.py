"""
上传文件访问 API 路由

HR / 管理员可读取任意文件，求职者只能读取自己申请中引用的文件
"""
from pathlib import Path
from fastapi import APIRouter, Depends, Response
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.database import get_db
from careers.core.exceptions import ForbiddenException, NotFoundException
from careers.core.security import get_current_user
from careers.crud import application_crud
from careers.models import User, UserRole
from careers.services import content_type_for, resolve_upload_path

router = APIRouter()

CACHE_CONTROL = "private, max-age=3600"


async def get_readable_file(db: AsyncSession, file_id: str, user: User) -> Path:
    """校验文件ID与访问权限，返回磁盘路径"""
    path = resolve_upload_path(file_id)

    if user.role not in (UserRole.HR.value, UserRole.ADMIN.value):
        if not await application_crud.applicant_owns_file(db, user.id, file_id):
            raise ForbiddenException("Access denied")

    if not path.is_file():
        raise NotFoundException("File not found")
    return path


def _file_headers(file_id: str) -> dict:
    return {
        "Content-Disposition": f'inline; filename="{file_id}"',
        "Cache-Control": CACHE_CONTROL,
    }


@router.get("/{file_id}", summary="读取上传文件")
async def get_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    path = await get_readable_file(db, file_id, current_user)
    return FileResponse(
        path,
        media_type=content_type_for(file_id),
        headers=_file_headers(file_id),
    )


@router.head("/{file_id}", summary="检查上传文件")
async def head_file(
    file_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    path = await get_readable_file(db, file_id, current_user)
    headers = _file_headers(file_id)
    headers["Content-Length"] = str(path.stat().st_size)
    return Response(status_code=200, media_type=content_type_for(file_id), headers=headers)
