"""
上传文件存储

文件保存在 settings.upload_dir 下，文件名即文件ID：
{owner_id}_{毫秒时间戳}_{kind}.{ext}
"""
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from fastapi import UploadFile
from loguru import logger
from werkzeug.utils import secure_filename

from careers.core.config import settings
from careers.core.exceptions import AppException, BadRequestException

# 扩展名 -> Content-Type
CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "txt": "text/plain",
    "rtf": "application/rtf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "zip": "application/zip",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def file_extension(filename: Optional[str]) -> str:
    """取安全的小写扩展名，没有扩展名时返回 bin"""
    name = secure_filename(filename or "")
    if "." not in name:
        return "bin"
    return name.rsplit(".", 1)[1].lower() or "bin"


def content_type_for(file_id: str) -> str:
    """按扩展名映射 Content-Type"""
    if "." not in file_id:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPES.get(file_id.rsplit(".", 1)[1].lower(), DEFAULT_CONTENT_TYPE)


def is_safe_file_id(file_id: str) -> bool:
    """文件ID不能包含路径分隔符或 .."""
    return bool(file_id) and "/" not in file_id and "\\" not in file_id and ".." not in file_id


def upload_dir() -> Path:
    path = Path(settings.upload_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_upload_path(file_id: str) -> Path:
    """文件ID -> 磁盘路径"""
    if not is_safe_file_id(file_id):
        raise BadRequestException("Invalid file id")
    return upload_dir() / file_id


async def read_upload(upload: UploadFile) -> bytes:
    """读取上传内容，超出大小限制时返回 413"""
    content = await upload.read()
    if len(content) > settings.max_upload_size:
        raise AppException(
            message=f"File {upload.filename} exceeds the {settings.max_upload_size_mb}MB limit",
            code=413
        )
    return content


async def save_uploads(uploads: List[Tuple[str, UploadFile]], *, owner_id: str) -> Dict[str, str]:
    """
    保存一组上传文件

    先读取并校验全部文件，全部通过后才写盘，任一文件超限时不落任何文件

    Args:
        uploads: (kind, 文件) 列表，kind 为 resume / additional_0 ...
        owner_id: 文件归属用户ID

    Returns:
        kind -> 文件ID（即保存的文件名），顺序与输入一致
    """
    contents = [(kind, upload.filename, await read_upload(upload)) for kind, upload in uploads]

    millis = int(time.time() * 1000)
    saved = {}
    for kind, filename, content in contents:
        file_id = f"{owner_id}_{millis}_{kind}.{file_extension(filename)}"
        (upload_dir() / file_id).write_bytes(content)
        saved[kind] = file_id
        logger.info(f"Saved upload {file_id} ({len(content)} bytes)")
    return saved


def remove_uploads(file_ids: Iterable[str]) -> None:
    """删除已写盘的文件（请求失败时清理）"""
    for file_id in file_ids:
        (upload_dir() / file_id).unlink(missing_ok=True)
        logger.info(f"Removed upload {file_id}")


def has_content(upload: Optional[UploadFile]) -> bool:
    """表单中的文件字段是否真的带了文件"""
    return upload is not None and bool(upload.filename) and (upload.size is None or upload.size > 0)
