"""
输入校验

与 pydantic 的 422 不同，这里的校验失败统一返回 400
"""
import re
from typing import Optional

from .exceptions import BadRequestException

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

APPLICANT_PASSWORD_MIN_LENGTH = 8
RESET_PASSWORD_MIN_LENGTH = 6


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_email(email: Optional[str]) -> str:
    """校验邮箱格式，返回小写邮箱"""
    value = (email or "").strip()
    if not is_valid_email(value):
        raise BadRequestException("Invalid email format")
    return value.lower()


def validate_password(password: Optional[str], min_length: int = APPLICANT_PASSWORD_MIN_LENGTH) -> str:
    pwd = str(password or "")
    if not pwd.strip():
        raise BadRequestException("Missing password")
    if len(pwd) < min_length:
        raise BadRequestException(f"Password must be at least {min_length} characters long")
    return pwd


def require_fields(**fields) -> None:
    """任何字段为空时返回 400，并列出缺失字段"""
    missing = [name for name, value in fields.items() if value is None or str(value).strip() == ""]
    if missing:
        raise BadRequestException(f"Missing required fields: {', '.join(missing)}")


def validate_linkedin_url(url: Optional[str]) -> Optional[str]:
    """LinkedIn 主页必须是 linkedin.com 链接，空值表示不修改"""
    if not url:
        return url
    if "linkedin.com" not in url.lower():
        raise BadRequestException("LinkedIn profile must be a linkedin.com URL")
    return url
