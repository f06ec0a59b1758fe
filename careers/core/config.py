"""
应用配置模块

使用 pydantic-settings 管理环境变量和应用配置
"""
from functools import lru_cache
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import json

# 项目根目录
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # 应用基础配置
    app_name: str = "Careers-API"
    app_env: str = "development"
    debug: bool = True

    # 数据库配置
    database_url: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'careers.db'}"

    # CORS 配置
    cors_origins: List[str] = ["*"]

    # 会话配置
    session_ttl_minutes: int = 60 * 24 * 7
    session_cookie_name: str = "session_token"

    # 上传文件配置
    upload_dir: Path = BASE_DIR / "uploads"
    max_upload_size_mb: int = 10
    max_additional_files: int = 10

    # 邮件配置（仅记录，不实际投递）
    company_name: str = "amealio"
    mail_from: str = "noreply@amealio.com"
    mail_from_name: str = "amealio Recruitment Team"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_path(cls, v):
        if isinstance(v, str) and "./data/" in v:
            return v.replace("./data/", str(BASE_DIR / "data") + "/")
        return v

    @property
    def is_production(self) -> bool:
        """是否为生产环境"""
        return self.app_env == "production"

    @property
    def max_upload_size(self) -> int:
        """单个上传文件大小上限（字节）"""
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()


# 全局配置实例
settings = get_settings()
