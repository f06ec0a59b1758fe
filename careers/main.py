"""
FastAPI 主应用入口

Careers 招聘门户后端
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from loguru import logger

from careers import __version__
from careers.core.config import settings
from careers.core.database import init_db, close_db
from careers.core.response import success_response, DictResponse
from careers.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from careers.api import api_router


def custom_generate_unique_id(route: APIRoute) -> str:
    """使用路由函数名作为 operationId"""
    return route.name


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理

    启动时初始化数据库，关闭时释放连接
    """
    logger.info(f"启动应用: {settings.app_name}")
    logger.info(f"环境: {settings.app_env}")
    logger.info(f"调试模式: {settings.debug}")

    await init_db()
    logger.info("数据库初始化完成")

    yield

    await close_db()
    logger.info("应用已关闭")


def create_app() -> FastAPI:
    """
    创建 FastAPI 应用实例
    """
    app = FastAPI(
        title=settings.app_name,
        description="Careers 招聘门户 API",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        generate_unique_id_function=custom_generate_unique_id,
    )

    # 注册异常处理器
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # 注册路由
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["系统"], response_model=DictResponse)
    async def health_check():
        """健康检查接口"""
        return success_response(data={"status": "healthy"})

    @app.get("/", tags=["系统"], response_model=DictResponse)
    async def root():
        return success_response(data={
            "name": settings.app_name,
            "version": __version__,
            "docs": "/docs" if settings.debug else None,
        })

    # 通配来源时不允许携带凭据
    allow_all = settings.cors_origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "careers.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.debug,
    )
