"""
FastAPI 入口，生命周期管理与错误处理
"""
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.api import users
from taskboard.core import events
from taskboard.core.config import Settings, settings
from taskboard.core.db import DatabaseManager
from taskboard.core.errors import TaskboardError
from taskboard.core.logging import get_logger

logger = get_logger("Taskboard")


def status_response(status_code: int, headers: Optional[dict] = None) -> PlainTextResponse:
    """只返回状态码和对应的状态短语，丢弃错误信息"""
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = str(status_code)
    return PlainTextResponse(phrase, status_code=status_code, headers=headers)


async def taskboard_error_handler(request: Request, exc: TaskboardError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status}: {exc}")
    return status_response(exc.status)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return status_response(exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"{request.method} {request.url.path} -> 400: {exc.errors()}")
    return status_response(400)


def create_app(
    db: Optional[DatabaseManager] = None,
    app_settings: Optional[Settings] = None
) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        db: 预先创建好的 DatabaseManager（测试时注入）；为空时在启动阶段按配置创建
        app_settings: 配置，默认使用进程级 settings
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        await events.startup_handler(app, app_settings)
        yield
        await events.shutdown_handler(app)

    app = FastAPI(
        title=app_settings.app_name,
        description="Task management REST service",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.db = db
    app.state.owns_db = False

    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # 注册路由
    app.include_router(users.router, prefix="/users", tags=["users"])

    @app.get("/health")
    async def health_check():
        """健康检查接口"""
        return {"status": "healthy", "service": "taskboard"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from taskboard.core.logging import setup_logging

    setup_logging(events.log_level(settings))
    uvicorn.run(app, host=settings.host, port=settings.port)
