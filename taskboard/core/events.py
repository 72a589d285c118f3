"""
启动/关闭时的钩子
"""
import logging

from fastapi import FastAPI

from taskboard.core.config import Settings
from taskboard.core.db import DatabaseManager
from taskboard.core.logging import get_logger

logger = get_logger("Taskboard")


async def startup_handler(app: FastAPI, app_settings: Settings):
    """应用启动时的初始化"""
    logger.info("Starting up...")

    # 没有注入 DatabaseManager 时按配置创建，并由应用负责关闭
    if getattr(app.state, "db", None) is None:
        app.state.db = DatabaseManager(app_settings.database_url, echo=app_settings.debug)
        app.state.owns_db = True
        logger.info(f"Database: {app.state.db.database_url}")

    # 只建缺失的表，不做破坏性重置
    await app.state.db.sync()

    logger.info("Startup complete")


async def shutdown_handler(app: FastAPI):
    """应用关闭时的清理"""
    logger.info("Shutting down...")

    if getattr(app.state, "owns_db", False):
        await app.state.db.close()
        app.state.db = None
        app.state.owns_db = False

    logger.info("Shutdown complete")


def log_level(app_settings: Settings) -> int:
    return logging.DEBUG if app_settings.debug else logging.INFO
