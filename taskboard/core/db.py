"""
SQLite (SQLModel) 连接管理

DatabaseManager 由调用方显式创建并传入（FastAPI 中挂在 app.state.db 上），
不再使用进程级单例。
"""
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from taskboard.core.logging import get_logger
# 导入模型以注册到 SQLModel.metadata
from taskboard.models import sql_models  # noqa: F401

logger = get_logger("Database")


def _normalize_url(database_url: str) -> str:
    """确保使用 aiosqlite 驱动"""
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite 默认不检查外键
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """数据库管理器：持有一个 engine 和一个 session 工厂"""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = _normalize_url(database_url)
        url = make_url(self.database_url)
        is_sqlite = url.get_backend_name() == "sqlite"

        engine_kwargs: dict = {"echo": echo}
        if is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                # 内存数据库：所有 session 共用同一个连接，否则每个连接都是一个空库
                engine_kwargs["poolclass"] = StaticPool

        self.engine: Optional[AsyncEngine] = create_async_engine(self.database_url, **engine_kwargs)
        if is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def sync(self, force: bool = False) -> None:
        """
        创建所有表

        Args:
            force: 为 True 时先删除所有表（破坏性重置）
        """
        if not self.engine:
            raise RuntimeError("Database not initialized")

        async with self.engine.begin() as conn:
            if force:
                await conn.run_sync(SQLModel.metadata.drop_all)
                logger.info("Dropped all tables")
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(f"Schema synced: {', '.join(sorted(SQLModel.metadata.tables))}")

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """获取数据库 session，一个请求一个"""
        if not self.engine:
            raise RuntimeError("Database not initialized")

        async with self.session_factory() as session:
            yield session

    async def close(self) -> None:
        """关闭所有连接"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency - 获取数据库 session"""
    db: Optional[DatabaseManager] = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database not initialized")

    async for session in db.session():
        yield session
