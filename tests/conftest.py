# tests/conftest.py

from __future__ import annotations

from typing import AsyncIterator

import httpx
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.db import DatabaseManager
from taskboard.main import create_app


@pytest_asyncio.fixture()
async def db() -> AsyncIterator[DatabaseManager]:
    """
    Fresh in-memory database per test.

    sync(force=True) is the same destructive reset the sync command performs.
    """
    manager = DatabaseManager("sqlite+aiosqlite://")
    await manager.sync(force=True)
    yield manager
    await manager.close()


@pytest_asyncio.fixture()
async def session(db: DatabaseManager) -> AsyncIterator[AsyncSession]:
    async with db.session_factory() as s:
        yield s


@pytest_asyncio.fixture()
async def client(db: DatabaseManager) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client bound to an app that uses the test database."""
    app = create_app(db=db)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
