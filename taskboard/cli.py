"""
命令行入口

命令：
- sync: 建表（--force 先删表再重建）
- serve: 用 uvicorn 启动 HTTP 服务
"""
import asyncio
import sys

import click

from taskboard.core.config import settings
from taskboard.core.db import DatabaseManager
from taskboard.core.events import log_level
from taskboard.core.logging import setup_logging


async def _sync(database_url: str, force: bool) -> None:
    db = DatabaseManager(database_url)
    try:
        await db.sync(force=force)
    finally:
        await db.close()


@click.group()
def main():
    """Taskboard 任务管理服务"""
    setup_logging(log_level(settings))


@main.command()
@click.option("--force", is_flag=True, help="Drop all tables before creating them")
@click.option("--database-url", default=None, help="Override TASKBOARD_DATABASE_URL")
def sync(force, database_url):
    """创建 owners / tasks 两张表"""
    url = database_url or settings.database_url
    try:
        asyncio.run(_sync(url, force))
    except Exception as e:
        click.echo(f"Schema sync failed: {e}", err=True)
        sys.exit(1)

    click.echo("Tables reset." if force else "Tables created.")


@main.command()
@click.option("--host", default=None, help="Bind address")
@click.option("--port", default=None, type=int, help="Bind port")
def serve(host, port):
    """启动 HTTP 服务"""
    import uvicorn
    from taskboard.main import app

    uvicorn.run(app, host=host or settings.host, port=port or settings.port)


if __name__ == "__main__":
    main()
