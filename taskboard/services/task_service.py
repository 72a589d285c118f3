"""
Task / Owner 的查询与批量操作

所有函数都显式接收 AsyncSession，写操作在函数内 commit。
存储层异常先 rollback 再原样抛出。
"""
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import BadRequestError, NotFoundError
from taskboard.core.logging import get_logger
from taskboard.models.sql_models import Owner, Task, to_utc

logger = get_logger("TaskService")

TASK_UPDATABLE_FIELDS = ("name", "due", "complete")


async def _commit(session: AsyncSession) -> None:
    try:
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        raise


# ==========================================
# 批量操作（单条 SQL 语句）
# ==========================================

async def clear_completed(session: AsyncSession) -> int:
    """
    删除所有已完成的任务，返回删除行数

    session 里已加载的对应对象会一并移除（默认 synchronize_session）。
    """
    try:
        result = await session.execute(
            delete(Task).where(Task.complete == True)  # noqa: E712
        )
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        raise
    logger.info(f"Cleared {result.rowcount} completed tasks")
    return result.rowcount


async def complete_all(session: AsyncSession) -> int:
    """
    把所有未完成的任务标记为完成，重复调用无副作用

    session 里已加载的 Task 对象同步更新 complete。
    """
    try:
        result = await session.execute(
            update(Task)
            .where(Task.complete == False)  # noqa: E712
            .values(complete=True)
        )
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        raise
    logger.info(f"Marked {result.rowcount} tasks complete")
    return result.rowcount


# ==========================================
# Owner
# ==========================================

async def create_owner(session: AsyncSession, name: str) -> Owner:
    owner = Owner(name=name)
    session.add(owner)
    await _commit(session)
    await session.refresh(owner)
    return owner


async def get_owner(session: AsyncSession, owner_id: int) -> Owner:
    owner = await session.get(Owner, owner_id)
    if owner is None:
        raise NotFoundError(f"Owner not found: {owner_id}")
    return owner


async def list_owners(session: AsyncSession) -> List[Owner]:
    result = await session.execute(select(Owner))
    return list(result.scalars().all())


async def get_incomplete_tasks(session: AsyncSession, owner: Owner) -> List[Task]:
    """
    某个 owner 名下所有未完成的任务

    不保证顺序，按存储返回的顺序。
    """
    result = await session.execute(
        select(Task).where(
            Task.owner_id == owner.id,
            Task.complete == False,  # noqa: E712
        )
    )
    return list(result.scalars().all())


# ==========================================
# Task
# ==========================================

async def create_task(
    session: AsyncSession,
    name: str,
    due: Optional[datetime] = None,
    complete: bool = False,
    owner_id: Optional[int] = None,
) -> Task:
    task = Task(name=name, due=to_utc(due), complete=complete, owner_id=owner_id)
    session.add(task)
    await _commit(session)
    await session.refresh(task)
    return task


async def bulk_create_tasks(session: AsyncSession, rows: Iterable[Mapping[str, Any]]) -> List[Task]:
    """一次 commit 插入多条任务"""
    tasks = [
        Task(
            name=row.get("name", ""),
            due=to_utc(row.get("due")),
            complete=bool(row.get("complete", False)),
            owner_id=row.get("owner_id"),
        )
        for row in rows
    ]
    session.add_all(tasks)
    await _commit(session)
    for task in tasks:
        await session.refresh(task)
    return tasks


async def get_task(session: AsyncSession, task_id: int) -> Task:
    task = await session.get(Task, task_id)
    if task is None:
        raise NotFoundError(f"Task not found: {task_id}")
    return task


async def list_tasks(
    session: AsyncSession,
    complete: Optional[bool] = None,
    owner_id: Optional[int] = None,
) -> List[Task]:
    stmt = select(Task)
    if complete is not None:
        stmt = stmt.where(Task.complete == complete)
    if owner_id is not None:
        stmt = stmt.where(Task.owner_id == owner_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_task(session: AsyncSession, task: Task, **fields: Any) -> Task:
    """更新单个任务的 name / due / complete"""
    unknown = set(fields) - set(TASK_UPDATABLE_FIELDS)
    if unknown:
        raise BadRequestError(f"Cannot update fields: {sorted(unknown)}")

    for key, value in fields.items():
        if key == "due":
            value = to_utc(value)
        setattr(task, key, value)

    session.add(task)
    await _commit(session)
    await session.refresh(task)
    return task


async def assign_owner(session: AsyncSession, task: Task, owner: Owner) -> Task:
    """
    把任务分配给 owner 并保存

    owner 不存在时由外键约束抛出 IntegrityError。
    """
    task.owner_id = owner.id
    session.add(task)
    await _commit(session)
    await session.refresh(task)
    return task
