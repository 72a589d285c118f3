"""
/users 路由：owner（用户）及其任务
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.api.deps import parse_body
from taskboard.core.db import get_db
from taskboard.schemas import (
    DeletedResponse, OwnerCreate, OwnerRead, TaskCreate, TaskRead,
    TaskStatusFilter, TaskUpdate, UpdatedResponse, validate_body
)
from taskboard.services import task_service

router = APIRouter()


# ==========================================
# 全体任务（固定路径放在 /{owner_id} 之前）
# ==========================================

@router.get("/tasks", response_model=List[TaskRead])
async def list_all_tasks(
    status_filter: Optional[TaskStatusFilter] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db)
):
    """所有任务，可按 ?status=complete|incomplete 过滤"""
    complete = None if status_filter is None else status_filter == TaskStatusFilter.complete
    tasks = await task_service.list_tasks(db, complete=complete)
    return [TaskRead.from_task(t) for t in tasks]


@router.post("/tasks/complete-all", response_model=UpdatedResponse)
async def complete_all_tasks(db: AsyncSession = Depends(get_db)):
    updated = await task_service.complete_all(db)
    return UpdatedResponse(updated=updated)


@router.delete("/tasks/completed", response_model=DeletedResponse)
async def clear_completed_tasks(db: AsyncSession = Depends(get_db)):
    deleted = await task_service.clear_completed(db)
    return DeletedResponse(deleted=deleted)


@router.get("/tasks/{task_id}", response_model=TaskRead)
async def get_task(task_id: int, db: AsyncSession = Depends(get_db)):
    task = await task_service.get_task(db, task_id)
    return TaskRead.from_task(task)


@router.patch("/tasks/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    body: dict = Depends(parse_body),
    db: AsyncSession = Depends(get_db)
):
    """修改单个任务（改名、改截止时间、切换完成状态）"""
    payload = validate_body(TaskUpdate, body)
    task = await task_service.get_task(db, task_id)
    # 只有 due 允许显式置空
    fields = {
        key: value for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key == "due"
    }
    task = await task_service.update_task(db, task, **fields)
    return TaskRead.from_task(task)


# ==========================================
# Owner
# ==========================================

@router.get("", response_model=List[OwnerRead])
async def list_owners(db: AsyncSession = Depends(get_db)):
    return await task_service.list_owners(db)


@router.post("", response_model=OwnerRead, status_code=status.HTTP_201_CREATED)
async def create_owner(
    body: dict = Depends(parse_body),
    db: AsyncSession = Depends(get_db)
):
    payload = validate_body(OwnerCreate, body)
    return await task_service.create_owner(db, payload.name)


@router.get("/{owner_id}", response_model=OwnerRead)
async def get_owner(owner_id: int, db: AsyncSession = Depends(get_db)):
    return await task_service.get_owner(db, owner_id)


@router.get("/{owner_id}/tasks", response_model=List[TaskRead])
async def list_owner_tasks(
    owner_id: int,
    status_filter: Optional[TaskStatusFilter] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db)
):
    """某个 owner 的任务；?status=incomplete 只返回未完成的"""
    owner = await task_service.get_owner(db, owner_id)
    if status_filter == TaskStatusFilter.incomplete:
        tasks = await task_service.get_incomplete_tasks(db, owner)
    else:
        complete = None if status_filter is None else True
        tasks = await task_service.list_tasks(db, complete=complete, owner_id=owner.id)
    return [TaskRead.from_task(t) for t in tasks]


@router.post("/{owner_id}/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_owner_task(
    owner_id: int,
    body: dict = Depends(parse_body),
    db: AsyncSession = Depends(get_db)
):
    payload = validate_body(TaskCreate, body)
    owner = await task_service.get_owner(db, owner_id)
    # 插入时直接带上 owner_id，一次 commit，失败时不会留下无主任务
    task = await task_service.create_task(
        db, payload.name, due=payload.due, complete=payload.complete, owner_id=owner.id
    )
    return TaskRead.from_task(task)


@router.put("/{owner_id}/tasks/{task_id}", response_model=TaskRead)
async def assign_task(owner_id: int, task_id: int, db: AsyncSession = Depends(get_db)):
    """把已有任务分配给 owner"""
    owner = await task_service.get_owner(db, owner_id)
    task = await task_service.get_task(db, task_id)
    task = await task_service.assign_owner(db, task, owner)
    return TaskRead.from_task(task)
