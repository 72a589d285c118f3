"""
HTTP 层的请求 / 响应 schema
"""
import math
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from taskboard.core.errors import BadRequestError
from taskboard.models.sql_models import Task, to_utc

T = TypeVar("T", bound=BaseModel)


class TaskStatusFilter(str, Enum):
    complete = "complete"
    incomplete = "incomplete"


# ==========================================
# Owner
# ==========================================

class OwnerCreate(BaseModel):
    name: str = Field(min_length=1)


class OwnerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


# ==========================================
# Task
# ==========================================

class TaskCreate(BaseModel):
    name: str = Field(min_length=1)
    due: Optional[datetime] = None
    complete: bool = False

    @field_validator("due", mode="before")
    @classmethod
    def _blank_due_is_none(cls, value: Any) -> Any:
        # 表单里空字段会以 "" 提交
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    due: Optional[datetime] = None
    complete: Optional[bool] = None

    @field_validator("due", mode="before")
    @classmethod
    def _blank_due_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TaskRead(BaseModel):
    id: int
    name: str
    due: Optional[datetime] = None
    complete: bool
    owner_id: Optional[int] = None
    # 毫秒；没有截止时间时为 null（JSON 不能表示 Infinity）
    time_remaining: Optional[float] = None
    overdue: bool = False

    @classmethod
    def from_task(cls, task: Task) -> "TaskRead":
        remaining = task.get_time_remaining()
        return cls(
            id=task.id,
            name=task.name,
            due=to_utc(task.due),
            complete=task.complete,
            owner_id=task.owner_id,
            time_remaining=None if math.isinf(remaining) else remaining,
            overdue=task.is_overdue(),
        )


class UpdatedResponse(BaseModel):
    updated: int


class DeletedResponse(BaseModel):
    deleted: int


def validate_body(model: Type[T], body: dict) -> T:
    """把已解析的请求体校验成 schema，失败统一返回 400"""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise BadRequestError(str(e)) from e
