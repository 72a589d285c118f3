"""
SQLModel 数据模型：owners / tasks 两张表，外键在 tasks 上
"""
import math
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    统一为带时区的 UTC 时间

    SQLite 读回的是 naive datetime，这里一律按 UTC 解释。
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Owner(SQLModel, table=True):
    """任务负责人表"""
    __tablename__ = "owners"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str


class Task(SQLModel, table=True):
    """任务表"""
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = ""
    due: Optional[datetime] = Field(default=None)
    complete: bool = Field(default=False, nullable=False, index=True)

    owner_id: Optional[int] = Field(default=None, foreign_key="owners.id", index=True)

    def get_time_remaining(self, now: Optional[datetime] = None) -> float:
        """
        距离截止时间还有多少毫秒

        没有 due 时返回 math.inf，与是否完成无关。每次调用都重新读取当前时间。
        """
        if self.due is None:
            return math.inf
        now = to_utc(now) if now is not None else datetime.now(timezone.utc)
        return (to_utc(self.due) - now).total_seconds() * 1000

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """已过截止时间且未完成"""
        if self.due is None or self.complete:
            return False
        now = to_utc(now) if now is not None else datetime.now(timezone.utc)
        return to_utc(self.due) < now
