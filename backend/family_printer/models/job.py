"""
批处理任务模型 - 任务状态、进度与已尝试产物

已尝试产物名单 attempted 不代表都已成功出图，调用方可与输出目录比对。
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .settings import ViewKind


class JobStatus(str, Enum):
    """任务状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class BatchProgress(BaseModel):
    """任务进度"""
    families_total: int = 0
    families_done: int = 0
    variants_attempted: int = 0
    current_family: str | None = None
    current_variant: str | None = None
    message: str = ""


class BatchJob(BaseModel):
    """批处理任务"""
    job_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    view_kind: ViewKind = ViewKind.PLAN

    # 状态
    status: JobStatus = JobStatus.QUEUED
    progress: BatchProgress = Field(default_factory=BatchProgress)
    cancel_requested: bool = False

    # 结果
    attempted: list[str] = Field(default_factory=list, description="已尝试的产物名")
    flags: list[str] = Field(default_factory=list, description="告警标记")
    errors: list[str] = Field(default_factory=list, description="错误信息")

    # 时间戳
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self) -> None:
        """标记为运行中"""
        self.status = JobStatus.RUNNING
        self.started_at = datetime.now()

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.status = JobStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = JobStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)

    def mark_cancelled(self) -> None:
        """标记为已取消"""
        self.status = JobStatus.CANCELLED
        self.finished_at = datetime.now()

    def request_cancel(self) -> None:
        """请求取消（仅在变体边界生效）"""
        self.cancel_requested = True

    def add_flag(self, flag: str) -> None:
        """添加告警标记（不中断）"""
        if flag not in self.flags:
            self.flags.append(flag)
