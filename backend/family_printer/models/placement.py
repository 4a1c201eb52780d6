"""
放置结果模型 - 直接放置 / 墙体承载放置 / 失败 三态结果
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .family import ElementId


class PlacementKind(str, Enum):
    """放置结果类型"""
    DIRECT = "direct"
    WALL_HOSTED = "wall_hosted"
    FAILED = "failed"


class PlacementResult(BaseModel):
    """放置结果"""
    kind: PlacementKind
    symbol_id: ElementId
    instance_id: ElementId | None = None
    host_id: ElementId | None = None   # 临时墙体（需在出图视图中隐藏）
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.kind != PlacementKind.FAILED

    @classmethod
    def failed(cls, symbol_id: ElementId, reason: str) -> PlacementResult:
        return cls(kind=PlacementKind.FAILED, symbol_id=symbol_id, reason=reason)
