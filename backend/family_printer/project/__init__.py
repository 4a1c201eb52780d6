"""
项目模块 - 视图准备/实例放置/工作区生命周期

子模块：
- views: 平面/轴测视图查找与创建
- placement: 放置策略链
- lifecycle: 单个族类型的完整处理流程
"""

from .lifecycle import WorkspaceLifecycle
from .placement import (
    DirectPlacement,
    PlacementResolver,
    PlacementStrategy,
    WallHostedPlacement,
)
from .views import ViewResolver

__all__ = [
    "WorkspaceLifecycle",
    "PlacementResolver",
    "PlacementStrategy",
    "DirectPlacement",
    "WallHostedPlacement",
    "ViewResolver",
]
