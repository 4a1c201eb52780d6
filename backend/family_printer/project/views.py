"""
视图解析器 - 查找或创建出图所需的视图

- 平面：名为 "Level 1"（可配置）的结构平面；不存在时在同名标高
  （否则第一个标高）上新建
- 轴测：最后一个非样板三维视图；不存在时新建轴测视图
"""

from __future__ import annotations

import logging

from ..config import get_config
from ..interfaces import HostOperationError, IHostWorkspace
from ..models import LevelInfo, ViewInfo, ViewKind, ViewType

logger = logging.getLogger(__name__)


class ViewResolver:
    """视图解析器"""

    def __init__(self, level_name: str | None = None):
        self.level_name = level_name or get_config().host.level_name

    def find_plan_view(self, workspace: IHostWorkspace) -> ViewInfo | None:
        for view in workspace.list_views():
            if view.name == self.level_name and view.view_type == ViewType.ENGINEERING_PLAN:
                return view
        return None

    def ensure_plan_view(self, workspace: IHostWorkspace) -> ViewInfo:
        """获取平面视图，不存在则创建"""
        view = self.find_plan_view(workspace)
        if view is not None:
            return view

        level = self._find_level(workspace)
        with workspace.transaction("Create Plan"):
            view = workspace.create_plan_view(level.id)
        logger.info(f"已创建平面视图: {view.name} (标高 {level.name})")
        return view

    def ensure_isometric_view(self, workspace: IHostWorkspace) -> ViewInfo:
        """获取三维视图，不存在则创建轴测视图"""
        view_3d = None
        for view in workspace.list_views():
            if view.view_type == ViewType.THREE_D and not view.is_template:
                view_3d = view
        if view_3d is not None:
            return view_3d

        with workspace.transaction("Add view"):
            view_3d = workspace.create_isometric_view()
        logger.info(f"已创建轴测视图: {view_3d.name}")
        return view_3d

    def activate(self, workspace: IHostWorkspace, view_kind: ViewKind) -> ViewInfo:
        """切换到出图视图"""
        if view_kind == ViewKind.ISOMETRIC:
            view = self.ensure_isometric_view(workspace)
        else:
            view = self.ensure_plan_view(workspace)
        workspace.set_active_view(view.id)
        return view

    def _find_level(self, workspace: IHostWorkspace) -> LevelInfo:
        levels = workspace.list_levels()
        if not levels:
            raise HostOperationError("工作区中没有标高，无法创建平面视图")
        for level in levels:
            if level.name == self.level_name:
                return level
        return levels[0]
