"""
放置解析器 - 按策略链把族类型放入工作区

策略（按顺序尝试，每个策略一个事务，要么整体提交要么整体回滚）：
1. DirectPlacement: 不带宿主，放在平面视图标高的原点；包围盒非空即成功
2. WallHostedPlacement: 新建一段直墙，实例以墙为宿主放在原点，
   墙在平面视图中隐藏（出图视图另行隐藏）
3. 幕墙嵌板/栏杆扶手承载等：追加 PlacementStrategy 子类即可，调用方无需改动

全部失败时返回 PlacementKind.FAILED，由上层跳过该类型。

测试要点：
- test_direct_placement: 直接放置成功不建墙
- test_wall_fallback: 包围盒为空时恰好创建一面墙
- test_all_strategies_fail: 全部失败返回失败结果且回滚
- test_plan_view_created: 缺少平面视图时先创建
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..config import get_config
from ..interfaces import HostOperationError, IHostWorkspace, PlacementError
from ..models import (
    ORIGIN,
    ElementId,
    FamilySymbol,
    PlacementKind,
    PlacementResult,
    Point3D,
    ViewInfo,
)
from .views import ViewResolver

logger = logging.getLogger(__name__)


def _has_geometry(workspace: IHostWorkspace, instance_id: ElementId, view: ViewInfo) -> bool:
    bbox = workspace.get_bounding_box(instance_id, view.id)
    return bbox is not None and not bbox.is_empty


class PlacementStrategy(ABC):
    """放置策略"""

    kind: PlacementKind
    transaction_name: str = "Insert Symbol"

    @abstractmethod
    def place(
        self,
        workspace: IHostWorkspace,
        symbol: FamilySymbol,
        view: ViewInfo,
    ) -> PlacementResult:
        """
        在事务内执行放置

        Raises:
            PlacementError: 放置后无几何（调用方回滚本策略）
        """
        ...


class DirectPlacement(PlacementStrategy):
    """标高上直接放置"""

    kind = PlacementKind.DIRECT

    def place(self, workspace, symbol, view):
        if view.level_id is None:
            raise PlacementError(f"视图无关联标高: {view.name}")
        workspace.activate_symbol(symbol.id)
        instance_id = workspace.place_instance(symbol.id, ORIGIN, view.level_id)
        if not _has_geometry(workspace, instance_id, view):
            raise PlacementError(f"直接放置后包围盒为空: {symbol.name}")
        return PlacementResult(kind=self.kind, symbol_id=symbol.id, instance_id=instance_id)


class WallHostedPlacement(PlacementStrategy):
    """以临时墙为宿主放置"""

    kind = PlacementKind.WALL_HOSTED
    transaction_name = "Insert Symbol Into Wall"

    def __init__(self, wall_length: float | None = None):
        self.wall_length = wall_length if wall_length is not None else get_config().host.wall_length

    def place(self, workspace, symbol, view):
        if view.level_id is None:
            raise PlacementError(f"视图无关联标高: {view.name}")
        wall_id = workspace.create_wall(
            ORIGIN, Point3D(x=self.wall_length), view.level_id
        )
        workspace.activate_symbol(symbol.id)
        instance_id = workspace.place_instance(symbol.id, ORIGIN, wall_id)
        if not _has_geometry(workspace, instance_id, view):
            raise PlacementError(f"墙体承载放置后包围盒为空: {symbol.name}")
        workspace.hide_elements(view.id, [wall_id])
        return PlacementResult(
            kind=self.kind,
            symbol_id=symbol.id,
            instance_id=instance_id,
            host_id=wall_id,
        )


class PlacementResolver:
    """放置解析器"""

    def __init__(
        self,
        strategies: list[PlacementStrategy] | None = None,
        view_resolver: ViewResolver | None = None,
    ):
        self.strategies = strategies if strategies is not None else [
            DirectPlacement(),
            WallHostedPlacement(),
        ]
        self.view_resolver = view_resolver or ViewResolver()

    def place(self, workspace: IHostWorkspace, symbol: FamilySymbol) -> PlacementResult:
        """按策略链放置，返回第一个成功的结果"""
        view = self.view_resolver.ensure_plan_view(workspace)

        reasons = []
        for strategy in self.strategies:
            try:
                with workspace.transaction(strategy.transaction_name):
                    result = strategy.place(workspace, symbol, view)
            except (PlacementError, HostOperationError) as e:
                logger.info(f"放置策略 {strategy.kind.value} 未成功: {e}")
                reasons.append(str(e))
                continue
            logger.debug(f"放置成功: {symbol.name} ({result.kind.value})")
            return result

        return PlacementResult.failed(symbol.id, "; ".join(reasons) or "无可用放置策略")
