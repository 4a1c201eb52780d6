"""
缩放启发式 - 由实例包围盒计算视图缩放系数

目的：不同实际尺寸的族类型出图后视觉比例一致，且最大的构件也不被裁掉。

算法：
1. 平面视图：ratio = width / height，ratio < 1 时取 ratio，否则保持 1
2. 轴测视图：按30°轴测投影计算
   widthTotal  = |cos30·width| + |cos30·depth|
   heightTotal = |sin30·width| + |sin30·depth| + |height|
   比值 < 1 时取比值
3. 遍历视图内所有实例，取最小值（最保守）
4. 后处理：轴测乘 1.55，仅当结果 < 1 时采用，否则保持原值；平面乘 0.95 留边

测试要点：
- test_plan_scale_range: 平面结果位于 (0, 1]
- test_isometric_adjustment: 轴测系数只在 < 1 时生效
- test_smallest_scale_wins: 多实例取最小
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from ..interfaces import IHostWorkspace
from ..models import BBox3D, ViewInfo, ViewKind

ISOMETRIC_ANGLE = math.pi / 6
ISOMETRIC_COEFFICIENT = 1.55
PLAN_MARGIN = 0.95
DEFAULT_SCALE = 1.0


def plan_scale(bbox: BBox3D, scale: float = DEFAULT_SCALE) -> float:
    """平面视图缩放"""
    if bbox.height <= 0:
        return scale
    ratio = bbox.width / bbox.height
    if 0 < ratio < 1:
        return ratio
    return scale


def isometric_scale(bbox: BBox3D, scale: float = DEFAULT_SCALE) -> float:
    """轴测视图缩放"""
    cos_a = math.cos(ISOMETRIC_ANGLE)
    sin_a = math.sin(ISOMETRIC_ANGLE)
    width_total = abs(cos_a * bbox.width) + abs(cos_a * bbox.depth)
    height_total = abs(sin_a * bbox.width) + abs(sin_a * bbox.depth) + abs(bbox.height)
    if height_total <= 0:
        return scale
    ratio = width_total / height_total
    if 0 < ratio < 1:
        return ratio
    return scale


def compute_scale(bbox: BBox3D, view_kind: ViewKind) -> float:
    """单个包围盒的缩放系数（未做后处理）"""
    if view_kind == ViewKind.ISOMETRIC:
        return isometric_scale(bbox)
    return plan_scale(bbox)


def adjust_scale(scale: float, view_kind: ViewKind) -> float:
    """后处理：轴测放大系数 / 平面留边"""
    if view_kind == ViewKind.ISOMETRIC:
        adjusted = ISOMETRIC_COEFFICIENT * scale
        return adjusted if adjusted < 1 else scale
    return scale * PLAN_MARGIN


class ScaleHeuristic:
    """视图缩放启发式"""

    def compute_for_boxes(
        self,
        boxes: Iterable[BBox3D | None],
        view_kind: ViewKind,
    ) -> float:
        """多个包围盒取最小缩放后做后处理"""
        scale = DEFAULT_SCALE
        for bbox in boxes:
            if bbox is None:
                continue
            scale = min(scale, compute_scale(bbox, view_kind))
        return adjust_scale(scale, view_kind)

    def compute_for_view(self, workspace: IHostWorkspace, view: ViewInfo) -> float:
        """遍历视图内所有族实例"""
        view_kind = ViewKind.ISOMETRIC if view.is_3d else ViewKind.PLAN
        boxes = (
            workspace.get_bounding_box(instance_id, view.id)
            for instance_id in workspace.list_instance_ids()
        )
        return self.compute_for_boxes(boxes, view_kind)
