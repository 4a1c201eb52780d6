"""
缩放启发式单元测试

每个模块完成后必须运行：pytest tests/unit/test_scale.py -v
"""

import math
from pathlib import Path

import pytest

from family_printer.models import BBox3D, ViewKind
from family_printer.render import ScaleHeuristic, compute_scale
from fakes import UNIT_BOX, FakeWorkspace, SymbolSpec


def box(dx: float, dy: float, dz: float) -> BBox3D:
    """X/Y/Z 跨度构造包围盒（height=dx, width=dy, depth=dz）"""
    return BBox3D(min_x=0, min_y=0, min_z=0, max_x=dx, max_y=dy, max_z=dz)


class TestComputeScale:
    """单个包围盒"""

    def test_plan_narrow(self):
        """测试 width/height < 1 时取比值"""
        assert compute_scale(box(dx=2, dy=1, dz=1), ViewKind.PLAN) == pytest.approx(0.5)

    def test_plan_wide(self):
        """测试比值 >= 1 时保持 1"""
        assert compute_scale(box(dx=1, dy=3, dz=1), ViewKind.PLAN) == 1.0

    def test_plan_zero_height(self):
        assert compute_scale(box(dx=0, dy=3, dz=1), ViewKind.PLAN) == 1.0

    def test_isometric(self):
        """测试30°轴测投影比值"""
        cos30 = math.cos(math.pi / 6)
        expected = (cos30 * 1 + cos30 * 3) / (0.5 * 1 + 0.5 * 3 + 2)
        assert compute_scale(UNIT_BOX, ViewKind.ISOMETRIC) == pytest.approx(expected)

    @pytest.mark.parametrize("kind", [ViewKind.PLAN, ViewKind.ISOMETRIC])
    def test_range(self, kind: ViewKind):
        """测试结果位于 (0, 1]"""
        for bbox in [box(1, 1, 1), box(10, 0.1, 5), box(0.1, 10, 0), UNIT_BOX]:
            scale = compute_scale(bbox, kind)
            assert 0 < scale <= 1


class TestScaleHeuristic:
    """多包围盒与后处理"""

    @pytest.fixture
    def heuristic(self) -> ScaleHeuristic:
        return ScaleHeuristic()

    def test_plan_margin(self, heuristic: ScaleHeuristic):
        """测试平面结果乘 0.95"""
        assert heuristic.compute_for_boxes([box(2, 1, 1)], ViewKind.PLAN) == pytest.approx(0.475)

    def test_smallest_scale_wins(self, heuristic: ScaleHeuristic):
        """测试多实例取最小值"""
        boxes = [box(2, 1, 1), box(4, 1, 1), box(1, 1, 1)]
        assert heuristic.compute_for_boxes(boxes, ViewKind.PLAN) == pytest.approx(0.25 * 0.95)

    def test_none_skipped(self, heuristic: ScaleHeuristic):
        assert heuristic.compute_for_boxes([None, box(2, 1, 1)], ViewKind.PLAN) == pytest.approx(0.475)

    def test_no_boxes(self, heuristic: ScaleHeuristic):
        assert heuristic.compute_for_boxes([], ViewKind.PLAN) == pytest.approx(0.95)

    def test_isometric_coefficient_applied(self, heuristic: ScaleHeuristic):
        """测试轴测系数在结果 < 1 时生效"""
        tall = box(dx=10, dy=1, dz=0)
        raw = compute_scale(tall, ViewKind.ISOMETRIC)
        assert heuristic.compute_for_boxes([tall], ViewKind.ISOMETRIC) == pytest.approx(1.55 * raw)

    def test_isometric_coefficient_skipped(self, heuristic: ScaleHeuristic):
        """测试轴测系数结果 >= 1 时保持原值，不留边"""
        raw = compute_scale(UNIT_BOX, ViewKind.ISOMETRIC)
        assert 1.55 * raw >= 1
        assert heuristic.compute_for_boxes([UNIT_BOX], ViewKind.ISOMETRIC) == pytest.approx(raw)

    def test_compute_for_view(self, heuristic: ScaleHeuristic, workspace: FakeWorkspace):
        """测试遍历视图内实例"""
        workspace.add_family("Door", [SymbolSpec("D1", direct=box(2, 1, 1)), SymbolSpec("D2", direct=box(1, 1, 1))])
        family = workspace.load_family(Path("Door.rfa"))
        for symbol in family.symbols:
            workspace.place_instance(symbol.id, None, 0)

        view = workspace.get_active_view()
        assert heuristic.compute_for_view(workspace, view) == pytest.approx(0.475)
