"""
数据模型单元测试

每个模块完成后必须运行：pytest tests/unit/test_models.py -v
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from family_printer.models import (
    BatchJob,
    BBox3D,
    ImageFileType,
    JobStatus,
    PathSet,
    PlacementKind,
    PlacementResult,
    RenderSettings,
    ViewInfo,
    ViewType,
)


class TestBBox3D:
    """包围盒测试"""

    def test_extents(self):
        """测试三向跨度（width 取 Y 向，height 取 X 向）"""
        bbox = BBox3D(min_x=1, min_y=2, min_z=3, max_x=4, max_y=7, max_z=4)
        assert bbox.width == 5
        assert bbox.height == 3
        assert bbox.depth == 1

    def test_is_empty(self):
        """测试空包围盒判定"""
        assert BBox3D(min_x=5, min_y=5, min_z=5, max_x=5, max_y=5, max_z=5).is_empty
        assert not BBox3D(min_x=0, min_y=0, min_z=0, max_x=0, max_y=0, max_z=1).is_empty


class TestRenderSettings:
    """出图参数测试"""

    def test_defaults(self):
        """测试默认值"""
        settings = RenderSettings()
        assert settings.scale == 50
        assert settings.image_size == 256
        assert settings.resolution == 150
        assert settings.extension == ".png"
        assert settings.zoom_value == 0.9

    def test_extension_normalized(self):
        """测试扩展名补点并转小写"""
        assert RenderSettings(extension="JPG").extension == ".jpg"

    def test_positive_values(self):
        """测试非正数被拒绝"""
        with pytest.raises(ValidationError):
            RenderSettings(image_size=0)

    def test_frozen(self):
        """测试批处理中只读"""
        settings = RenderSettings()
        with pytest.raises(ValidationError):
            settings.scale = 100


class TestPathSet:
    """路径集合测试"""

    def test_from_source(self, temp_dir: Path):
        """测试默认项目目录为族目录子文件夹"""
        paths = PathSet.from_source(temp_dir, temp_dir / "img")
        assert paths.projects_dir == temp_dir / "Projects"

    def test_projects_dir_must_differ(self, temp_dir: Path):
        """测试项目目录不能与族目录相同"""
        with pytest.raises(ValidationError):
            PathSet(families_dir=temp_dir, projects_dir=temp_dir, images_dir=temp_dir / "img")

    def test_ensure_dirs(self, paths: PathSet):
        """测试按需创建输出目录"""
        assert not paths.projects_dir.exists()
        paths.ensure_projects_dir()
        paths.ensure_images_dir()
        assert paths.projects_dir.is_dir()
        assert paths.images_dir.is_dir()


class TestPlacementResult:
    """放置结果测试"""

    def test_failed(self):
        result = PlacementResult.failed(7, "无几何")
        assert result.kind == PlacementKind.FAILED
        assert not result.succeeded
        assert result.instance_id is None

    def test_succeeded(self):
        result = PlacementResult(kind=PlacementKind.WALL_HOSTED, symbol_id=7, instance_id=8, host_id=9)
        assert result.succeeded


class TestViewInfo:
    def test_is_3d(self):
        assert ViewInfo(id=1, name="{3D}", view_type=ViewType.THREE_D).is_3d
        assert not ViewInfo(id=2, name="Level 1", view_type=ViewType.ENGINEERING_PLAN).is_3d


def test_pil_format():
    """测试宿主格式到 Pillow 格式名"""
    assert ImageFileType.JPEG_LOSSLESS.pil_format == "JPEG"
    assert ImageFileType.TARGA.pil_format == "TGA"


class TestBatchJob:
    """任务模型测试"""

    def test_lifecycle(self):
        """测试状态流转"""
        job = BatchJob()
        assert job.status == JobStatus.QUEUED

        job.mark_running()
        assert job.status == JobStatus.RUNNING
        assert job.started_at is not None

        job.mark_succeeded()
        assert job.status == JobStatus.SUCCEEDED
        assert job.finished_at is not None

    def test_mark_failed_records_error(self):
        job = BatchJob()
        job.mark_failed("族目录不存在")
        assert job.status == JobStatus.FAILED
        assert job.errors == ["族目录不存在"]

    def test_add_flag_dedup(self):
        """测试告警标记去重"""
        job = BatchJob()
        job.add_flag("载入失败:A.rfa")
        job.add_flag("载入失败:A.rfa")
        assert job.flags == ["载入失败:A.rfa"]

    def test_request_cancel(self):
        job = BatchJob()
        job.request_cancel()
        assert job.cancel_requested
