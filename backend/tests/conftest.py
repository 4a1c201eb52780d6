"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(workspace, paths):
        workspace.add_family("Door", [SymbolSpec("D1", direct=UNIT_BOX)])
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from family_printer.config import RuntimeConfig
from family_printer.models import PathSet, RenderSettings
from fakes import FakeWorkspace


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置"""
    return RuntimeConfig()


@pytest.fixture
def render_settings() -> RenderSettings:
    """小尺寸出图参数"""
    return RenderSettings(image_size=32, resolution=72)


# ============================================================================
# 工作区 Fixtures
# ============================================================================

@pytest.fixture
def workspace() -> FakeWorkspace:
    """带 "Level 1" 平面视图的内存工作区"""
    return FakeWorkspace()


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def paths(temp_dir: Path) -> PathSet:
    """族目录 + 默认项目子目录 + 图片目录"""
    families_dir = temp_dir / "families"
    families_dir.mkdir()
    return PathSet.from_source(families_dir, temp_dir / "images")
