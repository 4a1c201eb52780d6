"""
批处理输入模型 - 路径集合与出图参数

RenderSettings 在一次批处理中只读；省略即为仅生成项目、不出图的空跑。
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


class ViewKind(str, Enum):
    """出图视图类别"""
    PLAN = "plan"              # 二维平面（"标高 1" 结构平面）
    ISOMETRIC = "isometric"    # 三维轴测


class DetailLevel(str, Enum):
    """视图详细程度"""
    COARSE = "coarse"
    MEDIUM = "medium"
    FINE = "fine"


class RenderSettings(BaseModel):
    """出图参数"""
    scale: int = Field(50, gt=0, description="视图比例分母")
    image_size: int = Field(256, gt=0, description="最终正方形图片边长(px)")
    resolution: int = Field(150, gt=0, description="导出分辨率(DPI)")
    extension: str = Field(".png", description="图片扩展名")
    zoom_value: float = Field(0.9, gt=0, description="视图缩放系数")
    detail_level: DetailLevel = DetailLevel.MEDIUM

    model_config = {"frozen": True}

    @field_validator("extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip().lower()
        if value and not value.startswith("."):
            value = f".{value}"
        return value


class PathSet(BaseModel):
    """路径集合：族目录 / 项目输出目录 / 图片输出目录"""
    families_dir: Path
    projects_dir: Path
    images_dir: Path

    @model_validator(mode="after")
    def _check_projects_dir(self) -> PathSet:
        if self.projects_dir.resolve() == self.families_dir.resolve():
            raise ValueError("项目输出目录不能与族目录相同")
        return self

    @classmethod
    def from_source(
        cls,
        families_dir: Path,
        images_dir: Path,
        projects_folder_name: str = "Projects",
    ) -> PathSet:
        """默认项目目录为族目录下的子文件夹"""
        return cls(
            families_dir=families_dir,
            projects_dir=families_dir / projects_folder_name,
            images_dir=images_dir,
        )

    def ensure_projects_dir(self) -> Path:
        self.projects_dir.mkdir(parents=True, exist_ok=True)
        return self.projects_dir

    def ensure_images_dir(self) -> Path:
        self.images_dir.mkdir(parents=True, exist_ok=True)
        return self.images_dir
