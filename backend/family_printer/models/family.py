"""
族与宿主元素模型 - 族/类型/视图/标高的不透明句柄

宿主对象（文档、视图、元素）的生命周期由宿主管理，
这里只保存ID与读出的只读属性，不持有宿主对象本身。
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

# 宿主元素ID（不透明句柄）
ElementId = int


class BBox3D(BaseModel):
    """三维轴对齐包围盒

    坐标约定与宿主一致：width 取 Y 向跨度，height 取 X 向跨度（两个水平轴），
    depth 取 Z 向跨度（竖直轴）。
    """
    min_x: float
    min_y: float
    min_z: float
    max_x: float
    max_y: float
    max_z: float

    @property
    def width(self) -> float:
        return self.max_y - self.min_y

    @property
    def height(self) -> float:
        return self.max_x - self.min_x

    @property
    def depth(self) -> float:
        return self.max_z - self.min_z

    @property
    def is_empty(self) -> bool:
        """三个方向跨度均为0视为空"""
        return self.width == 0 and self.height == 0 and self.depth == 0


class Point3D(BaseModel):
    """三维点"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


ORIGIN = Point3D()


class FamilySymbol(BaseModel):
    """族类型（变体）- 从族中读出后不可变"""
    id: ElementId
    name: str
    family_name: str

    model_config = {"frozen": True}


class FamilyDefinition(BaseModel):
    """族定义"""
    id: ElementId
    name: str = Field(..., description="族名（文件名去扩展名）")
    source_path: Path | None = None
    symbols: list[FamilySymbol] = Field(default_factory=list)


class ViewType(str, Enum):
    """视图类型"""
    ENGINEERING_PLAN = "engineering_plan"
    FLOOR_PLAN = "floor_plan"
    THREE_D = "three_d"
    OTHER = "other"


class ViewInfo(BaseModel):
    """视图句柄"""
    id: ElementId
    name: str
    view_type: ViewType
    is_template: bool = False
    level_id: ElementId | None = None

    @property
    def is_3d(self) -> bool:
        return self.view_type == ViewType.THREE_D


class LevelInfo(BaseModel):
    """标高句柄"""
    id: ElementId
    name: str
