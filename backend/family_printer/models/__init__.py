"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现与宿主解耦：
- FamilyDefinition/FamilySymbol: 族与类型
- ViewInfo/LevelInfo/BBox3D: 宿主句柄与几何
- PathSet/RenderSettings: 批处理输入
- PlacementResult: 放置结果
- BatchJob: 任务状态与进度
"""

from .export import ExportRange, FitDirection, ImageExportOptions, ImageFileType
from .family import (
    ORIGIN,
    BBox3D,
    ElementId,
    FamilyDefinition,
    FamilySymbol,
    LevelInfo,
    Point3D,
    ViewInfo,
    ViewType,
)
from .job import BatchJob, BatchProgress, JobStatus
from .placement import PlacementKind, PlacementResult
from .settings import DetailLevel, PathSet, RenderSettings, ViewKind

__all__ = [
    "ElementId",
    "BBox3D",
    "Point3D",
    "ORIGIN",
    "FamilyDefinition",
    "FamilySymbol",
    "ViewType",
    "ViewInfo",
    "LevelInfo",
    "ViewKind",
    "DetailLevel",
    "RenderSettings",
    "PathSet",
    "ImageFileType",
    "FitDirection",
    "ExportRange",
    "ImageExportOptions",
    "PlacementKind",
    "PlacementResult",
    "BatchJob",
    "BatchProgress",
    "JobStatus",
]
