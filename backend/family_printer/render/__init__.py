"""
出图模块 - 缩放启发式/图片导出/居中裁切

子模块：
- formats: 扩展名 -> 光栅格式
- scale: 包围盒驱动的视图缩放
- cropper: Pillow 居中裁切
- exporter: 宿主导出 + 裁切流水
"""

from .cropper import crop_center, crop_window
from .exporter import ImageExporter
from .formats import resolve_image_file_type
from .scale import ScaleHeuristic, adjust_scale, compute_scale

__all__ = [
    "ImageExporter",
    "ScaleHeuristic",
    "compute_scale",
    "adjust_scale",
    "crop_center",
    "crop_window",
    "resolve_image_file_type",
]
