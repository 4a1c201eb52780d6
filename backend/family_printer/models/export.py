"""
图片导出参数模型 - 交给宿主光栅化器的导出选项
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from .family import ElementId


class ImageFileType(str, Enum):
    """宿主支持的光栅格式"""
    PNG = "png"
    JPEG_LOSSLESS = "jpeg_lossless"
    BMP = "bmp"
    TIFF = "tiff"
    TARGA = "targa"

    @property
    def pil_format(self) -> str:
        """Pillow 保存格式名"""
        return _PIL_FORMATS[self]


_PIL_FORMATS = {
    ImageFileType.PNG: "PNG",
    ImageFileType.JPEG_LOSSLESS: "JPEG",
    ImageFileType.BMP: "BMP",
    ImageFileType.TIFF: "TIFF",
    ImageFileType.TARGA: "TGA",
}


class FitDirection(str, Enum):
    """像素尺寸对应的方向"""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ExportRange(str, Enum):
    """导出范围"""
    VISIBLE_REGION_OF_CURRENT_VIEW = "visible_region_of_current_view"
    SET_OF_VIEWS = "set_of_views"


class ImageExportOptions(BaseModel):
    """图片导出选项"""
    file_path: Path
    file_type: ImageFileType
    resolution: int = Field(..., gt=0, description="DPI")
    pixel_size: int = Field(..., gt=0, description="取景方向像素尺寸")
    fit_direction: FitDirection = FitDirection.VERTICAL
    export_range: ExportRange = ExportRange.VISIBLE_REGION_OF_CURRENT_VIEW
    create_website: bool = False
    view_ids: list[ElementId] = Field(default_factory=list)
