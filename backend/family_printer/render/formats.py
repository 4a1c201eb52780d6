"""
图片格式解析 - 扩展名 -> 宿主光栅格式
"""

from __future__ import annotations

from pathlib import Path

from ..interfaces import UnknownImageFormatError
from ..models import ImageFileType

EXTENSION_FILE_TYPES: dict[str, ImageFileType] = {
    ".png": ImageFileType.PNG,
    ".jpg": ImageFileType.JPEG_LOSSLESS,
    ".bmp": ImageFileType.BMP,
    ".tiff": ImageFileType.TIFF,
    ".targa": ImageFileType.TARGA,
}


def resolve_image_file_type(extension: str) -> ImageFileType:
    """
    根据扩展名（或带扩展名的路径）解析图片格式

    Raises:
        UnknownImageFormatError: 不支持的扩展名
    """
    suffix = extension.strip().lower()
    if not suffix.startswith("."):
        suffix = Path(suffix).suffix or f".{suffix}"
    file_type = EXTENSION_FILE_TYPES.get(suffix)
    if file_type is None:
        raise UnknownImageFormatError(f"未知的图片格式: {extension}")
    return file_type
