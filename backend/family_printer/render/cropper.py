"""
居中裁切 - 将宿主导出的任意宽高比图片裁成正方形缩略图

裁切窗口：
    x = floor((W - size) / 2)
    y = trunc((H - size) / 2)
临时文件无论裁切成功、失败或无法解码，都会被删除。

依赖：
- Pillow: 图片读写
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..models import ImageFileType

logger = logging.getLogger(__name__)


def crop_window(width: int, height: int, size: int) -> tuple[int, int, int, int]:
    """计算居中正方形裁切框 (left, top, right, bottom)"""
    left = math.floor((width - size) / 2)
    top = int((height - size) / 2)
    return left, top, left + size, top + size


def crop_center(
    source: Path,
    destination: Path,
    size: int,
    file_type: ImageFileType | None = None,
) -> bool:
    """
    居中裁切并保存，随后删除源文件

    Args:
        source: 宿主导出的临时图片
        destination: 最终图片路径
        size: 正方形边长(px)
        file_type: 保存格式（为空时按目标扩展名推断）

    Returns:
        是否写出了目标文件
    """
    try:
        try:
            image = Image.open(source)
        except (FileNotFoundError, UnidentifiedImageError, OSError) as e:
            logger.warning(f"临时图片无法解码: {source}: {e}")
            return False

        with image:
            width, height = image.size
            if width < size or height < size:
                logger.warning(
                    f"导出图片尺寸不足: {source.name} {width}x{height} < {size}x{size}"
                )
                return False

            with image.crop(crop_window(width, height, size)) as region:
                save_format = file_type.pil_format if file_type else None
                if save_format == "JPEG" and region.mode not in ("RGB", "L"):
                    with region.convert("RGB") as rgb:
                        rgb.save(destination, format=save_format)
                else:
                    region.save(destination, format=save_format)
        return True
    finally:
        source.unlink(missing_ok=True)
