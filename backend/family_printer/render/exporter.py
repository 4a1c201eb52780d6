"""
图片导出器 - 驱动宿主光栅化并裁切为正方形缩略图

职责：
1. 在目标目录生成唯一临时文件名（uuid + 同扩展名），避免覆盖最终产物
2. 配置导出选项（竖向取景/格式/分辨率/像素尺寸/仅当前视图可见区域）
3. 按缩放启发式缩放所有打开视图后导出（同一事务内）
4. 居中裁切为 image_size 正方形，删除临时文件

依赖：
- IHostWorkspace: 宿主光栅化
- ScaleHeuristic: 视图缩放
- cropper: Pillow 裁切

测试要点：
- test_render_and_crop: 正常导出裁切
- test_invalid_name_skipped: 文件名不合法时跳过
- test_host_refusal: 宿主拒绝导出抛 ExportError
- test_temp_file_removed: 临时文件总被删除（含宿主写出部分文件后拒绝）
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from ..interfaces import ExportError, HostOperationError, IHostWorkspace
from ..models import (
    ExportRange,
    FitDirection,
    ImageExportOptions,
    RenderSettings,
    ViewInfo,
)
from .cropper import crop_center
from .formats import resolve_image_file_type
from .scale import ScaleHeuristic

logger = logging.getLogger(__name__)


class ImageExporter:
    """图片导出器实现"""

    def __init__(self, scale_heuristic: ScaleHeuristic | None = None):
        self.scale_heuristic = scale_heuristic or ScaleHeuristic()

    def render_and_crop(
        self,
        workspace: IHostWorkspace,
        view: ViewInfo,
        settings: RenderSettings,
        output_base: Path,
    ) -> Path | None:
        """
        导出视图并裁切

        Args:
            workspace: 宿主工作区
            view: 出图视图（应为当前活动视图）
            settings: 出图参数
            output_base: 不带扩展名的目标路径

        Returns:
            最终图片路径；文件名不合法或裁切失败时返回 None

        Raises:
            ExportError: 宿主拒绝导出
        """
        file_type = resolve_image_file_type(settings.extension)
        image_path = Path(f"{output_base}{settings.extension}")
        image_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = image_path.parent / f"{uuid.uuid4()}{settings.extension}"

        options = ImageExportOptions(
            file_path=tmp_path,
            file_type=file_type,
            resolution=settings.resolution,
            pixel_size=settings.image_size,
            fit_direction=FitDirection.VERTICAL,
            export_range=ExportRange.VISIBLE_REGION_OF_CURRENT_VIEW,
            create_website=False,
            view_ids=[view.id],
        )

        try:
            with workspace.transaction("Print"):
                zoom = self.scale_heuristic.compute_for_view(workspace, view)
                logger.debug(f"视图缩放系数: {view.name} -> {zoom:.4f}")
                workspace.zoom_open_views(zoom)

                if not workspace.is_valid_export_name(str(output_base)):
                    logger.info(f"导出文件名不合法，跳过: {output_base}")
                    return None

                try:
                    workspace.export_image(options)
                except HostOperationError as e:
                    raise ExportError(f"图片导出失败: {image_path.name}: {e}") from e

            if not crop_center(tmp_path, image_path, settings.image_size, file_type):
                return None
            return image_path
        finally:
            # 宿主拒绝导出前可能已写出部分文件
            tmp_path.unlink(missing_ok=True)
