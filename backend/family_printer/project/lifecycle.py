"""
工作区生命周期 - 单个族类型：放置 → 另存项目 → 出图 → 清理

整个批处理复用同一宿主文档，每一步都是独立提交的事务，
任何一步失败都不能让下一个类型继承脏状态：
1. 载入族前清空工作区已有族
2. 放置前清除上一类型遗留的实例与临时墙
3. 解析项目名（标识参数优先，否则 "<族名>&<类型名>"），规范化后作为文件名
4. 放置（策略链）
5. 另存为独立项目（目标文件存在且未被占用时先删除）
6. 有出图参数时：切换视图、隐藏临时墙、设置视图、导出裁切
7. 删除实例、临时墙与族类型（finally 中执行）
8. 族的所有类型处理完后删除族

测试要点：
- test_resolve_project_name_fallback: 标识参数为空时回退
- test_process_variant_dry_run: 不出图只存项目
- test_process_variant_renders: 出图并隐藏临时墙
- test_cleanup_after_failure: 失败后仍清理
- test_remove_empty_families: 只删除无实例的族
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import get_config
from ..interfaces import (
    FamilyLoadError,
    IHostWorkspace,
    ITitleResolver,
    PlacementError,
)
from ..models import (
    DetailLevel,
    ElementId,
    FamilyDefinition,
    FamilySymbol,
    PathSet,
    PlacementResult,
    RenderSettings,
    ViewInfo,
    ViewKind,
)
from ..naming import get_title_resolver, sanitize
from ..render import ImageExporter
from .placement import PlacementResolver
from .views import ViewResolver

logger = logging.getLogger(__name__)


def is_file_accessible(path: Path) -> bool:
    """文件未被其他进程占用"""
    try:
        with open(path, "r+b"):
            return True
    except OSError:
        return False


class WorkspaceLifecycle:
    """工作区生命周期管理"""

    def __init__(
        self,
        placement: PlacementResolver | None = None,
        view_resolver: ViewResolver | None = None,
        exporter: ImageExporter | None = None,
        title_resolver: ITitleResolver | None = None,
        identity_parameter: str | None = None,
        project_extension: str | None = None,
    ):
        config = get_config()
        self.view_resolver = view_resolver or ViewResolver()
        self.placement = placement or PlacementResolver(view_resolver=self.view_resolver)
        self.exporter = exporter or ImageExporter()
        self._title_resolver = title_resolver
        self.identity_parameter = identity_parameter or config.naming.identity_parameter
        self.project_extension = project_extension or config.host.project_extension

    @property
    def title_resolver(self) -> ITitleResolver:
        """按配置的宿主版本惰性创建（未知版本抛 UnknownHostVersionError）"""
        if self._title_resolver is None:
            host = get_config().host
            self._title_resolver = get_title_resolver(host.version, host.title_conventions)
        return self._title_resolver

    def validate_host(self) -> ITitleResolver:
        """
        出图前校验宿主版本

        Raises:
            UnknownHostVersionError: 宿主版本未配置标题规则
        """
        return self.title_resolver

    # ------------------------------------------------------------------
    # 族级
    # ------------------------------------------------------------------

    def remove_excess_families(self, workspace: IHostWorkspace) -> None:
        """删除工作区内所有已载入族"""
        for family_id in workspace.list_family_ids():
            self._delete(workspace, family_id, "族")

    def remove_empty_families(self, workspace: IHostWorkspace) -> list[ElementId]:
        """删除没有任何实例的族，返回尝试删除的族ID"""
        used = {
            workspace.get_instance_family(instance_id)
            for instance_id in workspace.list_instance_ids()
        }
        removed = [fid for fid in workspace.list_family_ids() if fid not in used]
        for family_id in removed:
            self._delete(workspace, family_id, "族")
        logger.info(f"已删除无实例的族: {len(removed)} 个")
        return removed

    def load_family(self, workspace: IHostWorkspace, path: Path) -> FamilyDefinition:
        """
        载入族文件

        Raises:
            FamilyLoadError: 载入失败且工作区中无同名族
        """
        with workspace.transaction("Load Family"):
            family = workspace.load_family(path)
        if family is None:
            family = workspace.find_family(path.stem)
        if family is None:
            raise FamilyLoadError(f"族载入失败: {path}")
        return family

    def release_family(self, workspace: IHostWorkspace, family: FamilyDefinition) -> None:
        """删除族定义"""
        self._delete(workspace, family.id, "族")

    # ------------------------------------------------------------------
    # 类型级
    # ------------------------------------------------------------------

    def resolve_project_name(
        self,
        workspace: IHostWorkspace,
        family: FamilyDefinition,
        symbol: FamilySymbol,
    ) -> str:
        """项目名：标识参数优先，否则为 <族名>&<类型名>"""
        if self.identity_parameter:
            value = workspace.get_symbol_parameter(symbol.id, self.identity_parameter)
            if value and value.strip():
                return value.strip()
        return f"{family.name}&{symbol.name}"

    def project_path(self, paths: PathSet, project_name: str) -> Path:
        return paths.projects_dir / f"{sanitize(project_name)}{self.project_extension}"

    def sweep(self, workspace: IHostWorkspace, keep_id: ElementId | None = None) -> None:
        """清除遗留的族实例与墙"""
        for element_id in workspace.list_instance_ids() + workspace.list_wall_ids():
            if element_id != keep_id:
                self._delete(workspace, element_id, "遗留元素")

    def process_variant(
        self,
        workspace: IHostWorkspace,
        family: FamilyDefinition,
        symbol: FamilySymbol,
        paths: PathSet,
        settings: RenderSettings | None = None,
        view_kind: ViewKind = ViewKind.PLAN,
    ) -> str:
        """
        处理单个族类型

        Args:
            workspace: 宿主工作区
            family: 所属族
            symbol: 族类型
            paths: 路径集合
            settings: 出图参数（为空时只生成项目）
            view_kind: 平面或轴测

        Returns:
            产物名（项目名）

        Raises:
            PlacementError: 所有放置策略失败
            HostOperationError: 另存被宿主拒绝
            ExportError: 导出被宿主拒绝
        """
        project_name = self.resolve_project_name(workspace, family, symbol)
        project_path = self.project_path(paths, project_name)

        self.sweep(workspace, keep_id=symbol.id)

        placement: PlacementResult | None = None
        try:
            placement = self.placement.place(workspace, symbol)
            if not placement.succeeded:
                raise PlacementError(f"放置失败: {project_name}: {placement.reason}")

            paths.ensure_projects_dir()
            self.save_project(workspace, project_path)

            if settings is not None:
                self.render_project(workspace, placement, paths, settings, view_kind)
        finally:
            self.cleanup(workspace, placement, symbol)

        return project_name

    def save_project(self, workspace: IHostWorkspace, project_path: Path) -> None:
        """另存为项目（目标存在且未占用时先删除）"""
        if project_path.exists() and is_file_accessible(project_path):
            project_path.unlink()
        logger.debug(f"另存项目: {project_path}")
        workspace.save_as(project_path)

    def render_project(
        self,
        workspace: IHostWorkspace,
        placement: PlacementResult,
        paths: PathSet,
        settings: RenderSettings,
        view_kind: ViewKind,
    ) -> Path | None:
        """切换出图视图并导出"""
        view = self.view_resolver.activate(workspace, view_kind)
        if placement.host_id is not None:
            with workspace.transaction("Hide Host"):
                workspace.hide_elements(view.id, [placement.host_id])

        self._apply_view_settings(workspace, view, settings)

        paths.ensure_images_dir()
        output_base = paths.images_dir / self.title_resolver.title_of(workspace)
        return self.exporter.render_and_crop(workspace, view, settings, output_base)

    def cleanup(
        self,
        workspace: IHostWorkspace,
        placement: PlacementResult | None,
        symbol: FamilySymbol,
    ) -> None:
        """删除实例、临时墙与族类型"""
        if placement is not None:
            if placement.instance_id is not None:
                self._delete(workspace, placement.instance_id, "实例")
            if placement.host_id is not None:
                self._delete(workspace, placement.host_id, "临时墙")
        self._delete(workspace, symbol.id, "族类型")

    # ------------------------------------------------------------------

    def _apply_view_settings(
        self,
        workspace: IHostWorkspace,
        view: ViewInfo,
        settings: RenderSettings,
    ) -> None:
        workspace.zoom_open_views(settings.zoom_value)
        detail_level = DetailLevel.FINE if view.is_3d else settings.detail_level
        with workspace.transaction("SetView"):
            workspace.set_view_display(view.id, settings.scale, detail_level)

    @staticmethod
    def _delete(workspace: IHostWorkspace, element_id: ElementId, label: str) -> None:
        """单独事务删除；失败只记录，由下一次清扫自愈"""
        try:
            with workspace.transaction("Delete"):
                workspace.delete_element(element_id)
        except Exception as e:
            logger.warning(f"删除{label}失败: {element_id}: {e}")
