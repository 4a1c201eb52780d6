"""
模块接口契约 - 定义宿主工作区与可注入能力的抽象接口

设计原则：
1. 核心逻辑只通过 IHostWorkspace 访问宿主，不直接依赖宿主API
2. 宿主对象（文档/视图/元素）以不透明ID传递，生命周期由宿主管理
3. 所有修改操作都包在 transaction() 中（提交或整体回滚）
4. 便于单元测试和mock替换

使用方式：
    from family_printer.interfaces import IHostWorkspace

    class MyWorkspace(IHostWorkspace):
        def transaction(self, name: str):
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import (
        BBox3D,
        DetailLevel,
        ElementId,
        FamilyDefinition,
        ImageExportOptions,
        LevelInfo,
        Point3D,
        ViewInfo,
    )


# ============================================================================
# 宿主工作区接口
# ============================================================================

class IHostWorkspace(ABC):
    """宿主工作区接口 - 整个批处理复用的唯一宿主文档"""

    # --- 事务与文档 ---

    @abstractmethod
    def transaction(self, name: str) -> AbstractContextManager[None]:
        """
        开启一个原子操作单元

        正常退出时提交；with 块内抛出异常时整体回滚并继续抛出。

        Args:
            name: 事务名称（显示在宿主撤销列表中）
        """
        ...

    @abstractmethod
    def title(self) -> str:
        """宿主文档标题（是否带扩展名取决于宿主版本）"""
        ...

    @abstractmethod
    def save_as(self, path: Path) -> None:
        """
        另存为独立项目文档

        Raises:
            HostOperationError: 文件已存在或被占用
        """
        ...

    @abstractmethod
    def document_path(self) -> Path | None:
        """当前文档的保存路径（从未保存过时返回 None）"""
        ...

    @abstractmethod
    def open_document(self, path: Path) -> None:
        """
        打开并激活文档，原文档随之关闭（不保存）

        Raises:
            HostOperationError: 文档无法打开
        """
        ...

    @abstractmethod
    def create_empty_project(self, path: Path) -> None:
        """新建空项目文档并保存到 path（不切换当前文档）"""
        ...

    # --- 族 ---

    @abstractmethod
    def load_family(self, path: Path) -> FamilyDefinition | None:
        """
        载入族文件（需在事务内调用）

        Returns:
            载入的族；宿主拒绝载入（如同名族已存在）时返回 None
        """
        ...

    @abstractmethod
    def find_family(self, name: str) -> FamilyDefinition | None:
        """按名称查找已载入的族"""
        ...

    @abstractmethod
    def list_family_ids(self) -> list[ElementId]:
        """工作区内所有已载入族"""
        ...

    @abstractmethod
    def get_symbol_parameter(self, symbol_id: ElementId, name: str) -> str | None:
        """读取类型参数值（参数不存在时返回 None）"""
        ...

    @abstractmethod
    def activate_symbol(self, symbol_id: ElementId) -> None:
        """激活族类型（放置前必须调用）"""
        ...

    # --- 实例与宿主构件 ---

    @abstractmethod
    def place_instance(
        self,
        symbol_id: ElementId,
        point: Point3D,
        host_id: ElementId,
    ) -> ElementId:
        """
        放置族实例（非结构）

        Args:
            symbol_id: 族类型
            point: 放置点
            host_id: 承载构件（标高或墙）
        """
        ...

    @abstractmethod
    def create_wall(self, start: Point3D, end: Point3D, level_id: ElementId) -> ElementId:
        """在指定标高创建直墙"""
        ...

    @abstractmethod
    def list_instance_ids(self) -> list[ElementId]:
        """工作区内所有族实例"""
        ...

    @abstractmethod
    def get_instance_family(self, instance_id: ElementId) -> ElementId:
        """实例所属族的ID"""
        ...

    @abstractmethod
    def list_wall_ids(self) -> list[ElementId]:
        """工作区内所有墙"""
        ...

    @abstractmethod
    def get_bounding_box(
        self,
        element_id: ElementId,
        view_id: ElementId | None = None,
    ) -> BBox3D | None:
        """元素在视图中的包围盒；无几何时返回 None"""
        ...

    @abstractmethod
    def delete_element(self, element_id: ElementId) -> None:
        """删除元素（需在事务内调用）"""
        ...

    @abstractmethod
    def hide_elements(self, view_id: ElementId, element_ids: list[ElementId]) -> None:
        """在视图中隐藏元素（需在事务内调用）"""
        ...

    # --- 视图 ---

    @abstractmethod
    def list_views(self) -> list[ViewInfo]:
        """工作区内所有视图"""
        ...

    @abstractmethod
    def list_levels(self) -> list[LevelInfo]:
        """工作区内所有标高"""
        ...

    @abstractmethod
    def create_plan_view(self, level_id: ElementId) -> ViewInfo:
        """在标高上创建结构平面视图（需在事务内调用）"""
        ...

    @abstractmethod
    def create_isometric_view(self) -> ViewInfo:
        """创建三维轴测视图（需在事务内调用）"""
        ...

    @abstractmethod
    def get_active_view(self) -> ViewInfo:
        """当前活动视图"""
        ...

    @abstractmethod
    def set_active_view(self, view_id: ElementId) -> None:
        """切换活动视图"""
        ...

    @abstractmethod
    def set_view_display(
        self,
        view_id: ElementId,
        scale: int,
        detail_level: DetailLevel,
    ) -> None:
        """设置视图比例与详细程度（需在事务内调用）"""
        ...

    @abstractmethod
    def zoom_open_views(self, zoom: float) -> None:
        """所有打开的视图：缩放到适合 → 按系数缩放 → 刷新"""
        ...

    # --- 导出 ---

    @abstractmethod
    def is_valid_export_name(self, name: str) -> bool:
        """导出文件名是否被宿主接受"""
        ...

    @abstractmethod
    def export_image(self, options: ImageExportOptions) -> None:
        """
        导出图片

        Raises:
            HostOperationError: 宿主拒绝导出
        """
        ...


# ============================================================================
# 可注入能力
# ============================================================================

class ITitleResolver(Protocol):
    """文档标题派生协议（按宿主版本配置）"""

    def title_of(self, workspace: IHostWorkspace) -> str:
        """返回不带扩展名的文档标题"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class FamilyPrinterError(Exception):
    """基础异常"""
    pass


class HostOperationError(FamilyPrinterError):
    """宿主操作被拒绝（文件已存在/被占用等，可恢复）"""
    pass


class FamilyNotFoundError(FamilyPrinterError):
    """族目录不存在或未找到族文件（批处理级）"""
    pass


class FamilyLoadError(FamilyPrinterError):
    """族载入失败（族级）"""
    pass


class PlacementError(FamilyPrinterError):
    """放置失败（变体级）"""
    pass


class ExportError(FamilyPrinterError):
    """导出错误（变体级）"""
    pass


class UnknownImageFormatError(FamilyPrinterError):
    """未知图片格式（批处理级）"""
    pass


class UnknownHostVersionError(FamilyPrinterError):
    """未配置标题派生规则的宿主版本（批处理级）"""
    pass
