"""
Revit 工作区适配器 - IHostWorkspace 的 Revit API 实现

运行环境：pyRevit CPython 引擎（pythonnet），
Revit API 在构造时导入，离开 Revit 时抛 HostOperationError。

职责：
1. 把不透明ID与 Revit ElementId 互转
2. 事务：正常提交，异常回滚；事务内的警告直接删除
3. Revit InvalidOperationException 转为 HostOperationError
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from ..interfaces import HostOperationError, IHostWorkspace
from ..models import (
    BBox3D,
    DetailLevel,
    ElementId,
    FamilyDefinition,
    FamilySymbol,
    FitDirection,
    ImageExportOptions,
    ImageFileType,
    LevelInfo,
    Point3D,
    ViewInfo,
    ViewType,
)

logger = logging.getLogger(__name__)


class RevitWorkspace(IHostWorkspace):
    """Revit 工作区"""

    def __init__(self, uidoc: Any):
        try:
            import clr

            clr.AddReference("RevitAPI")
            from Autodesk.Revit import DB
            from Autodesk.Revit import Exceptions as RevitExceptions
            from Autodesk.Revit.DB.Structure import StructuralType
            from System.Collections.Generic import List
        except ImportError as e:
            raise HostOperationError("Revit API 不可用，需在 Revit 内运行") from e

        self.uidoc = uidoc
        self.DB = DB
        self.StructuralType = StructuralType
        self.List = List
        self._invalid_operation = RevitExceptions.InvalidOperationException
        self._argument_exception = RevitExceptions.ArgumentException
        self._preprocessor = _make_warning_swallower(DB)

    @property
    def doc(self) -> Any:
        return self.uidoc.Document

    # ------------------------------------------------------------------
    # ID 转换
    # ------------------------------------------------------------------

    @staticmethod
    def _id_value(element_id: Any) -> ElementId:
        # Revit 2024+ 使用 Value，之前版本使用 IntegerValue
        value = getattr(element_id, "Value", None)
        if value is None:
            value = element_id.IntegerValue
        return int(value)

    def _element_id(self, element_id: ElementId) -> Any:
        return self.DB.ElementId(element_id)

    def _element(self, element_id: ElementId) -> Any:
        element = self.doc.GetElement(self._element_id(element_id))
        if element is None:
            raise HostOperationError(f"元素不存在: {element_id}")
        return element

    def _xyz(self, point: Point3D) -> Any:
        return self.DB.XYZ(point.x, point.y, point.z)

    def _collect_ids(self, cls: Any) -> list[ElementId]:
        collector = self.DB.FilteredElementCollector(self.doc).OfClass(cls)
        return [self._id_value(eid) for eid in collector.ToElementIds()]

    # ------------------------------------------------------------------
    # 事务与文档
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self, name: str):
        t = self.DB.Transaction(self.doc, name)
        options = t.GetFailureHandlingOptions()
        options.SetFailuresPreprocessor(self._preprocessor)
        t.SetFailureHandlingOptions(options)
        t.Start()
        try:
            yield
        except Exception:
            if t.HasStarted() and not t.HasEnded():
                t.RollBack()
            raise
        else:
            t.Commit()

    def title(self) -> str:
        return self.doc.Title

    def save_as(self, path: Path) -> None:
        try:
            self.doc.SaveAs(str(path))
        except (self._invalid_operation, self._argument_exception) as e:
            raise HostOperationError(f"项目另存失败: {path}: {e}") from e

    def document_path(self) -> Path | None:
        path_name = self.doc.PathName
        return Path(path_name) if path_name else None

    def open_document(self, path: Path) -> None:
        old_doc = self.doc
        try:
            self.uidoc = self.uidoc.Application.OpenAndActivateDocument(str(path))
        except (self._invalid_operation, self._argument_exception) as e:
            raise HostOperationError(f"文档无法打开: {path}: {e}") from e
        if old_doc.PathName != str(path):
            old_doc.Close(False)

    def create_empty_project(self, path: Path) -> None:
        application = self.uidoc.Application.Application
        empty_doc = application.NewProjectDocument(self.DB.UnitSystem.Metric)
        try:
            empty_doc.SaveAs(str(path))
        finally:
            empty_doc.Close(False)

    # ------------------------------------------------------------------
    # 族
    # ------------------------------------------------------------------

    def load_family(self, path: Path) -> FamilyDefinition | None:
        # out 参数传占位值，返回 (bool, Family)
        loaded, family = self.doc.LoadFamily(str(path), None)
        if not loaded or family is None:
            logger.debug(f"宿主未载入族: {path}")
            return None
        return self._family_definition(family, path)

    def find_family(self, name: str) -> FamilyDefinition | None:
        for family in self.DB.FilteredElementCollector(self.doc).OfClass(self.DB.Family):
            if family.Name == name:
                return self._family_definition(family, None)
        return None

    def _family_definition(self, family: Any, path: Path | None) -> FamilyDefinition:
        symbols = []
        for symbol_id in family.GetFamilySymbolIds():
            symbol = self.doc.GetElement(symbol_id)
            symbols.append(
                FamilySymbol(
                    id=self._id_value(symbol_id),
                    name=symbol.Name,
                    family_name=family.Name,
                )
            )
        return FamilyDefinition(
            id=self._id_value(family.Id),
            name=path.stem if path else family.Name,
            source_path=path,
            symbols=symbols,
        )

    def list_family_ids(self) -> list[ElementId]:
        return self._collect_ids(self.DB.Family)

    def get_symbol_parameter(self, symbol_id: ElementId, name: str) -> str | None:
        param = self._element(symbol_id).LookupParameter(name)
        if param is None:
            return None
        return param.AsString() or param.AsValueString()

    def activate_symbol(self, symbol_id: ElementId) -> None:
        symbol = self._element(symbol_id)
        if not symbol.IsActive:
            symbol.Activate()

    # ------------------------------------------------------------------
    # 实例与宿主构件
    # ------------------------------------------------------------------

    def place_instance(self, symbol_id: ElementId, point: Point3D, host_id: ElementId) -> ElementId:
        try:
            instance = self.doc.Create.NewFamilyInstance(
                self._xyz(point),
                self._element(symbol_id),
                self._element(host_id),
                self.StructuralType.NonStructural,
            )
        except (self._invalid_operation, self._argument_exception) as e:
            raise HostOperationError(f"放置实例失败: {e}") from e
        self.doc.Regenerate()
        return self._id_value(instance.Id)

    def create_wall(self, start: Point3D, end: Point3D, level_id: ElementId) -> ElementId:
        line = self.DB.Line.CreateBound(self._xyz(start), self._xyz(end))
        wall = self.DB.Wall.Create(self.doc, line, self._element_id(level_id), True)
        return self._id_value(wall.Id)

    def list_instance_ids(self) -> list[ElementId]:
        return self._collect_ids(self.DB.FamilyInstance)

    def get_instance_family(self, instance_id: ElementId) -> ElementId:
        return self._id_value(self._element(instance_id).Symbol.Family.Id)

    def list_wall_ids(self) -> list[ElementId]:
        return self._collect_ids(self.DB.Wall)

    def get_bounding_box(self, element_id: ElementId, view_id: ElementId | None = None) -> BBox3D | None:
        view = self._element(view_id) if view_id is not None else None
        box = self._element(element_id).get_BoundingBox(view)
        if box is None:
            return None
        return BBox3D(
            min_x=box.Min.X, min_y=box.Min.Y, min_z=box.Min.Z,
            max_x=box.Max.X, max_y=box.Max.Y, max_z=box.Max.Z,
        )

    def delete_element(self, element_id: ElementId) -> None:
        self.doc.Delete(self._element_id(element_id))

    def hide_elements(self, view_id: ElementId, element_ids: list[ElementId]) -> None:
        ids = self.List[self.DB.ElementId]()
        for element_id in element_ids:
            ids.Add(self._element_id(element_id))
        self._element(view_id).HideElements(ids)

    # ------------------------------------------------------------------
    # 视图
    # ------------------------------------------------------------------

    def _view_info(self, view: Any) -> ViewInfo:
        view_types = {
            self.DB.ViewType.EngineeringPlan: ViewType.ENGINEERING_PLAN,
            self.DB.ViewType.FloorPlan: ViewType.FLOOR_PLAN,
            self.DB.ViewType.ThreeD: ViewType.THREE_D,
        }
        level = getattr(view, "GenLevel", None)
        return ViewInfo(
            id=self._id_value(view.Id),
            name=view.Name,
            view_type=view_types.get(view.ViewType, ViewType.OTHER),
            is_template=view.IsTemplate,
            level_id=self._id_value(level.Id) if level is not None else None,
        )

    def list_views(self) -> list[ViewInfo]:
        collector = self.DB.FilteredElementCollector(self.doc).OfClass(self.DB.View)
        return [self._view_info(view) for view in collector]

    def list_levels(self) -> list[LevelInfo]:
        collector = self.DB.FilteredElementCollector(self.doc).OfClass(self.DB.Level)
        return [LevelInfo(id=self._id_value(level.Id), name=level.Name) for level in collector]

    def _view_family_type(self, view_family: Any) -> Any:
        collector = self.DB.FilteredElementCollector(self.doc).OfClass(self.DB.ViewFamilyType)
        for vft in collector:
            if vft.ViewFamily == view_family:
                return vft
        raise HostOperationError(f"缺少视图族类型: {view_family}")

    def create_plan_view(self, level_id: ElementId) -> ViewInfo:
        vft = self._view_family_type(self.DB.ViewFamily.StructuralPlan)
        view = self.DB.ViewPlan.Create(self.doc, vft.Id, self._element_id(level_id))
        return self._view_info(view)

    def create_isometric_view(self) -> ViewInfo:
        vft = self._view_family_type(self.DB.ViewFamily.ThreeDimensional)
        view = self.DB.View3D.CreateIsometric(self.doc, vft.Id)
        return self._view_info(view)

    def get_active_view(self) -> ViewInfo:
        return self._view_info(self.doc.ActiveView)

    def set_active_view(self, view_id: ElementId) -> None:
        self.uidoc.ActiveView = self._element(view_id)

    def set_view_display(self, view_id: ElementId, scale: int, detail_level: DetailLevel) -> None:
        levels = {
            DetailLevel.COARSE: self.DB.ViewDetailLevel.Coarse,
            DetailLevel.MEDIUM: self.DB.ViewDetailLevel.Medium,
            DetailLevel.FINE: self.DB.ViewDetailLevel.Fine,
        }
        view = self._element(view_id)
        view.DetailLevel = levels[detail_level]
        view.Scale = scale

    def zoom_open_views(self, zoom: float) -> None:
        for ui_view in self.uidoc.GetOpenUIViews():
            ui_view.ZoomToFit()
            ui_view.Zoom(zoom)
            self.uidoc.RefreshActiveView()

    # ------------------------------------------------------------------
    # 导出
    # ------------------------------------------------------------------

    def is_valid_export_name(self, name: str) -> bool:
        return bool(self.DB.ImageExportOptions.IsValidFileName(name))

    def export_image(self, options: ImageExportOptions) -> None:
        DB = self.DB
        file_types = {
            ImageFileType.PNG: DB.ImageFileType.PNG,
            ImageFileType.JPEG_LOSSLESS: DB.ImageFileType.JPEGLossless,
            ImageFileType.BMP: DB.ImageFileType.BMP,
            ImageFileType.TIFF: DB.ImageFileType.TIFF,
            ImageFileType.TARGA: DB.ImageFileType.TARGA,
        }
        export = DB.ImageExportOptions()
        export.ViewName = "temporary"
        export.FilePath = str(options.file_path)
        export.FitDirection = (
            DB.FitDirectionType.Vertical
            if options.fit_direction == FitDirection.VERTICAL
            else DB.FitDirectionType.Horizontal
        )
        export.HLRandWFViewsFileType = file_types[options.file_type]
        export.ImageResolution = _image_resolution(DB, options.resolution)
        export.ShouldCreateWebSite = options.create_website
        export.PixelSize = options.pixel_size

        if options.view_ids:
            ids = self.List[DB.ElementId]()
            for view_id in options.view_ids:
                ids.Add(self._element_id(view_id))
            export.SetViewsAndSheets(ids)
        export.ExportRange = DB.ExportRange.VisibleRegionOfCurrentView

        try:
            self.doc.ExportImage(export)
        except (self._invalid_operation, self._argument_exception) as e:
            raise HostOperationError(f"宿主拒绝导出: {e}") from e


def _image_resolution(DB: Any, dpi: int) -> Any:
    """DPI 取不超过它的最大档位"""
    steps = [
        (600, DB.ImageResolution.DPI_600),
        (300, DB.ImageResolution.DPI_300),
        (150, DB.ImageResolution.DPI_150),
    ]
    for threshold, value in steps:
        if dpi >= threshold:
            return value
    return DB.ImageResolution.DPI_72


def _make_warning_swallower(DB: Any) -> Any:
    """事务预处理器：删除所有警告，避免批处理被弹窗打断"""

    class WarningSwallower(DB.IFailuresPreprocessor):
        __namespace__ = "FamilyPrinter"

        def PreprocessFailures(self, failures_accessor):
            failures_accessor.DeleteAllWarnings()
            return DB.FailureProcessingResult.Continue

    return WarningSwallower()
