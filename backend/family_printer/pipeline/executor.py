"""
批处理执行器 - 遍历所有族的所有类型

职责：
1. 批处理级校验（图片格式/宿主版本/族目录），失败即中止整批
2. 逐族载入，载入失败跳过该族
3. 逐类型调用工作区生命周期，单个类型失败不影响其余类型
4. 汇总已尝试的产物名，更新进度
5. 仅在类型边界检查取消请求
6. 扫描目录运行结束后恢复批处理前的文档

测试要点：
- test_run_batch_counts: 2/0/1 个类型的三个族共尝试 3 个
- test_family_load_failure: 族载入失败跳过
- test_variant_failure_isolation: 类型失败隔离
- test_cancel_between_variants: 取消在类型边界生效
- test_run_folder_restores_document: 结束后重新打开原文档
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..config import get_config
from ..interfaces import FamilyLoadError, FamilyNotFoundError, IHostWorkspace
from ..models import BatchJob, PathSet, RenderSettings, ViewKind
from ..project import WorkspaceLifecycle
from ..render import resolve_image_file_type
from .scanner import scan_family_files

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BatchJob], None]


class BatchExecutor:
    """批处理执行器"""

    def __init__(
        self,
        workspace: IHostWorkspace,
        lifecycle: WorkspaceLifecycle | None = None,
        default_project: Path | None = None,
    ):
        self.config = get_config()
        self.workspace = workspace
        self.lifecycle = lifecycle or WorkspaceLifecycle()
        self.default_project = default_project or Path(self.config.host.default_project)

    def run_folder(
        self,
        paths: PathSet,
        settings: RenderSettings | None = None,
        view_kind: ViewKind = ViewKind.PLAN,
        job: BatchJob | None = None,
        progress_cb: ProgressCallback | None = None,
    ) -> list[str]:
        """
        扫描族目录后执行批处理

        另存项目会把当前文档换成最后生成的项目；结束后（含异常）重新打开
        批处理前的文档，原文档未保存过时打开默认空项目。
        """
        try:
            family_files = scan_family_files(
                paths.families_dir,
                self.config.host.family_extension,
                exclude_dirs=[paths.projects_dir, paths.images_dir],
            )
        except FamilyNotFoundError as e:
            logger.error(str(e))
            if job is not None:
                job.mark_failed(str(e))
            raise

        initial_path = self.workspace.document_path()
        default_project = self.default_project
        if not default_project.exists():
            default_project.parent.mkdir(parents=True, exist_ok=True)
            self.workspace.create_empty_project(default_project)
        try:
            return self.run_batch(family_files, paths, settings, view_kind, job, progress_cb)
        finally:
            self.restore_document(initial_path, default_project)

    def restore_document(self, initial_path: Path | None, default_project: Path) -> None:
        """重新打开批处理前的文档（不存在时打开默认空项目）"""
        target = initial_path if initial_path is not None and initial_path.exists() else default_project
        self.workspace.open_document(target)
        logger.info(f"已重新打开文档: {target}")

    def run_batch(
        self,
        family_files: list[Path],
        paths: PathSet,
        settings: RenderSettings | None = None,
        view_kind: ViewKind = ViewKind.PLAN,
        job: BatchJob | None = None,
        progress_cb: ProgressCallback | None = None,
    ) -> list[str]:
        """
        执行批处理

        Args:
            family_files: 族文件列表
            paths: 路径集合
            settings: 出图参数（为空时只生成项目）
            view_kind: 平面或轴测
            job: 任务对象（用于进度/取消）
            progress_cb: 每处理完一个类型回调一次

        Returns:
            已尝试的产物名列表
        """
        job = job or BatchJob(view_kind=view_kind)
        job.mark_running()
        job.progress.families_total = len(family_files)

        try:
            if settings is not None:
                resolve_image_file_type(settings.extension)
                self.lifecycle.validate_host()
        except Exception as e:
            logger.error(f"批处理校验失败: {e}")
            job.mark_failed(str(e))
            raise

        for family_path in family_files:
            if job.cancel_requested:
                break
            self._run_family(family_path, paths, settings, view_kind, job, progress_cb)
            job.progress.families_done += 1

        if job.cancel_requested:
            logger.info(f"[{job.job_id}] 批处理已取消，已尝试 {len(job.attempted)} 个类型")
            job.mark_cancelled()
        else:
            job.mark_succeeded()
        job.progress.message = f"完成: {len(job.attempted)} 个类型"
        self._notify(job, progress_cb)
        return list(job.attempted)

    def _run_family(
        self,
        family_path: Path,
        paths: PathSet,
        settings: RenderSettings | None,
        view_kind: ViewKind,
        job: BatchJob,
        progress_cb: ProgressCallback | None,
    ) -> None:
        """处理单个族"""
        job.progress.current_family = family_path.name
        workspace = self.workspace

        try:
            self.lifecycle.remove_excess_families(workspace)
            family = self.lifecycle.load_family(workspace, family_path)
        except FamilyLoadError as e:
            logger.warning(f"族载入失败，跳过: {family_path}: {e}")
            job.add_flag(f"载入失败:{family_path.name}")
            return
        except Exception as e:
            logger.exception(f"族载入异常，跳过: {family_path}")
            job.add_flag(f"载入失败:{family_path.name}")
            job.errors.append(f"{family_path.name}: {e}")
            return

        try:
            for symbol in family.symbols:
                if job.cancel_requested:
                    break
                project_name = f"{family.name}&{symbol.name}"
                job.progress.current_variant = project_name

                try:
                    project_name = self.lifecycle.resolve_project_name(workspace, family, symbol)
                    job.attempted.append(project_name)
                    job.progress.current_variant = project_name
                    self.lifecycle.process_variant(
                        workspace, family, symbol, paths, settings, view_kind
                    )
                except Exception as e:
                    logger.error(f"类型处理失败: {project_name}: {e}")
                    job.add_flag(f"处理失败:{project_name}")
                    job.errors.append(f"{project_name}: {e}")

                job.progress.variants_attempted += 1
                job.progress.message = f"已处理 {job.progress.variants_attempted} 个类型"
                self._notify(job, progress_cb)
        finally:
            self.lifecycle.release_family(workspace, family)

    @staticmethod
    def _notify(job: BatchJob, progress_cb: ProgressCallback | None) -> None:
        if progress_cb is not None:
            progress_cb(job)
