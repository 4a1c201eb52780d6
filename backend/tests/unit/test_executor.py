"""
批处理执行器与族文件扫描单元测试

每个模块完成后必须运行：pytest tests/unit/test_executor.py -v
"""

from pathlib import Path

import pytest

from family_printer.config import HostConfig, RuntimeConfig
from family_printer.interfaces import (
    FamilyNotFoundError,
    HostOperationError,
    UnknownHostVersionError,
    UnknownImageFormatError,
)
from family_printer.models import BatchJob, JobStatus, PathSet, RenderSettings
from family_printer.naming import PlainTitleResolver
from family_printer.pipeline import BatchExecutor, scan_family_files
from family_printer.project import (
    DirectPlacement,
    PlacementResolver,
    ViewResolver,
    WallHostedPlacement,
    WorkspaceLifecycle,
)
from fakes import UNIT_BOX, FakeWorkspace, SymbolSpec


class BrokenParameterWorkspace(FakeWorkspace):
    """读取指定类型的参数时宿主报错"""

    def __init__(self, broken_symbol: str):
        super().__init__()
        self.broken_symbol = broken_symbol

    def get_symbol_parameter(self, symbol_id: int, name: str) -> str | None:
        if self._symbol(symbol_id).name == self.broken_symbol:
            raise HostOperationError(f"参数读取失败: {symbol_id}")
        return super().get_symbol_parameter(symbol_id, name)


def make_lifecycle(title_resolver=None, identity_parameter=None) -> WorkspaceLifecycle:
    view_resolver = ViewResolver(level_name="Level 1")
    return WorkspaceLifecycle(
        placement=PlacementResolver(
            strategies=[DirectPlacement(), WallHostedPlacement(wall_length=10.0)],
            view_resolver=view_resolver,
        ),
        view_resolver=view_resolver,
        title_resolver=title_resolver,
        identity_parameter=identity_parameter,
        project_extension=".rvt",
    )


@pytest.fixture
def executor(workspace: FakeWorkspace, temp_dir: Path) -> BatchExecutor:
    return BatchExecutor(
        workspace,
        make_lifecycle(PlainTitleResolver()),
        default_project=temp_dir / "empty.rvt",
    )


@pytest.fixture
def family_files(workspace: FakeWorkspace, paths: PathSet) -> list[Path]:
    """三个族：分别有 2 / 0 / 1 个类型"""
    workspace.add_family(
        "A", [SymbolSpec("A1", direct=UNIT_BOX), SymbolSpec("A2", hosted=UNIT_BOX)]
    )
    workspace.add_family("B", [])
    workspace.add_family("C", [SymbolSpec("C1", direct=UNIT_BOX)])

    files = []
    for stem in ("A", "B", "C"):
        path = paths.families_dir / f"{stem}.rfa"
        path.write_bytes(b"rfa")
        files.append(path)
    return files


class TestScanFamilyFiles:
    """族文件扫描测试"""

    def test_recursive_sorted(self, paths: PathSet):
        sub = paths.families_dir / "sub"
        sub.mkdir()
        (sub / "Z.rfa").write_bytes(b"")
        (paths.families_dir / "A.RFA").write_bytes(b"")
        (paths.families_dir / "notes.txt").write_text("x")

        files = scan_family_files(paths.families_dir)
        assert [f.name for f in files] == ["A.RFA", "Z.rfa"]

    def test_output_dirs_excluded(self, paths: PathSet):
        """测试输出目录中的文件不作为输入"""
        (paths.families_dir / "A.rfa").write_bytes(b"")
        paths.ensure_projects_dir()
        (paths.projects_dir / "Backup.rfa").write_bytes(b"")

        files = scan_family_files(paths.families_dir, exclude_dirs=[paths.projects_dir])
        assert [f.name for f in files] == ["A.rfa"]

    def test_missing_dir(self, temp_dir: Path):
        with pytest.raises(FamilyNotFoundError):
            scan_family_files(temp_dir / "missing")

    def test_empty_dir(self, paths: PathSet):
        with pytest.raises(FamilyNotFoundError):
            scan_family_files(paths.families_dir)


class TestBatchExecutor:
    """批处理执行器测试"""

    def test_run_batch_counts(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet, workspace: FakeWorkspace
    ):
        """测试 2/0/1 个类型的三个族共尝试 3 个"""
        job = BatchJob()
        attempted = executor.run_batch(family_files, paths, job=job)

        assert attempted == ["A&A1", "A&A2", "C&C1"]
        assert job.status == JobStatus.SUCCEEDED
        assert job.progress.families_total == 3
        assert job.progress.families_done == 3
        assert job.progress.variants_attempted == 3
        assert sorted(p.name for p in paths.projects_dir.iterdir()) == [
            "A&A1.rvt",
            "A&A2.rvt",
            "C&C1.rvt",
        ]
        # 每个族处理完后被删除
        assert workspace.list_family_ids() == []

    def test_render_batch(
        self,
        executor: BatchExecutor,
        family_files: list[Path],
        paths: PathSet,
        render_settings: RenderSettings,
    ):
        executor.run_batch(family_files, paths, render_settings)
        assert sorted(p.name for p in paths.images_dir.iterdir()) == [
            "A&A1.png",
            "A&A2.png",
            "C&C1.png",
        ]

    def test_family_load_failure(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet
    ):
        """测试族载入失败跳过该族"""
        missing = paths.families_dir / "Missing.rfa"
        missing.write_bytes(b"rfa")

        job = BatchJob()
        attempted = executor.run_batch([missing] + family_files, paths, job=job)
        assert attempted == ["A&A1", "A&A2", "C&C1"]
        assert job.flags == ["载入失败:Missing.rfa"]
        assert job.status == JobStatus.SUCCEEDED

    def test_variant_failure_isolation(
        self, executor: BatchExecutor, paths: PathSet, workspace: FakeWorkspace
    ):
        """测试单个类型失败不影响其余类型"""
        workspace.add_family(
            "Mixed",
            [SymbolSpec("M1", direct=UNIT_BOX), SymbolSpec("Ghost"), SymbolSpec("M3", direct=UNIT_BOX)],
        )
        path = paths.families_dir / "Mixed.rfa"
        path.write_bytes(b"rfa")

        job = BatchJob()
        attempted = executor.run_batch([path], paths, job=job)
        assert attempted == ["Mixed&M1", "Mixed&Ghost", "Mixed&M3"]
        assert len(job.errors) == 1
        assert job.flags == ["处理失败:Mixed&Ghost"]
        assert sorted(p.name for p in paths.projects_dir.iterdir()) == ["Mixed&M1.rvt", "Mixed&M3.rvt"]

    def test_cancel_between_variants(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet
    ):
        """测试取消在类型边界生效"""
        job = BatchJob()
        attempted = executor.run_batch(
            family_files, paths, job=job, progress_cb=lambda j: j.request_cancel()
        )
        assert attempted == ["A&A1"]
        assert job.status == JobStatus.CANCELLED

    def test_progress_callback(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet
    ):
        seen = []
        executor.run_batch(family_files, paths, progress_cb=lambda j: seen.append(j.progress.variants_attempted))
        # 每个类型一次 + 结束一次
        assert seen == [1, 2, 3, 3]

    def test_unknown_image_format(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet, workspace: FakeWorkspace
    ):
        """测试未知图片格式中止整批"""
        job = BatchJob()
        with pytest.raises(UnknownImageFormatError):
            executor.run_batch(family_files, paths, RenderSettings(extension=".gif"), job=job)
        assert job.status == JobStatus.FAILED
        assert workspace.saved == []

    def test_unknown_host_version(
        self,
        family_files: list[Path],
        paths: PathSet,
        workspace: FakeWorkspace,
        render_settings: RenderSettings,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """测试未配置标题规则的宿主版本中止整批"""
        config = RuntimeConfig(host=HostConfig(version="2030"))
        monkeypatch.setattr("family_printer.project.lifecycle.get_config", lambda: config)

        executor = BatchExecutor(workspace, make_lifecycle())
        job = BatchJob()
        with pytest.raises(UnknownHostVersionError):
            executor.run_batch(family_files, paths, render_settings, job=job)
        assert job.status == JobStatus.FAILED

    def test_run_folder(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet
    ):
        """测试扫描族目录，输出目录内的族文件被排除"""
        paths.ensure_projects_dir()
        (paths.projects_dir / "Stale.rfa").write_bytes(b"rfa")

        attempted = executor.run_folder(paths)
        assert attempted == ["A&A1", "A&A2", "C&C1"]

    def test_run_folder_missing(self, executor: BatchExecutor, temp_dir: Path):
        """测试族目录不存在中止整批"""
        paths = PathSet.from_source(temp_dir / "missing", temp_dir / "images")
        job = BatchJob()
        with pytest.raises(FamilyNotFoundError):
            executor.run_folder(paths, job=job)
        assert job.status == JobStatus.FAILED

    def test_project_name_failure_isolation(self, paths: PathSet, temp_dir: Path):
        """测试读取标识参数失败只跳过该类型"""
        workspace = BrokenParameterWorkspace("A1")
        workspace.add_family(
            "A", [SymbolSpec("A1", direct=UNIT_BOX), SymbolSpec("A2", hosted=UNIT_BOX)]
        )
        workspace.add_family("C", [SymbolSpec("C1", direct=UNIT_BOX)])
        files = []
        for stem in ("A", "C"):
            path = paths.families_dir / f"{stem}.rfa"
            path.write_bytes(b"rfa")
            files.append(path)

        executor = BatchExecutor(
            workspace,
            make_lifecycle(PlainTitleResolver(), identity_parameter="Kennung"),
            default_project=temp_dir / "empty.rvt",
        )
        job = BatchJob()
        attempted = executor.run_batch(files, paths, job=job)

        assert attempted == ["A&A2", "C&C1"]
        assert job.flags == ["处理失败:A&A1"]
        assert len(job.errors) == 1
        assert job.status == JobStatus.SUCCEEDED

    def test_run_folder_restores_document(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet, workspace: FakeWorkspace, temp_dir: Path
    ):
        """测试结束后重新打开批处理前的文档"""
        initial = temp_dir / "Template.rvt"
        initial.write_bytes(b"project")
        workspace.doc_path = initial

        executor.run_folder(paths)
        assert workspace.opened == [initial]
        assert workspace.document_path() == initial
        assert workspace.title() == "Template"

    def test_run_folder_opens_default_project(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet, workspace: FakeWorkspace, temp_dir: Path
    ):
        """测试原文档未保存过时打开默认空项目"""
        executor.run_folder(paths)

        default_project = temp_dir / "empty.rvt"
        assert workspace.created_projects == [default_project]
        assert workspace.opened == [default_project]

    def test_run_folder_restores_after_abort(
        self, executor: BatchExecutor, family_files: list[Path], paths: PathSet, workspace: FakeWorkspace, temp_dir: Path
    ):
        """测试整批中止时仍恢复文档"""
        (temp_dir / "empty.rvt").write_bytes(b"empty")

        with pytest.raises(UnknownImageFormatError):
            executor.run_folder(paths, RenderSettings(extension=".gif"))
        assert workspace.created_projects == []
        assert workspace.opened == [temp_dir / "empty.rvt"]
