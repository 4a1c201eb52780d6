"""
在 Revit 内（pyRevit / RevitPythonShell）执行一次族图片批处理

用法：
    在 Revit 的 Python 控制台中运行本脚本，按提示依次输入族目录与图片目录；
    出图视图可选 plan / isometric。宿主版本用 FAMPRINT_HOST__VERSION 覆盖。
"""

import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main(uidoc, families_dir: str, images_dir: str, view_kind: str = "plan") -> int:
    _add_backend_to_path()
    from family_printer.config import configure_logging, get_config  # type: ignore
    from family_printer.host import RevitWorkspace  # type: ignore
    from family_printer.models import BatchJob, PathSet, ViewKind  # type: ignore
    from family_printer.pipeline import BatchExecutor  # type: ignore

    config = get_config()
    logger = configure_logging(config)

    paths = PathSet.from_source(
        Path(families_dir),
        Path(images_dir),
        config.naming.projects_folder_name,
    )
    job = BatchJob(view_kind=ViewKind(view_kind))
    executor = BatchExecutor(RevitWorkspace(uidoc))

    attempted = executor.run_folder(
        paths,
        config.render.to_settings(),
        job.view_kind,
        job=job,
        progress_cb=lambda j: logger.info(j.progress.message),
    )

    for flag in job.flags:
        print(f"FLAG {flag}")
    print(f"status={job.status.value} attempted={len(attempted)} errors={len(job.errors)}")
    return 0 if not job.errors else 1


if __name__ == "__main__":
    uidoc = __revit__.ActiveUIDocument  # noqa: F821
    families = input("族目录: ").strip()
    images = input("图片目录: ").strip()
    kind = input("视图 (plan/isometric) [plan]: ").strip() or "plan"
    main(uidoc, families, images, kind)
