"""
在 Revit 内（pyRevit / RevitPythonShell）删除当前文档中没有任何实例的族

用法：
    在 Revit 的 Python 控制台中运行本脚本。
"""

import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main(uidoc) -> int:
    _add_backend_to_path()
    from family_printer.config import configure_logging, get_config  # type: ignore
    from family_printer.host import RevitWorkspace  # type: ignore
    from family_printer.project import WorkspaceLifecycle  # type: ignore

    configure_logging(get_config())
    removed = WorkspaceLifecycle().remove_empty_families(RevitWorkspace(uidoc))
    print(f"removed={len(removed)}")
    return 0


if __name__ == "__main__":
    main(__revit__.ActiveUIDocument)  # noqa: F821
