"""
族文件扫描 - 递归查找族目录下的族文件

项目输出目录若位于族目录内会被排除，避免把生成物当作输入。
"""

from __future__ import annotations

from pathlib import Path

from ..interfaces import FamilyNotFoundError


def scan_family_files(
    families_dir: Path,
    extension: str = ".rfa",
    exclude_dirs: list[Path] | None = None,
) -> list[Path]:
    """
    递归扫描族文件

    Raises:
        FamilyNotFoundError: 目录不存在或未找到族文件
    """
    if not families_dir.is_dir():
        raise FamilyNotFoundError(f"族目录不存在: {families_dir}")

    excluded = [d.resolve() for d in exclude_dirs or []]
    extension = extension.lower()

    files = []
    for path in sorted(families_dir.rglob("*")):
        if not path.is_file() or path.suffix.lower() != extension:
            continue
        resolved = path.resolve()
        if any(resolved.is_relative_to(d) for d in excluded):
            continue
        files.append(path)

    if not files:
        raise FamilyNotFoundError(f"目录中未找到 {extension} 族文件: {families_dir}")
    return files
