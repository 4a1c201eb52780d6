"""
流水线模块 - 批处理编排

子模块：
- scanner: 族文件扫描
- executor: 批处理执行器
"""

from .executor import BatchExecutor
from .scanner import scan_family_files

__all__ = [
    "BatchExecutor",
    "scan_family_files",
]
