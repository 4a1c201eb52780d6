"""
宿主适配层 - IHostWorkspace 的具体实现

子模块：
- revit_workspace: Revit API 适配（需在 Revit 内运行）
"""

from .revit_workspace import RevitWorkspace

__all__ = ["RevitWorkspace"]
