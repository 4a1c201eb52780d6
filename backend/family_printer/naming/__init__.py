"""
命名模块 - 文件名规范化与文档标题派生

子模块：
- sanitizer: 变音字母转写 + 方向短语空格替换
- title: 按宿主版本派生文档标题
"""

from .sanitizer import sanitize
from .title import (
    PlainTitleResolver,
    StripExtensionTitleResolver,
    get_title_resolver,
)

__all__ = [
    "sanitize",
    "PlainTitleResolver",
    "StripExtensionTitleResolver",
    "get_title_resolver",
]
