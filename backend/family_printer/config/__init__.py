"""
配置层 - 加载运行期配置

职责：
- 加载 config/runtime.yaml（运行期参数）
- 提供类型安全的配置访问接口
- 初始化日志
"""

from .logging_setup import configure_logging
from .runtime_config import (
    HostConfig,
    LoggingConfig,
    NamingConfig,
    RenderConfig,
    RuntimeConfig,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "HostConfig",
    "RenderConfig",
    "NamingConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
    "configure_logging",
]
