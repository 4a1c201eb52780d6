"""
日志初始化 - 按运行期配置设置根日志级别与文件输出
"""

from __future__ import annotations

import logging

from .runtime_config import RuntimeConfig, get_config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(config: RuntimeConfig | None = None) -> logging.Logger:
    """配置 family_printer 包日志"""
    config = config or get_config()
    logger = logging.getLogger("family_printer")
    logger.setLevel(config.logging.log_level.upper())

    formatter = logging.Formatter(LOG_FORMAT)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    if config.logging.log_to_file and not any(
        isinstance(h, logging.FileHandler) for h in logger.handlers
    ):
        file_handler = logging.FileHandler(config.logging.log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
