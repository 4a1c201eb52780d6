"""
运行期配置 - 读取 config/runtime.yaml

职责：
- 加载宿主版本/标高名/默认出图参数/日志等运行参数
- 提供环境变量覆盖机制（FAMPRINT_ 前缀，嵌套用 __ 分隔）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from ..models import DetailLevel, RenderSettings


class HostConfig(BaseModel):
    """宿主配置"""

    version: str = "2019"
    level_name: str = "Level 1"
    # 宿主版本 -> 标题派生规则（strip_extension / as_is）
    title_conventions: dict[str, str] = Field(
        default_factory=lambda: {"2018": "strip_extension", "2019": "as_is"}
    )
    family_extension: str = ".rfa"
    project_extension: str = ".rvt"
    wall_length: float = 10.0
    # 批处理前文档未保存过时，结束后打开的空项目
    default_project: str = "default_project.rvt"


class RenderConfig(BaseModel):
    """默认出图参数"""

    scale: int = 50
    image_size: int = 256
    resolution: int = 150
    extension: str = ".png"
    zoom_value: float = 0.9
    detail_level: DetailLevel = DetailLevel.MEDIUM

    def to_settings(self) -> RenderSettings:
        return RenderSettings(**self.model_dump())


class NamingConfig(BaseModel):
    """命名配置"""

    # 类型参数名：非空时作为项目名，否则用 "<族名>&<类型名>"
    identity_parameter: str | None = None
    projects_folder_name: str = "Projects"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "family_printer.log"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    host: HostConfig = Field(default_factory=HostConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "FAMPRINT_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            host=HostConfig(**cls._extract(runtime_opts, "host")),
            render=RenderConfig(**cls._extract(runtime_opts, "render")),
            naming=NamingConfig(**cls._extract(runtime_opts, "naming")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（支持 {default: ...} 写法）"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            else:
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """日志文件与默认空项目的相对路径基于配置文件所在目录"""
        default_project = Path(self.host.default_project)
        if not default_project.is_absolute():
            self.host.default_project = str((base_dir / default_project).resolve())
        log_file = Path(self.logging.log_file)
        if not log_file.is_absolute():
            self.logging.log_file = str((base_dir / log_file).resolve())


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("config/runtime.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
