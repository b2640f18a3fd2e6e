"""
core.config：整合路径与统一 YAML 配置 app_config.yaml 的加载。

- 配置：config/app_config.yaml（含 source、catalog、matching、sink、deploy、app）。
- 路径：config 目录及 data/output/logs（见 .paths）。
- 统一加载：load_app_config() 启动时调用一次；之后通过 get_app_config() 获取。
"""

from __future__ import annotations

import logging
from pathlib import Path

from models.schemas import AppConfigSchema

from . import loader as _loader
from . import paths as _paths

logger = logging.getLogger(__name__)

# ----- 路径（直接转发） -----

get_app_config_path = _loader.get_app_config_path
get_base_dir = _paths.get_base_dir
get_config_dir = _paths.get_config_dir
get_data_dir = _paths.get_data_dir
get_output_dir = _paths.get_output_dir
get_log_dir = _paths.get_log_dir

# ----- 统一加载与缓存 -----

_app_config: AppConfigSchema | None = None


def load_app_config(path: Path | None = None, *, reload: bool = False) -> AppConfigSchema:
    """加载全部配置并缓存；path 为空时读取默认位置。reload=True 时强制重新读取。"""
    global _app_config

    if _app_config is not None and not reload:
        return _app_config

    _app_config = _loader.load_app_config_yaml(path)
    logger.debug("配置已加载: config_file=%s", path or get_app_config_path())
    return _app_config


def get_app_config() -> AppConfigSchema:
    """返回已缓存的配置，未加载时先加载。"""
    if _app_config is None:
        return load_app_config()
    return _app_config


def reset_app_config() -> None:
    """清空缓存（测试用）。"""
    global _app_config
    _app_config = None


__all__ = [
    "load_app_config",
    "get_app_config",
    "reset_app_config",
    "get_app_config_path",
    "get_base_dir",
    "get_config_dir",
    "get_data_dir",
    "get_output_dir",
    "get_log_dir",
]
