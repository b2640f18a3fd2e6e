"""
路径解析：基准目录、配置目录、下载缓存/输出/日志目录。

- 环境变量：FB2SQLITE_BASE_DIR / CONFIG_DIR / DATA_DIR / OUTPUT_DIR / LOG_DIR
- 未设置时：配置在 基准目录/config，缓存与输出默认在当前工作目录，日志在 基准目录/logs
"""

from __future__ import annotations

import os
from pathlib import Path


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value).resolve() if value else None


def get_base_dir() -> Path:
    """基准目录：项目根（core 的父目录）。"""
    return _env_path("FB2SQLITE_BASE_DIR") or Path(__file__).resolve().parent.parent.parent


def get_config_dir() -> Path:
    """配置文件目录。"""
    return _env_path("FB2SQLITE_CONFIG_DIR") or get_base_dir() / "config"


def get_data_dir() -> Path:
    """firstbase.csv 与 migel.xlsx 的缓存目录。"""
    return _env_path("FB2SQLITE_DATA_DIR") or Path.cwd()


def get_output_dir() -> Path:
    """SQLite 文件输出目录。"""
    return _env_path("FB2SQLITE_OUTPUT_DIR") or Path.cwd()


def get_log_dir() -> Path:
    """日志文件目录。"""
    return _env_path("FB2SQLITE_LOG_DIR") or get_base_dir() / "logs"
