"""core.config 单元测试：YAML 加载、回退默认、环境变量覆盖目录。"""

from __future__ import annotations

from pathlib import Path

import pytest

from core import config
from core.config import get_app_config, get_config_dir, get_log_dir, load_app_config
from core.config.loader import get_app_config_path, load_app_config_yaml


def test_load_yaml_overrides(tmp_path: Path) -> None:
    path = tmp_path / "app_config.yaml"
    path.write_text(
        "matching:\n  threshold: 0.5\n  workers: 2\nsink:\n  table: produkte\napp:\n  log_level: debug\n",
        encoding="utf-8",
    )
    cfg = load_app_config_yaml(path)
    assert cfg.matching.threshold == 0.5
    assert cfg.matching.workers == 2
    assert cfg.matching.query_columns == [5, 6, 7, 8]
    assert cfg.sink.table == "produkte"
    assert cfg.app.log_level == "DEBUG"


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    cfg = load_app_config_yaml(tmp_path / "nope.yaml")
    assert cfg.matching.threshold == 0.40
    assert cfg.source.max_fields == 15


@pytest.mark.parametrize(
    "content",
    [
        "matching: [unclosed\n",
        "- just\n- a list\n",
        "matching:\n  threshold: 3\n",
    ],
)
def test_invalid_content_uses_defaults(tmp_path: Path, content: str) -> None:
    path = tmp_path / "app_config.yaml"
    path.write_text(content, encoding="utf-8")
    cfg = load_app_config_yaml(path)
    assert cfg.matching.threshold == 0.40


def test_shipped_config_is_valid() -> None:
    root = Path(__file__).resolve().parents[2]
    cfg = load_app_config_yaml(root / "config" / "app_config.yaml")
    assert cfg.sink.plain_db_filename == "firstbase.db"
    assert cfg.catalog.translation_sheets == 2


def test_env_overrides_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FB2SQLITE_CONFIG_DIR", str(tmp_path / "cfg"))
    monkeypatch.setenv("FB2SQLITE_LOG_DIR", str(tmp_path / "log"))
    assert get_config_dir() == (tmp_path / "cfg").resolve()
    assert get_log_dir() == (tmp_path / "log").resolve()
    assert get_app_config_path() == (tmp_path / "cfg" / "app_config.yaml").resolve()


def test_cache_and_reload(tmp_path: Path) -> None:
    path = tmp_path / "app_config.yaml"
    path.write_text("matching:\n  batch_size: 10\n", encoding="utf-8")
    first = load_app_config(path)
    assert get_app_config() is first

    path.write_text("matching:\n  batch_size: 20\n", encoding="utf-8")
    assert load_app_config(path).matching.batch_size == 10
    assert load_app_config(path, reload=True).matching.batch_size == 20

    config.reset_app_config()
    assert config._app_config is None
