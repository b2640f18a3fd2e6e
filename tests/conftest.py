"""pytest 共享 fixture 与配置。"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# 保证项目根与 tests 目录在 sys.path 中，便于导入 core / app / domain / models 及测试工具
_root = Path(__file__).resolve().parent.parent
for _p in (_root, _root / "tests"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))

from catalog_helpers import catalog_row, write_workbook  # noqa: E402
from core.config import reset_app_config  # noqa: E402
from core.keyword_index import build_index  # noqa: E402
from domain.catalog import ClassificationItem, ReferenceCatalog  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_app_config():
    reset_app_config()
    yield
    reset_app_config()


@pytest.fixture
def migel_workbook(tmp_path: Path) -> Path:
    """三语 MiGeL 样例：DE 为权威表，FR/IT 为译文。"""
    de = [
        catalog_row(level=0, label="Absauggeräte"),
        catalog_row(item_id="01.01.01", label="Absauggerät für Sekret\nKauf", restriction="nur mit ärztlicher Verordnung"),
        catalog_row(item_id="01.01.02", label="Absaugkatheter steril"),
        catalog_row(level=0, label="Gehhilfen"),
        catalog_row(item_id="05.01.01", label="Gehstock höhenverstellbar"),
    ]
    fr = [
        catalog_row(level=0, label="Aspirateurs"),
        catalog_row(item_id="01.01.01", label="Aspirateur de sécrétions"),
        catalog_row(item_id="99.99.99", label="Article inconnu"),
    ]
    it = [
        catalog_row(item_id="05.01.01", label="Bastone regolabile"),
    ]
    return write_workbook(tmp_path / "migel.xlsx", {"DE": de, "FR": fr, "IT": it})


@pytest.fixture
def absaug_catalog() -> ReferenceCatalog:
    """直接构造的小型目录，便于测试匹配逻辑。"""
    items = [
        ClassificationItem(
            id="01.01.01",
            label="Absauggeräte für Sekret",
            restriction="nur mit ärztlicher Verordnung",
            keywords={"absauggeraet", "sekret"},
        ),
        ClassificationItem(id="05.01.01", label="Gehstock", keywords={"gehstock", "hoehenverstellbar"}),
        ClassificationItem(id="00.00.00", label="leer", keywords=set()),
    ]
    return ReferenceCatalog(items=items, index=build_index(items))
