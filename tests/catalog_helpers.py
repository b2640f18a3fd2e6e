"""测试用工作簿构造工具。"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import openpyxl  # type: ignore[import-untyped]

CATALOG_HEADER = ["S1", "S2", "S3", "S4", "S5", "S6", "Pos.-Nr.", "Bezeichnung", "Limitation"]


def catalog_row(
    *,
    level: int | None = None,
    item_id: str = "",
    label: str = "",
    restriction: str = "",
) -> list[Any]:
    """按默认列布局（6 个层级列、位置号、描述、限制）拼一行。"""
    levels: list[Any] = [None] * 6
    if level is not None:
        levels[level] = "x"
    return [*levels, item_id or None, label or None, restriction or None]


def write_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    """按 {表名: 数据行} 写工作簿，每表自动加表头行。"""
    wb = openpyxl.Workbook()
    first = True
    for title, rows in sheets.items():
        ws = wb.active if first else wb.create_sheet()
        first = False
        ws.title = title
        ws.append(CATALOG_HEADER)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path
