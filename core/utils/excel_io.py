"""Excel 读取公共逻辑：只读打开工作簿、单元格取值、按行遍历工作表。"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import openpyxl  # type: ignore[import-untyped]


def cell_value(cell_or_value: Any) -> str:
    """支持 openpyxl Cell 或裸值（如 iter_rows values_only=True），统一为 str。"""
    v = getattr(cell_or_value, "value", cell_or_value)
    if v is None:
        return ""
    return str(v).strip()


def row_cell(row: tuple[Any, ...] | list[Any], col: int) -> str:
    """取一行中第 col 列（0-based）的文本值，越界返回空串。"""
    if col < 0 or col >= len(row):
        return ""
    return cell_value(row[col])


@contextmanager
def open_workbook_read(path: Path):
    """以只读、data_only 方式打开 Excel，yield 工作簿，退出时关闭。"""
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        yield wb
    finally:
        wb.close()


def iter_sheet_rows(ws: Any, *, skip_rows: int = 0) -> Iterator[tuple[Any, ...]]:
    """按行遍历工作表（values_only），跳过顶部 skip_rows 行；空行返回空元组。"""
    for row_tuple in ws.iter_rows(min_row=skip_rows + 1, values_only=True):
        yield tuple(row_tuple) if row_tuple else ()
