"""产品表读取：本地 CSV 文本读取、按记录解析并截断列数。"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterator

from domain.errors import SourceReadError

# 每条记录最多保留的列数，多余列静默丢弃
MAX_FIELDS = 15


def read_local_text(file_path: Path) -> str:
    """读取本地缓存的 CSV（UTF-8，可带 BOM）。"""
    path = Path(file_path)
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"无法读取文件 {path}: {e}") from e


def read_table(content: str, max_fields: int = MAX_FIELDS) -> Iterator[list[str]]:
    """
    逐条产出 CSV 记录（首条为表头），每条截断为前 max_fields 列；空行跳过。
    语法错误或某条记录的原始列数与首条不一致时抛出 SourceReadError。
    """
    reader = csv.reader(io.StringIO(content.lstrip("\ufeff")), strict=True)
    expected: int | None = None
    try:
        for record in reader:
            if not record:
                continue
            if expected is None:
                expected = len(record)
            elif len(record) != expected:
                raise SourceReadError(
                    f"CSV 第 {reader.line_num} 行有 {len(record)} 列，首行为 {expected} 列"
                )
            yield record[:max_fields]
    except csv.Error as e:
        raise SourceReadError(f"CSV 第 {reader.line_num} 行解析失败: {e}") from e
