"""app.file_io 单元测试。"""

from __future__ import annotations

from pathlib import Path

import pytest

from app.file_io import MAX_FIELDS, read_local_text, read_table
from domain.errors import SourceReadError


def test_read_table_header_first() -> None:
    rows = list(read_table("gtin,name\n1,Gehstock\n2,\"Rollator, faltbar\"\n"))
    assert rows == [["gtin", "name"], ["1", "Gehstock"], ["2", "Rollator, faltbar"]]


def test_read_table_truncates_fields() -> None:
    header = ",".join(f"c{i}" for i in range(20))
    values = ",".join(str(i) for i in range(20))
    rows = list(read_table(f"{header}\n{values}\n"))
    assert all(len(r) == MAX_FIELDS for r in rows)
    assert rows[1][-1] == "14"


def test_read_table_custom_max_fields() -> None:
    rows = list(read_table("a,b,c\n1,2,3\n", max_fields=2))
    assert rows == [["a", "b"], ["1", "2"]]


def test_read_table_skips_blank_lines_and_bom() -> None:
    rows = list(read_table("\ufeffa,b\n\n1,2\n"))
    assert rows == [["a", "b"], ["1", "2"]]


def test_read_table_unequal_lengths_raise() -> None:
    rows = read_table("a,b,c\n1,2,3\n4,5\n")
    assert next(rows) == ["a", "b", "c"]
    assert next(rows) == ["1", "2", "3"]
    with pytest.raises(SourceReadError, match="列"):
        next(rows)


def test_read_table_syntax_error_raises() -> None:
    with pytest.raises(SourceReadError):
        list(read_table('a,b\n"1"x,2\n'))


def test_read_table_empty() -> None:
    assert list(read_table("")) == []


def test_read_local_text(tmp_path: Path) -> None:
    path = tmp_path / "firstbase.csv"
    path.write_bytes("\ufeffgtin,name\n1,Gerät\n".encode("utf-8"))
    assert read_local_text(path) == "gtin,name\n1,Gerät\n"


def test_read_local_text_missing(tmp_path: Path) -> None:
    with pytest.raises(SourceReadError):
        read_local_text(tmp_path / "missing.csv")
