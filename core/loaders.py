"""从 MiGeL 工作簿加载分类条目：权威语言表建条目，译文表补充关键词。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl.utils.exceptions import InvalidFileException  # type: ignore[import-untyped]
from tqdm import tqdm  # type: ignore[import-untyped]

from domain.catalog import CategoryContext, ClassificationItem
from domain.errors import CatalogFormatError
from models.schemas import CatalogSection

from .normalizer import extract_keywords
from .utils.excel_io import iter_sheet_rows, open_workbook_read, row_cell

logger = logging.getLogger(__name__)


class _ItemDraft:
    """加载期可变的条目草稿，关键词在译文阶段继续累加。"""

    __slots__ = ("id", "label", "restriction", "keywords")

    def __init__(self, item_id: str, label: str, restriction: str, keywords: set[str]) -> None:
        self.id = item_id
        self.label = label
        self.restriction = restriction
        self.keywords = keywords

    def freeze(self) -> ClassificationItem:
        return ClassificationItem(
            id=self.id,
            label=self.label,
            restriction=self.restriction,
            keywords=frozenset(self.keywords),
        )


def _first_line(text: str) -> str:
    lines = text.splitlines()
    return lines[0].strip() if lines else ""


def _deepest_level(row: tuple[Any, ...], level_columns: list[int]) -> int | None:
    """返回非空层级标记中最深的一层（下标），全空返回 None。"""
    deepest = None
    for level, col in enumerate(level_columns):
        if row_cell(row, col):
            deepest = level
    return deepest


def _parse_primary_sheet(ws: Any, layout: CatalogSection, *, desc: str) -> list[_ItemDraft]:
    """权威语言表：位置号非空的行为条目，否则有层级标记的行为类目表头。"""
    context = CategoryContext()
    drafts: list[_ItemDraft] = []
    for row in tqdm(iter_sheet_rows(ws, skip_rows=layout.header_rows), desc=desc, unit="行"):
        item_id = row_cell(row, layout.id_column)
        label = _first_line(row_cell(row, layout.label_column))
        if item_id:
            keywords = extract_keywords(label)
            for ancestor in context.labels():
                keywords |= extract_keywords(ancestor)
            drafts.append(
                _ItemDraft(item_id, label, row_cell(row, layout.restriction_column), keywords)
            )
            continue
        level = _deepest_level(row, layout.level_columns)
        if level is not None:
            context.enter(level, label)
    return drafts


def _merge_translation_sheet(
    ws: Any,
    layout: CatalogSection,
    drafts_by_id: dict[str, list[_ItemDraft]],
    *,
    desc: str,
) -> int:
    """译文表：仅为已有位置号的条目补充关键词，不新增条目。返回命中的行数。"""
    merged = 0
    for row in tqdm(iter_sheet_rows(ws, skip_rows=layout.header_rows), desc=desc, unit="行"):
        item_id = row_cell(row, layout.id_column)
        targets = drafts_by_id.get(item_id) if item_id else None
        if not targets:
            continue
        keywords = extract_keywords(row_cell(row, layout.label_column))
        for draft in targets:
            draft.keywords |= keywords
        merged += 1
    return merged


def load_catalog(excel_path: str | Path, layout: CatalogSection | None = None) -> list[ClassificationItem]:
    """
    解析 MiGeL 工作簿，返回条目列表（位置即倒排索引中的下标）。
    第 1 个工作表为权威语言；其后最多 layout.translation_sheets 个工作表为译文。
    文件不存在、无法打开或没有工作表时抛出 CatalogFormatError；单行格式异常只跳过。
    """
    layout = layout or CatalogSection()
    path = Path(excel_path)
    if not path.exists():
        raise CatalogFormatError(f"参考目录文件不存在: {path}")

    try:
        with open_workbook_read(path) as wb:
            sheets = wb.worksheets
            if not sheets:
                raise CatalogFormatError(f"工作簿中没有工作表: {path}")
            drafts = _parse_primary_sheet(sheets[0], layout, desc=f"解析 {sheets[0].title}")

            drafts_by_id: dict[str, list[_ItemDraft]] = {}
            for draft in drafts:
                drafts_by_id.setdefault(draft.id, []).append(draft)

            for ws in sheets[1 : 1 + layout.translation_sheets]:
                merged = _merge_translation_sheet(ws, layout, drafts_by_id, desc=f"合并 {ws.title}")
                logger.info("译文表 %s：补充关键词 %d 行", ws.title, merged)
    except (OSError, BadZipFile, InvalidFileException, KeyError) as e:
        raise CatalogFormatError(f"无法打开参考目录 {path}: {e}") from e

    items = [draft.freeze() for draft in drafts]
    logger.info("参考目录 %s：%d 个条目", path.name, len(items))
    return items
