"""domain.catalog 单元测试。"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.catalog import MAX_CATEGORY_LEVELS, CategoryContext, ClassificationItem


def test_classification_item_defaults() -> None:
    item = ClassificationItem()
    assert item.id == ""
    assert item.restriction == ""
    assert item.keywords == frozenset()
    assert item.keyword_weight == 0


def test_classification_item_strips_and_dedups() -> None:
    item = ClassificationItem(id=" 01.01.01 ", label=" Absauggerät ", keywords=["sekret", "sekret", "absauggeraet"])
    assert item.id == "01.01.01"
    assert item.label == "Absauggerät"
    assert item.keywords == frozenset({"sekret", "absauggeraet"})
    assert item.keyword_weight == len("sekret") + len("absauggeraet")


def test_classification_item_is_frozen() -> None:
    item = ClassificationItem(id="1")
    with pytest.raises(ValidationError):
        item.id = "2"  # type: ignore[misc]


class TestCategoryContext:
    def test_enter_clears_deeper_levels(self) -> None:
        ctx = CategoryContext()
        ctx.enter(0, "A")
        ctx.enter(1, "B")
        ctx.enter(2, "X")
        assert ctx.labels() == ["A", "B", "X"]
        ctx.enter(1, "B2")
        assert ctx.labels() == ["A", "B2"]

    def test_gap_levels_are_skipped(self) -> None:
        ctx = CategoryContext()
        ctx.enter(0, "A")
        ctx.enter(1, "B")
        ctx.enter(0, "A")
        ctx.enter(2, "C")
        assert ctx.labels() == ["A", "C"]

    def test_depth_bounds(self) -> None:
        assert CategoryContext().depth == MAX_CATEGORY_LEVELS
        with pytest.raises(ValueError):
            CategoryContext(MAX_CATEGORY_LEVELS + 1)
        with pytest.raises(IndexError):
            CategoryContext(3).enter(3, "too deep")

    def test_reset(self) -> None:
        ctx = CategoryContext()
        ctx.enter(0, "A")
        ctx.reset()
        assert ctx.labels() == []
