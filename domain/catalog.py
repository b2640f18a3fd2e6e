"""参考目录相关数据模型（Pydantic V2）：分类条目、加载期的层级上下文。"""

from __future__ import annotations

from typing import Any, NamedTuple

from pydantic import BaseModel, Field, field_validator

# 层级上下文最多保存的层数
MAX_CATEGORY_LEVELS = 7

# 产品行：最多 15 列文本
ProductRow = list[str]


def _strip_str(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


class ClassificationItem(BaseModel):
    """参考目录中的一条分类条目（MiGeL 位置号），加载后不可变。"""

    id: str = Field(default="", description="位置号，真实条目非空")
    label: str = Field(default="", description="描述首行（权威语言）")
    restriction: str = Field(default="", description="使用限制，可为空")
    keywords: frozenset[str] = Field(default_factory=frozenset, description="去重后的规范化关键词")

    @field_validator("id", "label", "restriction", mode="before")
    @classmethod
    def strip_str_fields(cls, v: Any) -> str:
        return _strip_str(v)

    @field_validator("keywords", mode="before")
    @classmethod
    def normalize_keywords(cls, v: Any) -> frozenset[str]:
        if v is None:
            return frozenset()
        return frozenset(str(k) for k in v if k)

    @property
    def keyword_weight(self) -> int:
        """关键词总权重：各关键词字符长度之和。"""
        return sum(len(k) for k in self.keywords)

    model_config = {"frozen": True}


class CategoryContext:
    """
    加载期的类目层级栈：每层保存该层最近一次出现的类目名称。
    设置第 i 层时清空所有更深的层，保证条目只继承直接祖先链。
    """

    def __init__(self, depth: int = MAX_CATEGORY_LEVELS) -> None:
        if depth < 1 or depth > MAX_CATEGORY_LEVELS:
            raise ValueError(f"层级数须在 1~{MAX_CATEGORY_LEVELS} 之间: {depth}")
        self._levels: list[str] = [""] * depth

    @property
    def depth(self) -> int:
        return len(self._levels)

    def enter(self, level: int, label: str) -> None:
        if not 0 <= level < len(self._levels):
            raise IndexError(f"层级越界: {level}")
        self._levels[level] = label
        for deeper in range(level + 1, len(self._levels)):
            self._levels[deeper] = ""

    def labels(self) -> list[str]:
        """当前祖先链上的非空类目名称，由浅到深。"""
        return [label for label in self._levels if label]

    def reset(self) -> None:
        self._levels = [""] * len(self._levels)


class ReferenceCatalog(NamedTuple):
    """条目列表与倒排索引的组合，匹配阶段只读共享。"""

    items: list[ClassificationItem]
    index: dict[str, list[int]]
