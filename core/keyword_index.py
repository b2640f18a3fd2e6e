"""倒排索引：关键词 → 含该关键词的条目位置列表。"""

from __future__ import annotations

from domain.catalog import ClassificationItem

KeywordIndex = dict[str, list[int]]


def build_index(items: list[ClassificationItem]) -> KeywordIndex:
    """单次线性遍历构建索引；不做加权，权重在匹配时按关键词长度计算。"""
    index: KeywordIndex = {}
    for position, item in enumerate(items):
        for keyword in item.keywords:
            index.setdefault(keyword, []).append(position)
    return index
