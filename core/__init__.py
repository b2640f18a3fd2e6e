"""
匹配核心：文本规范化、参考目录加载、倒排索引、关键词重叠匹配。
"""

from domain.catalog import ClassificationItem, ReferenceCatalog
from .keyword_index import KeywordIndex, build_index
from .loaders import load_catalog
from .matching import (
    DEFAULT_THRESHOLD,
    ENRICHMENT_COLUMNS,
    build_query,
    enrich_row,
    find_best_match,
    match,
    score_candidates,
)
from .normalizer import STOP_WORDS, extract_keywords, normalize

__all__ = [
    "ClassificationItem",
    "DEFAULT_THRESHOLD",
    "ENRICHMENT_COLUMNS",
    "KeywordIndex",
    "ReferenceCatalog",
    "STOP_WORDS",
    "build_index",
    "build_query",
    "enrich_row",
    "extract_keywords",
    "find_best_match",
    "load_catalog",
    "match",
    "normalize",
    "score_candidates",
]
