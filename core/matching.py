"""关键词重叠匹配：按关键词长度加权，对查询文本做子串检索。"""

from __future__ import annotations

from dataclasses import dataclass

from domain.catalog import ClassificationItem
from models.schemas import MatchResult

from .keyword_index import KeywordIndex
from .normalizer import normalize

# 接受阈值：命中权重至少占条目总权重的 40%
DEFAULT_THRESHOLD = 0.40

# 德/法/意描述与品牌所在列
DEFAULT_QUERY_COLUMNS = (5, 6, 7, 8)

ENRICHMENT_COLUMNS = ("migel_code", "migel_bezeichnung", "migel_limitation")


@dataclass
class Candidate:
    """单个候选条目的累计命中情况。"""

    position: int
    matched_weight: int = 0
    matched_count: int = 0
    score: float = 0.0


def build_query(row: list[str], query_columns: tuple[int, ...] | list[int] = DEFAULT_QUERY_COLUMNS) -> str:
    """按固定列序拼接查询文本，缺失列按空串处理。"""
    return " ".join(row[col] if col < len(row) else "" for col in query_columns)


def score_candidates(
    query_text: str,
    items: list[ClassificationItem],
    index: KeywordIndex,
) -> dict[int, Candidate]:
    """
    对索引中的每个关键词检查规范化查询是否包含它（子串，非整词，
    以覆盖德语复合词），累计各条目的命中权重与命中数并计算得分。
    总权重为 0 的条目不会出现在结果中。纯函数，可并发调用。
    """
    query = normalize(query_text).lower()
    if not query.strip():
        return {}
    candidates: dict[int, Candidate] = {}
    for keyword, positions in index.items():
        if keyword not in query:
            continue
        for position in positions:
            candidate = candidates.get(position)
            if candidate is None:
                candidate = candidates[position] = Candidate(position)
            candidate.matched_weight += len(keyword)
            candidate.matched_count += 1

    scored: dict[int, Candidate] = {}
    for position, candidate in candidates.items():
        total = items[position].keyword_weight
        if total <= 0:
            continue
        candidate.score = candidate.matched_weight / total
        scored[position] = candidate
    return scored


def find_best_match(
    query_text: str,
    items: list[ClassificationItem],
    index: KeywordIndex,
    threshold: float = DEFAULT_THRESHOLD,
) -> MatchResult | None:
    """得分 >= threshold 且至少命中 1 个关键词的候选中，按 (得分, 命中数) 取最大；无则返回 None。"""
    best: Candidate | None = None
    for candidate in score_candidates(query_text, items, index).values():
        if candidate.score < threshold or candidate.matched_count < 1:
            continue
        if best is None or (candidate.score, candidate.matched_count) > (best.score, best.matched_count):
            best = candidate
    if best is None:
        return None
    return MatchResult(
        item=items[best.position],
        score=min(best.score, 1.0),
        matched_count=best.matched_count,
    )


def match(
    query_text: str,
    items: list[ClassificationItem],
    index: KeywordIndex,
    threshold: float = DEFAULT_THRESHOLD,
) -> ClassificationItem | None:
    """返回最佳匹配条目，无匹配时返回 None。"""
    result = find_best_match(query_text, items, index, threshold)
    return result.item if result else None


def enrich_row(
    row: list[str],
    items: list[ClassificationItem],
    index: KeywordIndex,
    query_columns: tuple[int, ...] | list[int] = DEFAULT_QUERY_COLUMNS,
    threshold: float = DEFAULT_THRESHOLD,
) -> tuple[list[str], bool]:
    """为产品行追加 3 列（位置号、描述、限制）；未匹配时 3 列为空。返回 (新行, 是否匹配)。"""
    result = find_best_match(build_query(row, query_columns), items, index, threshold)
    if result is None:
        return [*row, "", "", ""], False
    return [*row, *result.enrichment_fields()], True
