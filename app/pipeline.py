"""
流水线：读取产品行 ->（可选）并行匹配参考目录 -> 交给唯一写入线程落库。

- 不匹配：边解析边写入，所有行保留。
- 匹配：先收集全部数据行，按批并行匹配；结果带原始位置，排序后按源顺序输出，
  只写入匹配成功的行（未匹配行丢弃）。
任何阶段出错都会回滚事务并抛出 PipelineAbort。
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, Future, ProcessPoolExecutor, as_completed
from enum import Enum
from operator import itemgetter
from pathlib import Path
from typing import Callable, Iterable

from tqdm import tqdm  # type: ignore[import-untyped]

from core.matching import ENRICHMENT_COLUMNS, enrich_row
from domain.catalog import ReferenceCatalog
from domain.errors import PipelineAbort, SinkError, SourceReadError
from models.schemas import MatchingSection, PipelineResult

from .sink import SinkWriter, SqliteSink

logger = logging.getLogger(__name__)

# (原始位置, 输出行, 是否匹配)
TaggedRow = tuple[int, list[str], bool]
ExecutorFactory = Callable[..., Executor]


class PipelineState(str, Enum):
    COLLECTING = "collecting"
    MATCHING = "matching"
    EMITTING = "emitting"
    DONE = "done"
    FAILED = "failed"


# ----- 工作进程：目录在初始化时传入一次，之后只读 -----

_worker_catalog: ReferenceCatalog | None = None
_worker_query_columns: tuple[int, ...] = ()
_worker_threshold: float = 0.0


def _init_worker(catalog: ReferenceCatalog, query_columns: tuple[int, ...], threshold: float) -> None:
    global _worker_catalog, _worker_query_columns, _worker_threshold
    _worker_catalog = catalog
    _worker_query_columns = query_columns
    _worker_threshold = threshold


def match_rows(
    batch: list[tuple[int, list[str]]],
    catalog: ReferenceCatalog,
    query_columns: tuple[int, ...],
    threshold: float,
) -> list[TaggedRow]:
    """匹配一批带位置的行，返回 (位置, 追加 3 列后的行, 是否匹配)。"""
    tagged: list[TaggedRow] = []
    for position, row in batch:
        out, matched = enrich_row(row, catalog.items, catalog.index, query_columns, threshold)
        tagged.append((position, out, matched))
    return tagged


def _match_batch(batch: list[tuple[int, list[str]]]) -> list[TaggedRow]:
    if _worker_catalog is None:
        raise RuntimeError("工作进程未初始化参考目录")
    return match_rows(batch, _worker_catalog, _worker_query_columns, _worker_threshold)


# ----- 流水线 -----


class CatalogPipeline:
    """一次运行的协调者；catalog 为 None 时不做匹配。"""

    def __init__(
        self,
        sink: SqliteSink,
        *,
        catalog: ReferenceCatalog | None = None,
        matching: MatchingSection | None = None,
        queue_size: int = 1024,
        executor_factory: ExecutorFactory | None = None,
    ) -> None:
        self._sink = sink
        self._catalog = catalog
        self._matching = matching or MatchingSection()
        self._queue_size = queue_size
        self._executor_factory = executor_factory or ProcessPoolExecutor
        self.state = PipelineState.COLLECTING

    @property
    def enriched(self) -> bool:
        return self._catalog is not None

    def _set_state(self, state: PipelineState) -> None:
        logger.debug("流水线状态: %s -> %s", self.state.value, state.value)
        self.state = state

    def _workers(self) -> int:
        return self._matching.workers or os.cpu_count() or 1

    def run(self, rows: Iterable[list[str]]) -> PipelineResult:
        writer = SinkWriter(self._sink, queue_size=self._queue_size).start()
        self._set_state(PipelineState.COLLECTING)
        try:
            if self._catalog is None:
                total = self._stream(rows, writer)
                matched = 0
            else:
                total, matched = self._enrich(rows, writer)
            emitted = writer.close()
        except Exception as e:
            stage = self.state.value
            if isinstance(e, SinkError):
                stage = "sink"
            elif isinstance(e, SourceReadError):
                stage = PipelineState.COLLECTING.value
            self._set_state(PipelineState.FAILED)
            writer.abort()
            raise PipelineAbort(stage, e) from e
        self._set_state(PipelineState.DONE)
        return PipelineResult(
            db_path=Path(self._sink.db_path),
            total_rows=total,
            matched_rows=matched,
            emitted_rows=emitted,
            enriched=self.enriched,
        )

    def _stream(self, rows: Iterable[list[str]], writer: SinkWriter) -> int:
        """不匹配：表头与所有数据行边读边写。返回数据行数。"""
        count = -1
        for row in tqdm(rows, desc="写入", unit="行", disable=not self._matching.show_progress):
            writer.send(row)
            count += 1
        if count < 0:
            raise SourceReadError("CSV 没有任何记录")
        return count

    def _collect(self, rows: Iterable[list[str]]) -> tuple[list[str], list[list[str]]]:
        header: list[str] | None = None
        body: list[list[str]] = []
        for row in rows:
            if header is None:
                header = [*row, *ENRICHMENT_COLUMNS]
            else:
                body.append(row)
        if header is None:
            raise SourceReadError("CSV 没有任何记录")
        return header, body

    def _enrich(self, rows: Iterable[list[str]], writer: SinkWriter) -> tuple[int, int]:
        """匹配：收集 -> 并行匹配 -> 按源顺序写入匹配成功的行。返回 (数据行数, 匹配数)。"""
        header, body = self._collect(rows)
        logger.info("收集到 %d 行数据，开始匹配", len(body))

        self._set_state(PipelineState.MATCHING)
        results = self._match_all(body)

        self._set_state(PipelineState.EMITTING)
        writer.send(header)
        matched = 0
        for _position, row, is_match in results:
            if is_match:
                writer.send(row)
                matched += 1
        logger.info("匹配成功 %d / %d 行", matched, len(body))
        return len(body), matched

    def _match_all(self, body: list[list[str]]) -> list[TaggedRow]:
        assert self._catalog is not None
        query_columns = tuple(self._matching.query_columns)
        threshold = self._matching.threshold
        tagged = list(enumerate(body))
        size = self._matching.batch_size
        batches = [tagged[i : i + size] for i in range(0, len(tagged), size)]
        progress = dict(total=len(batches), desc="匹配", unit="批", disable=not self._matching.show_progress)

        results: list[TaggedRow] = []
        workers = self._workers()
        if workers == 1 or len(batches) <= 1:
            for batch in tqdm(batches, **progress):
                results.extend(match_rows(batch, self._catalog, query_columns, threshold))
        else:
            executor = self._executor_factory(
                max_workers=min(workers, len(batches)),
                initializer=_init_worker,
                initargs=(self._catalog, query_columns, threshold),
            )
            futures: list[Future[list[TaggedRow]]] = []
            try:
                futures = [executor.submit(_match_batch, batch) for batch in batches]
                for future in tqdm(as_completed(futures), **progress):
                    results.extend(future.result())
            except BaseException:
                executor.shutdown(wait=True, cancel_futures=True)
                raise
            executor.shutdown()
        # 完成顺序不可依赖：按原始位置稳定排序
        results.sort(key=itemgetter(0))
        return results


def run_pipeline(
    rows: Iterable[list[str]],
    sink: SqliteSink,
    *,
    catalog: ReferenceCatalog | None = None,
    matching: MatchingSection | None = None,
    queue_size: int = 1024,
    executor_factory: ExecutorFactory | None = None,
) -> PipelineResult:
    """便捷入口：构造 CatalogPipeline 并运行。"""
    pipeline = CatalogPipeline(
        sink,
        catalog=catalog,
        matching=matching,
        queue_size=queue_size,
        executor_factory=executor_factory,
    )
    return pipeline.run(rows)
