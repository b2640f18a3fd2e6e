"""
SQLite 输出：唯一的写入者。

SqliteSink 在一个显式事务内删表、按表头建表（全部 TEXT 列）并逐行插入，
仅在收到流结束信号后提交；任何失败都回滚，不会留下部分写入的表。
SinkWriter 是持有 SqliteSink 的唯一线程，通过有界队列接收行。
"""

from __future__ import annotations

import logging
import queue
import sqlite3
import threading
from pathlib import Path

from domain.errors import SinkError

logger = logging.getLogger(__name__)

_END = object()
_ABORT = object()


def sanitize_column_name(name: str) -> str:
    """列名：把所有非字母数字字符替换为 _。"""
    return "".join(c if c.isalnum() else "_" for c in name)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SqliteSink:
    """单表 SQLite 写入：begin(header) -> insert(row)* -> commit() / rollback()。"""

    def __init__(self, db_path: str | Path, table: str = "data") -> None:
        self.db_path = Path(db_path)
        self.table = table
        self.rows_written = 0
        self._conn: sqlite3.Connection | None = None
        self._insert_sql = ""

    @property
    def in_transaction(self) -> bool:
        return self._conn is not None and self._conn.in_transaction

    def begin(self, header: list[str]) -> None:
        """打开连接、开启事务，删除旧表并按表头建表。"""
        if self._conn is not None:
            raise SinkError("写入已开始，不能重复建表")
        columns = ", ".join(f"{_quote(sanitize_column_name(h))} TEXT" for h in header)
        table = _quote(self.table)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # isolation_level=None：由本类显式 BEGIN/COMMIT，DDL 与插入处于同一事务
            self._conn = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=False)
            self._conn.execute("BEGIN")
            self._conn.execute(f"DROP TABLE IF EXISTS {table}")
            self._conn.execute(f"CREATE TABLE {table} ({columns})")
        except (sqlite3.Error, OSError) as e:
            self.rollback()
            raise SinkError(f"建表失败 {self.db_path}: {e}") from e
        self._insert_sql = f"INSERT INTO {table} VALUES ({', '.join('?' * len(header))})"
        logger.debug("建表 %s，%d 列", self.table, len(header))

    def insert(self, row: list[str]) -> None:
        if self._conn is None:
            raise SinkError("尚未建表，不能插入")
        try:
            self._conn.execute(self._insert_sql, row)
        except sqlite3.Error as e:
            raise SinkError(f"第 {self.rows_written + 1} 行插入失败: {e}") from e
        self.rows_written += 1

    def commit(self) -> None:
        """提交事务并关闭连接；从未建表时什么也不做。"""
        if self._conn is None:
            return
        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as e:
            self.rollback()
            raise SinkError(f"提交失败 {self.db_path}: {e}") from e
        self.close()
        logger.info("已提交 %d 行到 %s", self.rows_written, self.db_path)

    def rollback(self) -> None:
        """回滚未提交的事务并关闭连接。"""
        if self._conn is None:
            return
        try:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
                logger.warning("已回滚 %s", self.db_path)
        finally:
            self.close()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


class SinkWriter:
    """
    写入线程：首个元素为表头，其后为数据行，收到结束信号后提交。
    线程失败时回滚并继续清空队列，生产者下一次 send() 会抛出 SinkError。
    """

    def __init__(self, sink: SqliteSink, *, queue_size: int = 1024) -> None:
        self._sink = sink
        self._queue: queue.Queue[object] = queue.Queue(maxsize=queue_size)
        self._thread = threading.Thread(target=self._run, name="sqlite-writer", daemon=True)
        self._error: BaseException | None = None

    @property
    def sink(self) -> SqliteSink:
        return self._sink

    @property
    def error(self) -> BaseException | None:
        return self._error

    def start(self) -> SinkWriter:
        self._thread.start()
        return self

    def send(self, row: list[str]) -> None:
        """交给写入线程一行（首行为表头）；队列满时阻塞。"""
        if self._error is not None:
            raise SinkError(f"写入线程已失败: {self._error}") from self._error
        self._queue.put(row)

    def close(self) -> int:
        """发送结束信号并等待提交，返回写入的数据行数；写入失败时抛出 SinkError。"""
        self._queue.put(_END)
        self._thread.join()
        if self._error is not None:
            if isinstance(self._error, SinkError):
                raise self._error
            raise SinkError(str(self._error)) from self._error
        return self._sink.rows_written

    def abort(self) -> None:
        """通知写入线程回滚并等待其退出。"""
        if self._thread.is_alive():
            self._queue.put(_ABORT)
            self._thread.join()
        else:
            self._sink.rollback()

    def _run(self) -> None:
        finished = False
        try:
            header = self._queue.get()
            if header is _END or header is _ABORT:
                return
            self._sink.begin(header)  # type: ignore[arg-type]
            while True:
                row = self._queue.get()
                if row is _END or row is _ABORT:
                    finished = True
                    if row is _END:
                        self._sink.commit()
                    else:
                        self._sink.rollback()
                    return
                self._sink.insert(row)  # type: ignore[arg-type]
        except Exception as e:
            self._error = e
            logger.error("写入线程失败: %s", e)
            self._sink.rollback()
            if not finished:
                self._drain()

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            if item is _END or item is _ABORT:
                return
