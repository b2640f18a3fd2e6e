"""运行期异常：按失败阶段区分，便于入口打印出错环节并以非零状态退出。"""

from __future__ import annotations


class Fb2SqliteError(Exception):
    """所有业务异常的基类。"""


class SourceReadError(Fb2SqliteError):
    """产品表（CSV）无法读取或解析，例如某条记录的列数与表头不一致。"""


class CatalogFormatError(Fb2SqliteError):
    """参考目录工作簿不存在、无法打开或缺少工作表。"""


class SinkError(Fb2SqliteError):
    """建表、插入或提交失败；事务已回滚。"""


class TransferError(Fb2SqliteError):
    """下载或 scp 传输失败。"""


class PipelineAbort(Fb2SqliteError):
    """流水线中止：记录失败阶段与原始异常。"""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"{stage} 阶段失败: {cause}")
        self.stage = stage
        self.cause = cause
