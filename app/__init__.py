"""应用层：产品表读取、流水线、SQLite 写入、下载与部署。"""

from .file_io import MAX_FIELDS, read_local_text, read_table
from .pipeline import CatalogPipeline, PipelineState, run_pipeline
from .sink import SinkWriter, SqliteSink, sanitize_column_name
from .transfer import deploy_file, download_file, download_text

__all__ = [
    "MAX_FIELDS",
    "CatalogPipeline",
    "PipelineState",
    "SinkWriter",
    "SqliteSink",
    "deploy_file",
    "download_file",
    "download_text",
    "read_local_text",
    "read_table",
    "run_pipeline",
    "sanitize_column_name",
]
