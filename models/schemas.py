"""
Pydantic V2 Schema：统一配置各节、运行时路径、匹配结果与流水线结果。

- AppConfigSchema: config/app_config.yaml 根结构（source/catalog/matching/sink/deploy/app）。
- RunConfigSchema: 运行时目录与派生文件路径。
- MatchResult / PipelineResult: 匹配输出与一次运行的汇总。
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.catalog import MAX_CATEGORY_LEVELS, ClassificationItem


def _strip_str(v: Any) -> str:
    if v is None:
        return ""
    return str(v).strip()


# ----- 配置各节 -----


class SourceSection(BaseModel):
    """产品表（GS1 firstbase CSV）来源。"""

    url: str = Field(default="https://id.gs1.ch/01/07612345000961", description="CSV 下载地址")
    csv_filename: str = Field(default="firstbase.csv", description="本地缓存文件名")
    timeout_seconds: float = Field(default=300.0, gt=0, description="下载超时（秒）")
    max_fields: int = Field(default=15, ge=1, description="每行最多保留的列数，多余列丢弃")

    @field_validator("url", "csv_filename", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> str:
        return _strip_str(v)


class CatalogSection(BaseModel):
    """参考目录（MiGeL 工作簿）来源与列布局，列号均为 0-based。"""

    url: str = Field(
        default=(
            "https://www.bag.admin.ch/dam/de/sd-web/77j5rwUTzbkq/"
            "Mittel-%20und%20Gegenst%C3%A4ndeliste%20per%2001.01.2026%20in%20Excel-Format.xlsx"
        ),
        description="工作簿下载地址",
    )
    filename: str = Field(default="migel.xlsx", description="本地缓存文件名")
    header_rows: int = Field(default=1, ge=0, description="每个工作表顶部跳过的表头行数")
    level_columns: list[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4, 5], description="层级标记列")
    id_column: int = Field(default=6, ge=0, description="位置号列")
    label_column: int = Field(default=7, ge=0, description="描述列")
    restriction_column: int = Field(default=8, ge=0, description="限制列")
    translation_sheets: int = Field(default=2, ge=0, le=2, description="工作表 0 之后作为译文的表数")

    @field_validator("url", "filename", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> str:
        return _strip_str(v)

    @field_validator("level_columns", mode="after")
    @classmethod
    def check_levels(cls, v: list[int]) -> list[int]:
        if len(v) > MAX_CATEGORY_LEVELS:
            raise ValueError(f"层级标记列最多 {MAX_CATEGORY_LEVELS} 个")
        if any(c < 0 for c in v):
            raise ValueError("列号不能为负")
        return v


class MatchingSection(BaseModel):
    """关键词匹配参数。"""

    threshold: float = Field(default=0.40, ge=0.0, le=1.0, description="接受阈值：命中权重 / 条目总权重")
    query_columns: list[int] = Field(default_factory=lambda: [5, 6, 7, 8], description="拼接为查询文本的列（德/法/意描述、品牌）")
    workers: int = Field(default=0, ge=0, description="并行进程数，0 为 CPU 核数，1 为进程内顺序执行")
    batch_size: int = Field(default=256, ge=1, description="每个并行任务处理的行数")
    show_progress: bool = Field(default=True, description="是否显示 tqdm 进度条")


class SinkSection(BaseModel):
    """SQLite 输出。"""

    table: str = Field(default="data", description="目标表名")
    plain_db_filename: str = Field(default="firstbase.db", description="不匹配时的库文件名")
    deploy_db_filename: str = Field(default="firstbase_migel.db", description="匹配且部署时的库文件名")
    dated_db_pattern: str = Field(default="firstbase_migel_%d.%m.%Y.db", description="匹配不部署时的库文件名（strftime）")
    queue_size: int = Field(default=1024, ge=1, description="写入线程队列容量")

    def db_filename(self, *, enrich: bool, deploy: bool, today: date | None = None) -> str:
        if not enrich:
            return self.plain_db_filename
        if deploy:
            return self.deploy_db_filename
        return (today or date.today()).strftime(self.dated_db_pattern)


class DeploySection(BaseModel):
    """scp 部署目标。"""

    remote_dest: str = Field(default="", description="scp 目标，如 user@host:/var/www/")
    scp_command: str = Field(default="scp", description="scp 可执行文件")

    @field_validator("remote_dest", "scp_command", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> str:
        return _strip_str(v)


class AppSection(BaseModel):
    """应用级设置。"""

    log_level: str = Field(default="INFO", description="根日志级别")
    log_file_prefix: str = Field(default="fb2sqlite", description="日志文件名前缀")
    user_agent: str = Field(default="fb2sqlite/0.1", description="HTTP User-Agent")

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper() if v else "INFO"


class AppConfigSchema(BaseModel):
    """app_config.yaml 根结构，各节均有默认值。"""

    source: SourceSection = Field(default_factory=SourceSection)
    catalog: CatalogSection = Field(default_factory=CatalogSection)
    matching: MatchingSection = Field(default_factory=MatchingSection)
    sink: SinkSection = Field(default_factory=SinkSection)
    deploy: DeploySection = Field(default_factory=DeploySection)
    app: AppSection = Field(default_factory=AppSection)

    @model_validator(mode="before")
    @classmethod
    def drop_empty_sections(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ----- 运行时路径 -----


class RunConfigSchema(BaseModel):
    """运行时路径配置：下载缓存目录、数据库输出目录、日志目录。"""

    data_dir: Path = Field(description="CSV 与工作簿缓存目录")
    output_dir: Path = Field(description="SQLite 文件输出目录")
    log_dir: Path = Field(description="日志文件目录")
    csv_filename: str = Field(default="firstbase.csv", description="CSV 文件名")
    catalog_filename: str = Field(default="migel.xlsx", description="工作簿文件名")

    @property
    def csv_path(self) -> Path:
        return self.data_dir / self.csv_filename

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_filename

    model_config = {"frozen": False}


# ----- 匹配与流水线结果 -----


class MatchResult(BaseModel):
    """最佳匹配：条目、得分、命中关键词数。"""

    item: ClassificationItem
    score: float = Field(ge=0.0, le=1.0, description="命中权重 / 条目总权重")
    matched_count: int = Field(ge=1, description="命中的关键词个数")

    def enrichment_fields(self) -> list[str]:
        return [self.item.id, self.item.label, self.item.restriction]


class PipelineResult(BaseModel):
    """一次运行的汇总。"""

    db_path: Path
    total_rows: int = Field(default=0, ge=0, description="数据行数（不含表头）")
    matched_rows: int = Field(default=0, ge=0, description="匹配成功行数，仅匹配模式")
    emitted_rows: int = Field(default=0, ge=0, description="写入数据库的数据行数")
    enriched: bool = Field(default=False, description="是否启用匹配")
