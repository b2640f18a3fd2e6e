"""Pydantic 模型与 Schema：配置、运行时路径、匹配与流水线结果。"""

from .schemas import (
    AppConfigSchema,
    AppSection,
    CatalogSection,
    DeploySection,
    MatchingSection,
    MatchResult,
    PipelineResult,
    RunConfigSchema,
    SinkSection,
    SourceSection,
)

__all__ = [
    "AppConfigSchema",
    "AppSection",
    "CatalogSection",
    "DeploySection",
    "MatchingSection",
    "MatchResult",
    "PipelineResult",
    "RunConfigSchema",
    "SinkSection",
    "SourceSection",
]
