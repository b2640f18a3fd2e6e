"""models.schemas 单元测试。"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from domain.catalog import ClassificationItem
from models.schemas import (
    AppConfigSchema,
    CatalogSection,
    MatchingSection,
    MatchResult,
    RunConfigSchema,
    SinkSection,
)


class TestAppConfigSchema:
    def test_defaults(self) -> None:
        c = AppConfigSchema()
        assert c.matching.threshold == 0.40
        assert c.matching.query_columns == [5, 6, 7, 8]
        assert c.source.max_fields == 15
        assert c.sink.table == "data"
        assert c.catalog.level_columns == [0, 1, 2, 3, 4, 5]

    def test_partial_sections(self) -> None:
        c = AppConfigSchema.model_validate({"matching": {"workers": 3}, "deploy": None})
        assert c.matching.workers == 3
        assert c.matching.threshold == 0.40
        assert c.deploy.remote_dest == ""

    def test_invalid_threshold(self) -> None:
        with pytest.raises(ValidationError):
            MatchingSection(threshold=1.5)

    def test_too_many_levels(self) -> None:
        with pytest.raises(ValidationError):
            CatalogSection(level_columns=list(range(8)))


class TestSinkSection:
    def test_db_filenames(self) -> None:
        s = SinkSection()
        today = date(2026, 1, 5)
        assert s.db_filename(enrich=False, deploy=False, today=today) == "firstbase.db"
        assert s.db_filename(enrich=False, deploy=True, today=today) == "firstbase.db"
        assert s.db_filename(enrich=True, deploy=True, today=today) == "firstbase_migel.db"
        assert s.db_filename(enrich=True, deploy=False, today=today) == "firstbase_migel_05.01.2026.db"


class TestRunConfigSchema:
    def test_paths(self) -> None:
        config = RunConfigSchema(data_dir=Path("/tmp/data"), output_dir=Path("/out"), log_dir=Path("/log"))
        assert config.csv_path == Path("/tmp/data/firstbase.csv")
        assert config.catalog_path == Path("/tmp/data/migel.xlsx")


class TestMatchResult:
    def test_enrichment_fields(self) -> None:
        item = ClassificationItem(id="01.01.01", label="Absauggerät", restriction="max. 1")
        r = MatchResult(item=item, score=0.5, matched_count=1)
        assert r.enrichment_fields() == ["01.01.01", "Absauggerät", "max. 1"]

    def test_score_bounds(self) -> None:
        with pytest.raises(ValidationError):
            MatchResult(item=ClassificationItem(), score=1.2, matched_count=1)
        with pytest.raises(ValidationError):
            MatchResult(item=ClassificationItem(), score=0.5, matched_count=0)
