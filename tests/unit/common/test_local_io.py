"""Tests for common.local_io module."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone

from common.local_io import save_jsonl_records_local, to_record


@dataclass
class Record:
    name: str
    seen_at: datetime


class TestToRecord:
    def test_dataclass_is_serialized(self) -> None:
        record = Record("a", datetime(2024, 1, 1, tzinfo=timezone.utc))
        assert to_record(record) == {"name": "a", "seen_at": "2024-01-01T00:00:00+00:00"}

    def test_dict_passes_through(self) -> None:
        assert to_record({"a": 1}) == {"a": 1}


class TestSaveJsonlRecordsLocal:
    def test_writes_one_line_per_record(self, tmp_path) -> None:
        records = [Record("a", datetime(2024, 1, 1, tzinfo=timezone.utc)), {"name": "b"}]

        path = save_jsonl_records_local(records, "pulled_articles", output_dir=tmp_path / "out")

        assert path.parent == tmp_path / "out"
        assert path.name.startswith("pulled_articles_")
        assert path.suffix == ".jsonl"
        lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert [line["name"] for line in lines] == ["a", "b"]

    def test_empty_records(self, tmp_path) -> None:
        path = save_jsonl_records_local([], "article_topics", output_dir=tmp_path)
        assert path.read_text(encoding="utf-8") == ""
