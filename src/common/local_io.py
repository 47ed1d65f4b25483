"""Local JSONL output for the --load-local flag."""

from __future__ import annotations

import json
import logging
from dataclasses import is_dataclass
from pathlib import Path
from typing import Any, Iterable

from common.datetime import utc_now
from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "output"


def to_record(value: Any) -> Any:
    """A JSON-ready form of a dataclass or plain dict."""
    if is_dataclass(value) and not isinstance(value, type):
        return serialize_dataclass(value)
    return value


def save_jsonl_records_local(
    records: Iterable[Any],
    prefix: str,
    output_dir: str | Path = DEFAULT_OUTPUT_DIR,
) -> Path:
    """
    Write records, one JSON object per line, to <output_dir>/<prefix>_<utc timestamp>.jsonl.

    Records may be dataclasses (serialized with datetimes as ISO strings) or dicts.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filepath = output_path / f"{prefix}_{utc_now().strftime('%Y_%m_%d_%H_%M_%S')}.jsonl"

    count = 0
    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(to_record(record), default=str, ensure_ascii=False) + "\n")
            count += 1

    logger.info("Saved %d records to %s", count, filepath)
    return filepath
