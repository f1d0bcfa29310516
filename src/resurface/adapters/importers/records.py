"""Import highlight records from json/jsonl/yaml/csv files."""

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from resurface.adapters.importers.metadata import clean_author, clean_title
from resurface.core import Highlight, HighlightSource
from resurface.core.entities import generate_id


def _as_text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _parse_tags(value: Any) -> list[str]:
    if not value:
        return []
    if not isinstance(value, (list, tuple)):
        value = str(value).split(",")
    tags = [str(t).strip().lower() for t in value]
    return list(dict.fromkeys(t for t in tags if t))


def _as_timestamp(value: Any, default: str) -> str:
    # YAML turns unquoted timestamps into date/datetime objects
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value) if value else default


def load_records(path: Path) -> list[dict]:
    """Read raw records from a supported file."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        rows = []
        with path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    rows.append(json.loads(line))
        return rows
    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, list):
            return data
        raise ValueError("JSON file must be a list of objects.")
    if suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e
        if isinstance(data, list):
            return data
        raise ValueError("YAML file must be a list of mappings.")
    if suffix == ".csv":
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            return list(csv.DictReader(f))
    raise ValueError("Unsupported format. Use .jsonl, .json, .yaml or .csv")


def records_to_highlights(
    rows: list[dict],
    default_source: HighlightSource = HighlightSource.QUOTE,
    now: Optional[datetime] = None,
) -> list[Highlight]:
    """Turn raw records into fresh highlights.

    Rows without text are skipped silently. Rows that are not mappings or
    that fail validation are skipped with a warning. Memory state always
    starts at its defaults, whatever the record says.
    """
    captured_default = (now or datetime.now(timezone.utc)).isoformat()
    highlights = []
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            print(f"⚠️  Warning: Skipping record {index}: not a mapping")
            continue

        text = _as_text(row.get("text"))
        if not text:
            continue

        title = clean_title(_as_text(row.get("title") or row.get("book")))
        try:
            highlight = Highlight(
                id=str(row.get("id") or generate_id(title, text)),
                text=text,
                title=title,
                author=clean_author(_as_text(row.get("author"))),
                source=row.get("source") or default_source,
                captured_at=_as_timestamp(
                    row.get("capturedAt") or row.get("captured_at"), captured_default
                ),
                tags=_parse_tags(row.get("tags")),
                comment=_as_text(row.get("comment")) or None,
            )
        except ValueError as e:
            print(f"⚠️  Warning: Skipping record {index}: {e}")
            continue
        highlights.append(highlight)
    return highlights
