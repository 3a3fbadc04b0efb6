"""YAML record store and JSON index writer.

Records are written in one canonical layout (block style, indented
sequences, ISO-8601 UTC timestamps) so that repeated runs converge on the
same bytes. Every write goes to a temporary sibling file first and is then
moved into place with ``os.replace``.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import date, datetime, timezone
from typing import Any, List, Optional

import yaml

from constants import Constants

from .models import DateValue, PluginRecord, VersionEntry

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class RecordDumper(yaml.SafeDumper):
    """SafeDumper that indents sequences under their parent key."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def _represent_datetime(dumper: yaml.SafeDumper, value: datetime) -> yaml.Node:
    # Naive values are written without a zone so they reload naive
    if value.tzinfo is None:
        return dumper.represent_datetime(value)
    return dumper.represent_scalar("tag:yaml.org,2002:timestamp", format_timestamp(value))


RecordDumper.add_representer(datetime, _represent_datetime)


def to_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return to_utc(value).strftime(TIMESTAMP_FORMAT)


def parse_stored_date(text: str) -> Optional[datetime]:
    """Parse a date that came back from the store as plain text.

    Accepts ``YYYY-MM-DDTHH:MM:SSZ`` plus the other ISO-8601 spellings
    ``datetime.fromisoformat`` understands; returns None otherwise.
    """
    candidate = text.strip()
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        return to_utc(datetime.fromisoformat(candidate))
    except ValueError:
        return None


def restore_date(value: Optional[DateValue], *, context: str = "") -> Optional[DateValue]:
    """Re-materialize a date that came back from the store as text.

    Only text is converted; datetime and date values are returned as they
    are. Unparseable text is returned unchanged.
    """
    if not isinstance(value, str):
        return value
    parsed = parse_stored_date(value)
    if parsed is None:
        logger.warning("Keeping unparseable date '%s' %s as text", value, context)
        return value
    logger.warning("Restored date '%s' %s from text", value, context)
    return parsed


def restore_dates(versions: List[VersionEntry], *, context: str = "") -> None:
    """Repair pass over every entry's ``date`` field."""
    for entry in versions:
        entry.date = restore_date(entry.date, context=f"for {entry.version} {context}".strip())


def is_record_file(path: str) -> bool:
    return path.lower().endswith(tuple(Constants.RECORD_EXTENSIONS))


def load_mapping(path: str) -> Any:
    """Load a record file's raw field-map.

    Raises:
        yaml.YAMLError: if the content is not valid YAML.
        OSError: if the file cannot be read.
    """
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def dump_record(record: PluginRecord) -> str:
    return yaml.dump(
        record.to_mapping(),
        Dumper=RecordDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
        width=Constants.YAML_WIDTH,
    )


def atomic_write(path: str, text: str) -> None:
    """Write ``text`` to ``path`` through a temporary file and ``os.replace``."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def save_record(path: str, record: PluginRecord) -> None:
    atomic_write(path, dump_record(record))


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_index(records: List[PluginRecord], path: str) -> int:
    """Serialize record snapshots as one flat JSON array; return the entry count."""
    entries = [record.to_mapping() for record in records]
    atomic_write(path, json.dumps(entries, default=_json_default, ensure_ascii=False))
    return len(entries)
