"""Shared helpers: structured log events and JSONL record files."""

from __future__ import annotations

import gzip
import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO, Any

logger = logging.getLogger(__name__)


def log_event(logger: logging.Logger, message: str, **fields: Any) -> None:
    """Log a structured message with JSON fields."""
    if fields:
        payload = json.dumps(fields, sort_keys=True, ensure_ascii=False, default=str)
        logger.info("%s | %s", message, payload)
    else:
        logger.info("%s", message)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _open_text(path: Path, mode: str, *, compressed: bool | None = None) -> IO[str]:
    if compressed is None:
        compressed = path.suffix == ".gz"
    if compressed:
        return gzip.open(path, mode, encoding="utf-8")
    return open(path, mode, encoding="utf-8")


def read_jsonl(path: Path) -> Iterator[dict[str, Any]]:
    """Read JSONL file (supports .gz) and yield records.

    Lines that are not JSON objects are logged and skipped.
    """
    with _open_text(path, "rt") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError as exc:
                logger.warning("Skipping invalid JSON at %s:%d: %s", path, lineno, exc)
                continue
            if not isinstance(row, dict):
                logger.warning("Skipping non-object JSON at %s:%d", path, lineno)
                continue
            yield row


def write_jsonl(path: Path, rows: Iterable[dict[str, Any]]) -> int:
    """Write records to JSONL file (supports .gz) atomically. Returns the row count."""
    ensure_dir(path.parent)
    tmp_path = path.with_name(path.name + ".tmp")
    count = 0
    with _open_text(tmp_path, "wt", compressed=path.suffix == ".gz") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")
            count += 1
    tmp_path.replace(path)
    return count
