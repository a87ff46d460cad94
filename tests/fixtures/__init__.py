"""Builders for catalogue documents and record files used across tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape


def make_catalogue(entries: list[dict[str, str | None]]) -> str:
    """Render catalogue XML; a None value leaves the field out of the entry."""
    nodes = []
    for item in entries:
        fields = "".join(
            f"<{name}>{escape(value)}</{name}>"
            for name, value in item.items()
            if value is not None
        )
        nodes.append(f"<node>{fields}</node>")
    return '<?xml version="1.0" encoding="UTF-8"?>\n<nodes>' + "".join(nodes) + "</nodes>"


def entry(
    urls: str | None,
    *,
    scope: str | None = "resource",
    category: str | None = None,
    collections: str | None = None,
    subject: str | None = None,
) -> dict[str, str | None]:
    """One catalogue node, in field order."""
    return {
        "urls": urls,
        "collectionCategories": category,
        "allCollections": collections,
        "subject": subject,
        "scope": scope,
    }


def create_sample_jsonl(path: Path, records: list[dict[str, Any]]) -> None:
    """Create a JSONL file with sample records."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
