"""
collection_scopes/batch.py

Runs the record processor over a stream of input records.

The scope index is shared read-only by every worker thread; each record is
owned by the one thread that processes it. Output order matches input order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from collection_scopes.observability import ScopeMetrics
from collection_scopes.processor import RecordOutcome, process_record
from collection_scopes.scope_index import ScopeIndex

logger = logging.getLogger(__name__)


def enrich_records(
    records: Iterable[dict[str, Any]],
    index: ScopeIndex,
    *,
    url_field: str = "url",
    id_field: str = "id",
    workers: int = 1,
    metrics: ScopeMetrics | None = None,
) -> Iterator[RecordOutcome]:
    """Process each input record and yield the outcomes that carry a record."""

    def _one(record: dict[str, Any]) -> RecordOutcome:
        record_id = record.get(id_field)
        return process_record(
            record.get(url_field),
            record,
            index,
            record_id=None if record_id is None else str(record_id),
            metrics=metrics,
        )

    if workers <= 1:
        for record in records:
            outcome = _one(record)
            if outcome.emitted:
                yield outcome
        return

    logger.info("Enriching records with %d worker threads", workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scope-enrich") as pool:
        for outcome in pool.map(_one, records):
            if outcome.emitted:
                yield outcome
