"""
collection_scopes/processor.py

Per-record orchestration between the upstream extractor and the indexer.

Outcome statuses:
--------------------------
- ``enriched``      at least one rule matched and was applied
- ``unmatched``     URI parsed, no rule matched
- ``unhosted``      URI parsed but has no host; only exact matching applies
                    and the record carries no partition key
- ``unresolvable``  URI failed to parse; the record passes through
                    un-enriched and the failure is logged and counted
- ``skipped``       upstream produced no record; nothing is emitted

Per-record problems never raise out of ``process_record``: one bad URI must
not fail the batch it belongs to.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any

from collection_scopes.enricher import apply_rule
from collection_scopes.exceptions import UnresolvableURI
from collection_scopes.logging_config import LogContext
from collection_scopes.observability import ScopeMetrics
from collection_scopes.redaction import redact_uri
from collection_scopes.resolver import iter_matches
from collection_scopes.scope_index import ScopeIndex
from collection_scopes.uris import parse_uri

logger = logging.getLogger(__name__)

STATUS_ENRICHED = "enriched"
STATUS_UNMATCHED = "unmatched"
STATUS_UNHOSTED = "unhosted"
STATUS_UNRESOLVABLE = "unresolvable"
STATUS_SKIPPED = "skipped"


@dataclass
class RecordOutcome:
    status: str
    key: str | None = None
    record: MutableMapping[str, Any] | None = None
    matched_scopes: list[str] = field(default_factory=list)
    error: dict[str, Any] | None = None

    @property
    def emitted(self) -> bool:
        return self.record is not None

    def to_output(self) -> dict[str, Any]:
        """Output line shape: the partition key and the record."""
        return {"key": self.key, "record": self.record}


def process_record(
    url: str | None,
    record: MutableMapping[str, Any] | None,
    index: ScopeIndex,
    *,
    record_id: str | None = None,
    metrics: ScopeMetrics | None = None,
) -> RecordOutcome:
    """Resolve ``url`` against ``index``, enrich ``record`` and key it by host."""
    outcome = _process(url, record, index, record_id=record_id, metrics=metrics)
    if metrics is not None:
        metrics.record_outcome(outcome.status)
    return outcome


def _process(
    url: str | None,
    record: MutableMapping[str, Any] | None,
    index: ScopeIndex,
    *,
    record_id: str | None,
    metrics: ScopeMetrics | None,
) -> RecordOutcome:
    if record is None:
        logger.debug("Extractor returned no record for %s", redact_uri(url))
        return RecordOutcome(status=STATUS_SKIPPED)

    with LogContext(record_id=record_id, uri=redact_uri(url)):
        try:
            uri = parse_uri(url, record_id=record_id)
        except UnresolvableURI as exc:
            logger.warning(
                "Unresolvable URI %s for record %s: %s",
                redact_uri(url),
                record_id,
                exc.message,
            )
            return RecordOutcome(
                status=STATUS_UNRESOLVABLE, record=record, error=exc.as_log_fields()
            )

        matched: list[str] = []
        for match in iter_matches(uri, index):
            apply_rule(match.rule, record)
            matched.append(match.scope.literal)
            if metrics is not None:
                metrics.record_match(match.scope)

    if uri.host is None:
        status = STATUS_UNHOSTED
    elif matched:
        status = STATUS_ENRICHED
    else:
        status = STATUS_UNMATCHED
    return RecordOutcome(status=status, key=uri.host, record=record, matched_scopes=matched)
