"""
collection_scopes/observability.py

Prometheus metrics for a scope-enrichment run.

Each ScopeMetrics owns its own CollectorRegistry so that several runs (or
tests) in one process never collide on metric names.

Usage:
    metrics = ScopeMetrics()
    metrics.observe_index(index)
    metrics.record_outcome("enriched")
    metrics.write(Path("metrics.prom"))
"""

from __future__ import annotations

import logging
from pathlib import Path

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

from collection_scopes.model import Scope
from collection_scopes.scope_index import ScopeIndex
from collection_scopes.utils import ensure_dir

logger = logging.getLogger(__name__)


class ScopeMetrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.records = Counter(
            "collection_scopes_records",
            "Records seen by the record processor, by outcome",
            labelnames=("status",),
            registry=self.registry,
        )
        self.rule_matches = Counter(
            "collection_scopes_rule_matches",
            "Rules applied to records, by matching scope",
            labelnames=("scope",),
            registry=self.registry,
        )
        self.index_entries = Gauge(
            "collection_scopes_index_entries",
            "Keys loaded into the scope index, by scope literal",
            labelnames=("scope",),
            registry=self.registry,
        )

    def observe_index(self, index: ScopeIndex) -> None:
        for literal, count in index.counts().items():
            self.index_entries.labels(scope=literal).set(count)

    def record_outcome(self, status: str) -> None:
        self.records.labels(status=status).inc()

    def record_match(self, scope: Scope) -> None:
        self.rule_matches.labels(scope=scope.literal).inc()

    def value(self, name: str, **labels: str) -> float:
        """Current sample value, 0.0 when the series has not been touched."""
        return self.registry.get_sample_value(name, labels) or 0.0

    def render(self) -> bytes:
        return generate_latest(self.registry)

    def write(self, path: Path) -> None:
        ensure_dir(path.parent)
        path.write_bytes(self.render())
        logger.info("Wrote metrics to %s", path)
