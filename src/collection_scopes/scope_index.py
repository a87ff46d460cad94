"""
collection_scopes/scope_index.py

Read-only lookup tables from scope key to collection rule, one per scope.

A ``ScopeIndex`` is assembled with a ``ScopeIndexBuilder`` once per worker
and never changes afterwards, so any number of threads may query it without
locking. Keys per scope:

    EXACT_RESOURCE  the full URI string
    ORIGIN_PREFIX   ``scheme://host``
    HOST_SUFFIX     the rule URL exactly as catalogued; its host is
                    extracted once, when the index is built
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from collection_scopes.exceptions import UnresolvableURI
from collection_scopes.model import RESERVED_SCOPE_LITERALS, CollectionRule, Scope
from collection_scopes.redaction import redact_uri
from collection_scopes.uris import parse_uri

logger = logging.getLogger(__name__)


class ScopeIndex:
    __slots__ = ("_tables", "_reserved", "_suffix_hosts")

    def __init__(
        self,
        tables: Mapping[Scope, Mapping[str, CollectionRule]] | None = None,
        reserved: Mapping[str, Mapping[str, CollectionRule]] | None = None,
    ) -> None:
        tables = tables or {}
        reserved = reserved or {}
        self._tables: dict[Scope, Mapping[str, CollectionRule]] = {
            scope: MappingProxyType(dict(tables.get(scope, {}))) for scope in Scope
        }
        self._reserved: dict[str, Mapping[str, CollectionRule]] = {
            literal: MappingProxyType(dict(reserved.get(literal, {})))
            for literal in sorted(RESERVED_SCOPE_LITERALS)
        }
        self._suffix_hosts: tuple[tuple[str, str, CollectionRule], ...] = tuple(
            (key, host, rule)
            for key, rule in self._tables[Scope.HOST_SUFFIX].items()
            if (host := _suffix_key_host(key)) is not None
        )

    def table(self, scope: Scope) -> Mapping[str, CollectionRule]:
        return self._tables[scope]

    def get(self, scope: Scope, key: str) -> CollectionRule | None:
        return self._tables[scope].get(key)

    def suffix_hosts(self) -> tuple[tuple[str, str, CollectionRule], ...]:
        """(key, host, rule) for every HOST_SUFFIX key that has a usable host."""
        return self._suffix_hosts

    def reserved_table(self, literal: str) -> Mapping[str, CollectionRule]:
        """Entries loaded under a reserved scope literal. Never used for matching."""
        return self._reserved[literal]

    def counts(self) -> dict[str, int]:
        """Entries per scope literal, reserved buckets included."""
        counts = {scope.literal: len(table) for scope, table in self._tables.items()}
        counts.update({literal: len(table) for literal, table in self._reserved.items()})
        return counts

    def __len__(self) -> int:
        return sum(len(table) for table in self._tables.values())

    def __iter__(self) -> Iterator[tuple[Scope, str, CollectionRule]]:
        for scope, table in self._tables.items():
            for key, rule in table.items():
                yield scope, key, rule

    def __repr__(self) -> str:
        return f"ScopeIndex({self.counts()!r})"


class ScopeIndexBuilder:
    """Mutable staging area for a ScopeIndex. Later keys overwrite earlier ones."""

    def __init__(self) -> None:
        self._tables: dict[Scope, dict[str, CollectionRule]] = {scope: {} for scope in Scope}
        self._reserved: dict[str, dict[str, CollectionRule]] = {
            literal: {} for literal in RESERVED_SCOPE_LITERALS
        }

    def add(self, scope: Scope, key: str, rule: CollectionRule) -> bool:
        """Register ``rule`` under ``key``. Empty rules are ignored and return False."""
        if rule.is_empty:
            return False
        table = self._tables[scope]
        if key in table:
            logger.debug("Overwriting %s rule for %s", scope.literal, key)
        table[key] = rule
        return True

    def add_reserved(self, literal: str, key: str, rule: CollectionRule) -> bool:
        if rule.is_empty:
            return False
        self._reserved[literal][key] = rule
        return True

    def build(self) -> ScopeIndex:
        return ScopeIndex(self._tables, self._reserved)


def _suffix_key_host(key: str) -> str | None:
    try:
        host = parse_uri(key).host
    except UnresolvableURI as exc:
        logger.warning("Skipping unparseable subdomains key %s: %s", redact_uri(key), exc.message)
        return None
    if host is None:
        logger.warning("Skipping subdomains key without host: %s", redact_uri(key))
    return host
