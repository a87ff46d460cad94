"""
collection_scopes/model.py

Value types shared by the loader, the index and the resolver.

Scope literals as they appear in the catalogue:

    resource    -> Scope.EXACT_RESOURCE  "just this URL"
    root        -> Scope.ORIGIN_PREFIX   "all URLs that start like this"
    subdomains  -> Scope.HOST_SUFFIX     "this host or any subdomain"
    plus1       -> reserved; loaded into its own table but never queried
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

RESERVED_SCOPE_LITERALS = frozenset({"plus1"})


class Scope(Enum):
    EXACT_RESOURCE = "resource"
    ORIGIN_PREFIX = "root"
    HOST_SUFFIX = "subdomains"

    @property
    def literal(self) -> str:
        return self.value

    @classmethod
    def from_literal(cls, literal: str) -> Scope:
        """Convert a catalogue scope literal. Raises ValueError for unknown literals."""
        return cls(literal.strip())


@dataclass(frozen=True)
class CollectionRule:
    """The collection and subject tags one catalogue entry assigns."""

    category_label: str | None = None
    all_collections: tuple[str, ...] = ()
    subjects: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.category_label or self.all_collections or self.subjects)

    def to_dict(self) -> dict[str, object]:
        return {
            "collectionCategories": self.category_label,
            "allCollections": list(self.all_collections),
            "subject": list(self.subjects),
        }
