"""
collection_scopes/catalogue.py

Compiles the curator catalogue into a ScopeIndex.

The catalogue is an XML export whose root holds repeated ``node`` entries:

    <nodes>
      <node>
        <urls>http://a.org/x http://a.org/y</urls>
        <collectionCategories>News</collectionCategories>
        <allCollections>Elections 2015|Elections 2015/Parties</allCollections>
        <subject>Politics | Elections</subject>
        <scope>resource</scope>
      </node>
    </nodes>

Entries that carry no category, collection or subject are skipped before
any other field is looked at. Everything else must name at least one URL and
a known scope literal, otherwise the whole load fails with MalformedCatalogue:
a partially-built index would silently misclassify records.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from collection_scopes.exceptions import MalformedCatalogue
from collection_scopes.model import RESERVED_SCOPE_LITERALS, CollectionRule, Scope
from collection_scopes.scope_index import ScopeIndex, ScopeIndexBuilder
from collection_scopes.utils import log_event

logger = logging.getLogger(__name__)

ENTRY_TAG = "node"
URLS_FIELD = "urls"
CATEGORY_FIELD = "collectionCategories"
COLLECTIONS_FIELD = "allCollections"
SUBJECT_FIELD = "subject"
SCOPE_FIELD = "scope"

_PIPE_RE = re.compile(r"\s*\|\s*")


def split_tags(value: str | None) -> tuple[str, ...]:
    """Split a pipe-delimited tag list, trimming whitespace around each delimiter."""
    if not value or not value.strip():
        return ()
    return tuple(tag for tag in _PIPE_RE.split(value.strip()) if tag)


def _field(node: ET.Element, name: str) -> str | None:
    text = node.findtext(name)
    if text is None:
        return None
    text = text.strip()
    return text or None


def build_rule(
    category: str | None, all_collections: str | None, subject: str | None
) -> CollectionRule:
    return CollectionRule(
        category_label=category or None,
        all_collections=split_tags(all_collections),
        subjects=split_tags(subject),
    )


def load_catalogue(text: str | bytes) -> ScopeIndex:
    """Parse catalogue XML into a ScopeIndex. Raises MalformedCatalogue."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise MalformedCatalogue(
            f"Catalogue is not well-formed XML: {exc}",
            context={"error": str(exc)},
        ) from exc

    builder = ScopeIndexBuilder()
    skipped = 0
    for position, node in enumerate(root.findall(ENTRY_TAG), start=1):
        category = _field(node, CATEGORY_FIELD)
        all_collections = _field(node, COLLECTIONS_FIELD)
        subject = _field(node, SUBJECT_FIELD)
        if category is None and all_collections is None and subject is None:
            skipped += 1
            continue

        rule = build_rule(category, all_collections, subject)
        if rule.is_empty:
            # Only delimiters, e.g. "|"
            skipped += 1
            continue

        urls = (_field(node, URLS_FIELD) or "").split()
        if not urls:
            raise MalformedCatalogue(
                f"Catalogue entry {position} has no urls",
                context={"entry": position},
            )

        scope_literal = _field(node, SCOPE_FIELD)
        if scope_literal is None:
            raise MalformedCatalogue(
                f"Catalogue entry {position} has no scope",
                context={"entry": position, "urls": urls},
            )
        if scope_literal in RESERVED_SCOPE_LITERALS:
            for url in urls:
                builder.add_reserved(scope_literal, url, rule)
            continue
        try:
            scope = Scope.from_literal(scope_literal)
        except ValueError as exc:
            raise MalformedCatalogue(
                f"Catalogue entry {position} has unknown scope {scope_literal!r}",
                context={"entry": position, "scope": scope_literal},
            ) from exc

        for url in urls:
            builder.add(scope, url, rule)

    index = builder.build()
    for literal, count in index.counts().items():
        logger.info("Processed %d URIs for scope %s", count, literal)
    log_event(logger, "Catalogue loaded", entries=len(index), skipped=skipped)
    return index


def load_catalogue_file(path: Path) -> ScopeIndex:
    try:
        text = path.read_bytes()
    except OSError as exc:
        raise MalformedCatalogue(
            f"Cannot read catalogue {path}: {exc}",
            context={"path": str(path), "error": str(exc)},
        ) from exc
    logger.info("Parsing collection catalogue %s", path)
    return load_catalogue(text)
