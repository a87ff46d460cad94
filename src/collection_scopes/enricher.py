"""
collection_scopes/enricher.py

Appends matched rules onto a metadata record.

Records are plain dicts whose multi-valued fields are lists. Values are only
ever appended: nothing is removed or deduplicated, so enriching an already
enriched record again repeats every value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, MutableMapping
from typing import Any

from collection_scopes.model import CollectionRule
from collection_scopes.redaction import redact_uri

logger = logging.getLogger(__name__)

URL_FIELD = "url"
COLLECTION_FIELD = "collection"
COLLECTIONS_FIELD = "collections"
SUBJECT_FIELD = "subject"


def add_field(record: MutableMapping[str, Any], name: str, value: Any) -> None:
    """Append ``value`` to the multi-valued field ``name``."""
    current = record.get(name)
    if current is None:
        record[name] = [value]
    elif isinstance(current, list):
        current.append(value)
    else:
        record[name] = [current, value]


def apply_rules(rules: Iterable[CollectionRule], record: MutableMapping[str, Any]) -> None:
    for rule in rules:
        apply_rule(rule, record)


def apply_rule(rule: CollectionRule, record: MutableMapping[str, Any]) -> None:
    url = redact_uri(record.get(URL_FIELD))
    if rule.category_label:
        add_field(record, COLLECTION_FIELD, rule.category_label)
        logger.debug("Added collection %r to %s", rule.category_label, url)
    for collection in rule.all_collections:
        add_field(record, COLLECTIONS_FIELD, collection)
        logger.debug("Added collections value %r to %s", collection, url)
    for subject in rule.subjects:
        add_field(record, SUBJECT_FIELD, subject)
        logger.debug("Added subject %r to %s", subject, url)
