"""Collection and subject scope resolution for archived web records."""

from collection_scopes.catalogue import load_catalogue, load_catalogue_file
from collection_scopes.enricher import apply_rules
from collection_scopes.exceptions import MalformedCatalogue, ScopeError, UnresolvableURI
from collection_scopes.model import CollectionRule, Scope
from collection_scopes.processor import RecordOutcome, process_record
from collection_scopes.resolver import iter_matches, resolve
from collection_scopes.scope_index import ScopeIndex, ScopeIndexBuilder
from collection_scopes.uris import ParsedURI, parse_uri

__all__ = [
    "CollectionRule",
    "Scope",
    "ScopeIndex",
    "ScopeIndexBuilder",
    "load_catalogue",
    "load_catalogue_file",
    "ParsedURI",
    "parse_uri",
    "resolve",
    "iter_matches",
    "apply_rules",
    "process_record",
    "RecordOutcome",
    "ScopeError",
    "MalformedCatalogue",
    "UnresolvableURI",
]
