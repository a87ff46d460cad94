"""
collection_scopes/resolver.py

Matches a URI against every scope of a ScopeIndex.

All three checks always run and their hits are concatenated:

1. exact      the URI string is a key of the EXACT_RESOURCE table
2. prefix     ``scheme://host`` is a key of the ORIGIN_PREFIX table
3. suffix     the URI host, minus one leading ``www.``, equals or is a
              subdomain of the host of an HOST_SUFFIX key

The suffix check scans the HOST_SUFFIX hosts the index extracted at build
time. Host-suffix catalogues are small next to record volume; a
reversed-label trie would make the scan logarithmic if that ever stops being
true.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from collection_scopes.model import CollectionRule, Scope
from collection_scopes.scope_index import ScopeIndex
from collection_scopes.uris import ParsedURI, is_same_or_subdomain, parse_uri, strip_www


@dataclass(frozen=True)
class ScopeMatch:
    scope: Scope
    key: str
    rule: CollectionRule


def iter_matches(uri: ParsedURI, index: ScopeIndex) -> Iterator[ScopeMatch]:
    """Yield every rule that applies to ``uri``, in evaluation order."""
    exact = index.get(Scope.EXACT_RESOURCE, uri.raw)
    if exact is not None:
        yield ScopeMatch(Scope.EXACT_RESOURCE, uri.raw, exact)

    if uri.host is None:
        return

    prefix = uri.origin
    rule = index.get(Scope.ORIGIN_PREFIX, prefix)
    if rule is not None:
        yield ScopeMatch(Scope.ORIGIN_PREFIX, prefix, rule)

    domain = strip_www(uri.host)
    for key, host, rule in index.suffix_hosts():
        if is_same_or_subdomain(domain, host):
            yield ScopeMatch(Scope.HOST_SUFFIX, key, rule)


def resolve(uri: ParsedURI | str, index: ScopeIndex) -> list[CollectionRule]:
    """Return the rules matching ``uri`` across all scopes; empty when none match.

    A string is parsed first and may raise UnresolvableURI.
    """
    if isinstance(uri, str):
        uri = parse_uri(uri)
    return [match.rule for match in iter_matches(uri, index)]
