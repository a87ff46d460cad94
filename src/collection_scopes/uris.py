"""
collection_scopes/uris.py

URI parsing for scope resolution.

The resolver is queried with the ``ParsedURI`` the record processor already
built, so a record's URI is parsed exactly once. ``urllib.parse`` validates
the authority (ports, IPv6 brackets); the host itself is taken from the
netloc as written, minus userinfo and port, so case and IPv6 brackets survive
and a catalogue key compares equal to the same text in a record URI.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from collection_scopes.exceptions import UnresolvableURI

_ILLEGAL_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")

WWW_PREFIX = "www."


@dataclass(frozen=True)
class ParsedURI:
    raw: str
    scheme: str
    host: str | None
    port: int | None = None

    def __str__(self) -> str:
        return self.raw

    @property
    def origin(self) -> str | None:
        """``scheme://host``, or None when the URI has no host."""
        if self.host is None:
            return None
        return f"{self.scheme}://{self.host}"


def parse_uri(text: str, *, record_id: str | None = None) -> ParsedURI:
    """Parse a URI string. Raises UnresolvableURI when it cannot be parsed."""
    if not isinstance(text, str) or not text:
        raise UnresolvableURI("Empty or non-string URI", uri=str(text or ""), record_id=record_id)
    if _ILLEGAL_CHARS_RE.search(text):
        raise UnresolvableURI(
            "URI contains whitespace or control characters", uri=text, record_id=record_id
        )
    try:
        parts = urlsplit(text)
        port = parts.port
    except ValueError as exc:
        raise UnresolvableURI(f"URI parse error: {exc}", uri=text, record_id=record_id) from exc
    return ParsedURI(raw=text, scheme=parts.scheme, host=_netloc_host(parts.netloc), port=port)


def _netloc_host(netloc: str) -> str | None:
    """Host part of ``netloc`` as written: no userinfo or port, brackets kept."""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        host = hostport[: hostport.find("]") + 1]
    else:
        host = hostport.partition(":")[0]
    return host or None


def strip_www(host: str) -> str:
    """Remove a single leading literal ``www.`` label."""
    if host.startswith(WWW_PREFIX):
        return host[len(WWW_PREFIX):]
    return host


def is_same_or_subdomain(domain: str, host: str) -> bool:
    """True when ``domain`` equals ``host`` or is a subdomain of it."""
    if not domain or not host:
        return False
    return domain == host or domain.endswith(f".{host}")
