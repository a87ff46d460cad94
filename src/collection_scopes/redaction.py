"""Masking of credentials that archived URIs sometimes carry.

Crawled URLs can embed ``user:password@`` userinfo or access tokens in their
query strings. Anything that reaches a log line goes through these helpers.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "<REDACTED>"

_USERINFO_RE = re.compile(r"(?i)\b([a-z][a-z0-9+.-]*://)[^/\s@?#]+@")
_QUERY_SECRET_RE = re.compile(
    r"(?i)([?&;](?:access[-_]?token|api[-_]?key|auth|password|passwd|secret|sig|signature|token)=)"
    r"[^&;#\s]*"
)
_TOKEN_PATTERNS = [
    re.compile(r"gh[pousr]_[A-Za-z0-9_]{30,}"),
    re.compile(r"AKIA[0-9A-Z]{16}"),
    re.compile(r"eyJ[a-zA-Z0-9_-]{10,}\.[a-zA-Z0-9._-]{10,}\.[a-zA-Z0-9._-]{10,}"),
]


def redact_uri(uri: object) -> str:
    if not uri:
        return ""
    redacted = _USERINFO_RE.sub(rf"\1{REDACTED}@", str(uri))
    return _QUERY_SECRET_RE.sub(rf"\1{REDACTED}", redacted)


def redact_string(text: str) -> str:
    redacted = redact_uri(text)
    for pattern in _TOKEN_PATTERNS:
        redacted = pattern.sub(REDACTED, redacted)
    return redacted


def redact_structure(value: Any) -> Any:
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, Mapping):
        return {key: redact_structure(val) for key, val in value.items()}
    if isinstance(value, tuple):
        return tuple(redact_structure(item) for item in value)
    if isinstance(value, list):
        return [redact_structure(item) for item in value]
    return value
