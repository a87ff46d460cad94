"""Error types raised by catalogue loading, URI parsing and job configuration.

Every error carries a stable ``code`` and a ``context`` dict so it can be
logged as structured fields. Only ``UnresolvableURI`` is recovered per record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class ScopeError(Exception):
    message: str
    code: str = "scope_error"
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, message: str, *, code: str | None = None, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.context = dict(context or {})

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "error_code": self.code,
            "error_message": self.message,
            "error_context": self.context,
        }


class MalformedCatalogue(ScopeError):
    """The catalogue cannot be compiled into a scope index. Fatal at startup."""

    code = "malformed_catalogue"


class UnresolvableURI(ScopeError):
    """A per-record URI could not be parsed. Recovered by the record processor."""

    code = "unresolvable_uri"

    def __init__(self, message: str, *, uri: str, record_id: str | None = None) -> None:
        context: dict[str, Any] = {"uri": uri}
        if record_id is not None:
            context["record_id"] = record_id
        super().__init__(message, context=context)


class ConfigValidationError(ScopeError):
    code = "config_validation_error"


class YamlParseError(ScopeError):
    code = "yaml_parse_error"
