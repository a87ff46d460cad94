from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft7Validator, FormatChecker

from collection_scopes.exceptions import ConfigValidationError, YamlParseError

JOB_CONFIG_SCHEMA = "job_config"
_MAX_REPORTED_ERRORS = 10


@cache
def load_schema(schema_name: str) -> dict[str, Any]:
    schema_dir = resources.files("collection_scopes").joinpath("schemas")
    schema_path = schema_dir.joinpath(f"{schema_name}.schema.json")
    try:
        return json.loads(schema_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Schema not found: {schema_name}") from exc


def validate_config(config: Any, schema_name: str, *, config_path: Path | None = None) -> None:
    schema = load_schema(schema_name)
    validator = Draft7Validator(schema, format_checker=FormatChecker())
    errors = sorted(validator.iter_errors(config), key=lambda exc: list(exc.path))
    if not errors:
        return
    location = str(config_path) if config_path else "<config>"
    lines = [f"Schema validation failed for {location} ({schema_name})."]
    error_details: list[dict[str, str]] = []
    for error in errors[:_MAX_REPORTED_ERRORS]:
        path = ".".join(str(p) for p in error.path) if error.path else "<root>"
        lines.append(f"- {path}: {error.message}")
        error_details.append({"path": path, "message": error.message})
    if len(errors) > _MAX_REPORTED_ERRORS:
        lines.append(f"... and {len(errors) - _MAX_REPORTED_ERRORS} more errors.")
    raise ConfigValidationError(
        "\n".join(lines),
        context={
            "path": location,
            "schema": schema_name,
            "errors": error_details,
            "truncated": len(errors) > _MAX_REPORTED_ERRORS,
        },
    )


def read_yaml(path: Path, schema_name: str | None = None) -> Any:
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise YamlParseError(
            f"YAML parse error in {path}: {exc}",
            context={"path": str(path), "error": str(exc)},
        ) from exc
    if data is None:
        data = {}
    if schema_name:
        validate_config(data, schema_name, config_path=path)
    return data


@dataclass(frozen=True)
class JobConfig:
    """Settings for one enrichment job."""

    catalogue: Path
    input_url_field: str = "url"
    input_id_field: str = "id"
    workers: int = 1
    metrics_out: Path | None = None
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base_dir: Path | None = None) -> JobConfig:
        """Build a config from validated data; relative paths resolve against ``base_dir``."""
        logging_cfg = data.get("logging") or {}
        metrics_out = data.get("metrics_out")
        return cls(
            catalogue=_resolve_path(data["catalogue"], base_dir),
            input_url_field=data.get("input_url_field", "url"),
            input_id_field=data.get("input_id_field", "id"),
            workers=int(data.get("workers", 1)),
            metrics_out=_resolve_path(metrics_out, base_dir) if metrics_out else None,
            log_level=str(logging_cfg.get("level", "INFO")).upper(),
            log_format=logging_cfg.get("format", "text"),
        )


def _resolve_path(raw: str, base_dir: Path | None) -> Path:
    path = Path(raw).expanduser()
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    return path


def load_job_config(path: Path) -> JobConfig:
    data = read_yaml(path, schema_name=JOB_CONFIG_SCHEMA)
    return JobConfig.from_mapping(data, base_dir=path.parent)
