#!/usr/bin/env python3
"""Command line entry point for collection scope enrichment."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from collections import Counter
from pathlib import Path

from collection_scopes.__version__ import __version__
from collection_scopes.batch import enrich_records
from collection_scopes.catalogue import load_catalogue_file
from collection_scopes.config import JobConfig, load_job_config
from collection_scopes.exceptions import ScopeError
from collection_scopes.logging_config import add_logging_args, configure_logging
from collection_scopes.observability import ScopeMetrics
from collection_scopes.utils import log_event, read_jsonl, write_jsonl

logger = logging.getLogger(__name__)

COMMAND_ENRICH = "enrich"
COMMAND_INSPECT = "inspect"
EXIT_CONFIG_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collection-scopes",
        description="Annotate archived records with collection and subject tags.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    enrich = sub.add_parser(COMMAND_ENRICH, help="Enrich a JSONL file of records.")
    enrich.add_argument("--config", type=Path, help="Job configuration YAML.")
    enrich.add_argument("--catalogue", type=Path, help="Catalogue XML (overrides config).")
    enrich.add_argument("--input", type=Path, required=True, help="Input records (.jsonl or .jsonl.gz).")
    enrich.add_argument("--output", type=Path, required=True, help="Output records (.jsonl or .jsonl.gz).")
    enrich.add_argument("--workers", type=int, default=None, help="Worker threads (overrides config).")
    enrich.add_argument("--metrics-out", type=Path, default=None, help="Write Prometheus metrics here.")
    add_logging_args(enrich)

    inspect = sub.add_parser(COMMAND_INSPECT, help="Print per-scope entry counts of a catalogue.")
    inspect.add_argument("--catalogue", type=Path, required=True, help="Catalogue XML.")
    add_logging_args(inspect)
    return parser


def _resolve_job_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> JobConfig:
    if args.config is not None:
        config = load_job_config(args.config)
    elif args.catalogue is not None:
        config = JobConfig(catalogue=args.catalogue)
    else:
        parser.error("enrich requires --config or --catalogue")
    overrides: dict[str, object] = {}
    if args.catalogue is not None:
        overrides["catalogue"] = args.catalogue
    if args.workers is not None:
        if args.workers < 1:
            parser.error("--workers must be at least 1")
        overrides["workers"] = args.workers
    if args.metrics_out is not None:
        overrides["metrics_out"] = args.metrics_out
    if args.log_level is not None:
        overrides["log_level"] = args.log_level.upper()
    if args.log_format is not None:
        overrides["log_format"] = args.log_format
    return dataclasses.replace(config, **overrides)


def run_enrich(config: JobConfig, input_path: Path, output_path: Path) -> dict[str, int]:
    """Load the catalogue once, enrich every input record and write the output file."""
    index = load_catalogue_file(config.catalogue)
    metrics = ScopeMetrics()
    metrics.observe_index(index)

    statuses: Counter[str] = Counter()

    def _rows():
        for outcome in enrich_records(
            read_jsonl(input_path),
            index,
            url_field=config.input_url_field,
            id_field=config.input_id_field,
            workers=config.workers,
            metrics=metrics,
        ):
            statuses[outcome.status] += 1
            yield outcome.to_output()

    written = write_jsonl(output_path, _rows())
    summary = {"written": written, **dict(statuses)}
    log_event(logger, "Enrichment finished", output=str(output_path), **summary)
    if config.metrics_out is not None:
        metrics.write(config.metrics_out)
    return summary


def _run_inspect(args: argparse.Namespace) -> int:
    configure_logging(level=args.log_level, fmt=args.log_format or "text")
    index = load_catalogue_file(args.catalogue)
    print(json.dumps(index.counts(), indent=2, sort_keys=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == COMMAND_INSPECT:
            return _run_inspect(args)
        if not args.input.is_file():
            parser.error(f"input file not found: {args.input}")
        config = _resolve_job_config(args, parser)
        configure_logging(level=config.log_level, fmt=config.log_format)
        summary = run_enrich(config, args.input, args.output)
    except ScopeError as exc:
        configure_logging()
        logger.error("%s (%s)", exc.message, exc.code)
        return EXIT_CONFIG_ERROR
    print(json.dumps(summary, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
