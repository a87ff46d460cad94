"""
Shared pytest fixtures for collection scope tests.

Provides common fixtures for:
- Catalogue XML documents
- Input record files
- Fresh metrics registries
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if SRC_ROOT.is_dir():
    sys.path.insert(0, str(SRC_ROOT))

from tests.fixtures import create_sample_jsonl, entry, make_catalogue  # noqa: E402


# =============================================================================
# Catalogue fixtures
# =============================================================================


@pytest.fixture
def sample_catalogue() -> str:
    """A catalogue exercising every scope, including the reserved one."""
    return make_catalogue(
        [
            entry("http://a.org/x", category="News", subject="Politics|Elections"),
            entry("http://b.org", scope="root", collections="Blogs | Blogs/Personal"),
            entry("http://gov.uk", scope="subdomains", collections="Government"),
            entry("http://c.org/1 http://c.org/2", scope="plus1", category="Reserved"),
            entry("http://skipped.org/", scope="resource"),
        ]
    )


@pytest.fixture
def catalogue_file(tmp_path: Path, sample_catalogue: str) -> Path:
    path = tmp_path / "catalogue.xml"
    path.write_text(sample_catalogue, encoding="utf-8")
    return path


@pytest.fixture
def sample_index(sample_catalogue: str) -> Any:
    from collection_scopes.catalogue import load_catalogue

    return load_catalogue(sample_catalogue)


# =============================================================================
# Record fixtures
# =============================================================================


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    return [
        {"id": "r1", "url": "http://a.org/x", "title": "Exact hit"},
        {"id": "r2", "url": "http://b.org/post/1?page=2", "title": "Prefix hit"},
        {"id": "r3", "url": "https://data.gov.uk/dataset", "title": "Subdomain hit"},
        {"id": "r4", "url": "http://mygov.uk/", "title": "No hit"},
        {"id": "r5", "url": "http://bad host/", "title": "Unparseable"},
    ]


@pytest.fixture
def records_file(tmp_path: Path, sample_records: list[dict[str, Any]]) -> Path:
    path = tmp_path / "records.jsonl"
    create_sample_jsonl(path, sample_records)
    return path


# =============================================================================
# Metrics and logging fixtures
# =============================================================================


@pytest.fixture
def metrics() -> Any:
    from collection_scopes.observability import ScopeMetrics

    return ScopeMetrics()


@pytest.fixture(autouse=True)
def reset_log_context() -> Generator[None, None, None]:
    """Reset structured log context before and after each test."""
    from collection_scopes.logging_config import clear_log_context

    clear_log_context()
    yield
    clear_log_context()
