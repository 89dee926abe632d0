# award-graph/tests/conftest.py
#
# Test bootstrap for pytest: ensure repository root is on sys.path so tests can import
# the `award_graph` package without requiring PYTHONPATH to be explicitly set by the caller.
#
# Fixture Organization:
# - This file: core fixtures (config, sample export, in-memory store)
# - tests/factories.py: test data factories (AwardRecordFactory, write_award_csv)
# - tests/mocks/: mock factories (Neo4jMocks) and InMemoryGraphStore
#
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger


_repo_root = Path(__file__).resolve().parents[1]
_repo_root_str = str(_repo_root)

if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)

# Configure test logging using loguru for consistency with application code
logger.remove()
logger.add(
    sys.stderr,
    level="INFO",
    format="{time:YYYY-MM-DD HH:mm:ss} {level} {name}: {message}",
)


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "fast: Fast unit tests that should complete in < 1 second")
    config.addinivalue_line("markers", "slow: Slow tests that may take > 1 second to complete")
    config.addinivalue_line("markers", "integration: Tests that run several stages together")
    config.addinivalue_line("markers", "neo4j: Tests that require Neo4j database")


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return _repo_root


@pytest.fixture
def pipeline_config(tmp_path):
    """PipelineConfig with file logging disabled and a temp export path."""
    from award_graph.config.schemas import PipelineConfig

    return PipelineConfig(
        source={"csv_path": str(tmp_path / "awards.csv")},
        logging={"file_path": None, "format": "text"},
    )


@pytest.fixture
def memory_store():
    from tests.mocks.graph_store import InMemoryGraphStore

    return InMemoryGraphStore()


@pytest.fixture
def sample_rows():
    """Export rows covering co-PIs, a near-duplicate title and a shared manager."""
    from tests.factories import export_row

    return [
        export_row(
            "1000001",
            title="Study of X",
            pi="Alice Able",
            co_pis="Jane Doe, John Smith",
            pm="Pat Manager",
            organization="State University",
            state="CA",
            city="Davis",
            amount="$100,000.00",
        ),
        export_row(
            "1000002",
            title="A Study of X",
            pi="Bob Baker",
            pm="Pat Manager",
            organization="Tech Institute",
            state="MA",
            city="Cambridge",
            amount="$50,000.00",
        ),
        export_row(
            "1000003",
            title="Completely Unrelated Title",
            pi="Jane Doe",
            pm="Quinn Officer",
            organization="State University",
            state="CA",
            city="Davis",
            amount="$25,000.00",
        ),
    ]


@pytest.fixture
def sample_csv(tmp_path, sample_rows) -> Path:
    from tests.factories import write_award_csv

    return write_award_csv(tmp_path / "awards.csv", sample_rows)
