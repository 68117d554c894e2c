"""Shared fixtures for delay simulator tests."""

from pathlib import Path

import pytest

from delaysim.registry import (
    DirectoryFileSource,
    DistributionRegistry,
    InMemoryFileSource,
    get_default_registry,
)

RESOURCES_DIR = Path(__file__).parent / "resources"


@pytest.fixture(autouse=True)
def _clear_default_registry():
    """Keep the process-wide registry from leaking between tests."""
    get_default_registry().clear()
    yield
    get_default_registry().clear()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DELAYSIM_ROOT",
        "DELAYSIM_DISTRIBUTION_FILES",
        "DELAYSIM_MAPPINGS_DIR",
        "DELAYSIM_CHECK_DISTRIBUTIONS",
        "DELAYSIM_METRIC_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def resources_dir() -> Path:
    return RESOURCES_DIR


@pytest.fixture
def registry() -> DistributionRegistry:
    """Registry reading from tests/resources."""
    return DistributionRegistry(DirectoryFileSource(RESOURCES_DIR))


@pytest.fixture
def memory_files() -> InMemoryFileSource:
    return InMemoryFileSource(
        {
            "a.json": '{"K": {"type": "fixed", "delayMillis": 10}, "only-a": {"type": "fixed", "delayMillis": 1}}',
            "b.json": '{"K": {"type": "fixed", "delayMillis": 20}}',
            "c.json": '{"other": {"type": "uniform", "lowerMillis": 5, "upperMillis": 6}}',
        }
    )
