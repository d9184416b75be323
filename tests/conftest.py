"""Shared pytest fixtures and configuration."""

from datetime import date

import pytest

from gradescale.roster import MemoryStorage, RosterStore

FIXED_DAY = date(2024, 1, 1)


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: tests against a real SQLite file")


# Shared fixtures


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Empty in-memory storage backend."""
    return MemoryStorage()


@pytest.fixture
def store(memory_storage: MemoryStorage) -> RosterStore:
    """RosterStore over in-memory storage with a fixed creation date."""
    return RosterStore(memory_storage, today=lambda: FIXED_DAY)
