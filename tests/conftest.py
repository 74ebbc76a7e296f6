"""Shared pytest fixtures and configuration."""

import pytest

from registrar.config import Settings
from registrar.registrar import Registrar
from registrar.state_store import StateStore


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def store():
    """Create an in-memory StateStore."""
    s = StateStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at an in-memory database."""
    return Settings(db_path=":memory:", log_to_console=False)


@pytest.fixture
def registrar(settings: Settings, store: StateStore) -> Registrar:
    """Registrar wired to the in-memory store."""
    return Registrar(settings, store=store)
