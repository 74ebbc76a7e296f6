"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from registrar.config import Settings
from registrar.registrar import Registrar

# Global Registrar instance (initialized on app startup)
_registrar: Registrar | None = None


def init_registrar(settings: Settings) -> Registrar:
    """Initialize the global Registrar instance."""
    global _registrar  # noqa: PLW0603
    _registrar = Registrar(settings)
    return _registrar


def close_registrar() -> None:
    """Close the global Registrar instance."""
    global _registrar  # noqa: PLW0603
    if _registrar is not None:
        _registrar.close()
        _registrar = None


def get_registrar() -> Generator[Registrar, None, None]:
    """Dependency that provides the Registrar instance."""
    if _registrar is None:
        raise RuntimeError("Registrar not initialized. Call init_registrar() first.")
    yield _registrar


# Type alias for dependency injection
RegistrarDep = Annotated[Registrar, Depends(get_registrar)]
