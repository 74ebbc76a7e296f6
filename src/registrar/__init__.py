"""Registrar - course, student and enrollment bookkeeping."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version string."""
    return __version__
