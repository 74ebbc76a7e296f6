"""Registrar - wires the store, catalog, roster and coordinator together."""

from __future__ import annotations

import logging

from registrar.catalog import CourseCatalog
from registrar.config import Settings
from registrar.coordinator import EnrollmentCoordinator
from registrar.roster import StudentRoster
from registrar.state_store import StateStore

logger = logging.getLogger(__name__)


class Registrar:
    """Entry point holding one instance of each component.

    The catalog and roster are loaded from storage on construction.
    """

    def __init__(self, settings: Settings | None = None, store: StateStore | None = None) -> None:
        """Initialize all components.

        Args:
            settings: Configuration; read from the environment when omitted.
            store: Existing store to use instead of opening settings.db_path.
        """
        self.settings = settings if settings is not None else Settings.from_env()
        self.store = store if store is not None else StateStore(self.settings.db_path)
        self.catalog = CourseCatalog(self.store)
        self.roster = StudentRoster(self.store)
        self.coordinator = EnrollmentCoordinator(self.store, self.catalog, self.roster)
        logger.info(
            "Registrar ready (db=%s, courses=%d, students=%d)",
            self.settings.db_path,
            len(self.catalog.list_courses()),
            len(self.roster.list_students()),
        )

    def close(self) -> None:
        """Close the underlying store."""
        self.store.close()
