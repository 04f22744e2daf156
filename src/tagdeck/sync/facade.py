"""Translate in-memory labeling state to and from the label document."""

from __future__ import annotations

import itertools
import logging
import threading
from pathlib import Path
from typing import Optional

from tagdeck.hotkeys import HotkeyBook, default_hotkeys
from tagdeck.labels import AssignmentStore, CategoryRegistry
from tagdeck.state import DocumentRepository, LabelDocument, MissingStateError, StateError

from .location import DocumentLocation, resolve_config_location

LOGGER = logging.getLogger(__name__)


class ConfigSyncFacade:
    """Load and save categories, assignments and hotkeys for a directory.

    Loads are tagged with increasing request ids; a load that completes after
    a more recent one was issued is discarded so stale results never
    overwrite newer state. Failures are logged and re-raised without rolling
    back in-memory state.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        registry: CategoryRegistry,
        assignments: AssignmentStore,
        hotkeys: HotkeyBook,
        *,
        config_file_path: str = "",
        seed_default_hotkeys: bool = True,
    ) -> None:
        self.config_file_path = config_file_path
        self.seed_default_hotkeys = seed_default_hotkeys
        self._repository = repository
        self._registry = registry
        self._assignments = assignments
        self._hotkeys = hotkeys
        self._request_ids = itertools.count(1)
        self._latest_request = 0
        self._lock = threading.Lock()

    def location(self, current_directory: str) -> Optional[DocumentLocation]:
        """Return the document location, or None when no directory resolves."""
        location = resolve_config_location(self.config_file_path, current_directory)
        if not location.directory:
            return None
        return location

    def load(self, current_directory: str) -> bool:
        """Replace in-memory state with the document for ``current_directory``.

        A missing document clears assignments. Fields absent from the document
        leave the matching state untouched. When no hotkeys remain afterwards
        and seeding is enabled, the default hotkeys are added and saved.

        Returns:
            bool: False when nothing was applied (no directory, or superseded).

        Raises:
            StateError: If the document exists but cannot be read.
        """
        location = self.location(current_directory)
        if location is None:
            LOGGER.debug("No directory to load labels from")
            return False

        request_id = self._begin_request()
        try:
            document: Optional[LabelDocument] = self._repository.load(
                location.directory, location.filename
            )
        except MissingStateError:
            document = None
        except StateError as exc:
            LOGGER.error("Failed to load label document from %s: %s", location.directory, exc)
            raise

        if not self._is_latest(request_id):
            LOGGER.debug("Discarding superseded load #%d for %s", request_id, location.directory)
            return False

        if document is None:
            LOGGER.info("No label document in %s; starting without assignments", location.directory)
            self._assignments.clear()
        else:
            self._apply(document)

        if self.seed_default_hotkeys and len(self._hotkeys) == 0:
            self._hotkeys.replace(default_hotkeys())
            LOGGER.info("Seeded default hotkeys for %s", location.directory)
            self.save(current_directory)
        return True

    def save(self, current_directory: str) -> Optional[Path]:
        """Write the current state to the document for ``current_directory``.

        Returns:
            Optional[Path]: Location written, or None when no directory resolves.

        Raises:
            StateError: If the document cannot be written.
        """
        location = self.location(current_directory)
        if location is None:
            return None

        document = LabelDocument(
            categories=self._registry.all(),
            image_categories=self._assignments.pairs(),
            hotkeys=self._hotkeys.all(),
        )
        try:
            return self._repository.save(location.directory, location.filename, document)
        except StateError as exc:
            LOGGER.error("Failed to save label document to %s: %s", location.directory, exc)
            raise

    def _apply(self, document: LabelDocument) -> None:
        if document.categories is not None:
            self._registry.replace(document.categories)
        if document.image_categories is not None:
            self._assignments.replace(document.image_categories)
        if document.hotkeys is not None:
            self._hotkeys.replace(document.hotkeys)

    def _begin_request(self) -> int:
        with self._lock:
            request_id = next(self._request_ids)
            self._latest_request = request_id
            return request_id

    def _is_latest(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._latest_request


__all__ = ["ConfigSyncFacade"]
