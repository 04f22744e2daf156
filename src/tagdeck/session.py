"""Labeling session: the state object shared by the labeling components.

The hosting application builds one :class:`LabelingSession` per window and
passes it its collaborators (viewer, confirmation prompt, image remover,
document repository). Every edit goes through the session so the
suppression and navigation policies are applied in one place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from tagdeck.collaborators import ConfirmPrompt, ImageRemover, ViewerControls
from tagdeck.config import TagdeckConfig
from tagdeck.filtering import (
    FilterCriteria,
    FilterEngine,
    SortCriteria,
    normalize_image_entries,
    sort_images,
)
from tagdeck.hotkeys import ActionKind, HotkeyAction, HotkeyBook, parse_action
from tagdeck.ingestion.models import ImageEntry
from tagdeck.labels import AssignmentStore, AssignmentView, Category, CategoryRegistry
from tagdeck.state import DocumentRepository
from tagdeck.sync import ConfigSyncFacade
from tagdeck.viewer import NavigationResolver, RefilterSuppressionController, ViewerState

LOGGER = logging.getLogger(__name__)


def _decline(message: str, *, title: str) -> bool:
    LOGGER.warning("No confirmation prompt configured; declining %r", title)
    return False


class LabelingSession:
    """Categories, assignments, filter and viewer state of one browsing session."""

    def __init__(
        self,
        *,
        registry: CategoryRegistry,
        assignments: AssignmentStore,
        hotkeys: HotkeyBook,
        viewer: ViewerControls,
        sync: Optional[ConfigSyncFacade] = None,
        confirm: ConfirmPrompt = _decline,
        remover: Optional[ImageRemover] = None,
        filter_engine: Optional[FilterEngine] = None,
        suppression: Optional[RefilterSuppressionController] = None,
    ) -> None:
        self.registry = registry
        self.assignments = assignments
        self.hotkeys = hotkeys
        self.viewer = viewer
        self.sync = sync
        self.confirm = confirm
        self.remover = remover
        self.filter_engine = filter_engine or FilterEngine()
        self.suppression = suppression or RefilterSuppressionController()
        self.navigator = NavigationResolver(viewer, self.visible_paths)
        self.current_directory = ""
        self.images: list[ImageEntry] = []
        self.criteria = FilterCriteria()
        self.sort = SortCriteria()

    @classmethod
    def create(
        cls,
        *,
        config: Optional[TagdeckConfig] = None,
        repository: Optional[DocumentRepository] = None,
        viewer: Optional[ViewerControls] = None,
        confirm: ConfirmPrompt = _decline,
        remover: Optional[ImageRemover] = None,
    ) -> "LabelingSession":
        """Build a session and its components from settings.

        Args:
            config: Settings; defaults are used when omitted.
            repository: Document repository; a JSON repository using the
                configured default filename is created when omitted.
            viewer: Viewer control surface; an in-memory one when omitted.
            confirm: Confirmation prompt for destructive operations.
            remover: Collaborator removing image files.

        Returns:
            LabelingSession: Session with empty state.
        """
        config = config or TagdeckConfig()
        registry = CategoryRegistry()
        assignments = AssignmentStore(registry)
        hotkeys = HotkeyBook()
        sync = ConfigSyncFacade(
            repository or DocumentRepository(config.storage.default_filename),
            registry,
            assignments,
            hotkeys,
            config_file_path=config.storage.config_file_path,
            seed_default_hotkeys=config.hotkeys.seed_defaults,
        )
        session = cls(
            registry=registry,
            assignments=assignments,
            hotkeys=hotkeys,
            viewer=viewer or ViewerState(),
            sync=sync,
            confirm=confirm,
            remover=remover,
        )
        session.criteria = FilterCriteria(case_sensitive=config.filtering.case_sensitive_names)
        return session

    # ------------------------------------------------------------------ #
    # Directory and listing                                              #
    # ------------------------------------------------------------------ #

    @property
    def current_image(self) -> Optional[str]:
        return self.viewer.current_path

    def open_directory(self, directory: Path | str, images: Iterable[object] = ()) -> bool:
        """Switch to ``directory`` and load its label document.

        Returns:
            bool: Whether the loaded document was applied.
        """
        self.current_directory = Path(directory).as_posix()
        self.set_images(images)
        self.suppression.clear()
        if self.viewer.current_path is not None:
            self.viewer.close()
        if self.sync is None:
            return False
        return self.sync.load(self.current_directory)

    def set_images(self, images: Iterable[object]) -> None:
        self.images = normalize_image_entries(images)

    def set_filter(self, criteria: FilterCriteria) -> None:
        """Replace the filter criteria; a pending deferred refilter is applied."""
        self.suppression.clear()
        self.criteria = criteria

    def set_sort(self, sort: SortCriteria) -> None:
        self.sort = sort

    def assignment_view(self) -> AssignmentView:
        """Return the assignment view filtering currently uses (snapshot or live)."""
        return self.suppression.assignment_view(self.assignments)

    def visible_entries(self) -> list[ImageEntry]:
        """Return the sorted, filtered images."""
        view = self.assignment_view()
        ordered = sort_images(self.images, self.sort, view)
        return self.filter_engine.filter_entries(ordered, self.criteria, view)

    def visible_paths(self) -> list[str]:
        return [entry.path for entry in self.visible_entries()]

    # ------------------------------------------------------------------ #
    # Categories                                                         #
    # ------------------------------------------------------------------ #

    def create_category(self, name: str, color: Optional[str] = None) -> Category:
        category = self.registry.create(name, color)
        self.save()
        return category

    def update_category(self, category_id: str, **fields: object) -> Category:
        category = self.registry.update(category_id, **fields)
        self.save()
        return category

    def delete_category(self, category_id: str) -> bool:
        """Delete a category after confirmation; returns False when declined."""
        deleted = self.registry.delete(
            category_id, confirm=self.confirm, assignments=self.assignments, hotkeys=self.hotkeys
        )
        if deleted:
            self.save()
        return deleted

    def category_counts(self) -> dict[str, int]:
        return {category.id: self.assignments.count(category.id) for category in self.registry}

    # ------------------------------------------------------------------ #
    # Assignments                                                        #
    # ------------------------------------------------------------------ #

    def assign(self, path: str, category_id: str) -> bool:
        """Assign a category to any image, navigating away if it leaves the filter."""
        return self._mutate(path, category_id, self.assignments.assign, from_viewer=False)

    def toggle(self, path: str, category_id: str) -> bool:
        """Toggle a category on any image, navigating away if it leaves the filter."""
        return self._mutate(path, category_id, self.assignments.toggle, from_viewer=False)

    def assign_for_current_image(self, category_id: str) -> bool:
        """Assign a category to the viewed image, deferring any refilter."""
        path = self.current_image
        if path is None:
            return False
        return self._mutate(path, category_id, self.assignments.assign, from_viewer=True)

    def toggle_for_current_image(self, category_id: str) -> bool:
        """Toggle a category on the viewed image, deferring any refilter."""
        path = self.current_image
        if path is None:
            return False
        return self._mutate(path, category_id, self.assignments.toggle, from_viewer=True)

    def _mutate(
        self,
        path: str,
        category_id: str,
        operation: Callable[[str, str], bool],
        *,
        from_viewer: bool,
    ) -> bool:
        if operation == self.assignments.assign and self.assignments.has(path, category_id):
            return False

        filtering_by_category = self.criteria.has_category_filter
        if from_viewer and filtering_by_category:
            self.suppression.begin(self.assignments)

        if not operation(path, category_id):
            return False

        if (
            not from_viewer
            and not self.suppression.suppressed
            and filtering_by_category
            and path == self.current_image
        ):
            self.navigator.navigate_to_next_filtered_image(path)

        self.save()
        return True

    # ------------------------------------------------------------------ #
    # Viewer navigation                                                  #
    # ------------------------------------------------------------------ #

    def open_image(self, path: str) -> bool:
        """Open ``path`` in the viewer if it is part of the visible list."""
        if path not in self.visible_paths():
            LOGGER.debug("Not opening %s: not in the filtered list", path)
            return False
        self.viewer.open(path)
        return True

    def close_viewer(self) -> None:
        self.suppression.clear()
        self.viewer.close()

    def show_next(self) -> Optional[str]:
        """Explicitly move to the next image, applying any deferred refilter."""
        return self._step(1)

    def show_previous(self) -> Optional[str]:
        """Explicitly move to the previous image, applying any deferred refilter."""
        return self._step(-1)

    def _step(self, offset: int) -> Optional[str]:
        current = self.current_image
        if current is None:
            return None
        recovering = self.suppression.clear()
        return self.navigator.step(current, offset, recovering=recovering)

    def delete_current_image(self) -> Optional[str]:
        """Remove the viewed image file and show the image that replaces it.

        Returns:
            Optional[str]: The image now shown, or None when the viewer closed
            or nothing was deleted.
        """
        path = self.current_image
        if path is None:
            return None
        if self.remover is None:
            LOGGER.warning("No image remover configured; not deleting %s", path)
            return None

        self.suppression.clear()
        visible = self.visible_paths()
        removed_index = visible.index(path) if path in visible else len(visible)
        try:
            self.remover(path)
        except OSError as exc:
            LOGGER.error("Failed to delete %s: %s", path, exc)
            raise
        self.images = [entry for entry in self.images if entry.path != path]
        return self.navigator.navigate_after_removal(removed_index)

    # ------------------------------------------------------------------ #
    # Hotkeys                                                            #
    # ------------------------------------------------------------------ #

    def handle_key(self, key: str, modifiers: Sequence[str] = ()) -> bool:
        """Run the action bound to a key press; returns whether one matched."""
        hotkey = self.hotkeys.match(key, modifiers)
        if hotkey is None:
            return False
        self.execute_action(hotkey.parsed_action)
        return True

    def execute_action(self, action: HotkeyAction | str) -> bool:
        """Run a decoded hotkey action; returns False for empty or unknown ones."""
        if isinstance(action, str):
            action = parse_action(action)

        kind = action.kind
        if kind is ActionKind.NEXT_IMAGE:
            self.show_next()
        elif kind is ActionKind.PREVIOUS_IMAGE:
            self.show_previous()
        elif kind is ActionKind.DELETE_IMAGE_AND_NEXT:
            self.delete_current_image()
        elif action.category_id is not None:
            # Legacy assign actions behave like toggles.
            self.toggle_for_current_image(action.category_id)
            if kind is ActionKind.TOGGLE_CATEGORY_NEXT:
                self.show_next()
        else:
            if kind is ActionKind.UNKNOWN:
                LOGGER.warning("Unknown hotkey action: %s", action.raw)
            return False
        return True

    # ------------------------------------------------------------------ #
    # Persistence                                                        #
    # ------------------------------------------------------------------ #

    def save(self) -> Optional[Path]:
        """Persist the current state; errors propagate to the caller."""
        if self.sync is None:
            return None
        return self.sync.save(self.current_directory)


__all__ = ["LabelingSession"]
