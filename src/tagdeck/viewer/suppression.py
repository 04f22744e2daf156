"""Deferred refiltering while the viewed image is being edited.

Editing the categories of the image shown in the viewer while that category
is the active filter would shrink the filtered set under the user and force
the viewer to jump. While suppression is active the category stage reads a
snapshot taken before the first edit, so the viewed image keeps its pre-edit
membership until the user navigates explicitly.
"""

from __future__ import annotations

import logging
from typing import Optional

from tagdeck.labels.assignments import AssignmentStore, AssignmentView

LOGGER = logging.getLogger(__name__)


class RefilterSuppressionController:
    """Hold the frozen assignment view for one suppression episode."""

    def __init__(self) -> None:
        self.suppressed: bool = False
        self.snapshot: Optional[AssignmentView] = None

    def begin(self, store: AssignmentStore) -> None:
        """Enter (or stay in) suppression, snapshotting the live store once.

        Must be called before the mutation so the snapshot holds the pre-edit
        state. Later calls in the same episode keep the first snapshot.
        """
        if self.snapshot is None:
            self.snapshot = store.snapshot()
            LOGGER.debug("Refilter suppressed; snapshot of %d image(s) taken", len(self.snapshot))
        self.suppressed = True

    def clear(self) -> bool:
        """Leave suppression and discard the snapshot.

        Returns:
            bool: Whether suppression was active.
        """
        was_suppressed = self.suppressed
        self.suppressed = False
        self.snapshot = None
        if was_suppressed:
            LOGGER.debug("Refilter suppression cleared")
        return was_suppressed

    def assignment_view(self, store: AssignmentStore) -> AssignmentView:
        """Return the view the category stage must use right now."""
        if self.suppressed and self.snapshot is not None:
            return self.snapshot
        return store.view()


__all__ = ["RefilterSuppressionController"]
