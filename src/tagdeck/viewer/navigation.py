"""Decide which image the viewer shows after the filtered set changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Sequence

if TYPE_CHECKING:
    from tagdeck.collaborators import ViewerControls

LOGGER = logging.getLogger(__name__)


def _index(paths: Sequence[str], path: Optional[str]) -> int:
    if path is None:
        return -1
    try:
        return paths.index(path)
    except ValueError:
        return -1


class NavigationResolver:
    """Retarget the viewer against a freshly computed filtered list.

    Every method recomputes the list through ``filtered_paths`` so the
    assignment view currently authoritative (live or snapshot) is honored.
    """

    def __init__(
        self,
        viewer: "ViewerControls",
        filtered_paths: Callable[[], list[str]],
    ) -> None:
        self._viewer = viewer
        self._filtered_paths = filtered_paths

    def navigate_to_next_filtered_image(self, current_path: Optional[str]) -> Optional[str]:
        """Show the image following ``current_path``, or close the viewer.

        - ``current_path`` not listed: open the first image, close if none.
        - ``current_path`` listed last: open the previous image, close if it
          was the only one.
        - otherwise open the next image.

        Returns:
            Optional[str]: The opened path, or None when the viewer was closed.
        """
        paths = self._filtered_paths()
        idx = _index(paths, current_path)

        if idx < 0:
            target = paths[0] if paths else None
        elif idx == len(paths) - 1:
            target = paths[idx - 1] if len(paths) > 1 else None
        else:
            target = paths[idx + 1]

        return self._show(target)

    def step(
        self, current_path: Optional[str], offset: int, *, recovering: bool = False
    ) -> Optional[str]:
        """Move by ``offset`` (+1 next, -1 previous) without wrapping.

        When ``current_path`` is no longer listed and ``recovering`` is set
        (a deferred edit removed it), jump to the first image when moving
        forward or the last when moving backward.

        Returns:
            Optional[str]: The opened path, or None when the viewer did not move.
        """
        paths = self._filtered_paths()
        idx = _index(paths, current_path)

        if idx >= 0:
            target_index = idx + offset
            if 0 <= target_index < len(paths):
                return self._open(paths[target_index])
            return None
        if recovering and paths:
            return self._open(paths[0] if offset > 0 else paths[-1])
        return None

    def navigate_after_removal(self, removed_index: int) -> Optional[str]:
        """Show the image that took the place of a removed one.

        Opens the image now at ``removed_index``, the last image when the
        removed one was last, or closes the viewer when nothing is left.
        """
        paths = self._filtered_paths()
        if not paths:
            return self._show(None)
        return self._show(paths[min(max(removed_index, 0), len(paths) - 1)])

    def _show(self, target: Optional[str]) -> Optional[str]:
        if target is None:
            LOGGER.debug("Filtered list exhausted; closing viewer")
            self._viewer.close()
            return None
        return self._open(target)

    def _open(self, target: str) -> str:
        LOGGER.debug("Viewer -> %s", target)
        self._viewer.open(target)
        return target


__all__ = ["NavigationResolver"]
