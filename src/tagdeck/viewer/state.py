"""In-memory viewer control surface."""

from __future__ import annotations

from typing import Callable, Optional


class ViewerState:
    """Track which image the single-image viewer shows.

    Hosts with a real viewer pass ``on_open``/``on_close`` callbacks to render
    the change; the CLI and tests use the recorded state directly.
    """

    def __init__(
        self,
        *,
        on_open: Optional[Callable[[str], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        self._current: Optional[str] = None
        self._on_open = on_open
        self._on_close = on_close
        self.history: list[Optional[str]] = []

    @property
    def current_path(self) -> Optional[str]:
        return self._current

    @property
    def is_open(self) -> bool:
        return self._current is not None

    def open(self, path: str) -> None:
        self._current = path
        self.history.append(path)
        if self._on_open is not None:
            self._on_open(path)

    def close(self) -> None:
        self._current = None
        self.history.append(None)
        if self._on_close is not None:
            self._on_close()


__all__ = ["ViewerState"]
