"""Label document persistence for browsed directories."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from tagdeck.config.models import DEFAULT_DOCUMENT_FILENAME

from .errors import MissingStateError, StateError
from .models import LabelDocument

LOGGER = logging.getLogger(__name__)


class DocumentRepository:
    """Read and write the JSON label document of a directory."""

    def __init__(self, default_filename: str = DEFAULT_DOCUMENT_FILENAME) -> None:
        """Initialize the repository.

        Args:
            default_filename: Filename used when callers do not supply one.
        """
        self._default_filename = default_filename

    @property
    def default_filename(self) -> str:
        """Return the filename used when none is configured.

        Returns:
            str: Default label document filename.
        """
        return self._default_filename

    def document_path(self, directory: Path | str, filename: Optional[str] = None) -> Path:
        """Return the document location for ``directory``.

        Args:
            directory: Directory holding the document.
            filename: Optional filename overriding the default.

        Returns:
            Path: Full path of the label document.
        """
        return Path(directory).expanduser() / (filename or self._default_filename)

    def load(self, directory: Path | str, filename: Optional[str] = None) -> LabelDocument:
        """Load the label document stored for ``directory``.

        Args:
            directory: Directory holding the document.
            filename: Optional filename overriding the default.

        Returns:
            LabelDocument: Parsed document. Malformed entries are dropped.

        Raises:
            MissingStateError: If no document exists.
            StateError: If the document cannot be read or parsed.
        """
        path = self.document_path(directory, filename)
        if not path.exists():
            raise MissingStateError(f"No label document found at {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StateError(f"Invalid label document {path}: {exc}") from exc
        except OSError as exc:
            raise StateError(f"Unable to read label document {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StateError(f"Label document {path} must contain a JSON object.")

        try:
            return LabelDocument.model_validate(data)
        except ValidationError as exc:
            raise StateError(f"Invalid label document {path}: {exc}") from exc

    def save(
        self,
        directory: Path | str,
        filename: Optional[str],
        document: LabelDocument,
    ) -> Path:
        """Persist ``document`` for ``directory``.

        Args:
            directory: Directory holding the document.
            filename: Optional filename overriding the default.
            document: Document to serialize.

        Returns:
            Path: Location written.

        Raises:
            StateError: If the document cannot be written.
        """
        path = self.document_path(directory, filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(document.to_payload(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise StateError(f"Unable to write label document {path}: {exc}") from exc
        LOGGER.debug("Saved label document %s", path)
        return path


__all__ = ["DocumentRepository", "LabelDocument", "MissingStateError", "StateError"]
