"""Configuration models describing tagdeck settings."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DOCUMENT_FILENAME = ".tagdeck.json"
DEFAULT_IMAGE_EXTENSIONS = [
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".webp",
    ".bmp",
    ".tif",
    ".tiff",
]


class TagdeckBaseModel(BaseModel):
    """Shared configuration for tagdeck settings models."""

    model_config = ConfigDict(extra="forbid")


class StorageSettings(TagdeckBaseModel):
    """Where the label document for a browsed directory lives.

    Attributes:
        config_file_path: Optional full path of the label document. Empty means
            the document sits in the browsed directory under ``default_filename``.
        default_filename: Filename used when no explicit filename is configured.
    """

    config_file_path: str = ""
    default_filename: str = DEFAULT_DOCUMENT_FILENAME


class FilteringSettings(TagdeckBaseModel):
    """Defaults applied to filter criteria built by the CLI.

    Attributes:
        case_sensitive_names: Whether name patterns match case-sensitively.
    """

    case_sensitive_names: bool = False


class ScanningSettings(TagdeckBaseModel):
    """Options governing image enumeration.

    Attributes:
        recursive: Whether to descend into subdirectories.
        include_hidden: Whether dot-files and dot-directories are listed.
        follow_symlinks: Whether symbolic links are followed.
        extensions: Lower-case file suffixes treated as images.
    """

    recursive: bool = False
    include_hidden: bool = False
    follow_symlinks: bool = False
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_IMAGE_EXTENSIONS))


class HotkeySettings(TagdeckBaseModel):
    """Hotkey bootstrap behavior.

    Attributes:
        seed_defaults: Seed next/previous image hotkeys when a directory has none.
    """

    seed_defaults: bool = True


class LoggingSettings(TagdeckBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(TagdeckBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
    """

    quiet_default: bool = False


class TagdeckConfig(TagdeckBaseModel):
    """Top-level configuration struct for tagdeck.

    Attributes:
        storage: Label document location settings.
        filtering: Filter defaults.
        scanning: Image enumeration settings.
        hotkeys: Hotkey bootstrap settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    storage: StorageSettings = Field(default_factory=StorageSettings)
    filtering: FilteringSettings = Field(default_factory=FilteringSettings)
    scanning: ScanningSettings = Field(default_factory=ScanningSettings)
    hotkeys: HotkeySettings = Field(default_factory=HotkeySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DEFAULT_DOCUMENT_FILENAME",
    "DEFAULT_IMAGE_EXTENSIONS",
    "TagdeckBaseModel",
    "StorageSettings",
    "FilteringSettings",
    "ScanningSettings",
    "HotkeySettings",
    "LoggingSettings",
    "CLIOptions",
    "TagdeckConfig",
]
