"""Settings management for tagdeck."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import TagdeckConfig
from .sources import ENV_PREFIX, dotted_overrides, environment_overrides, merge_settings, split_key

DEFAULT_CONFIG_PATH = Path("~/.tagdeck/config.yaml")


class ConfigManager:
    """Read and write the user settings file.

    The file holds the six settings sections as YAML. Loading layers it over
    the model defaults, then ``TAGDECK__`` environment variables, then CLI
    overrides.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> TagdeckConfig:
        """Return the effective settings.

        Args:
            cli_overrides: Dotted ``section.field`` values that win over everything else.
            include_env: Whether ``TAGDECK__`` environment variables apply.

        Raises:
            ConfigError: If the file or an override is invalid.
        """
        self.ensure_exists()
        return merge_settings(
            self.read_file(),
            environment_overrides(self._env) if include_env else None,
            dotted_overrides(cli_overrides or {}),
        )

    def ensure_exists(self) -> Path:
        """Write the default settings if the file is missing."""
        if not self._config_path.exists():
            self.save(TagdeckConfig())
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def read_file(self) -> dict[str, Any]:
        """Return the sections stored in the file, without defaults applied.

        Raises:
            ConfigError: If the file is not YAML or not a mapping.
        """
        try:
            raw = yaml.safe_load(self.read_text()) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse settings file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Settings file must contain a mapping at the top level.")
        return raw

    def save(self, settings: TagdeckConfig | Mapping[str, Any]) -> None:
        """Validate and write ``settings``.

        Raises:
            ConfigError: If ``settings`` does not validate.
        """
        if not isinstance(settings, TagdeckConfig):
            merge_settings(settings)
            data = dict(settings)
        else:
            data = settings.model_dump(mode="python")
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")

    def set_value(self, key: str, value: Any) -> bool:
        """Store one dotted ``section.field`` value in the file.

        Returns:
            bool: False when the file already held ``value``.

        Raises:
            ConfigError: If the key is malformed or the value does not validate.
        """
        section, field = split_key(key)
        data = self.read_file()
        values = data.get(section)
        if values is None:
            values = data[section] = {}
        elif not isinstance(values, dict):
            raise ConfigError(f"Settings section '{section}' must be a mapping.")
        if field in values and values[field] == value:
            return False
        values[field] = value
        self.save(data)
        return True


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "TagdeckConfig",
    "merge_settings",
]
