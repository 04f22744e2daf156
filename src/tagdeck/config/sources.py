"""Settings layers and how they combine."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import TagdeckConfig

ENV_PREFIX = "TAGDECK__"

Layer = Mapping[str, Mapping[str, Any]]


def split_key(key: str) -> tuple[str, str]:
    """Split a dotted ``section.field`` key.

    Raises:
        ConfigError: If ``key`` does not name exactly one section and field.
    """
    parts = [part.strip() for part in key.split(".")]
    if len(parts) != 2 or not all(parts):
        raise ConfigError(
            f"'{key}' is not a settings key; use SECTION.FIELD such as 'logging.level'."
        )
    return parts[0], parts[1]


def dotted_overrides(values: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Group ``{"section.field": value}`` overrides by section."""
    layer: dict[str, dict[str, Any]] = {}
    for key, value in values.items():
        section, field = split_key(key)
        layer.setdefault(section, {})[field] = value
    return layer


def environment_overrides(env: Mapping[str, str]) -> dict[str, dict[str, Any]]:
    """Collect ``TAGDECK__SECTION__FIELD`` variables for known settings.

    Values are read as YAML scalars so ``true`` and ``[".jpg"]`` arrive typed.
    Variables that name no known field are ignored.
    """
    layer: dict[str, dict[str, Any]] = {}
    for section, fields in TagdeckConfig().model_dump().items():
        for field in fields:
            raw = env.get(f"{ENV_PREFIX}{section.upper()}__{field.upper()}")
            if raw is None:
                continue
            try:
                value: Any = yaml.safe_load(raw)
            except yaml.YAMLError:
                value = raw
            layer.setdefault(section, {})[field] = value
    return layer


def merge_settings(*layers: Optional[Layer]) -> TagdeckConfig:
    """Validate the settings produced by ``layers``; later layers win per field.

    Fields no layer mentions keep their model defaults.

    Raises:
        ConfigError: If a section is not a mapping or a value fails validation.
    """
    sections: dict[str, dict[str, Any]] = {}
    for layer in layers:
        for section, values in (layer or {}).items():
            if not isinstance(values, Mapping):
                raise ConfigError(f"Settings section '{section}' must be a mapping.")
            sections.setdefault(section, {}).update(values)

    try:
        return TagdeckConfig.model_validate(sections)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


__all__ = [
    "ENV_PREFIX",
    "dotted_overrides",
    "environment_overrides",
    "merge_settings",
    "split_key",
]
