"""Synchronization between labeling state and the label document."""

from .facade import ConfigSyncFacade
from .location import DocumentLocation, resolve_config_location

__all__ = ["ConfigSyncFacade", "DocumentLocation", "resolve_config_location"]
