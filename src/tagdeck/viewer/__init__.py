"""Viewer state, refilter suppression and filtered navigation."""

from .navigation import NavigationResolver
from .state import ViewerState
from .suppression import RefilterSuppressionController

__all__ = ["NavigationResolver", "RefilterSuppressionController", "ViewerState"]
