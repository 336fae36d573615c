#
# src/testdeck/runtime/__init__.py
#
"""
Runtime coordination: the session controller and the watch coordinator.
"""

from .session import SessionController
from .watch_coordinator import WatchCoordinator

__all__ = ["SessionController", "WatchCoordinator"]
