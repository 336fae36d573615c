#
# src/testdeck/monitor/__init__.py
#
"""
Filesystem change notification for watch mode.
"""

from .events import ChangeEvent, ChangeKind, ChangeNotifier
from .service import WatchdogChangeNotifier

__all__ = ["ChangeEvent", "ChangeKind", "ChangeNotifier", "WatchdogChangeNotifier"]
