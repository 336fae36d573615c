#
# src/testdeck/tui/__init__.py
#
"""
Textual user interface for interactive sessions.
"""

from .app import TestdeckTuiApp

__all__ = ["TestdeckTuiApp"]
