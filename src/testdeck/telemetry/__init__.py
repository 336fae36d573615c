#
# src/testdeck/telemetry/__init__.py
#
"""
Logging setup and logger type aliases for testdeck.
"""

from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]
