#
# src/testdeck/exceptions.py
#
"""
Exception hierarchy for testdeck.
"""

from pathlib import Path


class TestdeckError(Exception):
    """Base class for all testdeck errors."""

    __test__ = False  # keep pytest from collecting Test* names


class ConfigurationError(TestdeckError):
    """Raised when configuration is missing, malformed or invalid."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        full_message = message
        if path:
            full_message += f" (Config: '{path}')"
        super().__init__(full_message)


class DiscoveryError(TestdeckError):
    """Raised when a discovery scan cannot run at all (e.g. invalid root)."""

    def __init__(self, message: str, root: Path | None = None, details: Exception | None = None):
        self.root = root
        self.details = details
        full_message = f"[Discovery] {message}"
        if root:
            full_message += f" (Root: '{root}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class MonitoringSetupError(TestdeckError):
    """Raised when the filesystem change notifier cannot be started."""

    pass


class ChannelClosedError(TestdeckError):
    """Raised when a producer sends on an output channel whose consumer is gone."""

    pass


# 🔼⚙️
