#
# src/testdeck/monitor/events.py
#
"""
Change events as seen by the session engine.
"""

from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from attrs import define, field


class ChangeKind(Enum):
    MODIFIED = "modified"
    CREATED = "created"
    DELETED = "deleted"
    MOVED = "moved"
    OTHER = "other"

    @classmethod
    def from_watchdog(cls, event_type: str) -> "ChangeKind":
        try:
            return cls(event_type)
        except ValueError:
            return cls.OTHER


@define(frozen=True, slots=True)
class ChangeEvent:
    """A filesystem change below the watched root."""

    kind: ChangeKind
    path: Path = field(converter=Path)
    is_directory: bool = field(default=False)

    @property
    def is_content_modification(self) -> bool:
        # Directory "modified" events only mean an entry was added or removed.
        return self.kind is ChangeKind.MODIFIED and not self.is_directory


@runtime_checkable
class ChangeNotifier(Protocol):
    """Non-blocking source of change events."""

    def poll(self) -> ChangeEvent | None:
        """Return the next pending event, or None when there is none."""
        ...


# 🔼⚙️
