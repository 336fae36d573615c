# src/testdeck/runtime/watch_coordinator.py
"""
Bridges change notifications to test reruns while watch mode is on.
"""
from collections.abc import Callable

import structlog

from testdeck.monitor import ChangeNotifier
from testdeck.state import SessionState
from testdeck.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.watch_coordinator")


class WatchCoordinator:
    """Polls the notifier once per scheduler tick and triggers at most one run."""

    def __init__(
        self,
        notifier: ChangeNotifier,
        state: SessionState,
        trigger: Callable[[], object],
    ):
        self.notifier = notifier
        self.state = state
        self.trigger = trigger
        log.debug("WatchCoordinator initialized.")

    def _drain(self) -> tuple[int, int]:
        """Consume every pending event; return (total, content modifications)."""
        total = relevant = 0
        while (event := self.notifier.poll()) is not None:
            total += 1
            if event.is_content_modification:
                relevant += 1
        return total, relevant

    def tick(self) -> bool:
        """
        Handle everything that arrived since the previous tick.

        Events are always drained, so changes made while watch mode was off
        never fire later when it is switched on. Returns True if a run was
        triggered.
        """
        total, relevant = self._drain()
        if not total:
            return False
        if not self.state.watch_enabled:
            log.debug("Watch mode off, discarding change events", count=total)
            return False
        if not relevant:
            log.debug("No content modifications in batch", count=total)
            return False

        log.info("File change detected, running tests", events=total, modifications=relevant, emoji_key="watch")
        self.trigger()
        return True


# 🔼⚙️
