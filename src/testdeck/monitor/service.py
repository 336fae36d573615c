#
# src/testdeck/monitor/service.py
#
"""
watchdog-backed change notifier for the watched source tree.
"""

import os
import queue
from pathlib import Path

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from testdeck.exceptions import MonitoringSetupError
from testdeck.monitor.events import ChangeEvent, ChangeKind
from testdeck.testing.ignore import IgnoreMatcher

log = structlog.get_logger("monitor.service")


class _QueueingHandler(FileSystemEventHandler):
    """Runs on the observer thread; only ever touches the thread-safe queue."""

    def __init__(self, events: "queue.SimpleQueue[ChangeEvent]", matcher: IgnoreMatcher) -> None:
        super().__init__()
        self._events = events
        self._matcher = matcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        src_path = Path(os.fsdecode(event.src_path))
        if self._matcher.is_ignored(src_path, is_dir=event.is_directory):
            return
        self._events.put(
            ChangeEvent(
                kind=ChangeKind.from_watchdog(event.event_type),
                path=src_path,
                is_directory=event.is_directory,
            )
        )


class WatchdogChangeNotifier:
    """
    Implements the ChangeNotifier protocol with a recursive watchdog Observer.

    Events for hidden or ``.gitignore``d paths are dropped as they arrive, so
    build artifacts written by a test run (e.g. ``target/``) cannot retrigger
    watch mode.
    """

    def __init__(self, root: Path, include_hidden: bool = False) -> None:
        self.root = root
        self._events: queue.SimpleQueue[ChangeEvent] = queue.SimpleQueue()
        self._matcher = IgnoreMatcher(root, include_hidden=include_hidden)
        self._observer: Observer | None = None

    @property
    def is_running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        observer = Observer()
        try:
            observer.schedule(_QueueingHandler(self._events, self._matcher), str(self.root), recursive=True)
            observer.start()
        except (OSError, RuntimeError) as e:
            log.error("Failed to start filesystem observer", root=str(self.root), error=str(e))
            raise MonitoringSetupError(f"Cannot watch '{self.root}': {e}") from e
        self._observer = observer
        log.info("Watching for changes", root=str(self.root), emoji_key="watch")

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=2.0)
        self._observer = None
        log.debug("Filesystem observer stopped", root=str(self.root))

    def poll(self) -> ChangeEvent | None:
        try:
            return self._events.get_nowait()
        except queue.Empty:
            return None


# 🔼⚙️
