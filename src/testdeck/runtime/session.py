# src/testdeck/runtime/session.py

"""
High-level coordinator for one interactive testdeck session.
Owns the state, the output buffer and every runtime collaborator.
"""

from pathlib import Path

import structlog

from testdeck.buffer import OutputBuffer
from testdeck.config import TestdeckConfig
from testdeck.exceptions import DiscoveryError, MonitoringSetupError
from testdeck.monitor import ChangeNotifier, WatchdogChangeNotifier
from testdeck.rendering import AnsiLineRenderer, StyledSpan
from testdeck.state import Command, Intent, SessionState
from testdeck.telemetry import StructLogger
from testdeck.testing import (
    ExecutionPipeline,
    OutputChannel,
    OutputChunk,
    RegexTestDiscoverer,
    RunHandle,
    TestDiscoverer,
    get_profile,
)

from .watch_coordinator import WatchCoordinator

log: StructLogger = structlog.get_logger("runtime.session")


class SessionController:
    """
    Wires operator commands, discovery, test runs and watch mode together.

    Everything here runs on the UI thread. Background run threads only reach
    the session through ``channel``; ``pump_output`` is the single place where
    their text enters the buffer.
    """

    def __init__(
        self,
        root: Path,
        discoverer: TestDiscoverer,
        pipeline: ExecutionPipeline,
        channel: OutputChannel,
        notifier: ChangeNotifier | None = None,
        buffer_capacity: int = 1000,
        drop_stale_output: bool = False,
        watch_enabled: bool = False,
    ):
        self.root = root
        self.discoverer = discoverer
        self.pipeline = pipeline
        self.channel = channel
        self.notifier = notifier
        self.state = SessionState(watch_enabled=watch_enabled)
        self.buffer = OutputBuffer(buffer_capacity)
        self.renderer = AnsiLineRenderer()
        self.drop_stale_output = drop_stale_output
        self.current_run: RunHandle | None = None
        self.watch_coordinator: WatchCoordinator | None = (
            WatchCoordinator(notifier, self.state, self.run_selected) if notifier is not None else None
        )
        self._log = log.bind(root=str(root))

    @classmethod
    def from_config(
        cls,
        config: TestdeckConfig,
        root: Path | None = None,
        watch: bool = True,
    ) -> "SessionController":
        """Build a controller with the real discoverer, pipeline and notifier."""
        session_root = root or config.session.root
        profile = get_profile(config.runner.profile)
        channel = OutputChannel()
        pipeline = ExecutionPipeline(
            profile,
            channel,
            env=config.runner.env,
            probe=config.runner.probe_fast_runner,
        )
        notifier = WatchdogChangeNotifier(session_root) if watch else None
        return cls(
            root=session_root,
            discoverer=RegexTestDiscoverer(profile),
            pipeline=pipeline,
            channel=channel,
            notifier=notifier,
            buffer_capacity=config.session.buffer_capacity,
            drop_stale_output=config.session.drop_stale_output,
            watch_enabled=config.session.watch_on_start,
        )

    # --- Lifecycle -----------------------------------------------------------
    def start(self) -> None:
        """Initial scan, then start watching (a watch failure is not fatal)."""
        self._log.info("Session starting.")
        self.rescan()
        start = getattr(self.notifier, "start", None)
        if start is None:
            return
        try:
            start()
        except MonitoringSetupError as e:
            self._log.error("Watch mode unavailable", error=str(e))
            self._emit(f"Watch mode unavailable: {e}\n")
            self.watch_coordinator = None

    def shutdown(self) -> None:
        self._log.info("Session shutting down.")
        stop = getattr(self.notifier, "stop", None)
        if stop is not None:
            stop()
        self.channel.close()

    # --- Commands ------------------------------------------------------------
    def handle(self, command: Command) -> Intent:
        intent = self.state.apply(command)
        if intent is Intent.RUN_TEST:
            self._log.debug("Running selected test")
            self.run_selected()
        elif intent is Intent.RESCAN:
            self._log.debug("Rescanning for tests")
            self.rescan()
        return intent

    def rescan(self) -> None:
        """Replace the catalog wholesale with a fresh discovery scan."""
        self._emit("Rescanning for tests...\n")
        try:
            groups = self.discoverer.scan(self.root)
        except DiscoveryError as e:
            self._log.error("Discovery failed", error=str(e))
            self._emit(f"Rescan failed: {e}\n")
            groups = []
        self.state.replace_catalog(groups)
        self._emit(f"Rescan complete. Found {len(groups)} test files.\n")
        self._log.info("Rescan complete", files=len(groups), emoji_key="scan")

    def select_test(self, test_name: str) -> bool:
        """Point the selection at the first test called ``test_name``."""
        for group_index, group in enumerate(self.state.test_groups):
            if test_name in group.test_names:
                self.state.select(group_index, group.test_names.index(test_name))
                return True
        return False

    def run_selected(self) -> RunHandle | None:
        """Clear the output and start the selected test."""
        group = self.state.selected_group
        test_name = self.state.selected_test
        if group is None or test_name is None:
            self._emit("No test selected.\n")
            return None

        # Anything still queued belongs to the output being cleared.
        self.pump_output()
        self.buffer.clear()
        self.state.reset_output()
        self.current_run = self.pipeline.run_test(group, test_name)
        return self.current_run

    # --- Output --------------------------------------------------------------
    def _emit(self, text: str) -> None:
        self.channel.send(text, run_id=None)

    def _is_stale(self, chunk: OutputChunk) -> bool:
        return (
            self.drop_stale_output
            and chunk.run_id is not None
            and self.current_run is not None
            and chunk.run_id != self.current_run.run_id
        )

    def pump_output(self, limit: int | None = None) -> list[OutputChunk]:
        """Move pending channel output into the buffer; returns what was appended."""
        appended: list[OutputChunk] = []
        for chunk in self.channel.drain(limit):
            if self._is_stale(chunk):
                continue
            self.buffer.append(chunk.text)
            appended.append(chunk)
        if appended:
            self.state.sync_output(self.buffer.line_count())
        return appended

    def tick(self) -> bool:
        """One scheduler tick: drain output, then check for file changes."""
        changed = bool(self.pump_output())
        if self.watch_coordinator is not None and self.watch_coordinator.tick():
            changed = True
        return changed

    def set_viewport_height(self, height: int) -> None:
        self.state.set_viewport_height(height)
        self.state.sync_output(self.buffer.line_count())

    def visible_lines(self) -> list[str]:
        return self.buffer.slice(self.state.scroll_offset, self.state.viewport_height)

    def render_viewport(self) -> list[list[StyledSpan]]:
        return [self.renderer.render(line) for line in self.visible_lines()]


# 🔼⚙️
