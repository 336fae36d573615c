#
# src/testdeck/tui/app.py
#
"""
Three-pane Textual front end for a testdeck session.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any, ClassVar

import structlog
from rich.style import Style
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import Footer, Header, Static

from testdeck.rendering import to_rich_text
from testdeck.runtime import SessionController
from testdeck.state import Command, Intent, Pane

log = structlog.get_logger("tui.app")

SELECTED_STYLE = Style(color="black", bgcolor="#add8e6")
PANE_WIDGET_IDS: dict[Pane, str] = {
    Pane.FILE_LIST: "file-list",
    Pane.TEST_LIST: "test-list",
    Pane.OUTPUT: "output",
}


class TimerManager:
    """Keeps track of named interval timers so they can be stopped together."""

    def __init__(self, app: App) -> None:
        self.app = app
        self._timers: dict[str, Timer] = {}
        self._logger = log.bind(component="TimerManager")

    def create_timer(self, name: str, interval: float, callback: Callable[[], Any]) -> Timer:
        if name in self._timers:
            self.stop_timer(name)
        timer = self.app.set_interval(interval, callback, name=name)
        self._timers[name] = timer
        self._logger.debug("Timer created", name=name, interval=interval)
        return timer

    def stop_timer(self, name: str) -> bool:
        timer = self._timers.pop(name, None)
        if timer is None:
            return False
        timer.stop()
        self._logger.debug("Timer stopped", name=name)
        return True

    def stop_all_timers(self) -> None:
        names = list(self._timers)
        for name in names:
            self.stop_timer(name)
        self._logger.debug("All timers stopped", count=len(names))


def format_file_list(controller: SessionController) -> Text:
    state = controller.state
    text = Text(no_wrap=True, end="")
    for index, group in enumerate(state.test_groups):
        if index:
            text.append("\n")
        label = _display_path(group.source_path, controller.root)
        text.append(label, SELECTED_STYLE if index == state.selected_group_index else None)
    return text


def format_test_list(controller: SessionController) -> Text:
    state = controller.state
    text = Text(no_wrap=True, end="")
    group = state.selected_group
    if group is None:
        return text
    for index, name in enumerate(group.test_names):
        if index:
            text.append("\n")
        text.append(name, SELECTED_STYLE if index == state.selected_test_index else None)
    return text


def output_title(controller: SessionController) -> str:
    return f"Test Output (Scroll: {controller.state.scroll_offset}/{controller.buffer.line_count()})"


def _display_path(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


class TestdeckTuiApp(App):
    """Test browser and runner for one source tree."""

    __test__ = False

    TITLE = "Testdeck"
    BINDINGS: ClassVar[list] = [
        ("q", "command('quit')", "Quit"),
        ("w", "command('toggle_watch')", "Watch"),
        ("r", "command('confirm')", "Run/Rescan"),
        ("enter", "command('confirm')", "Run/Rescan"),
        ("h", "command('pane_left')", "Left"),
        ("left", "command('pane_left')", "Left"),
        ("l", "command('pane_right')", "Right"),
        ("right", "command('pane_right')", "Right"),
        ("j", "command('line_down')", "Down"),
        ("down", "command('line_down')", "Down"),
        ("k", "command('line_up')", "Up"),
        ("up", "command('line_up')", "Up"),
        ("d", "command('page_down')", "Page Down"),
        ("pagedown", "command('page_down')", "Page Down"),
        ("u", "command('page_up')", "Page Up"),
        ("pageup", "command('page_up')", "Page Up"),
    ]

    CSS = """
    Screen {
        layout: vertical;
        overflow: hidden;
    }

    #main {
        height: 1fr;
    }

    #left-column {
        width: 30%;
        height: 1fr;
    }

    #file-list, #test-list {
        height: 1fr;
        border: round $accent;
        overflow: hidden;
    }

    #output {
        width: 1fr;
        height: 1fr;
        border: round $accent;
        overflow: hidden;
    }

    #file-list.-focused, #test-list.-focused, #output.-focused {
        border: round #ffa500;
    }
    """

    def __init__(
        self,
        controller: SessionController,
        poll_interval: float = 0.1,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.controller = controller
        self._poll_interval = poll_interval
        self._timer_manager = TimerManager(self)
        self._is_shutting_down = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main"):
            with Vertical(id="left-column"):
                yield Static(id="file-list")
                yield Static(id="test-list")
            yield Static(id="output")
        yield Footer()

    def on_mount(self) -> None:
        log.info("TUI mounted, starting session.")
        self.query_one("#file-list", Static).border_title = "Test Files"
        self.query_one("#test-list", Static).border_title = "Tests"
        self.controller.start()
        self._timer_manager.create_timer("tick", self._poll_interval, self._on_tick)
        self.call_after_refresh(self._sync_viewport)
        self.refresh_view()

    def on_resize(self, event: events.Resize) -> None:
        self.call_after_refresh(self._sync_viewport)

    def _sync_viewport(self) -> None:
        height = self.query_one("#output", Static).content_size.height
        if height > 0:
            self.controller.set_viewport_height(height)
            self.refresh_view()

    def _on_tick(self) -> None:
        if self._is_shutting_down:
            return
        try:
            changed = self.controller.tick()
        except Exception:
            log.exception("Session tick failed, shutting down.")
            self.action_quit()
            return
        if changed:
            self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw all three panes from the current session state."""
        controller = self.controller
        state = controller.state

        file_list = self.query_one("#file-list", Static)
        test_list = self.query_one("#test-list", Static)
        output = self.query_one("#output", Static)

        file_list.update(format_file_list(controller))
        test_list.update(format_test_list(controller))
        output.update(to_rich_text(controller.render_viewport()))
        output.border_title = output_title(controller)

        for pane, widget_id in PANE_WIDGET_IDS.items():
            self.query_one(f"#{widget_id}", Static).set_class(state.focused_pane is pane, "-focused")

        self.sub_title = "Watch: ON" if state.watch_enabled else "Watch: OFF"

    def action_command(self, name: str) -> None:
        try:
            command = Command[name.upper()]
        except KeyError:
            log.warning("Unknown command binding", command=name)
            return
        intent = self.controller.handle(command)
        if intent is Intent.QUIT:
            self.action_quit()
            return
        if intent is not Intent.NONE:
            # Pull the enqueued status lines in right away.
            self.controller.pump_output()
        self.refresh_view()

    def action_quit(self) -> None:
        """Stops the session and exits; safe to call more than once."""
        if self._is_shutting_down:
            return
        self._is_shutting_down = True
        log.info("Quit requested, shutting down session.")
        self._timer_manager.stop_all_timers()
        self.controller.shutdown()
        self.exit(0)


# 🖥️✨
