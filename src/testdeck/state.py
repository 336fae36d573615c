# src/testdeck/state.py
#
"""
Defines the session state model: pane focus, test selection, watch mode and
the output viewport position.
"""

from enum import Enum, IntEnum, auto
from pathlib import Path

import structlog
from attrs import define, field, mutable

log: structlog.stdlib.BoundLogger = structlog.get_logger("state")

PANE_COUNT = 3


class Pane(IntEnum):
    """The three regions that can hold input focus, in left-to-right cycle order."""

    FILE_LIST = 0
    TEST_LIST = 1
    OUTPUT = 2


class Command(Enum):
    """Operator inputs understood by the session state machine."""

    PANE_LEFT = auto()
    PANE_RIGHT = auto()
    LINE_DOWN = auto()
    LINE_UP = auto()
    PAGE_DOWN = auto()
    PAGE_UP = auto()
    TOGGLE_WATCH = auto()
    CONFIRM = auto()
    QUIT = auto()


class Intent(Enum):
    """Follow-up work a command asks the outer loop to perform."""

    NONE = auto()
    RUN_TEST = auto()
    RESCAN = auto()
    QUIT = auto()


@define(frozen=True, slots=True)
class TestGroup:
    """The tests declared by one source file, in declaration order."""

    __test__ = False

    source_path: Path = field(converter=Path)
    test_names: tuple[str, ...] = field(converter=tuple)


@mutable(slots=True)
class SessionState:
    """
    Holds the navigation state of one interactive session.

    Every mutator leaves the selection indices inside the catalog and the
    scroll offset inside ``[0, max(0, total_output_lines - viewport_height)]``.
    """

    test_groups: tuple[TestGroup, ...] = field(factory=tuple, converter=tuple)
    selected_group_index: int = field(default=0)
    selected_test_index: int = field(default=0)
    focused_pane: Pane = field(default=Pane.FILE_LIST)
    watch_enabled: bool = field(default=False)
    scroll_offset: int = field(default=0)
    viewport_height: int = field(default=0)
    total_output_lines: int = field(default=0)
    # False once the operator scrolls manually; restored when output is cleared.
    follow_tail: bool = field(default=True)
    should_quit: bool = field(default=False)

    def __attrs_post_init__(self) -> None:
        self._clamp_selection()
        self._clamp_scroll()

    # --- Catalog ---------------------------------------------------------
    def replace_catalog(self, groups: list[TestGroup] | tuple[TestGroup, ...]) -> None:
        """Swap in a freshly scanned catalog; selection restarts at the top."""
        self.test_groups = tuple(groups)
        self.selected_group_index = 0
        self.selected_test_index = 0
        log.debug("Test catalog replaced", group_count=len(self.test_groups))

    @property
    def selected_group(self) -> TestGroup | None:
        if not self.test_groups:
            return None
        return self.test_groups[self.selected_group_index]

    @property
    def selected_test(self) -> str | None:
        group = self.selected_group
        if group is None or not group.test_names:
            return None
        return group.test_names[self.selected_test_index]

    def select(self, group_index: int, test_index: int = 0) -> None:
        """Jump straight to a group/test pair (clamped like any other move)."""
        self.selected_group_index = group_index
        self.selected_test_index = test_index
        self._clamp_selection()

    # --- Command dispatch ----------------------------------------------------
    def apply(self, command: Command) -> Intent:
        """Apply one operator input and report what the outer loop should do next."""
        match command:
            case Command.PANE_LEFT:
                self.focused_pane = Pane((self.focused_pane - 1) % PANE_COUNT)
            case Command.PANE_RIGHT:
                self.focused_pane = Pane((self.focused_pane + 1) % PANE_COUNT)
            case Command.LINE_DOWN:
                self._move(1)
            case Command.LINE_UP:
                self._move(-1)
            case Command.PAGE_DOWN:
                if self.focused_pane is Pane.OUTPUT:
                    self._scroll_by(self.page_size)
            case Command.PAGE_UP:
                if self.focused_pane is Pane.OUTPUT:
                    self._scroll_by(-self.page_size)
            case Command.TOGGLE_WATCH:
                self.watch_enabled = not self.watch_enabled
                log.info("Watch mode toggled", watch_enabled=self.watch_enabled, emoji_key="watch")
            case Command.QUIT:
                self.should_quit = True
                return Intent.QUIT
            case Command.CONFIRM:
                if self.focused_pane is Pane.TEST_LIST:
                    return Intent.RUN_TEST
                if self.focused_pane is Pane.FILE_LIST:
                    return Intent.RESCAN
        return Intent.NONE

    def _move(self, delta: int) -> None:
        if self.focused_pane is Pane.FILE_LIST:
            if not self.test_groups:
                return
            new_index = self._clamp_index(self.selected_group_index + delta, len(self.test_groups))
            if new_index != self.selected_group_index:
                self.selected_group_index = new_index
                # A different file has a different test list.
                self.selected_test_index = 0
        elif self.focused_pane is Pane.TEST_LIST:
            group = self.selected_group
            if group is None:
                return
            self.selected_test_index = self._clamp_index(
                self.selected_test_index + delta, len(group.test_names)
            )
        else:
            self._scroll_by(delta)

    # --- Viewport ------------------------------------------------------------
    @property
    def max_scroll(self) -> int:
        return max(0, self.total_output_lines - self.viewport_height)

    @property
    def page_size(self) -> int:
        return max(1, self.viewport_height)

    def set_viewport_height(self, height: int) -> None:
        self.viewport_height = max(0, height)
        self._settle_scroll()

    def sync_output(self, total_lines: int) -> None:
        """Record the buffer's new length; follow the tail unless pinned."""
        self.total_output_lines = max(0, total_lines)
        self._settle_scroll()

    def reset_output(self) -> None:
        """The output buffer was cleared: back to the top, following again."""
        self.total_output_lines = 0
        self.scroll_offset = 0
        self.follow_tail = True

    def _scroll_by(self, delta: int) -> None:
        self.follow_tail = False
        self.scroll_offset += delta
        self._clamp_scroll()

    def _settle_scroll(self) -> None:
        if self.follow_tail:
            self.scroll_offset = self.max_scroll
        else:
            self._clamp_scroll()

    def _clamp_scroll(self) -> None:
        self.scroll_offset = min(max(0, self.scroll_offset), self.max_scroll)

    # --- Helpers -------------------------------------------------------------
    @staticmethod
    def _clamp_index(index: int, length: int) -> int:
        if length <= 0:
            return 0
        return min(max(0, index), length - 1)

    def _clamp_selection(self) -> None:
        self.selected_group_index = self._clamp_index(self.selected_group_index, len(self.test_groups))
        group = self.selected_group
        test_count = len(group.test_names) if group else 0
        self.selected_test_index = self._clamp_index(self.selected_test_index, test_count)


# 🔼⚙️
