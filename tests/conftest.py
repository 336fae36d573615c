#
# tests/conftest.py
#
import re
import sys
from collections import deque
from pathlib import Path

import pytest

from testdeck.monitor import ChangeEvent, ChangeKind
from testdeck.runtime import SessionController
from testdeck.state import TestGroup
from testdeck.testing import ExecutionPipeline, OutputChannel, RunnerProfile

SAMPLE_LIB_RS = """\
pub fn add(a: i32, b: i32) -> i32 {
    a + b
}

#[test]
fn test_add() {
    assert_eq!(add(1, 2), 3);
}

#[tokio::test]
async fn test_async_add() {
    assert_eq!(add(2, 2), 4);
}
"""

SAMPLE_UTIL_RS = """\
#[test]
fn util_works() {}
"""


class FakeNotifier:
    """In-memory ChangeNotifier; tests push events, the coordinator polls them."""

    def __init__(self) -> None:
        self.events: deque[ChangeEvent] = deque()
        self.started = False
        self.stopped = False

    def push(self, kind: ChangeKind = ChangeKind.MODIFIED, path: str = "src/lib.rs", is_directory: bool = False):
        self.events.append(ChangeEvent(kind=kind, path=Path(path), is_directory=is_directory))

    def poll(self) -> ChangeEvent | None:
        return self.events.popleft() if self.events else None

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True


class FakeDiscoverer:
    """TestDiscoverer returning a fixed catalog and counting scans."""

    def __init__(self, groups: list[TestGroup]) -> None:
        self.groups = groups
        self.scans = 0

    def scan(self, root: Path) -> list[TestGroup]:
        self.scans += 1
        return list(self.groups)


def make_python_profile(script: str) -> RunnerProfile:
    """A profile whose command runs ``script`` with the current interpreter."""
    return RunnerProfile(
        name="inline-python",
        file_patterns=("*.py",),
        test_pattern=re.compile(r"def (?P<name>test_\w+)"),
        standard_command=(sys.executable, "-c", script, "{test}"),
    )


@pytest.fixture
def cargo_tree(tmp_path: Path) -> Path:
    """A small Rust-style tree with tests, a gitignored target dir and a hidden dir."""
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "lib.rs").write_text(SAMPLE_LIB_RS)
    (tmp_path / "src" / "util.rs").write_text(SAMPLE_UTIL_RS)
    (tmp_path / "src" / "main.rs").write_text("fn main() {}\n")
    (tmp_path / "target" / "debug").mkdir(parents=True)
    (tmp_path / "target" / "debug" / "build.rs").write_text(SAMPLE_UTIL_RS)
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "secret.rs").write_text(SAMPLE_UTIL_RS)
    (tmp_path / ".gitignore").write_text("# build output\n/target/\n")
    return tmp_path


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def sample_groups(tmp_path: Path) -> list[TestGroup]:
    return [
        TestGroup(source_path=tmp_path / "a.rs", test_names=["a", "b"]),
        TestGroup(source_path=tmp_path / "b.rs", test_names=["c"]),
    ]


@pytest.fixture
def echo_controller(tmp_path: Path, sample_groups, fake_notifier) -> SessionController:
    """A controller whose "test command" prints its argument and exits 0."""
    channel = OutputChannel()
    pipeline = ExecutionPipeline(
        make_python_profile("import sys; print('ran', sys.argv[1])"), channel, probe=False
    )
    controller = SessionController(
        root=tmp_path,
        discoverer=FakeDiscoverer(sample_groups),
        pipeline=pipeline,
        channel=channel,
        notifier=fake_notifier,
    )
    yield controller
    controller.shutdown()


@pytest.fixture
def python_profile():
    """Factory fixture: ``python_profile(script)`` builds an inline-python profile."""
    return make_python_profile


@pytest.fixture
def fake_discoverer(sample_groups) -> FakeDiscoverer:
    return FakeDiscoverer(sample_groups)
