#
# src/testdeck/testing/profiles.py
#
"""
Runner profiles: how tests are recognized in source files and how one test
is invoked for a given toolchain.
"""

import re
import sys
from collections.abc import Sequence

from attrs import define, field

TEST_PLACEHOLDER = "{test}"


def _to_tuple(value: Sequence[str] | None) -> tuple[str, ...] | None:
    return tuple(value) if value is not None else None


@define(frozen=True, slots=True)
class RunnerProfile:
    """
    Everything toolchain-specific the session engine needs.

    ``standard_command`` and ``fast_command`` are argv templates in which
    ``{test}`` is replaced by the selected test name. ``fast_probe`` is run
    once when the pipeline is built; a zero exit status enables
    ``fast_command``.
    """

    name: str
    file_patterns: tuple[str, ...] = field(converter=tuple)
    test_pattern: re.Pattern[str] = field()
    standard_command: tuple[str, ...] = field(converter=tuple)
    fast_command: tuple[str, ...] | None = field(default=None, converter=_to_tuple)
    fast_probe: tuple[str, ...] | None = field(default=None, converter=_to_tuple)
    env: dict[str, str] = field(factory=dict)

    @test_pattern.validator
    def _check_pattern(self, attribute, value: re.Pattern[str]) -> None:
        if "name" not in value.groupindex:
            raise ValueError(f"Profile '{self.name}' test_pattern needs a (?P<name>...) group")

    @property
    def has_fast_runner(self) -> bool:
        return self.fast_command is not None and self.fast_probe is not None

    def command_for(self, test_name: str, fast: bool = False) -> list[str]:
        template = self.fast_command if fast and self.fast_command else self.standard_command
        return [arg.replace(TEST_PLACEHOLDER, test_name) for arg in template]


CARGO_PROFILE = RunnerProfile(
    name="cargo",
    file_patterns=("*.rs",),
    test_pattern=re.compile(
        r"#\[(?:cfg\(test\)|(?:tokio::)?test)\]\s*(?:async\s+)?fn\s+(?P<name>\w+)",
        re.MULTILINE,
    ),
    standard_command=("cargo", "test", TEST_PLACEHOLDER, "--", "--nocapture"),
    fast_command=("cargo", "nextest", "run", TEST_PLACEHOLDER, "--no-capture"),
    fast_probe=("cargo", "nextest", "--version"),
    env={
        "CARGO_TERM_COLOR": "always",
        "CARGO_INCREMENTAL": "0",
        "RUSTFLAGS": "-Awarnings",
    },
)

PYTEST_PROFILE = RunnerProfile(
    name="pytest",
    file_patterns=("test_*.py", "*_test.py"),
    test_pattern=re.compile(r"^[ \t]*(?:async[ \t]+)?def[ \t]+(?P<name>test\w*)[ \t]*\(", re.MULTILINE),
    standard_command=(sys.executable, "-m", "pytest", "-k", TEST_PLACEHOLDER, "-s", "--color=yes"),
    env={"PY_COLORS": "1"},
)


# 🔼⚙️
