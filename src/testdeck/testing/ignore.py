#
# src/testdeck/testing/ignore.py
#
"""
Ignore rules shared by test discovery and the change notifier.

Supports, for the ``.gitignore`` at the scan root:
- Glob patterns (*, ?, [...]) and ``**``
- Directory-only patterns (trailing /)
- Negation patterns (leading !)
- Anchored patterns (leading / or containing /) vs. basename patterns

Hidden entries (names starting with ".") are excluded unless
``include_hidden`` is set.
"""

import fnmatch
from pathlib import Path, PurePosixPath

import structlog

log = structlog.get_logger("testing.ignore")


class IgnoreMatcher:
    """Decides whether a path below ``root`` should be skipped."""

    def __init__(
        self,
        root: Path,
        include_hidden: bool = False,
        extra_patterns: list[str] | None = None,
    ) -> None:
        self._root = root.resolve()
        self._include_hidden = include_hidden
        self._patterns: list[tuple[str, bool, bool, bool]] = []  # (pattern, negated, dir_only, anchored)
        self._load_gitignore()
        for pattern in extra_patterns or []:
            self._add_pattern(pattern)

    @property
    def root(self) -> Path:
        return self._root

    def _load_gitignore(self) -> None:
        gitignore_path = self._root / ".gitignore"
        if not gitignore_path.is_file():
            return
        try:
            content = gitignore_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            log.warning("Could not read .gitignore, continuing without it", path=str(gitignore_path), error=str(e))
            return
        for line in content.splitlines():
            self._add_pattern(line)
        log.debug("Loaded ignore patterns", path=str(gitignore_path), count=len(self._patterns))

    def _add_pattern(self, line: str) -> None:
        line = line.rstrip()
        if not line or line.startswith("#"):
            return
        negated = line.startswith("!")
        if negated:
            line = line[1:]
        dir_only = line.endswith("/")
        line = line.rstrip("/")
        anchored = "/" in line
        line = line.lstrip("/")
        if line:
            self._patterns.append((line, negated, dir_only, anchored))

    def _relative(self, path: Path) -> PurePosixPath | None:
        try:
            rel = path.resolve().relative_to(self._root)
        except (ValueError, OSError):
            return None
        return PurePosixPath(rel.as_posix())

    @staticmethod
    def _matches(rel: str, name: str, pattern: str, anchored: bool) -> bool:
        if anchored:
            if fnmatch.fnmatchcase(rel, pattern):
                return True
            # "**/x" also matches "x" at the root.
            return pattern.startswith("**/") and fnmatch.fnmatchcase(rel, pattern[3:])
        return fnmatch.fnmatchcase(name, pattern)

    def _entry_ignored(self, rel: PurePosixPath, is_dir: bool) -> bool:
        ignored = False
        rel_str = str(rel)
        for pattern, negated, dir_only, anchored in self._patterns:
            if dir_only and not is_dir:
                continue
            if self._matches(rel_str, rel.name, pattern, anchored):
                ignored = not negated
        return ignored

    def is_ignored(self, path: Path, is_dir: bool | None = None) -> bool:
        """Check ``path`` and every parent directory up to the root.

        ``is_dir`` may be passed for paths that no longer exist (deletions).
        Paths outside the root are never ignored.
        """
        rel = self._relative(path)
        if rel is None or str(rel) == ".":
            return False
        if is_dir is None:
            is_dir = path.is_dir()

        parts = rel.parts
        for depth in range(1, len(parts) + 1):
            prefix = PurePosixPath(*parts[:depth])
            prefix_is_dir = is_dir if depth == len(parts) else True
            if not self._include_hidden and prefix.name.startswith("."):
                return True
            if self._entry_ignored(prefix, prefix_is_dir):
                return True
        return False


# 🔼⚙️
