#
# src/testdeck/rendering/ansi.py
#
"""
Turns one raw output line carrying SGR escape sequences into styled spans.
"""

import re
from collections.abc import Iterable
from enum import Enum

from attrs import define, evolve, field
from rich.style import Style
from rich.text import Text

# Any CSI sequence: ESC [ params final-byte. Only final byte "m" (SGR) styles text.
ANSI_CSI_RE = re.compile(r"\x1b\[([0-9;:?]*)([@-~])")

SGR_RESET = 0
SGR_BOLD = 1
SGR_FG_EXTENDED = 38
SGR_BG_EXTENDED = 48


class Color(Enum):
    """The eight basic terminal colors, in SGR offset order."""

    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"


_BASIC_COLORS: tuple[Color, ...] = tuple(Color)


@define(frozen=True, slots=True)
class StyledSpan:
    """A run of visible text sharing one style."""

    text: str
    foreground: Color | None = field(default=None)
    background: Color | None = field(default=None)
    bold: bool = field(default=False)


@define(frozen=True, slots=True)
class _SpanStyle:
    foreground: Color | None = None
    background: Color | None = None
    bold: bool = False


def _parse_params(raw: str) -> list[int]:
    """SGR parameters; an empty list (``ESC[m``) means reset."""
    if not raw:
        return [SGR_RESET]
    params = []
    for part in re.split(r"[;:]", raw):
        # An empty field counts as 0, as in "ESC[;1m".
        params.append(int(part) if part.isdigit() else SGR_RESET)
    return params


def _apply_sgr(style: _SpanStyle, params: list[int]) -> _SpanStyle:
    i = 0
    while i < len(params):
        code = params[i]
        if code == SGR_RESET:
            style = _SpanStyle()
        elif code == SGR_BOLD:
            style = evolve(style, bold=True)
        elif 30 <= code <= 37:
            style = evolve(style, foreground=_BASIC_COLORS[code - 30])
        elif 40 <= code <= 47:
            style = evolve(style, background=_BASIC_COLORS[code - 40])
        elif code in (SGR_FG_EXTENDED, SGR_BG_EXTENDED):
            # 38;5;n and 38;2;r;g;b are unsupported; skip their arguments whole.
            mode = params[i + 1] if i + 1 < len(params) else None
            if mode == 5:
                i += 2
            elif mode == 2:
                i += 4
        i += 1
    return style


class AnsiLineRenderer:
    """Stateless SGR interpreter.

    Each call starts from the default style, so no attribute leaks from one
    line into the next. Attributes accumulate left to right: a reset clears
    everything, a color code replaces only its own slot, and unrecognized
    codes (or non-SGR CSI sequences) are dropped without error.
    """

    def render(self, line: str) -> list[StyledSpan]:
        spans: list[StyledSpan] = []
        style = _SpanStyle()
        pos = 0
        for match in ANSI_CSI_RE.finditer(line):
            self._emit(spans, line[pos : match.start()], style)
            if match.group(2) == "m":
                style = _apply_sgr(style, _parse_params(match.group(1)))
            pos = match.end()
        self._emit(spans, line[pos:], style)
        return spans

    @staticmethod
    def _emit(spans: list[StyledSpan], text: str, style: _SpanStyle) -> None:
        if text:
            spans.append(
                StyledSpan(
                    text=text,
                    foreground=style.foreground,
                    background=style.background,
                    bold=style.bold,
                )
            )


def strip_ansi(line: str) -> str:
    """Remove every CSI escape sequence, leaving only the visible characters."""
    return ANSI_CSI_RE.sub("", line)


def to_rich_text(lines: Iterable[list[StyledSpan]]) -> Text:
    """Assemble rendered lines into one ``rich`` Text for a widget."""
    text = Text(no_wrap=False, end="")
    for index, spans in enumerate(lines):
        if index:
            text.append("\n")
        for span in spans:
            text.append(
                span.text,
                Style(
                    color=span.foreground.value if span.foreground else None,
                    bgcolor=span.background.value if span.background else None,
                    bold=span.bold or None,
                ),
            )
    return text


# 🔼⚙️
