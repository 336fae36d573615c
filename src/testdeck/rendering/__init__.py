#
# src/testdeck/rendering/__init__.py
#
"""
ANSI-aware line rendering for the output pane.
"""

from .ansi import AnsiLineRenderer, Color, StyledSpan, strip_ansi, to_rich_text

__all__ = [
    "AnsiLineRenderer",
    "Color",
    "StyledSpan",
    "strip_ansi",
    "to_rich_text",
]
