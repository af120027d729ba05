"""Terminal text styling: colours, padding, borders, margins and layout."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum

ANSI_RESET = "\033[0m"
ANSI_RED = "\033[31m"
ANSI_GREEN = "\033[32m"
ANSI_YELLOW = "\033[33m"
ANSI_BLUE = "\033[34m"
ANSI_LIGHT_RED = "\033[91m"
ANSI_LIGHT_GREEN = "\033[92m"
ANSI_LIGHT_YELLOW = "\033[93m"
ANSI_LIGHT_BLUE = "\033[94m"

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_HEX_RE = re.compile(r"#([0-9a-fA-F]{6})")


class Align(Enum):
    """Horizontal alignment for joined blocks."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Border(Enum):
    """Box-drawing character sets."""

    NORMAL = ("─", "│", "┌", "┐", "└", "┘")
    ROUNDED = ("─", "│", "╭", "╮", "╰", "╯")

    @property
    def horizontal(self) -> str:
        return self.value[0]

    @property
    def vertical(self) -> str:
        return self.value[1]

    @property
    def top_left(self) -> str:
        return self.value[2]

    @property
    def top_right(self) -> str:
        return self.value[3]

    @property
    def bottom_left(self) -> str:
        return self.value[4]

    @property
    def bottom_right(self) -> str:
        return self.value[5]


def _char_width(ch: str) -> int:
    if unicodedata.combining(ch) or unicodedata.category(ch) in ("Mn", "Me", "Cf"):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def visible_width(text: str) -> int:
    """Return the terminal cell width of the widest line of ``text``."""
    plain = _ANSI_RE.sub("", text)
    return max(sum(_char_width(ch) for ch in line) for line in plain.split("\n"))


def _box(value: int | tuple[int, ...]) -> tuple[int, int, int, int]:
    if isinstance(value, int):
        sides: tuple[int, ...] = (value,) * 4
    elif len(value) == 1:
        sides = (value[0],) * 4
    elif len(value) == 2:
        sides = (value[0], value[1], value[0], value[1])
    elif len(value) == 4:
        sides = tuple(value)
    else:
        raise ValueError(f"expected 1, 2 or 4 sides, got {len(value)}")
    if any(side < 0 for side in sides):
        raise ValueError("sides must not be negative")
    return sides  # type: ignore[return-value]


def _colour(hex_colour: str, base: int) -> str:
    match = _HEX_RE.fullmatch(hex_colour)
    if match is None:
        raise ValueError(f"invalid colour: {hex_colour!r}")
    digits = match.group(1)
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    return f"{base};2;{r};{g};{b}"


def _wrap(line: str, codes: str) -> str:
    opening = f"\x1b[{codes}m"
    return opening + line.replace(ANSI_RESET, ANSI_RESET + opening) + ANSI_RESET


@dataclass(frozen=True)
class Style:
    """An immutable description of how to render a block of text.

    ``padding`` and ``margin`` take CSS-like values: one int, or a tuple of
    1, 2 (vertical, horizontal) or 4 (top, right, bottom, left) ints.
    """

    bold: bool = False
    italic: bool = False
    foreground: str | None = None
    background: str | None = None
    padding: int | tuple[int, ...] = 0
    margin: int | tuple[int, ...] = 0
    border: Border | None = None
    border_foreground: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "padding", _box(self.padding))
        object.__setattr__(self, "margin", _box(self.margin))
        for colour in (self.foreground, self.background, self.border_foreground):
            if colour is not None:
                _colour(colour, 38)

    def _sgr(self) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.italic:
            codes.append("3")
        if self.foreground is not None:
            codes.append(_colour(self.foreground, 38))
        if self.background is not None:
            codes.append(_colour(self.background, 48))
        return ";".join(codes)

    def render(self, text: str) -> str:
        """Render ``text`` with this style applied."""
        lines = text.split("\n")
        width = visible_width(text)
        top, right, bottom, left = self.padding
        body = [
            " " * left + line + " " * (width - visible_width(line) + right)
            for line in lines
        ]
        inner_width = width + left + right
        body = [" " * inner_width] * top + body + [" " * inner_width] * bottom

        sgr = self._sgr()
        if sgr:
            body = [_wrap(line, sgr) for line in body]

        if self.border is not None:
            edge = self.border
            border_codes = (
                _colour(self.border_foreground, 38) if self.border_foreground else ""
            )

            def paint(segment: str) -> str:
                return _wrap(segment, border_codes) if border_codes else segment

            body = (
                [paint(edge.top_left + edge.horizontal * inner_width + edge.top_right)]
                + [paint(edge.vertical) + line + paint(edge.vertical) for line in body]
                + [paint(edge.bottom_left + edge.horizontal * inner_width + edge.bottom_right)]
            )
            inner_width += 2

        m_top, m_right, m_bottom, m_left = self.margin
        body = [" " * m_left + line + " " * m_right for line in body]
        full_width = inner_width + m_left + m_right
        body = [" " * full_width] * m_top + body + [" " * full_width] * m_bottom
        return "\n".join(body)


def join_vertical(align: Align, *args: str) -> str:
    """Stack text blocks vertically, padding lines to a common width."""
    if not args:
        return ""
    lines = [line for block in args for line in block.split("\n")]
    width = max(visible_width(line) for line in lines)
    out = []
    for line in lines:
        gap = width - visible_width(line)
        if align is Align.LEFT:
            left = 0
        elif align is Align.RIGHT:
            left = gap
        else:
            left = gap // 2
        out.append(" " * left + line + " " * (gap - left))
    return "\n".join(out)