"""Text measurement for node boxes.

Layout consults a measurer to size each node. Any callable taking
``(text, constraints)`` and returning a `Size` works, as long as it is a
pure function of its inputs.
"""

import math
from dataclasses import dataclass
from typing import List, Protocol


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class MeasureConstraints:
    """Bounds a measured box has to respect."""
    max_width: float
    min_width: float
    min_height: float


class TextMeasurer(Protocol):
    def __call__(self, text: str, constraints: MeasureConstraints) -> Size:
        ...


def wrap_words(text: str, fits) -> List[str]:
    """Greedy word wrap.

    `fits(line)` tells whether a candidate line fits the available width.
    Explicit newlines are kept; a word too long for a line of its own is
    broken by characters.
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if fits(candidate):
                current = candidate
                continue
            if current:
                lines.append(current)
            current = ""
            for char in word:
                if current and not fits(current + char):
                    lines.append(current)
                    current = ""
                current += char
        lines.append(current)
    return lines


class CharWidthMeasurer:
    """Deterministic fixed-pitch estimate of a node box.

    Every character advances `char_width`; lines wrap at the widest box
    the constraints allow.
    """

    def __init__(self, char_width: float = 8.0, line_height: float = 21.0,
                 padding_x: float = 12.0, padding_y: float = 8.0):
        self.char_width = char_width
        self.line_height = line_height
        self.padding_x = padding_x
        self.padding_y = padding_y

    def __call__(self, text: str, constraints: MeasureConstraints) -> Size:
        # Empty text still occupies one line
        text = text or " "
        natural = max(len(line) for line in text.split("\n")) * self.char_width
        # Small buffer against sub-pixel wrapping differences
        width = natural + self.padding_x * 2 + 2
        width = max(constraints.min_width, min(constraints.max_width, width))

        inner = max(self.char_width, width - self.padding_x * 2)
        per_line = max(1, int(inner // self.char_width))
        lines = wrap_words(text, lambda line: len(line) <= per_line)

        height = len(lines) * self.line_height + self.padding_y * 2
        return Size(width=width, height=max(constraints.min_height, math.ceil(height)))
