"""Text measurement backed by cairo font metrics.

Needs pycairo (``pip install mindtree[cairo]``).
"""

import math
from typing import Dict, Tuple

import cairo

from mindtree.measure import MeasureConstraints, Size, wrap_words


class CairoTextMeasurer:
    """Measure node text with cairo's toy font API.

    Results are cached per (text, constraints), so repeated layouts of an
    unchanged map don't touch cairo at all.
    """

    def __init__(self, font_family: str = "Sans", font_size: float = 14.0,
                 bold: bool = False, line_spacing: float = 1.5,
                 padding_x: float = 12.0, padding_y: float = 8.0):
        self.font_family = font_family
        self.font_size = font_size
        self.line_height = font_size * line_spacing
        self.padding_x = padding_x
        self.padding_y = padding_y

        # A 1x1 surface is enough to get a context for metrics
        self._surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, 1, 1)
        self._cr = cairo.Context(self._surface)
        weight = cairo.FONT_WEIGHT_BOLD if bold else cairo.FONT_WEIGHT_NORMAL
        self._cr.select_font_face(font_family, cairo.FONT_SLANT_NORMAL, weight)
        self._cr.set_font_size(font_size)
        self._cache: Dict[Tuple[str, MeasureConstraints], Size] = {}

    def text_width(self, text: str) -> float:
        """Advance width of a single line."""
        if not text:
            return 0.0
        return self._cr.text_extents(text).x_advance

    def __call__(self, text: str, constraints: MeasureConstraints) -> Size:
        key = (text, constraints)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        text = text or " "
        natural = max(self.text_width(line) for line in text.split("\n"))
        width = natural + self.padding_x * 2 + 2
        width = max(constraints.min_width, min(constraints.max_width, width))

        inner = width - self.padding_x * 2
        lines = wrap_words(text, lambda line: self.text_width(line) <= inner)
        height = len(lines) * self.line_height + self.padding_y * 2

        size = Size(width=width, height=max(constraints.min_height, math.ceil(height)))
        self._cache[key] = size
        return size
