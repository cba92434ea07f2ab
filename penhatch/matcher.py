"""Nearest-pen matching in LAB space."""
from typing import Dict, Sequence, Tuple, Union

import numpy as np

from penhatch.color_space import perceptual_distance
from penhatch.palette import ColoredPen, Palette
from penhatch.types import PaletteError, PerceptualColor


def closest_pen(
    target: PerceptualColor,
    candidates: Union[Palette, Sequence[ColoredPen]]
) -> ColoredPen:
    """
    Find the candidate whose LAB color is closest to ``target``.

    Ties go to the first candidate in enumeration order.

    Args:
        target: LAB color to match
        candidates: Palette or any non-empty sequence of pens

    Returns:
        The closest pen

    Raises:
        PaletteError: If ``candidates`` is empty
    """
    if len(candidates) == 0:
        raise PaletteError("Cannot match a color against an empty candidate set")

    if isinstance(candidates, Palette):
        labs = candidates.lab
    else:
        labs = np.array([pen.perceptual_color() for pen in candidates])

    distances = perceptual_distance(labs, target)
    # argmin returns the first index of the minimum
    return candidates[int(np.argmin(distances))]


class PenMatcher:
    """Memoizing matcher bound to one palette."""

    def __init__(self, palette: Palette):
        self.palette = palette
        self._memo: Dict[Tuple[float, float, float], ColoredPen] = {}

    def match(self, target: PerceptualColor) -> ColoredPen:
        key = tuple(float(c) for c in target)
        pen = self._memo.get(key)
        if pen is None:
            pen = closest_pen(target, self.palette)
            self._memo[key] = pen
        return pen

    @property
    def cache_size(self) -> int:
        return len(self._memo)
