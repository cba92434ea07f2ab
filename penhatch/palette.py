"""Pen palette and two-ink blend model.

Inks are physical pens with a fixed sRGB color. A blend is an ordered pair of
inks drawn as alternating strokes; its color is the linear-light midpoint of
the two inks. ``(a, b)`` and ``(b, a)`` are different blends with the same
color, so a blend palette holds color-duplicate entries and the matcher's
tie-break decides which one wins.
"""
import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from itertools import product
from pathlib import Path
from typing import Iterator, Sequence, Tuple, Union

import numpy as np

from penhatch.color_space import linear_to_lab, linear_to_srgb8, srgb_to_linear
from penhatch.types import PaletteError, PerceptualColor

logger = logging.getLogger(__name__)


class ColoredPen:
    """Anything that has a color and can be matched against a target."""

    def linear_color(self) -> np.ndarray:
        raise NotImplementedError

    def perceptual_color(self) -> PerceptualColor:
        return linear_to_lab(self.linear_color())

    def display_color(self) -> Tuple[int, int, int]:
        """8-bit sRGB triple for stroke coloring."""
        return linear_to_srgb8(self.linear_color())


@dataclass(frozen=True)
class Ink(ColoredPen):
    """A single physical ink."""
    name: str
    srgb: Tuple[int, int, int]
    blank: bool = False  # the bare canvas; never drawn

    def linear_color(self) -> np.ndarray:
        return srgb_to_linear(np.array(self.srgb, dtype=np.float64) / 255.0)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class InkBlend(ColoredPen):
    """Ordered pair of inks drawn on alternating strokes."""
    ink_a: Ink
    ink_b: Ink

    def linear_color(self) -> np.ndarray:
        # (a + b) / 2 rather than a + (b - a) / 2 keeps the mix exactly symmetric
        return (self.ink_a.linear_color() + self.ink_b.linear_color()) * 0.5

    @property
    def inks(self) -> Tuple[Ink, Ink]:
        return self.ink_a, self.ink_b

    def __str__(self) -> str:
        return f"{self.ink_a.name}/{self.ink_b.name}"


# InkJoy gel pens, measured swatches
RED = Ink("Red", (0xd1, 0x24, 0x31))
BERRY = Ink("Berry", (0xc1, 0x52, 0x9e))
PINK = Ink("Pink", (0xd8, 0x40, 0x8c))
ORANGE = Ink("Orange", (0xf3, 0x6c, 0x38))
YELLOW = Ink("Yellow", (0xff, 0xda, 0x3a))
GREEN = Ink("Green", (0x00, 0xa8, 0x5d))
LIME = Ink("Lime", (0xa6, 0xd0, 0x60))
SLATE_BLUE = Ink("SlateBlue", (0x28, 0x62, 0x8f))
BLUE = Ink("Blue", (0x32, 0x55, 0xa4))
BRIGHT_BLUE = Ink("BrightBlue", (0x47, 0xb7, 0xe6))
TEAL = Ink("Teal", (0x00, 0x9b, 0xa8))
PURPLE = Ink("Purple", (0x78, 0x5b, 0xa7))
COCOA = Ink("Cocoa", (0x8e, 0x61, 0x5e))
BLACK = Ink("Black", (0x37, 0x36, 0x3d))
WHITE_CANVAS = Ink("WhiteCanvas", (0xfc, 0xfc, 0xfc), blank=True)

INKJOY_GEL_PENS: Tuple[Ink, ...] = (
    RED, BERRY, PINK, ORANGE, YELLOW, GREEN, LIME, SLATE_BLUE,
    BLUE, BRIGHT_BLUE, TEAL, PURPLE, COCOA, BLACK, WHITE_CANVAS,
)

INK_SETS = {
    "gel": INKJOY_GEL_PENS,
    "black": (BLACK,),
}


class Palette:
    """Immutable, ordered set of matchable pens with cached LAB colors."""

    def __init__(self, pens: Sequence[ColoredPen]):
        if len(pens) == 0:
            raise PaletteError("Palette must contain at least one pen")
        self._pens = tuple(pens)
        # Per-pen conversion so rows match pen.perceptual_color() bit for bit
        self._lab = np.array([pen.perceptual_color() for pen in self._pens])
        self._lab.setflags(write=False)

    @classmethod
    def blends_of(cls, inks: Sequence[Ink]) -> "Palette":
        """All ordered ink pairs, in (a-major, b-minor) enumeration order."""
        return cls([InkBlend(a, b) for a, b in product(inks, repeat=2)])

    @property
    def pens(self) -> Tuple[ColoredPen, ...]:
        return self._pens

    @property
    def lab(self) -> np.ndarray:
        """(N, 3) LAB colors, row i belongs to pens[i]."""
        return self._lab

    def __len__(self) -> int:
        return len(self._pens)

    def __iter__(self) -> Iterator[ColoredPen]:
        return iter(self._pens)

    def __getitem__(self, index: int) -> ColoredPen:
        return self._pens[index]


@lru_cache(maxsize=None)
def blend_palette(name: str = "gel") -> Palette:
    """Named reference palette of ink blends.

    Raises:
        PaletteError: If the name is unknown
    """
    try:
        inks = INK_SETS[name]
    except KeyError:
        raise PaletteError(
            f"Unknown palette '{name}', expected one of {sorted(INK_SETS)}"
        ) from None
    return Palette.blends_of(inks)


def _parse_rgb(value: Union[str, Sequence[int]]) -> Tuple[int, int, int]:
    if isinstance(value, str):
        value = value.lstrip("#")
        if len(value) != 6:
            raise PaletteError(f"Expected #rrggbb color, got '#{value}'")
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)

    if len(value) != 3 or not all(0 <= int(c) <= 255 for c in value):
        raise PaletteError(f"Expected three channels in [0, 255], got {value}")
    return int(value[0]), int(value[1]), int(value[2])


def load_ink_file(path: Union[str, Path]) -> Tuple[Ink, ...]:
    """
    Load a custom ink set from JSON.

    The file holds a list of objects ``{"name": ..., "rgb": [r, g, b] or
    "#rrggbb", "blank": false}``. Order is kept; it drives tie-breaks.

    Raises:
        FileNotFoundError: If the file doesn't exist
        PaletteError: If the content is malformed or empty
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ink file not found: {path}")

    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise PaletteError(f"Invalid JSON in ink file {path}: {e}") from e

    if not isinstance(entries, list) or not entries:
        raise PaletteError(f"Ink file {path} must contain a non-empty list")

    inks = []
    for entry in entries:
        try:
            inks.append(Ink(
                name=str(entry["name"]),
                srgb=_parse_rgb(entry["rgb"]),
                blank=bool(entry.get("blank", False)),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise PaletteError(f"Malformed ink entry {entry!r}: {e}") from e

    logger.info(f"Loaded {len(inks)} inks from {path}")
    return tuple(inks)
