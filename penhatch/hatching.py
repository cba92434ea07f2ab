"""Hatch line generation for a single block.

Strokes run along the field direction ``v``. Starting from a jittered origin
in the block's top-left quadrant, candidate lines are spaced along both
perpendiculars of ``v`` and clipped to the block; every line that crosses the
block becomes a stroke, alternating between the two inks of the blend.
"""
import math
from typing import List

import numpy as np

from penhatch.geometry import Box, box_intersection, rotate
from penhatch.palette import InkBlend
from penhatch.types import LineSegment, PixelBlock, Point, Vector

# Walks stop once the candidate origin leaves the block scaled by this factor
WALK_BOUND_FACTOR = 5.0


def line_spacing(dilution: float, min_spacing: float, max_spacing: float) -> float:
    """Distance between strokes; lighter blocks get wider spacing."""
    return dilution * (max_spacing - min_spacing) + min_spacing


def block_rng(seed: int, grid_x: int, grid_y: int) -> np.random.Generator:
    """Jitter generator for one block, independent of processing order."""
    return np.random.default_rng([seed, grid_x, grid_y])


def hatch_block(
    block: PixelBlock,
    blend: InkBlend,
    dilution: float,
    direction: Vector,
    rng: np.random.Generator,
    min_spacing: float,
    max_spacing: float
) -> List[LineSegment]:
    """
    Generate the strokes for one block.

    Args:
        block: Block being drawn; its box is ``[0, width] x [0, height]``
            locally and segments are translated by its origin
        blend: Matched ink pair
        dilution: Fraction of the block to leave blank
        direction: Stroke direction; normalized here, so any length works
        rng: Source of the origin jitter
        min_spacing: Spacing at dilution 0
        max_spacing: Spacing as dilution approaches 1

    Returns:
        Segments in global image coordinates; empty for a degenerate direction

    Raises:
        ValueError: If the computed spacing is not positive
    """
    spacing = line_spacing(dilution, min_spacing, max_spacing)
    if not spacing > 0 or not math.isfinite(spacing):
        raise ValueError(f"Line spacing must be positive, got {spacing}")

    v = np.asarray(direction, dtype=np.float64)
    norm = math.hypot(v[0], v[1]) if np.all(np.isfinite(v)) else math.nan
    if not (norm > 0 and math.isfinite(norm)):
        # No perpendicular to walk along
        return []
    # Perpendicular steps must be exactly one spacing long
    v = v / norm

    box = Box.of_size(block.width, block.height)
    bound = box.scaled(WALK_BOUND_FACTOR)
    origin = np.array([
        rng.random() * block.width / 2.0,
        rng.random() * block.height / 2.0,
    ])

    segments: List[LineSegment] = []
    # k = 0 lies on both walks; only the first one draws it
    _walk(segments, block, blend, box, bound, origin, v, rotate(v, math.pi / 2), spacing, 0)
    _walk(segments, block, blend, box, bound, origin, v, rotate(v, -math.pi / 2), spacing, 1)
    return segments


def _walk(
    segments: List[LineSegment],
    block: PixelBlock,
    blend: InkBlend,
    box: Box,
    bound: Box,
    origin: Vector,
    v: Vector,
    perpendicular: Vector,
    spacing: float,
    k: int
) -> None:
    """Step along one perpendicular, appending clipped strokes."""
    use_a = True
    offset = np.array([block.x, block.y], dtype=np.float64)

    while True:
        o = origin + perpendicular * spacing * k
        if not bound.contains(o):
            break

        clipped = box_intersection(box, o, v)
        if clipped is not None:
            ink = blend.ink_a if use_a else blend.ink_b
            use_a = not use_a
            p1, p2 = clipped[0] + offset, clipped[1] + offset
            segments.append(LineSegment(
                start=Point(float(p1[0]), float(p1[1])),
                end=Point(float(p2[0]), float(p2[1])),
                ink=ink,
            ))

        k += 1
