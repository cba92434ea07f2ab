"""Dilution estimate: how much of a block to leave as bare canvas."""
import numpy as np

from penhatch.color_space import WHITE_LAB, mix_lab, perceptual_distance
from penhatch.types import PerceptualColor

DILUTION_STEP = 0.005


def estimate_dilution(
    target: PerceptualColor,
    ink: PerceptualColor,
    step: float = DILUTION_STEP
) -> float:
    """
    Estimate the fraction of a block that should stay blank.

    Walks the ink color toward white in fixed steps. Each iteration measures
    the blend at the current ratio and, if it beats the best distance so far,
    moves the ratio one step ahead; the first non-improvement stops the walk.
    The result is therefore one step past the best measured blend and may be a
    local optimum. Output reproducibility depends on this exact behaviour.

    Args:
        target: Block LAB color
        ink: LAB color of the matched blend
        step: Ratio increment

    Returns:
        Dilution ratio in [0, 1)
    """
    best = np.inf
    ratio = 0.0

    while ratio < 1.0:
        trial = ratio + step
        distance = float(perceptual_distance(target, mix_lab(ink, WHITE_LAB, ratio)))

        if distance < best and trial < 1.0:
            best = distance
            ratio = trial
        else:
            break

    return ratio
