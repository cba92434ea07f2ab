"""Color space conversions and perceptual distance.

Pipeline colors live in linear RGB [0, 1]; sRGB only appears at the I/O
boundaries (decoded pixels, ink definitions, SVG stroke colors). Distances are
measured in CIE L*a*b* (D65, 2 degree observer).
"""
from typing import Sequence, Union

import numpy as np
from skimage.color import deltaE_cie76, xyz2lab

# Linear sRGB -> XYZ, D65 illuminant
_RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041]
])

ColorLike = Union[np.ndarray, Sequence[float]]


def srgb_to_linear(srgb: ColorLike) -> np.ndarray:
    """
    Convert sRGB to linear RGB.

    Args:
        srgb: sRGB values in range [0, 1], any shape ending in 3

    Returns:
        Linear RGB values, same shape
    """
    srgb = np.asarray(srgb, dtype=np.float64)

    # Apply sRGB EOTF (Electro-Optical Transfer Function)
    return np.where(
        srgb <= 0.04045,
        srgb / 12.92,
        ((srgb + 0.055) / 1.055) ** 2.4
    )


def linear_to_srgb(linear: ColorLike) -> np.ndarray:
    """
    Convert linear RGB to sRGB.

    Args:
        linear: Linear RGB values in range [0, 1]

    Returns:
        sRGB values in range [0, 1]
    """
    linear = np.clip(np.asarray(linear, dtype=np.float64), 0.0, 1.0)

    # Apply sRGB OETF (Opto-Electrical Transfer Function)
    return np.where(
        linear <= 0.0031308,
        linear * 12.92,
        1.055 * (linear ** (1.0 / 2.4)) - 0.055
    )


def linear_to_lab(linear: ColorLike) -> np.ndarray:
    """
    Convert linear RGB to CIELAB.

    Args:
        linear: Linear RGB values, shape (..., 3)

    Returns:
        LAB values, same shape
    """
    linear = np.asarray(linear, dtype=np.float64)
    shape = linear.shape

    xyz = np.dot(linear.reshape(-1, 3), _RGB_TO_XYZ.T)

    # skimage wants an image-shaped array
    lab = xyz2lab(xyz.reshape(-1, 1, 3), illuminant="D65", observer="2")
    return lab.reshape(shape)


def srgb8_to_lab(pixels: np.ndarray) -> np.ndarray:
    """Convert 8-bit sRGB pixels (..., 3) to CIELAB."""
    return linear_to_lab(srgb_to_linear(np.asarray(pixels, dtype=np.float64) / 255.0))


def linear_to_srgb8(linear: ColorLike) -> tuple:
    """Encode a linear color as an 8-bit sRGB triple (rounded, clipped)."""
    srgb = linear_to_srgb(linear)
    r, g, b = np.clip(np.round(srgb * 255.0), 0, 255).astype(int)
    return int(r), int(g), int(b)


def perceptual_distance(lab1: ColorLike, lab2: ColorLike) -> Union[float, np.ndarray]:
    """
    Euclidean (CIE76) distance between LAB colors.

    Broadcasts, so one side may be an (N, 3) array of candidates.
    """
    return deltaE_cie76(np.asarray(lab1, dtype=np.float64), np.asarray(lab2, dtype=np.float64))


def mix_lab(lab: ColorLike, other: ColorLike, factor: float) -> np.ndarray:
    """Linear interpolation from ``lab`` (factor 0) to ``other`` (factor 1)."""
    lab = np.asarray(lab, dtype=np.float64)
    other = np.asarray(other, dtype=np.float64)
    return lab + (other - lab) * factor


WHITE_LAB = linear_to_lab(np.ones(3))
