"""Raster image ingestion: decode, brighten and resize to the sampling grid."""
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageOps

from penhatch.types import IngestError, IngestResult

logger = logging.getLogger(__name__)


def brighten(image: np.ndarray, amount: int) -> np.ndarray:
    """
    Add ``amount`` to every channel, clamped to [0, 255].

    Args:
        image: (H, W, 3) uint8 image
        amount: Signed offset

    Returns:
        New uint8 image
    """
    if amount == 0:
        return image
    shifted = image.astype(np.int32) + int(amount)
    return np.clip(shifted, 0, 255).astype(np.uint8)


def _to_rgb(img: Image.Image) -> Tuple[Image.Image, bool]:
    """Flatten any PIL mode to RGB, compositing transparency on white."""
    if img.mode in ("RGBA", "LA", "P"):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[3])
        return background, True
    if img.mode != "RGB":
        return img.convert("RGB"), False
    return img, False


def ingest(
    path: Union[str, Path],
    size: Optional[Tuple[int, int]] = None,
    brightness: int = 0
) -> IngestResult:
    """
    Ingest a raster image file.

    Args:
        path: Path to image file
        size: Exact (width, height) to resize to; the aspect ratio is not kept
        brightness: Offset added to every 8-bit channel before resizing

    Returns:
        IngestResult with an (H, W, 3) uint8 sRGB array

    Raises:
        FileNotFoundError: If file doesn't exist
        IngestError: If file cannot be loaded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise IngestError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)
            img, has_alpha = _to_rgb(img)
            image = np.array(img, dtype=np.uint8)

    except (IOError, OSError) as e:
        raise IngestError(f"Failed to load image {path}: {e}") from e

    # Clamp at full resolution, then average down
    image = brighten(image, brightness)

    if size is not None and (image.shape[1], image.shape[0]) != tuple(size):
        logger.debug(f"Resizing {image.shape[1]}x{image.shape[0]} -> {size[0]}x{size[1]}")
        resized = Image.fromarray(image).resize(tuple(size), Image.Resampling.BOX)
        image = np.array(resized, dtype=np.uint8)

    height, width = image.shape[:2]

    return IngestResult(
        image_srgb=image,
        original_path=str(path),
        width=width,
        height=height,
        has_alpha=has_alpha
    )


def ingest_from_array(image: np.ndarray, path: str = "") -> IngestResult:
    """
    Create IngestResult from numpy array.

    Args:
        image: sRGB image (H, W), (H, W, 3) or (H, W, 4), uint8 or float in [0, 1]
        path: Optional path for reference

    Returns:
        IngestResult
    """
    image = np.asarray(image)

    if image.ndim == 2:
        # Grayscale - convert to RGB
        image = np.stack([image] * 3, axis=-1)

    if image.ndim != 3:
        raise IngestError(f"Expected 2D or 3D array, got {image.ndim}D")

    if image.dtype != np.uint8:
        image = np.clip(np.round(image.astype(np.float64) * 255.0), 0, 255).astype(np.uint8)

    if image.shape[2] == 4:
        # RGBA - composite on white
        has_alpha = True
        alpha = image[..., 3:4].astype(np.float64) / 255.0
        rgb = image[..., :3].astype(np.float64)
        image = np.round(rgb * alpha + 255.0 * (1 - alpha)).astype(np.uint8)
    elif image.shape[2] == 3:
        has_alpha = False
    else:
        raise IngestError(f"Expected 3 or 4 channels, got {image.shape[2]}")

    height, width = image.shape[:2]

    return IngestResult(
        image_srgb=image,
        original_path=path,
        width=width,
        height=height,
        has_alpha=has_alpha
    )
