"""Block grid and per-block color sampling."""
from typing import Iterator, Tuple

import numpy as np

from penhatch.color_space import srgb8_to_lab
from penhatch.types import ImageArray, PerceptualColor, PixelBlock, SamplingError


def iter_blocks(
    width: int,
    height: int,
    blocks_x: int,
    blocks_y: int
) -> Iterator[Tuple[int, int, PixelBlock]]:
    """
    Tile an image into a ``blocks_x`` by ``blocks_y`` grid.

    Block edges are ``floor(i * width / blocks_x)`` so the grid covers the
    image exactly; neighbouring blocks differ in size by at most one pixel.
    Yields in raster order, x outer and y inner.

    Yields:
        (grid_x, grid_y, block)
    """
    for gx in range(blocks_x):
        x0 = gx * width // blocks_x
        x1 = (gx + 1) * width // blocks_x
        for gy in range(blocks_y):
            y0 = gy * height // blocks_y
            y1 = (gy + 1) * height // blocks_y
            yield gx, gy, PixelBlock(x=x0, y=y0, width=x1 - x0, height=y1 - y0)


def sample_block(image: ImageArray, block: PixelBlock) -> PerceptualColor:
    """
    Representative LAB color of a block.

    Each pixel is converted from 8-bit sRGB to LAB and the three LAB channels
    are averaged independently. Averaging in LAB rather than in linear light
    is intentional; output depends on it.

    Args:
        image: (H, W, 3) uint8 sRGB image
        block: Region to sample

    Returns:
        Mean LAB color

    Raises:
        SamplingError: If the block is empty or not inside the image
    """
    if block.width <= 0 or block.height <= 0:
        raise SamplingError(f"Cannot sample a zero-area block: {block}")

    height, width = image.shape[:2]
    if (block.x < 0 or block.y < 0
            or block.x + block.width > width or block.y + block.height > height):
        raise SamplingError(f"Block {block} lies outside the {width}x{height} image")

    pixels = image[block.y:block.y + block.height, block.x:block.x + block.width, :3]
    lab = srgb8_to_lab(pixels.reshape(-1, 3))
    return lab.mean(axis=0)
