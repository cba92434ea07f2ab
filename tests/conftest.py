"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from penhatch.config import ENV_VARS
from penhatch.palette import BLUE, RED


def solid_image(rgb, width: int = 20, height: int = 20) -> np.ndarray:
    """Uniform (H, W, 3) uint8 image."""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :] = rgb
    return image


@pytest.fixture
def red_ink_image():
    """Image filled with the Red ink's own swatch color."""
    return solid_image(RED.srgb)


@pytest.fixture
def white_image():
    """Pure white image."""
    return solid_image((255, 255, 255))


@pytest.fixture
def red_blue_image():
    """Left half Red ink, right half Blue ink."""
    image = solid_image(RED.srgb, width=20, height=10)
    image[:, 10:] = BLUE.srgb
    return image


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No penhatch variables in the environment and no .env in reach of cwd."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
