"""Tests for color conversions."""
import numpy as np
import pytest

from penhatch.color_space import (
    WHITE_LAB,
    linear_to_lab,
    linear_to_srgb,
    linear_to_srgb8,
    mix_lab,
    perceptual_distance,
    srgb8_to_lab,
    srgb_to_linear,
)


class TestTransferFunctions:

    def test_round_trip(self):
        values = np.linspace(0, 1, 11)
        np.testing.assert_allclose(linear_to_srgb(srgb_to_linear(values)), values, atol=1e-12)

    def test_known_values(self):
        assert srgb_to_linear(0.0) == 0.0
        assert srgb_to_linear(1.0) == pytest.approx(1.0)
        assert srgb_to_linear(0.5) == pytest.approx(0.21404, abs=1e-4)

    def test_srgb8_rounds_and_clips(self):
        assert linear_to_srgb8([0.0, 1.0, 2.0]) == (0, 255, 255)
        assert linear_to_srgb8([-1.0, 0.0, 0.0]) == (0, 0, 0)


class TestLab:

    def test_white_and_black(self):
        np.testing.assert_allclose(WHITE_LAB, [100.0, 0.0, 0.0], atol=1e-3)
        np.testing.assert_allclose(linear_to_lab([0.0, 0.0, 0.0]), [0.0, 0.0, 0.0], atol=1e-9)

    def test_shape_preserved(self):
        image = np.random.default_rng(0).integers(0, 256, (4, 5, 3))
        assert srgb8_to_lab(image).shape == (4, 5, 3)

    def test_red_is_red(self):
        L, a, b = srgb8_to_lab(np.array([255, 0, 0]))
        assert L == pytest.approx(53.24, abs=0.05)
        assert a > 70
        assert b > 60


class TestDistance:

    def test_symmetric_and_non_negative(self):
        rng = np.random.default_rng(1)
        for _ in range(20):
            c1 = rng.uniform([0, -100, -100], [100, 100, 100])
            c2 = rng.uniform([0, -100, -100], [100, 100, 100])
            d12 = perceptual_distance(c1, c2)
            assert d12 >= 0
            assert d12 == perceptual_distance(c2, c1)

    def test_identity(self):
        c = np.array([42.0, -3.5, 17.25])
        assert perceptual_distance(c, c) == 0.0

    def test_euclidean(self):
        assert perceptual_distance([0, 0, 0], [3, 4, 0]) == pytest.approx(5.0)

    def test_broadcast_over_candidates(self):
        candidates = np.array([[0, 0, 0], [1, 0, 0], [0, 0, 2]], dtype=float)
        np.testing.assert_allclose(perceptual_distance(candidates, [0, 0, 0]), [0, 1, 2])


class TestMix:

    def test_endpoints_and_midpoint(self):
        a = np.array([20.0, 10.0, -10.0])
        np.testing.assert_array_equal(mix_lab(a, WHITE_LAB, 0.0), a)
        np.testing.assert_allclose(mix_lab(a, WHITE_LAB, 1.0), WHITE_LAB)
        np.testing.assert_allclose(mix_lab(a, [100, 0, 0], 0.5), [60.0, 5.0, -5.0])
