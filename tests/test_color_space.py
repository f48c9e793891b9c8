import numpy as np
import pytest

from utils.color_space import (hsv_to_hex, hsv_to_rgb, hue_distance, rgb_image_to_hsv,
                               rgb_to_hsv, rotate_hue, to_hex)


@pytest.mark.parametrize('rgb', [
    (0, 0, 0), (255, 255, 255), (255, 0, 0), (12, 200, 99),
    (230, 190, 170), (128, 128, 127), (1, 2, 254), (250, 10, 240),
])
def test_hsv_round_trip_within_one(rgb):
    back = hsv_to_rgb(*rgb_to_hsv(*rgb))
    assert all(abs(a - b) <= 1 for a, b in zip(rgb, back))


def test_rgb_to_hsv_primaries():
    assert rgb_to_hsv(255, 0, 0) == pytest.approx((0.0, 1.0, 1.0))
    assert rgb_to_hsv(0, 255, 0)[0] == pytest.approx(120.0)
    assert rgb_to_hsv(0, 0, 255)[0] == pytest.approx(240.0)


def test_rgb_to_hsv_gray_has_no_saturation():
    h, s, v = rgb_to_hsv(128, 128, 128)
    assert s == 0.0
    assert v == pytest.approx(128 / 255.0)


def test_inputs_are_clamped():
    assert rgb_to_hsv(300, -20, 0) == rgb_to_hsv(255, 0, 0)
    assert hsv_to_rgb(0, 1.5, 2.0) == (255, 0, 0)
    assert hsv_to_rgb(360, 1, 1) == (255, 0, 0)


def test_hue_distance_is_circular():
    assert hue_distance(40, 40) == 0
    assert hue_distance(10, 350) == pytest.approx(20)
    assert hue_distance(350, 10) == pytest.approx(20)
    assert hue_distance(0, 180) == pytest.approx(180)
    assert np.allclose(hue_distance(np.array([0.0, 90.0, 359.0]), 1.0), [1.0, 89.0, 2.0])


def test_rotate_hue_wraps():
    assert rotate_hue(350, 20) == pytest.approx(10)
    assert rotate_hue(10, -30) == pytest.approx(340)
    assert rotate_hue(0, 360) == 0
    assert 0 <= rotate_hue(-1e-20, 0) < 360


def test_to_hex_uppercase_and_padded():
    assert to_hex(255, 0, 16) == '#FF0010'
    assert to_hex(10, 171, 205) == '#0AABCD'
    assert to_hex(300, -5, 0) == '#FF0000'


def test_hsv_to_hex_clamps():
    assert hsv_to_hex(0, 1.4, -0.2) == '#000000'
    assert hsv_to_hex(120, 1.0, 1.0) == '#00FF00'


def test_image_conversion_matches_scalar():
    pixels = np.array([[[230, 190, 170, 255], [40, 180, 60, 0]]], dtype=np.uint8)
    hsv = rgb_image_to_hsv(pixels)
    assert hsv.shape == (1, 2, 3)
    for i, rgb in enumerate([(230, 190, 170), (40, 180, 60)]):
        assert tuple(hsv[0, i]) == pytest.approx(rgb_to_hsv(*rgb))
