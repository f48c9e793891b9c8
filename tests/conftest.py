import os
import sys

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SKIN_RGB = (224, 180, 150)
BACKGROUND_RGB = (40, 180, 60)
EYE_RGB = (60, 40, 30)
HAIR_RGB = (30, 20, 15)


def uniform_image(rgb, width=120, height=160):
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., :3] = rgb
    image[..., 3] = 255
    return image


@pytest.fixture
def skin_image():
    return uniform_image(SKIN_RGB)


@pytest.fixture
def noisy_image():
    rng = np.random.default_rng(0)
    image = rng.integers(0, 256, size=(60, 80, 4), dtype=np.uint8)
    image[..., 3] = 255
    return image


@pytest.fixture
def synthetic_face():
    """Skin ellipse with eyes and a block of hair on a saturated green background, 300x400"""
    width, height = 300, 400
    image = uniform_image(BACKGROUND_RGB, width, height)
    ys, xs = np.mgrid[0:height, 0:width]

    face = ((xs - 150) / 70.0) ** 2 + ((ys - 160) / 95.0) ** 2 <= 1.0
    image[face, :3] = SKIN_RGB

    image[40:90, 90:210, :3] = HAIR_RGB

    for ex in (125, 175):
        eye = (xs - ex) ** 2 + (ys - 150) ** 2 <= 8 ** 2
        image[eye, :3] = EYE_RGB

    return image
