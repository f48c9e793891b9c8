from dataclasses import dataclass

import numpy as np

from .color_space import NEUTRAL_RGB, rgb_image_to_hsv


@dataclass(frozen=True)
class Rectangle:
    """Pixel rectangle, right/bottom exclusive"""
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self):
        return max(0, self.right - self.left)

    @property
    def height(self):
        return max(0, self.bottom - self.top)

    @property
    def area(self):
        return self.width * self.height

    def clamp(self, width, height):
        """Clamp to a width x height buffer, keeping left <= right and top <= bottom"""
        left = int(max(0, min(width, self.left)))
        top = int(max(0, min(height, self.top)))
        right = int(max(left, min(width, self.right)))
        bottom = int(max(top, min(height, self.bottom)))
        return Rectangle(left, top, right, bottom)

    def as_slices(self):
        return slice(self.top, self.bottom), slice(self.left, self.right)


def region_average(pixels, rect=None, stride=5):
    """
    Strided mean RGB over a rectangle of a pixel buffer

    Parameters:
    ----------
    pixels : numpy.ndarray
        (H, W, 3|4) uint8 buffer in RGB(A) order
    rect : Rectangle, optional
        Region to average (default: the whole buffer); clamped to the buffer
    stride : int
        Sample every `stride`-th pixel in each axis

    Returns:
    -------
    rgb : tuple
        Mean (r, g, b), or NEUTRAL_RGB when the clamped region is empty
    """
    height, width = pixels.shape[:2]
    if rect is None:
        rect = Rectangle(0, 0, width, height)
    rect = rect.clamp(width, height)

    if rect.area == 0:
        return NEUTRAL_RGB

    rows, cols = rect.as_slices()
    region = pixels[rows, cols, :3][::stride, ::stride]
    count = region.shape[0] * region.shape[1]
    mean = region.reshape(-1, 3).astype(np.int64).sum(axis=0) // count
    return tuple(int(c) for c in mean)


def is_skin_tone(hsv):
    """
    Broad skin-tone gate used for sampling

    Accepts a single (h, s, v) triple or an (..., 3) array and returns a bool
    or a boolean mask accordingly.
    """
    hsv = np.asarray(hsv, dtype=np.float64)
    h, s, v = hsv[..., 0], hsv[..., 1], hsv[..., 2]
    hue_ok = ((h >= 0) & (h <= 50)) | ((h >= 340) & (h <= 360))
    sat_ok = (s >= 0.12) & (s <= 0.78)
    val_ok = (v >= 0.18) & (v <= 0.96)
    mask = hue_ok & sat_ok & val_ok
    if mask.ndim == 0:
        return bool(mask)
    return mask


class SkinSampler:
    """
    Seeded random sampler that estimates the dominant skin color of a face crop
    """
    def __init__(self,
                 central_fraction=0.5,
                 sample_count=500,
                 seed=42,
                 min_skin_samples=50):
        """
        Initialize the skin sampler

        Parameters:
        ----------
        central_fraction : float
            Fraction of width and height (centered) that samples are drawn from
        sample_count : int
            Number of random pixel coordinates to draw
        seed : int
            Seed for the per-call random generator
        min_skin_samples : int
            Minimum number of skin-gated samples before falling back to the
            whole-buffer average
        """
        if not 0 < central_fraction <= 1:
            raise ValueError(f"central_fraction must be in (0, 1], got {central_fraction}")
        if sample_count <= 0:
            raise ValueError(f"sample_count must be positive, got {sample_count}")

        self.central_fraction = central_fraction
        self.sample_count = sample_count
        self.seed = seed
        self.min_skin_samples = min_skin_samples

    def central_rectangle(self, width, height):
        """Rectangle covering the central fraction of a width x height buffer"""
        margin = (1.0 - self.central_fraction) / 2.0
        return Rectangle(int(width * margin), int(height * margin),
                         int(width * (1.0 - margin)), int(height * (1.0 - margin)))

    def sample_skin_color(self, pixels, rng=None):
        """
        Estimate the skin color of a face crop

        Parameters:
        ----------
        pixels : numpy.ndarray
            (H, W, 3|4) uint8 face crop in RGB(A) order
        rng : numpy.random.Generator, optional
            Random source exposing `integers(low, high, size)`. A new
            generator seeded with `self.seed` is created for every call when
            omitted, so repeated calls are reproducible.

        Returns:
        -------
        rgb : tuple
            Mean (r, g, b) of the retained skin samples
        """
        height, width = pixels.shape[:2]
        rect = self.central_rectangle(width, height)

        if rect.width == 0 or rect.height == 0:
            return region_average(pixels)

        if rng is None:
            rng = np.random.default_rng(self.seed)

        xs = np.asarray(rng.integers(rect.left, rect.right, size=self.sample_count))
        ys = np.asarray(rng.integers(rect.top, rect.bottom, size=self.sample_count))

        samples = pixels[ys, xs, :3]
        skin = samples[is_skin_tone(rgb_image_to_hsv(samples[np.newaxis])[0])]

        if len(skin) < self.min_skin_samples:
            return region_average(pixels)

        mean = skin.astype(np.int64).sum(axis=0) // len(skin)
        return tuple(int(c) for c in mean)
