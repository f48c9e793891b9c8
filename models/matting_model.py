import numpy as np

from utils.color_space import hue_distance, rgb_image_to_hsv

# Alpha values below/above these (0-255 scale) are snapped to 0/255
FRINGE_CUTOFF = 10
OPAQUE_CUTOFF = 245


def elliptic_radius(width, height, center_y_ratio=0.48, axis_ratios=(0.46, 0.50)):
    """
    Normalized elliptical distance of every pixel from the face center

    Parameters:
    ----------
    width, height : int
        Buffer dimensions
    center_y_ratio : float
        Vertical position of the ellipse center as a fraction of height
    axis_ratios : tuple
        Horizontal and vertical semi-axes as fractions of width and height

    Returns:
    -------
    radius : numpy.ndarray
        (height, width) float array, 1.0 on the ellipse boundary
    """
    cx = width / 2.0
    cy = height * center_y_ratio
    rx = width * axis_ratios[0]
    ry = height * axis_ratios[1]

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    dx = (xs - cx) / rx
    dy = (ys - cy) / ry
    return np.sqrt(dx * dx + dy * dy)


def build_trimap(radius, inner=0.70, outer=1.15):
    """
    Pass 1: split the crop into definite foreground (1), definite
    background (0) and undetermined (NaN) zones
    """
    trimap = np.full(radius.shape, np.nan, dtype=np.float64)
    trimap[radius <= inner] = 1.0
    trimap[radius >= outer] = 0.0
    return trimap


def skin_tolerances(skin_ref):
    """Hue/saturation/value tolerances scaled by the skin reference"""
    _, ref_s, ref_v = skin_ref
    hue_tol = 28.0 + ref_s * 12.0
    sat_tol = 0.22 + ref_v * 0.10
    val_tol = 0.25 + (1.0 - ref_v) * 0.10
    return hue_tol, sat_tol, val_tol


def skin_score(hsv, skin_ref):
    """
    Gaussian similarity of HSV pixels to the skin reference, in [0, 1]

    Parameters:
    ----------
    hsv : numpy.ndarray
        (..., 3) HSV values, hue in degrees
    skin_ref : tuple
        (h, s, v) skin reference

    Returns:
    -------
    score : numpy.ndarray
        Product of the per-channel similarities
    """
    ref_h, ref_s, ref_v = skin_ref
    hue_tol, sat_tol, val_tol = skin_tolerances(skin_ref)

    d_h = hue_distance(hsv[..., 0], ref_h)
    d_s = np.abs(hsv[..., 1] - ref_s)
    d_v = np.abs(hsv[..., 2] - ref_v)

    score_h = np.exp(-(d_h * d_h) / (2.0 * hue_tol * hue_tol))
    score_s = np.exp(-(d_s * d_s) / (2.0 * sat_tol * sat_tol))
    score_v = np.exp(-(d_v * d_v) / (2.0 * val_tol * val_tol))
    return score_h * score_s * score_v


def elliptic_weight(radius, inner=0.70, outer=1.15):
    """Cosine falloff: 1 at the inner boundary, 0 at the outer boundary"""
    t = np.clip((radius - inner) / (outer - inner), 0.0, 1.0)
    return 0.5 * (1.0 + np.cos(np.pi * t))


def score_uncertain(pixels, trimap, radius, skin_ref, inner=0.70, outer=1.15):
    """
    Pass 2: resolve undetermined trimap pixels

    Raw alpha of an undetermined pixel is its skin color score times its
    elliptic spatial weight. Determined pixels are copied unchanged.

    Returns:
    -------
    alpha : numpy.ndarray
        New (H, W) float array with no undetermined values left
    """
    alpha = trimap.copy()
    uncertain = np.isnan(trimap)
    if not uncertain.any():
        return alpha

    hsv = rgb_image_to_hsv(pixels[uncertain][np.newaxis])[0]
    alpha[uncertain] = skin_score(hsv, skin_ref) * elliptic_weight(radius[uncertain], inner, outer)
    return alpha


def _sliding_mean(values, radius, axis):
    """Mean over a [i - radius, i + radius] window, truncated at the edges"""
    values = np.moveaxis(values, axis, -1)
    n = values.shape[-1]

    # prefix sums; each window sum is a difference of two entries
    prefix = np.zeros(values.shape[:-1] + (n + 1,), dtype=np.float64)
    prefix[..., 1:] = np.cumsum(values, axis=-1)

    idx = np.arange(n)
    hi = np.minimum(idx + radius + 1, n)
    lo = np.maximum(idx - radius, 0)
    means = (prefix[..., hi] - prefix[..., lo]) / (hi - lo)
    return np.moveaxis(means, -1, axis)


def box_blur_alpha(alpha, radius, iterations=3):
    """
    Pass 3: separable box blur, repeated to approximate a Gaussian

    Parameters:
    ----------
    alpha : numpy.ndarray
        (H, W) float alpha grid
    radius : int
        Half window size in pixels
    iterations : int
        Number of horizontal + vertical passes

    Returns:
    -------
    blurred : numpy.ndarray
        New (H, W) float array
    """
    blurred = np.asarray(alpha, dtype=np.float64)
    for _ in range(iterations):
        blurred = _sliding_mean(blurred, radius, axis=1)
        blurred = _sliding_mean(blurred, radius, axis=0)
    return blurred


def s_curve(t):
    """Smoothstep t^2 * (3 - 2t) on values clamped to [0, 1]"""
    t = np.clip(t, 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def finalize_alpha(alpha):
    """
    Pass 4 (mask part): shape the blurred alpha and quantize to 0-255 with
    dead zones at both ends
    """
    shaped = np.floor(s_curve(alpha) * 255.0 + 0.5).astype(np.int32)
    shaped[shaped < FRINGE_CUTOFF] = 0
    shaped[shaped > OPAQUE_CUTOFF] = 255
    return shaped.astype(np.uint8)


def apply_alpha(pixels, alpha_mask):
    """Return a new RGBA buffer with the RGB of `pixels` and the given alpha"""
    height, width = pixels.shape[:2]
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[..., :3] = pixels[..., :3]
    out[..., 3] = alpha_mask
    return out


class SkinMattingModel:
    """
    Model-free alpha matting of a centered face crop.

    The crop is partitioned into a trimap by an ellipse, the uncertain ring is
    scored against the sampled skin tone, and the resulting mask is feathered
    with an iterated box blur before being written into the alpha channel.
    """
    def __init__(self,
                 inner_radius=0.70,
                 outer_radius=1.15,
                 blur_iterations=3,
                 min_blur_radius=2,
                 blur_divisor=28,
                 center_y_ratio=0.48,
                 axis_ratios=(0.46, 0.50)):
        """
        Initialize the matting model

        Parameters:
        ----------
        inner_radius : float
            Normalized elliptic radius inside which pixels are foreground
        outer_radius : float
            Normalized elliptic radius beyond which pixels are background
        blur_iterations : int
            Box blur iterations in the smoothing pass
        min_blur_radius : int
            Lower bound for the blur radius
        blur_divisor : int
            Blur radius is min(width, height) // blur_divisor
        center_y_ratio : float
            Vertical ellipse center as a fraction of the crop height
        axis_ratios : tuple
            Ellipse semi-axes as fractions of the crop width and height
        """
        if inner_radius >= outer_radius:
            raise ValueError(f"inner_radius ({inner_radius}) must be smaller than outer_radius ({outer_radius})")

        self.inner_radius = inner_radius
        self.outer_radius = outer_radius
        self.blur_iterations = blur_iterations
        self.min_blur_radius = min_blur_radius
        self.blur_divisor = blur_divisor
        self.center_y_ratio = center_y_ratio
        self.axis_ratios = axis_ratios

    def blur_radius(self, width, height):
        return max(self.min_blur_radius, min(width, height) // self.blur_divisor)

    def radius_map(self, width, height):
        return elliptic_radius(width, height, self.center_y_ratio, self.axis_ratios)

    def predict(self, pixels, skin_ref):
        """
        Compute the 0-255 alpha mask of a face crop

        Parameters:
        ----------
        pixels : numpy.ndarray
            (H, W, 3|4) uint8 face crop in RGB(A) order
        skin_ref : tuple
            (h, s, v) reference skin tone

        Returns:
        -------
        alpha_mask : numpy.ndarray
            (H, W) uint8 alpha mask
        """
        height, width = pixels.shape[:2]
        if width == 0 or height == 0:
            raise ValueError("Cannot matte an empty image")

        radius = self.radius_map(width, height)
        trimap = build_trimap(radius, self.inner_radius, self.outer_radius)
        raw = score_uncertain(pixels, trimap, radius, skin_ref, self.inner_radius, self.outer_radius)
        blurred = box_blur_alpha(raw, self.blur_radius(width, height), self.blur_iterations)
        return finalize_alpha(blurred)

    def remove_background(self, pixels, skin_ref):
        """
        Cut the face out of its background

        Returns a new RGBA buffer of the same size; RGB channels are copied
        unchanged and the alpha channel holds the matte.
        """
        return apply_alpha(pixels, self.predict(pixels, skin_ref))
