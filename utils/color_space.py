import numpy as np
from skimage import color

# Neutral skin color returned whenever a sampling region has no pixels
NEUTRAL_RGB = (210, 180, 160)


def clamp01(value):
    """Clamp a float to the [0, 1] range"""
    return max(0.0, min(1.0, float(value)))


def clamp_channel(value):
    """Clamp a color channel to the [0, 255] range"""
    return int(max(0, min(255, round(value))))


def rgb_to_hsv(r, g, b):
    """
    Convert an RGB triple to HSV

    Parameters:
    ----------
    r, g, b : int
        Channel values in [0, 255] (clamped if outside)

    Returns:
    -------
    hsv : tuple
        (hue in degrees [0, 360), saturation [0, 1], value [0, 1])
    """
    rgb = np.array([[[clamp_channel(r), clamp_channel(g), clamp_channel(b)]]], dtype=np.float64) / 255.0
    h, s, v = color.rgb2hsv(rgb)[0, 0]
    return (float(h) * 360.0) % 360.0, float(s), float(v)


def hsv_to_rgb(h, s, v):
    """
    Convert an HSV triple back to RGB

    Parameters:
    ----------
    h : float
        Hue in degrees (wrapped into [0, 360))
    s, v : float
        Saturation and value (clamped to [0, 1])

    Returns:
    -------
    rgb : tuple
        (r, g, b) integers in [0, 255]
    """
    hsv = np.array([[[rotate_hue(h, 0) / 360.0, clamp01(s), clamp01(v)]]], dtype=np.float64)
    rgb = color.hsv2rgb(hsv)[0, 0]
    return tuple(clamp_channel(c * 255.0) for c in rgb)


def rgb_image_to_hsv(pixels):
    """
    Vectorized RGB to HSV conversion for a whole pixel buffer

    Parameters:
    ----------
    pixels : numpy.ndarray
        (H, W, 3) or (H, W, 4) uint8 buffer in RGB(A) order; alpha is ignored

    Returns:
    -------
    hsv : numpy.ndarray
        (H, W, 3) float array, hue in degrees, saturation and value in [0, 1]
    """
    rgb = pixels[..., :3].astype(np.float64) / 255.0
    hsv = color.rgb2hsv(rgb)
    hsv[..., 0] = (hsv[..., 0] * 360.0) % 360.0
    return hsv


def hue_distance(h1, h2):
    """Shorter arc between two hues, in [0, 180]"""
    d = np.abs(np.asarray(h1, dtype=np.float64) - h2) % 360.0
    d = np.where(d > 180.0, 360.0 - d, d)
    if d.ndim == 0:
        return float(d)
    return d


def rotate_hue(h, degrees):
    """Rotate a hue and wrap it into [0, 360)"""
    r = (float(h) + float(degrees)) % 360.0
    # float modulo can land exactly on 360 for tiny negative inputs
    return 0.0 if r >= 360.0 else r


def to_hex(r, g, b):
    """Format an RGB triple as an uppercase #RRGGBB string"""
    return "#{:02X}{:02X}{:02X}".format(clamp_channel(r), clamp_channel(g), clamp_channel(b))


def hsv_to_hex(h, s, v):
    """Clamp saturation/value, convert to RGB and format as #RRGGBB"""
    return to_hex(*hsv_to_rgb(h, clamp01(s), clamp01(v)))


def luminance(rgb):
    """Rec. 709 relative luminance of an RGB triple (0-255 scale)"""
    r, g, b = rgb
    return 0.2126 * r + 0.7152 * g + 0.0722 * b
