from dataclasses import dataclass, asdict

import numpy as np

from .color_space import luminance, rgb_to_hsv
from .region_sampler import Rectangle, region_average

CONTRAST_LOW = 'Low'
CONTRAST_MEDIUM = 'Medium'
CONTRAST_HIGH = 'High'

INTENSITY_BRIGHT = 'Bright'
INTENSITY_SOFT = 'Soft'


@dataclass(frozen=True)
class FeatureSet:
    contrast_level: str
    intensity_level: str
    saturation: float
    brightness: float

    def to_dict(self):
        return asdict(self)


DEFAULT_FEATURES = FeatureSet(CONTRAST_MEDIUM, INTENSITY_SOFT, 0.0, 0.0)


def luminance_contrast(rgb1, rgb2):
    """Absolute luminance difference between two RGB triples"""
    return abs(luminance(rgb1) - luminance(rgb2))


class PersonalFeatureExtractor:
    """
    Derives contrast and intensity levels from skin, eye and hair colors
    """
    def __init__(self,
                 high_contrast=70.0,
                 medium_contrast=40.0,
                 bright_saturation=0.4,
                 bright_value=0.6,
                 region_stride=3):
        """
        Initialize the feature extractor

        Parameters:
        ----------
        high_contrast : float
            Mean luminance contrast above which contrast is High
        medium_contrast : float
            Mean luminance contrast above which contrast is Medium
        bright_saturation : float
            Mean saturation above which coloring can be Bright
        bright_value : float
            Mean value above which coloring can be Bright
        region_stride : int
            Sampling stride for eye and hair regions
        """
        if medium_contrast > high_contrast:
            raise ValueError("medium_contrast must not exceed high_contrast")

        self.high_contrast = high_contrast
        self.medium_contrast = medium_contrast
        self.bright_saturation = bright_saturation
        self.bright_value = bright_value
        self.region_stride = region_stride

    def contrast_level(self, contrast):
        if contrast > self.high_contrast:
            return CONTRAST_HIGH
        if contrast > self.medium_contrast:
            return CONTRAST_MEDIUM
        return CONTRAST_LOW

    def analyze_features(self, skin_rgb, eye_rgb, hair_rgb):
        """
        Build a FeatureSet from skin, eye and hair colors

        Parameters:
        ----------
        skin_rgb, eye_rgb, hair_rgb : tuple
            (r, g, b) colors sampled from the face

        Returns:
        -------
        features : FeatureSet
        """
        contrast = np.mean([
            luminance_contrast(skin_rgb, eye_rgb),
            luminance_contrast(skin_rgb, hair_rgb),
            luminance_contrast(eye_rgb, hair_rgb),
        ])

        hsvs = [rgb_to_hsv(*rgb) for rgb in (skin_rgb, eye_rgb, hair_rgb)]
        saturation = float(np.mean([hsv[1] for hsv in hsvs]))
        brightness = float(np.mean([hsv[2] for hsv in hsvs]))

        if saturation > self.bright_saturation and brightness > self.bright_value:
            intensity = INTENSITY_BRIGHT
        else:
            intensity = INTENSITY_SOFT

        return FeatureSet(self.contrast_level(contrast), intensity, saturation, brightness)

    def analyze_skin_only(self, skin_rgb):
        """Reduced FeatureSet used when no eye or hair colors are available"""
        _, saturation, brightness = rgb_to_hsv(*skin_rgb)
        intensity = INTENSITY_BRIGHT if saturation > self.bright_saturation else INTENSITY_SOFT
        return FeatureSet(CONTRAST_MEDIUM, intensity, saturation, brightness)

    # Sampling regions, in face-crop coordinates

    def eye_rectangles(self, center, eye_distance):
        """Square boxes around both eyes"""
        cx, cy = center
        half = 0.25 * eye_distance
        rects = []
        for ex in (cx - eye_distance / 2.0, cx + eye_distance / 2.0):
            rects.append(Rectangle(int(ex - half), int(cy - half), int(ex + half), int(cy + half)))
        return rects

    def hair_rectangle(self, center, eye_distance):
        """Band from the top of the crop down to 1.6 eye distances above the eye line"""
        cx, cy = center
        return Rectangle(int(cx - eye_distance), 0, int(cx + eye_distance), int(cy - 1.6 * eye_distance))

    def sample_eye_color(self, pixels, center, eye_distance):
        colors = [region_average(pixels, rect, stride=self.region_stride)
                  for rect in self.eye_rectangles(center, eye_distance)]
        return tuple(int(c) for c in np.mean(colors, axis=0))

    def sample_hair_color(self, pixels, center, eye_distance):
        return region_average(pixels, self.hair_rectangle(center, eye_distance), stride=self.region_stride)

    def extract_features(self, pixels, skin_rgb, center, eye_distance):
        """
        Sample eye and hair colors from a face crop and analyze them with the skin color

        Parameters:
        ----------
        pixels : numpy.ndarray
            (H, W, 3|4) face crop in RGB(A) order
        skin_rgb : tuple
            Sampled skin color
        center : tuple
            Eye midpoint (x, y) in crop coordinates
        eye_distance : float
            Distance between the eyes in pixels

        Returns:
        -------
        features : FeatureSet
        eye_rgb : tuple
        hair_rgb : tuple
        """
        eye_rgb = self.sample_eye_color(pixels, center, eye_distance)
        hair_rgb = self.sample_hair_color(pixels, center, eye_distance)
        return self.analyze_features(skin_rgb, eye_rgb, hair_rgb), eye_rgb, hair_rgb
