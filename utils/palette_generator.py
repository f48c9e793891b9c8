from dataclasses import dataclass

from .color_space import clamp01, hsv_to_hex, rgb_to_hsv, rotate_hue
from .feature_extraction import (CONTRAST_HIGH, CONTRAST_LOW, CONTRAST_MEDIUM,
                                 DEFAULT_FEATURES, INTENSITY_BRIGHT)

PALETTE_COUNT = 15
PALETTE_SIZE = 5


@dataclass(frozen=True)
class Palette:
    name: str
    colors: tuple

    def __post_init__(self):
        if len(self.colors) != PALETTE_SIZE:
            raise ValueError(f"Palette '{self.name}' needs {PALETTE_SIZE} colors, got {len(self.colors)}")

    def to_list(self):
        """[name, hex1, ..., hex5]"""
        return [self.name] + list(self.colors)


# Fixed palettes per season family, three each
SEASON_FAMILY_PALETTES = {
    'Spring': (
        ('Spring Brights', ('#FF6F61', '#FFD166', '#06D6A0', '#FFB07C', '#40C4AA')),
        ('Spring Pastels', ('#F7CAC9', '#FBE7A1', '#C9E4CA', '#FFDAB9', '#B5EAD7')),
        ('Spring Neutrals', ('#F5E6CC', '#E2C799', '#C8A165', '#A67B5B', '#8B6F47')),
    ),
    'Summer': (
        ('Summer Pastels', ('#B7D7EA', '#E9BFD1', '#CFE9E3', '#D8D2EE', '#F0E6F2')),
        ('Summer Cools', ('#7AA0C4', '#9B93C7', '#8FB1AA', '#A3B9D2', '#C08CA8')),
        ('Summer Neutrals', ('#E6E1DA', '#B8B4AE', '#8F9AA6', '#6E7A86', '#4B5563')),
    ),
    'Autumn': (
        ('Autumn Earth', ('#B5651D', '#C68642', '#8B5E3C', '#A47149', '#6B4226')),
        ('Autumn Spice', ('#C0392B', '#D35400', '#B7950B', '#7D6608', '#6E2C00')),
        ('Autumn Forest', ('#556B2F', '#6B8E23', '#8F9779', '#4A5D23', '#2F4F2F')),
    ),
    'Winter': (
        ('Winter Jewels', ('#0F52BA', '#50C878', '#9B111E', '#6A0DAD', '#008080')),
        ('Winter Icy', ('#E8F4F8', '#DDE7F0', '#E6E0F8', '#F0F8FF', '#D6EAF8')),
        ('Winter Contrast', ('#000000', '#FFFFFF', '#1B365D', '#C8102E', '#4B0082')),
    ),
}

CONTRAST_PALETTES = {
    CONTRAST_HIGH: ('High Contrast', ('#000000', '#FFFFFF', '#B22222', '#000080', '#FFD700')),
    CONTRAST_MEDIUM: ('Medium Contrast', ('#2F4F4F', '#D2B48C', '#8B4513', '#708090', '#F5DEB3')),
    CONTRAST_LOW: ('Low Contrast', ('#C8B8A8', '#D8C8B8', '#B8A898', '#E0D4C8', '#A89888')),
}

UNDERTONE_PALETTES = {
    'Warm': ('Warm Tones', ((12.0, 0.60, 0.88), (25.0, 0.65, 0.82), (35.0, 0.70, 0.75),
                            (45.0, 0.60, 0.78), (55.0, 0.50, 0.80))),
    'Cool': ('Cool Tones', ((200.0, 0.45, 0.80), (230.0, 0.50, 0.75), (260.0, 0.48, 0.72),
                            (290.0, 0.42, 0.78), (320.0, 0.38, 0.82))),
    'Neutral': ('Earth & Jewel', ((10.0, 0.55, 0.58), (35.0, 0.55, 0.55), (75.0, 0.48, 0.45),
                                  (215.0, 0.82, 0.50), (350.0, 0.80, 0.52))),
}


def _swatches(h, offsets):
    """Hex colors for (hue rotation, saturation, value) triples relative to hue h"""
    return tuple(hsv_to_hex(rotate_hue(h, dh), s, v) for dh, s, v in offsets)


class PaletteGenerator:
    """
    Builds the ordered list of 15 named five-color palettes for a skin color
    """
    def color_theory_palettes(self, h, s, v):
        """Monochromatic, analogous, complementary, triadic, split-complementary and tetradic"""
        def lift(ds, dv):
            return clamp01(s + ds), clamp01(v + dv)

        mono = [(0, *lift(-0.35, 0.25)), (0, *lift(-0.18, 0.12)), (0, s, v),
                (0, *lift(0.18, -0.12)), (0, *lift(0.30, -0.22))]
        analogous = [(-60, s, v), (-30, s, v), (0, s, v), (30, s, v), (60, s, v)]
        complementary = [(0, *lift(0.0, 0.10)), (0, s, v), (0, *lift(0.15, -0.15)),
                         (180, s, v), (180, *lift(-0.15, 0.10))]
        triadic = [(0, s, v), (120, s, v), (240, s, v),
                   (120, *lift(-0.20, 0.10)), (240, *lift(-0.20, 0.10))]
        split = [(0, s, v), (150, s, v), (210, s, v),
                 (150, *lift(-0.15, 0.12)), (210, *lift(-0.15, 0.12))]
        tetradic = [(0, s, v), (90, s, v), (180, s, v), (270, s, v), (0, *lift(-0.25, 0.15))]

        return [
            Palette('Monochromatic', _swatches(h, mono)),
            Palette('Analogous', _swatches(h, analogous)),
            Palette('Complementary', _swatches(h, complementary)),
            Palette('Triadic', _swatches(h, triadic)),
            Palette('Split-Complementary', _swatches(h, split)),
            Palette('Tetradic', _swatches(h, tetradic)),
        ]

    def season_palettes(self, season):
        """Fixed palettes of the season family named in the season label"""
        for family, palettes in SEASON_FAMILY_PALETTES.items():
            if family in season:
                return [Palette(name, colors) for name, colors in palettes]
        raise ValueError(f"Unknown season '{season}'")

    def depth_palettes(self, h):
        light = [(-60, 0.22, 0.94), (-30, 0.25, 0.92), (0, 0.28, 0.96), (30, 0.25, 0.93), (60, 0.22, 0.95)]
        deep = [(-60, 0.68, 0.35), (-30, 0.72, 0.42), (0, 0.75, 0.38), (30, 0.70, 0.45), (60, 0.65, 0.32)]
        return [Palette('Light & Pastel', _swatches(h, light)),
                Palette('Deep & Rich', _swatches(h, deep))]

    def undertone_palette(self, undertone):
        name, swatches = UNDERTONE_PALETTES[undertone]
        return Palette(name, tuple(hsv_to_hex(*swatch) for swatch in swatches))

    def contrast_palette(self, contrast_level):
        name, colors = CONTRAST_PALETTES[contrast_level]
        return Palette(name, colors)

    def intensity_palette(self, h, intensity_level):
        if intensity_level == INTENSITY_BRIGHT:
            vivid = [(-60, 0.80, 0.85), (-30, 0.85, 0.88), (0, 0.88, 0.90), (30, 0.82, 0.87), (60, 0.78, 0.84)]
            return Palette('Clear & Vivid', _swatches(h, vivid))
        muted = [(-60, 0.18, 0.65), (-30, 0.20, 0.60), (0, 0.22, 0.68), (30, 0.20, 0.63), (60, 0.18, 0.70)]
        return Palette('Muted & Soft', _swatches(h, muted))

    def neutral_palette(self, h):
        ramp = [(0, 0.04, 0.96), (0, 0.07, 0.78), (0, 0.09, 0.56), (0, 0.11, 0.32), (0, 0.13, 0.12)]
        return Palette('Neutral Harmony', _swatches(h, ramp))

    def generate(self, rgb, classification, features=None):
        """
        Generate all palettes for a skin color

        Parameters:
        ----------
        rgb : tuple
            (r, g, b) skin color; its HSV is the base of the hue-driven palettes
        classification : ClassificationResult
            Undertone and season of the skin color
        features : FeatureSet, optional
            Contrast and intensity levels (default: Medium contrast, Soft)

        Returns:
        -------
        palettes : list of Palette
            Exactly 15 palettes in presentation order
        """
        if features is None:
            features = DEFAULT_FEATURES

        h, s, v = rgb_to_hsv(*rgb)

        palettes = self.color_theory_palettes(h, s, v)
        palettes += self.season_palettes(classification.season)
        palettes += self.depth_palettes(h)
        palettes.append(self.undertone_palette(classification.undertone))
        palettes.append(self.contrast_palette(features.contrast_level))
        palettes.append(self.intensity_palette(h, features.intensity_level))
        palettes.append(self.neutral_palette(h))
        return palettes
