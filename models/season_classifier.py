from dataclasses import dataclass, asdict
from typing import Callable, NamedTuple

from utils.color_space import rgb_to_hsv
from utils.feature_extraction import DEFAULT_FEATURES, INTENSITY_BRIGHT

WARM = 'Warm'
COOL = 'Cool'
NEUTRAL = 'Neutral'

LIGHT = 'Light'
MID = 'Mid'
DARK = 'Dark'

CLEAR = 'Clear'
SOFT = 'Soft'


class ChannelDiffs(NamedTuple):
    rgd: int
    gbd: int
    rbd: int

    @classmethod
    def from_rgb(cls, rgb):
        r, g, b = (int(c) for c in rgb)
        return cls(r - g, g - b, r - b)


class UndertoneRule(NamedTuple):
    detail: str
    undertone: str
    predicate: Callable[[ChannelDiffs], bool]


# First match wins; later bands overlap earlier ones
UNDERTONE_RULES = (
    UndertoneRule('Golden (intense)', WARM, lambda d: d.rgd > 35 and d.rbd > 50),
    UndertoneRule('Golden (medium)', WARM, lambda d: d.rgd > 25 and d.rbd > 35),
    UndertoneRule('Golden (mild)', WARM, lambda d: d.rgd > 20 and d.rbd > 25),
    UndertoneRule('Rosy (intense)', COOL, lambda d: d.gbd > 30 and d.rbd < 5),
    UndertoneRule('Rosy (medium)', COOL, lambda d: d.gbd > 20 and d.rbd < 10),
    UndertoneRule('Rosy (mild)', COOL, lambda d: d.gbd > 15 and d.rbd < 15),
    UndertoneRule('Neutral', NEUTRAL,
                  lambda d: abs(d.rgd) < 12 and abs(d.gbd) < 12 and abs(d.rbd) < 20),
    UndertoneRule('Peach', WARM, lambda d: d.rgd > 10 and d.rbd > 15 and d.gbd < 5),
    UndertoneRule('Olive', WARM, lambda d: d.gbd > 8 and d.rgd < 20),
    UndertoneRule('Neutral (mild)', NEUTRAL, lambda d: True),
)


@dataclass(frozen=True)
class Season:
    code: str
    name: str
    category: str
    family: str


class SeasonRule(NamedTuple):
    temperature: str
    depth: str
    clarity: str
    season: Season


SEASON_RULES = (
    SeasonRule(WARM, LIGHT, CLEAR, Season('BSP', 'Bright Spring', 'bright_spring', 'Spring')),
    SeasonRule(WARM, LIGHT, SOFT, Season('LSP', 'Light Spring', 'light_spring', 'Spring')),
    SeasonRule(WARM, MID, CLEAR, Season('WSP', 'Warm Spring', 'warm_spring', 'Spring')),
    SeasonRule(WARM, MID, SOFT, Season('SAU', 'Soft Autumn', 'soft_autumn', 'Autumn')),
    SeasonRule(WARM, DARK, CLEAR, Season('WAU', 'Warm Autumn', 'warm_autumn', 'Autumn')),
    SeasonRule(WARM, DARK, SOFT, Season('DAU', 'Deep Autumn', 'deep_autumn', 'Autumn')),
    SeasonRule(COOL, LIGHT, CLEAR, Season('BWI', 'Bright Winter', 'bright_winter', 'Winter')),
    SeasonRule(COOL, LIGHT, SOFT, Season('LSU', 'Light Summer', 'light_summer', 'Summer')),
    SeasonRule(COOL, MID, CLEAR, Season('CWI', 'Cool Winter', 'cool_winter', 'Winter')),
    SeasonRule(COOL, MID, SOFT, Season('CSU', 'Cool Summer', 'cool_summer', 'Summer')),
    SeasonRule(COOL, DARK, CLEAR, Season('DWI', 'Deep Winter', 'deep_winter', 'Winter')),
    SeasonRule(COOL, DARK, SOFT, Season('SSU', 'Soft Summer', 'soft_summer', 'Summer')),
)

SEASONS = tuple(rule.season for rule in SEASON_RULES)


@dataclass(frozen=True)
class ClassificationResult:
    undertone: str
    undertone_detail: str
    season: str
    season_full: str
    season_category: str
    season_code: str
    season_family: str
    temperature: str
    depth: str
    clarity: str

    def to_dict(self):
        return asdict(self)


def match_undertone(rgb, rules=UNDERTONE_RULES):
    """Return the first undertone rule matching an RGB color"""
    diffs = ChannelDiffs.from_rgb(rgb)
    for rule in rules:
        if rule.predicate(diffs):
            return rule
    raise ValueError(f"No undertone rule matched {tuple(rgb)}")


def match_season(temperature, depth, clarity, rules=SEASON_RULES):
    for rule in rules:
        if (rule.temperature, rule.depth, rule.clarity) == (temperature, depth, clarity):
            return rule.season
    raise ValueError(f"No season rule for ({temperature}, {depth}, {clarity})")


class SeasonClassifier:
    """
    Maps a sampled skin color and its FeatureSet to an undertone and a season
    """
    def __init__(self,
                 light_value=0.6,
                 dark_value=0.4,
                 clear_saturation=0.45,
                 neutral_warm_rbd=10):
        """
        Initialize the classifier

        Parameters:
        ----------
        light_value : float
            HSV value above which coloring is light
        dark_value : float
            HSV value below which coloring is dark
        clear_saturation : float
            Saturation above which coloring is clear
        neutral_warm_rbd : int
            R-B difference from which a neutral undertone leans warm
        """
        if dark_value > light_value:
            raise ValueError("dark_value must not exceed light_value")

        self.light_value = light_value
        self.dark_value = dark_value
        self.clear_saturation = clear_saturation
        self.neutral_warm_rbd = neutral_warm_rbd

    def temperature(self, undertone, rgb):
        if undertone == NEUTRAL:
            return WARM if ChannelDiffs.from_rgb(rgb).rbd >= self.neutral_warm_rbd else COOL
        return undertone

    def depth(self, value):
        if value > self.light_value:
            return LIGHT
        if value < self.dark_value:
            return DARK
        return MID

    def clarity(self, saturation, features):
        """Clear above the saturation threshold or for Bright intensity, otherwise Soft"""
        if saturation > self.clear_saturation or features.intensity_level == INTENSITY_BRIGHT:
            return CLEAR
        # intensity is binary, so anything not clear is soft
        return SOFT

    def classify(self, rgb, features=None):
        """
        Classify a skin color

        Parameters:
        ----------
        rgb : tuple
            (r, g, b) sampled skin color
        features : FeatureSet, optional
            Contrast/intensity features (default: Medium contrast, Soft)

        Returns:
        -------
        result : ClassificationResult
        """
        if features is None:
            features = DEFAULT_FEATURES

        undertone_rule = match_undertone(rgb)
        _, saturation, value = rgb_to_hsv(*rgb)

        temperature = self.temperature(undertone_rule.undertone, rgb)
        depth = self.depth(value)
        clarity = self.clarity(saturation, features)
        season = match_season(temperature, depth, clarity)

        return ClassificationResult(
            undertone=undertone_rule.undertone,
            undertone_detail=undertone_rule.detail,
            season=season.name,
            season_full=f"{season.name} ({temperature} · {depth} · {clarity})",
            season_category=season.category,
            season_code=season.code,
            season_family=season.family,
            temperature=temperature,
            depth=depth,
            clarity=clarity,
        )
