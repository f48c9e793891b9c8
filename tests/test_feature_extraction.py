import pytest

from utils.feature_extraction import (CONTRAST_HIGH, CONTRAST_LOW, CONTRAST_MEDIUM, INTENSITY_BRIGHT,
                                      INTENSITY_SOFT, PersonalFeatureExtractor, luminance_contrast)
from utils.region_sampler import Rectangle

from conftest import EYE_RGB, HAIR_RGB, SKIN_RGB


@pytest.fixture
def extractor():
    return PersonalFeatureExtractor()


def test_luminance_contrast_is_symmetric():
    assert luminance_contrast((255, 255, 255), (0, 0, 0)) == pytest.approx(255.0)
    assert luminance_contrast((10, 20, 30), (40, 50, 60)) == luminance_contrast((40, 50, 60), (10, 20, 30))


def test_dark_eyes_and_hair_give_high_contrast(extractor):
    features = extractor.analyze_features((230, 190, 170), (40, 30, 20), (20, 15, 10))
    assert features.contrast_level == CONTRAST_HIGH


def test_identical_colors_give_low_contrast(extractor):
    features = extractor.analyze_features(SKIN_RGB, SKIN_RGB, SKIN_RGB)
    assert features.contrast_level == CONTRAST_LOW


def test_medium_contrast_band(extractor):
    # luminance gaps of 50, 50 and 0 average to 33.3; 60, 60, 0 average to 40 (not above)
    assert extractor.contrast_level(33.3) == CONTRAST_LOW
    assert extractor.contrast_level(40.0) == CONTRAST_LOW
    assert extractor.contrast_level(40.1) == CONTRAST_MEDIUM
    assert extractor.contrast_level(70.0) == CONTRAST_MEDIUM
    assert extractor.contrast_level(70.1) == CONTRAST_HIGH


def test_saturated_bright_colors_are_bright(extractor):
    color = (250, 100, 50)
    features = extractor.analyze_features(color, color, color)
    assert features.intensity_level == INTENSITY_BRIGHT
    assert features.saturation == pytest.approx(0.8)
    assert features.brightness == pytest.approx(250 / 255.0)


def test_dark_saturated_colors_are_soft(extractor):
    features = extractor.analyze_features((230, 190, 170), (40, 30, 20), (20, 15, 10))
    assert features.saturation > 0.4
    assert features.brightness < 0.6
    assert features.intensity_level == INTENSITY_SOFT


def test_skin_only_features(extractor):
    muted = extractor.analyze_skin_only((230, 190, 170))
    assert muted.contrast_level == CONTRAST_MEDIUM
    assert muted.intensity_level == INTENSITY_SOFT

    vivid = extractor.analyze_skin_only((220, 120, 80))
    assert vivid.contrast_level == CONTRAST_MEDIUM
    assert vivid.intensity_level == INTENSITY_BRIGHT


def test_sampling_regions(extractor):
    eyes = extractor.eye_rectangles((100, 80), 40)
    assert eyes == [Rectangle(70, 70, 90, 90), Rectangle(110, 70, 130, 90)]
    assert extractor.hair_rectangle((100, 80), 40) == Rectangle(60, 0, 140, 16)


def test_extract_features_from_face_crop(extractor, synthetic_face):
    crop = synthetic_face[50:290, 65:235]
    center = (150 - 65, 150 - 50)
    features, eye_rgb, hair_rgb = extractor.extract_features(crop, SKIN_RGB, center, 50)

    assert hair_rgb == HAIR_RGB
    assert sum(eye_rgb) < sum(SKIN_RGB)
    assert features.contrast_level in (CONTRAST_MEDIUM, CONTRAST_HIGH)


def test_hair_region_outside_crop_uses_neutral(extractor, synthetic_face):
    crop = synthetic_face[100:290, 65:235]
    _, _, hair_rgb = extractor.extract_features(crop, SKIN_RGB, (85, 50), 50)
    assert hair_rgb == (210, 180, 160)


def test_invalid_thresholds():
    with pytest.raises(ValueError):
        PersonalFeatureExtractor(high_contrast=30, medium_contrast=40)
