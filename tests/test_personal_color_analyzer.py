import json

import numpy as np
import pytest
from matplotlib.figure import Figure
import matplotlib.pyplot as plt

from models.season_classifier import SEASONS
from utils.feature_extraction import CONTRAST_MEDIUM
from utils.image_preprocessing import FaceDescriptor
from utils.palette_generator import PALETTE_COUNT
from utils.personal_color_analyzer import PersonalColorAnalyzer
from utils.region_sampler import Rectangle

from conftest import HAIR_RGB, SKIN_RGB

FACE = FaceDescriptor(150, 150, 50)


@pytest.fixture
def analyzer():
    return PersonalColorAnalyzer()


def test_center_region_without_face(analyzer, synthetic_face):
    result = analyzer.analyze(synthetic_face)

    assert result.face_detected is False
    assert result.background_removed is False
    assert result.eye_rgb is None and result.hair_rgb is None
    assert result.face_rect == Rectangle(75, 58, 225, 208)
    assert np.array_equal(result.cutout, synthetic_face[58:208, 75:225])
    assert (result.cutout[..., 3] == 255).all()
    assert result.features.contrast_level == CONTRAST_MEDIUM
    assert result.season in {season.name for season in SEASONS}
    assert len(result.palettes) == PALETTE_COUNT


def test_face_path_removes_background(analyzer, synthetic_face):
    result = analyzer.analyze(synthetic_face, FACE)

    assert result.face_detected is True
    assert result.face_rect == Rectangle(65, 50, 235, 288)
    assert result.cutout.shape == (238, 170, 4)
    assert result.cutout[0, 0, 3] == 0
    assert result.cutout[119, 85, 3] == 255
    assert result.hair_rgb == HAIR_RGB
    assert sum(result.eye_rgb) < sum(SKIN_RGB)
    assert len(result.palettes) == PALETTE_COUNT


def test_face_outside_image_uses_center_region(analyzer, synthetic_face):
    result = analyzer.analyze(synthetic_face, FaceDescriptor(900, 900, 50))
    assert result.face_detected is False
    assert result.face_rect == Rectangle(75, 58, 225, 208)


def test_uniform_skin_is_sampled_exactly(analyzer, skin_image):
    result = analyzer.analyze(skin_image, FaceDescriptor(60, 70, 20))
    assert result.skin_rgb == SKIN_RGB
    assert (result.r, result.g, result.b) == SKIN_RGB


def test_analysis_is_deterministic(analyzer, synthetic_face):
    first = analyzer.analyze(synthetic_face, FACE)
    second = PersonalColorAnalyzer().analyze(synthetic_face, FACE)
    assert first.skin_rgb == second.skin_rgb
    assert first.classification == second.classification
    assert first.palettes == second.palettes
    assert np.array_equal(first.cutout, second.cutout)


def test_input_is_not_modified(analyzer, synthetic_face):
    original = synthetic_face.copy()
    analyzer.analyze(synthetic_face, FACE)
    assert np.array_equal(synthetic_face, original)


def test_rgb_input_is_accepted(analyzer, synthetic_face):
    rgba = analyzer.analyze(synthetic_face)
    rgb = analyzer.analyze(synthetic_face[..., :3])
    assert rgb.skin_rgb == rgba.skin_rgb
    assert rgb.cutout.shape[2] == 4


@pytest.mark.parametrize('image', [
    None,
    np.zeros((0, 10, 4), dtype=np.uint8),
    np.zeros((10, 10), dtype=np.uint8),
    np.zeros((10, 10, 2), dtype=np.uint8),
])
def test_invalid_images_raise(analyzer, image):
    with pytest.raises(ValueError):
        analyzer.analyze(image)


def test_to_dict_is_json_serializable(analyzer, synthetic_face):
    result = analyzer.analyze(synthetic_face, FACE)
    data = json.loads(json.dumps(result.to_dict()))

    assert data['season'] == result.season
    assert data['undertone'] == result.undertone
    assert len(data['palettes']) == PALETTE_COUNT
    assert len(data['palettes'][0]) == 6
    assert data['face_rect'] == [65, 50, 235, 288]
    assert data['hair_rgb'] == list(HAIR_RGB)


def test_visualize_results_returns_figure(analyzer, synthetic_face):
    for face in (None, FACE):
        fig = analyzer.visualize_results(analyzer.analyze(synthetic_face, face))
        assert isinstance(fig, Figure)
        assert len(fig.axes) == 6
        plt.close(fig)


def test_undertone_detail_is_exposed(analyzer, synthetic_face):
    result = analyzer.analyze(synthetic_face, FACE)
    data = result.to_dict()

    assert result.undertone in ('Warm', 'Cool', 'Neutral')
    assert result.undertone_detail == result.classification.undertone_detail
    assert data['undertone_detail'] == result.undertone_detail
