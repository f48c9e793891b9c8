from .color_space import rgb_to_hsv, hsv_to_rgb, hue_distance, rotate_hue, to_hex
from .region_sampler import Rectangle, SkinSampler, region_average, is_skin_tone
from .feature_extraction import FeatureSet, PersonalFeatureExtractor
from .image_preprocessing import FaceDescriptor, ImagePreprocessor
from .palette_generator import Palette, PaletteGenerator

__all__ = [
    'rgb_to_hsv',
    'hsv_to_rgb',
    'hue_distance',
    'rotate_hue',
    'to_hex',
    'Rectangle',
    'SkinSampler',
    'region_average',
    'is_skin_tone',
    'FeatureSet',
    'PersonalFeatureExtractor',
    'FaceDescriptor',
    'ImagePreprocessor',
    'Palette',
    'PaletteGenerator'
]
