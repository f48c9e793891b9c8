from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.colors as mcolors

from models.matting_model import SkinMattingModel
from models.season_classifier import ClassificationResult, SeasonClassifier
from .color_space import rgb_to_hsv, to_hex
from .feature_extraction import FeatureSet, PersonalFeatureExtractor
from .image_preprocessing import ImagePreprocessor
from .palette_generator import Palette, PaletteGenerator
from .region_sampler import Rectangle, SkinSampler, region_average


@dataclass
class PersonalColorResult:
    skin_rgb: Tuple[int, int, int]
    skin_hsv: Tuple[float, float, float]
    features: FeatureSet
    classification: ClassificationResult
    palettes: List[Palette]
    cutout: np.ndarray = field(repr=False)
    face_rect: Rectangle
    face_detected: bool
    eye_rgb: Optional[Tuple[int, int, int]] = None
    hair_rgb: Optional[Tuple[int, int, int]] = None
    face_image_path: str = ''
    image: Optional[np.ndarray] = field(default=None, repr=False)

    @property
    def r(self):
        return self.skin_rgb[0]

    @property
    def g(self):
        return self.skin_rgb[1]

    @property
    def b(self):
        return self.skin_rgb[2]

    @property
    def undertone(self):
        """Coarse Warm/Cool/Neutral label; the Golden/Rosy/Peach/Olive band is `undertone_detail`"""
        return self.classification.undertone

    @property
    def undertone_detail(self):
        return self.classification.undertone_detail

    @property
    def season(self):
        return self.classification.season

    @property
    def background_removed(self):
        return self.face_detected

    def to_dict(self):
        """JSON-friendly summary (the cutout pixels are left out)"""
        return {
            'r': self.r,
            'g': self.g,
            'b': self.b,
            'skin_hex': to_hex(*self.skin_rgb),
            'skin_hsv': list(self.skin_hsv),
            'eye_rgb': list(self.eye_rgb) if self.eye_rgb is not None else None,
            'hair_rgb': list(self.hair_rgb) if self.hair_rgb is not None else None,
            'undertone': self.undertone,
            'undertone_detail': self.undertone_detail,
            'season': self.season,
            'classification': self.classification.to_dict(),
            'features': self.features.to_dict(),
            'palettes': [palette.to_list() for palette in self.palettes],
            'face_detected': self.face_detected,
            'face_rect': [self.face_rect.left, self.face_rect.top, self.face_rect.right, self.face_rect.bottom],
            'face_image_path': self.face_image_path,
        }


class PersonalColorAnalyzer:
    """
    Runs one personal color analysis over a decoded RGBA image
    """
    def __init__(self,
                 preprocessor=None,
                 sampler=None,
                 matting_model=None,
                 feature_extractor=None,
                 classifier=None,
                 palette_generator=None):
        """
        Initialize the analyzer; every component falls back to its defaults

        Parameters:
        ----------
        preprocessor : ImagePreprocessor, optional
        sampler : SkinSampler, optional
        matting_model : SkinMattingModel, optional
        feature_extractor : PersonalFeatureExtractor, optional
        classifier : SeasonClassifier, optional
        palette_generator : PaletteGenerator, optional
        """
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.sampler = sampler or SkinSampler()
        self.matting_model = matting_model or SkinMattingModel()
        self.feature_extractor = feature_extractor or PersonalFeatureExtractor()
        self.classifier = classifier or SeasonClassifier()
        self.palette_generator = palette_generator or PaletteGenerator()

    def _validate(self, image):
        if image is None:
            raise ValueError("No image to analyze")

        image = np.asarray(image)
        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise ValueError(f"Expected an (H, W, 3|4) image, got shape {image.shape}")
        if image.shape[0] == 0 or image.shape[1] == 0:
            raise ValueError("Image is empty")

        image = image.astype(np.uint8, copy=False)
        if image.shape[2] == 3:
            alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
            image = np.concatenate([image, alpha], axis=2)
        return image

    def analyze(self, image, face=None):
        """
        Analyze the personal colors of a photo

        Parameters:
        ----------
        image : numpy.ndarray
            (H, W, 3|4) uint8 image in RGB(A) order
        face : FaceDescriptor, optional
            Primary detected face; the center-crop path is used when omitted

        Returns:
        -------
        result : PersonalColorResult
        """
        image = self._validate(image)
        height, width = image.shape[:2]

        face_rect = None
        if face is not None:
            face_rect = self.preprocessor.face_rectangle(face, width, height)
            if face_rect.area == 0:
                print("Face region is empty, using the center region")
                face_rect = None

        eye_rgb = hair_rgb = None

        if face_rect is not None:
            crop = self.preprocessor.crop(image, face_rect)
            skin_rgb = self.sampler.sample_skin_color(crop)
            skin_hsv = rgb_to_hsv(*skin_rgb)

            cutout = self.matting_model.remove_background(crop, skin_hsv)

            center = (face.center_x - face_rect.left, face.center_y - face_rect.top)
            features, eye_rgb, hair_rgb = self.feature_extractor.extract_features(
                crop, skin_rgb, center, face.eye_distance)
        else:
            face_rect = self.preprocessor.center_rectangle(width, height)
            cutout = self.preprocessor.crop(image, face_rect)
            skin_rgb = region_average(cutout)
            skin_hsv = rgb_to_hsv(*skin_rgb)
            features = self.feature_extractor.analyze_skin_only(skin_rgb)

        classification = self.classifier.classify(skin_rgb, features)
        palettes = self.palette_generator.generate(skin_rgb, classification, features)

        return PersonalColorResult(
            skin_rgb=skin_rgb,
            skin_hsv=skin_hsv,
            features=features,
            classification=classification,
            palettes=palettes,
            cutout=cutout,
            face_rect=face_rect,
            face_detected=eye_rgb is not None,
            eye_rgb=eye_rgb,
            hair_rgb=hair_rgb,
            image=image,
        )

    def visualize_results(self, result):
        """
        Visualize the analysis results

        Parameters:
        ----------
        result : PersonalColorResult
            Result of `analyze`

        Returns:
        -------
        fig : matplotlib.figure.Figure
        """
        fig = plt.figure(figsize=(16, 10))

        ax = fig.add_subplot(2, 3, 1)
        ax.imshow(result.image[..., :3])
        rect = result.face_rect
        ax.add_patch(plt.Rectangle((rect.left, rect.top), rect.width, rect.height,
                                   fill=False, edgecolor='yellow', linewidth=2))
        ax.set_title('Original Image')
        ax.axis('off')

        ax = fig.add_subplot(2, 3, 2)
        ax.imshow(result.cutout)
        ax.set_title('Face Cutout' if result.background_removed else 'Center Region')
        ax.axis('off')

        ax = fig.add_subplot(2, 3, 3)
        ax.imshow(result.cutout[..., 3], cmap='gray', vmin=0, vmax=255)
        ax.set_title('Alpha Mask')
        ax.axis('off')

        # Sampled colors
        ax = fig.add_subplot(2, 3, 4)
        swatches = [('Skin', result.skin_rgb)]
        if result.eye_rgb is not None:
            swatches += [('Eyes', result.eye_rgb), ('Hair', result.hair_rgb)]
        for i, (label, rgb) in enumerate(swatches):
            ax.add_patch(plt.Rectangle((i, 0), 1, 1, color=np.array(rgb) / 255.0))
            ax.text(i + 0.5, -0.15, f"{label}\n{to_hex(*rgb)}", ha='center', va='top', fontsize=10)
        ax.set_xlim(0, len(swatches))
        ax.set_ylim(-0.6, 1)
        ax.axis('off')
        ax.set_title('Sampled Colors')

        # Classification summary
        ax = fig.add_subplot(2, 3, 5)
        ax.axis('off')
        c = result.classification
        text = (f"Undertone: {c.undertone} ({c.undertone_detail})\n"
                f"Season: {c.season_full}\n"
                f"Contrast: {result.features.contrast_level}\n"
                f"Intensity: {result.features.intensity_level}")
        ax.text(0.5, 0.5, text, ha='center', va='center', fontsize=12,
                bbox={'facecolor': 'white', 'alpha': 0.8, 'pad': 10})
        ax.set_title('Analysis Results')

        # Palette grid
        ax = fig.add_subplot(2, 3, 6)
        for row, palette in enumerate(result.palettes):
            for col, hex_color in enumerate(palette.colors):
                ax.add_patch(plt.Rectangle((col, -row - 1), 1, 1, color=mcolors.to_rgb(hex_color)))
            ax.text(-0.2, -row - 0.5, palette.name, ha='right', va='center', fontsize=7)
        ax.set_xlim(-4, len(result.palettes[0].colors))
        ax.set_ylim(-len(result.palettes), 0)
        ax.axis('off')
        ax.set_title('Palettes')

        fig.tight_layout()
        return fig
