import os
from dataclasses import dataclass
from datetime import datetime

import cv2
import numpy as np

from .region_sampler import Rectangle


@dataclass(frozen=True)
class FaceDescriptor:
    """Eye midpoint and inter-eye distance of a detected face, in image pixels"""
    center_x: float
    center_y: float
    eye_distance: float


class ImagePreprocessor:
    """
    Loads photos into RGBA buffers and cuts face or fallback regions out of them
    """
    def __init__(self,
                 target_width=480,
                 face_width_ratio=3.4,
                 face_aspect=1.4,
                 face_top_ratio=0.42,
                 min_face_size=60,
                 fallback_face_size=180):
        """
        Initialize the image preprocessor

        Parameters:
        ----------
        target_width : int
            Working width images are scaled to (height follows the aspect ratio)
        face_width_ratio : float
            Face crop width as a multiple of the eye distance
        face_aspect : float
            Face crop height as a multiple of its width
        face_top_ratio : float
            Share of the crop height placed above the eye midpoint
        min_face_size : int
            Crops narrower or shorter than this are replaced by the fallback box
        fallback_face_size : int
            Side of the square box used for too-small face crops
        """
        if target_width is not None and target_width <= 0:
            raise ValueError(f"target_width must be positive, got {target_width}")

        self.target_width = target_width
        self.face_width_ratio = face_width_ratio
        self.face_aspect = face_aspect
        self.face_top_ratio = face_top_ratio
        self.min_face_size = min_face_size
        self.fallback_face_size = fallback_face_size

    def load_image(self, image_path):
        """
        Read an image file into an RGBA buffer

        Parameters:
        ----------
        image_path : str
            Path to the image, optionally prefixed with file://

        Returns:
        -------
        image : numpy.ndarray or None
            (H, W, 4) uint8 RGBA buffer, or None if the file cannot be decoded
        """
        if image_path.startswith('file://'):
            image_path = image_path[len('file://'):]

        image = cv2.imread(image_path, cv2.IMREAD_UNCHANGED)
        if image is None:
            return None

        return self.to_rgba(image)

    def to_rgba(self, image):
        """Convert a decoded OpenCV image (gray, BGR or BGRA) to RGBA"""
        if image.dtype != np.uint8:
            image = cv2.convertScaleAbs(image, alpha=255.0 / max(1, int(image.max())))

        if image.ndim == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        if image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)

    def resize(self, image):
        """Scale to the working width, preserving the aspect ratio"""
        if self.target_width is None:
            return image.copy()

        height, width = image.shape[:2]
        target_height = max(1, int(self.target_width / float(width) * height))
        return cv2.resize(image, (self.target_width, target_height), interpolation=cv2.INTER_LINEAR)

    def face_rectangle(self, face, width, height):
        """
        Crop rectangle around a detected face

        Parameters:
        ----------
        face : FaceDescriptor
            Detected face
        width, height : int
            Image dimensions

        Returns:
        -------
        rect : Rectangle
            Face crop clamped to the image; a fixed square box centered on the
            face when the proportional crop is too small
        """
        fw = face.eye_distance * self.face_width_ratio
        fh = fw * self.face_aspect

        left = max(0, int(face.center_x - fw / 2))
        top = max(0, int(face.center_y - fh * self.face_top_ratio))
        right = min(width, int(face.center_x + fw / 2))
        bottom = min(height, int(face.center_y + fh * (1.0 - self.face_top_ratio)))

        if (right - left) < self.min_face_size or (bottom - top) < self.min_face_size:
            half = self.fallback_face_size / 2
            left = max(0, int(face.center_x - half))
            top = max(0, int(face.center_y - half))
            right = min(width, int(face.center_x + half))
            bottom = min(height, int(face.center_y + half))

        return Rectangle(left, top, right, bottom).clamp(width, height)

    def center_rectangle(self, width, height):
        """Square crop centered at (width/2, height/3) with side min(width, height)/2"""
        cx = width // 2
        cy = height // 3
        size = min(width, height) // 2

        left = max(0, cx - size // 2)
        top = max(0, cy - size // 2)
        right = min(width, cx + size // 2)
        bottom = min(height, cy + size // 2)
        return Rectangle(left, top, right, bottom)

    def crop(self, image, rect):
        """Independent copy of the pixels inside `rect`"""
        rows, cols = rect.clamp(image.shape[1], image.shape[0]).as_slices()
        return image[rows, cols].copy()

    def save_png(self, image, output_dir, prefix):
        """
        Save an RGBA buffer as a lossless PNG

        Parameters:
        ----------
        image : numpy.ndarray
            (H, W, 4) RGBA buffer
        output_dir : str
            Directory to write into (created if missing)
        prefix : str
            File name prefix, e.g. 'face' or 'center_region'

        Returns:
        -------
        str
            file:// URI of the written file, or "" on failure
        """
        try:
            os.makedirs(output_dir, exist_ok=True)
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            path = os.path.abspath(os.path.join(output_dir, f"{prefix}_{timestamp}.png"))

            # several saves within one second get a counter suffix
            counter = 1
            while os.path.exists(path):
                path = os.path.abspath(os.path.join(output_dir, f"{prefix}_{timestamp}_{counter}.png"))
                counter += 1

            if not cv2.imwrite(path, cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA)):
                print(f"Could not write image: {path}")
                return ""
            return 'file://' + path
        except (OSError, cv2.error) as e:
            print(f"Error saving image: {e}")
            return ""
