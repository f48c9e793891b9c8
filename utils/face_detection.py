import numpy as np
import face_recognition

from .image_preprocessing import FaceDescriptor


class FaceDetector:
    """
    Locates the primary face of a photo and reduces it to an eye midpoint and
    an inter-eye distance
    """
    def __init__(self, model='large'):
        """
        Parameters:
        ----------
        model : str
            face_recognition landmark model ('large' or 'small')
        """
        self.model = model

    def detect(self, image):
        """
        Detect the primary face

        Parameters:
        ----------
        image : numpy.ndarray
            (H, W, 3|4) uint8 image in RGB(A) order

        Returns:
        -------
        face : FaceDescriptor or None
            First detected face, or None if no face was found
        """
        rgb = np.ascontiguousarray(image[..., :3])
        landmarks = face_recognition.face_landmarks(rgb, model=self.model)

        if not landmarks:
            return None

        # Use the first face found
        points = landmarks[0]
        if 'left_eye' not in points or 'right_eye' not in points:
            return None

        left = np.mean(points['left_eye'], axis=0)
        right = np.mean(points['right_eye'], axis=0)
        center = (left + right) / 2.0
        distance = float(np.linalg.norm(right - left))

        if distance <= 0:
            return None

        return FaceDescriptor(float(center[0]), float(center[1]), distance)
