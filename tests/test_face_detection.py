import numpy as np
import pytest

face_recognition = pytest.importorskip('face_recognition')

from utils.face_detection import FaceDetector  # noqa: E402
from utils.image_preprocessing import FaceDescriptor  # noqa: E402


def test_detect_uses_eye_landmarks(monkeypatch):
    landmarks = [{
        'left_eye': [(90, 100), (110, 100), (100, 96), (100, 104)],
        'right_eye': [(170, 100), (190, 100), (180, 96), (180, 104)],
        'nose_tip': [(140, 140)],
    }]
    monkeypatch.setattr(face_recognition, 'face_landmarks', lambda image, model: landmarks)

    face = FaceDetector().detect(np.zeros((300, 300, 4), dtype=np.uint8))
    assert face == FaceDescriptor(140.0, 100.0, 80.0)


def test_detect_without_faces(monkeypatch):
    monkeypatch.setattr(face_recognition, 'face_landmarks', lambda image, model: [])
    assert FaceDetector().detect(np.zeros((50, 50, 3), dtype=np.uint8)) is None
