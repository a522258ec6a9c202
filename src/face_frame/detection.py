"""Face detection collaborators.

Detectors return boxes in the pixel space of the image they were given
(detector space). The fit evaluator only ever looks at the first box.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .geometry import BoundingBox


class BaseFaceDetector(ABC):
    """Abstract base class for face detectors."""

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[BoundingBox]:
        """Detect faces in an image.

        Args:
            image: BGR image as numpy array

        Returns:
            List of BoundingBox objects in image pixel space
        """
        pass


class HaarCascadeDetector(BaseFaceDetector):
    """Face detector using OpenCV Haar Cascades."""

    def __init__(
        self,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_size: Tuple[int, int] = (30, 30),
    ):
        """Initialize Haar Cascade detector.

        Args:
            scale_factor: Scale factor for multi-scale detection
            min_neighbors: Minimum neighbors for detection
            min_size: Minimum face size to detect
        """
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = tuple(min_size)

        cascade_path = cv2.data.haarcascades + "haarcascade_frontalface_default.xml"  # type: ignore
        self.cascade = cv2.CascadeClassifier(cascade_path)

        if self.cascade.empty():
            raise RuntimeError(f"Failed to load cascade from {cascade_path}")

    def detect(self, image: np.ndarray) -> List[BoundingBox]:
        """Detect faces using Haar Cascade, largest first."""
        if len(image.shape) == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image

        faces = self.cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
        )

        detected = [
            BoundingBox(x=int(x), y=int(y), width=int(w), height=int(h))
            for (x, y, w, h) in faces
        ]
        detected.sort(key=lambda box: box.area, reverse=True)
        return detected


class FaceDetector:
    """Face detector facade with configurable backend."""

    BACKENDS = {
        "haar_cascade": HaarCascadeDetector,
    }

    def __init__(self, backend: str = "haar_cascade", **kwargs):
        """Initialize face detector with specified backend.

        Args:
            backend: Detection backend to use
            **kwargs: Additional arguments for the detector
        """
        if backend not in self.BACKENDS:
            raise ValueError(
                f"Unknown backend: {backend}. "
                f"Available: {list(self.BACKENDS.keys())}"
            )

        self.backend_name = backend
        self.detector = self.BACKENDS[backend](**kwargs)

    def detect(self, image: np.ndarray) -> List[BoundingBox]:
        """Detect faces in an image."""
        return self.detector.detect(image)

    @classmethod
    def available_backends(cls) -> List[str]:
        """Return list of available detection backends."""
        return list(cls.BACKENDS.keys())


def first_face(faces: Sequence[BoundingBox]) -> Optional[BoundingBox]:
    """Return the first detected face, or None if there are none."""
    return faces[0] if faces else None
