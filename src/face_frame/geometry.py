"""Geometry value types shared by the crop mapper and the fit evaluator.

Three coordinate spaces are in play and must never be mixed:

- screen space: logical units of the viewfinder (``ScreenGeometry``,
  screen-space ``FrameSpec``)
- photo space: pixels of a captured photo (``PhotoGeometry``, ``CropRegion``)
- detector space: pixels of the image handed to the face detector
  (``BoundingBox``, detector-space ``FrameSpec``)
"""

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class ScreenGeometry:
    """Logical display dimensions."""

    width: float
    height: float

    @property
    def aspect(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class FrameSpec:
    """Guide frame size and position.

    ``left``/``top`` are only meaningful for screen-space frames; detector-space
    frames sit at the origin of the detector image.
    """

    width: float
    height: float
    left: float = 0.0
    top: float = 0.0

    @classmethod
    def centered(
        cls,
        screen: ScreenGeometry,
        width: float,
        height: Optional[float] = None,
    ) -> "FrameSpec":
        """Build a screen-space frame centered on ``screen``.

        Args:
            screen: Screen the frame is drawn on
            width: Frame width in screen units
            height: Frame height (square frame if None)

        Returns:
            FrameSpec with ``left``/``top`` set so the frame is centered
        """
        if height is None:
            height = width
        return cls(
            width=width,
            height=height,
            left=(screen.width - width) / 2,
            top=(screen.height - height) / 2,
        )

    @classmethod
    def detector(cls, width: float, height: Optional[float] = None) -> "FrameSpec":
        """Build a detector-space frame anchored at the origin."""
        if height is None:
            height = width
        return cls(width=width, height=height)

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class PhotoGeometry:
    """Pixel dimensions of a captured photo."""

    width: int
    height: int

    @classmethod
    def from_image(cls, image: np.ndarray) -> "PhotoGeometry":
        """Read dimensions from an image array (H, W[, C])."""
        return cls(width=int(image.shape[1]), height=int(image.shape[0]))

    @property
    def aspect(self) -> float:
        return self.width / self.height


def _is_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False


@dataclass(frozen=True)
class BoundingBox:
    """Detected face box in detector space.

    Detectors may hand back partial results, so every field is optional.
    Use ``is_complete`` before doing arithmetic on a box.
    """

    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BoundingBox":
        """Build a box from a detector result dict; missing keys stay None."""
        return cls(
            x=data.get("x"),
            y=data.get("y"),
            width=data.get("width"),
            height=data.get("height"),
        )

    @property
    def is_complete(self) -> bool:
        """True when all four fields are finite numbers."""
        return all(_is_number(v) for v in (self.x, self.y, self.width, self.height))

    @property
    def center(self) -> Tuple[float, float]:
        """Center point of the box."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class CropRegion:
    """Pixel rectangle inside a photo.

    ``clamped`` is set when the requested rectangle had to be shrunk to stay
    within the photo; it does not take part in equality.
    """

    x: int
    y: int
    width: int
    height: int
    clamped: bool = field(default=False, compare=False)

    @property
    def is_empty(self) -> bool:
        """True for a zero-area region (no usable crop)."""
        return self.width <= 0 or self.height <= 0

    def contained_in(self, photo: PhotoGeometry) -> bool:
        """Check that the region lies within ``photo``."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.x + self.width <= photo.width
            and self.y + self.height <= photo.height
        )

    def as_slices(self) -> Tuple[slice, slice]:
        """Return (rows, cols) slices for indexing an image array."""
        return (
            slice(self.y, self.y + self.height),
            slice(self.x, self.x + self.width),
        )
