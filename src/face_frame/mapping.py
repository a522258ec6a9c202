"""Guide frame to photo coordinate mapping.

The live preview shows the camera image cover-fitted to the screen: it is
scaled uniformly until both screen axes are filled and the overflow on one axis
is cropped evenly from both sides. ``compute_crop_region`` undoes that fit to
find which photo pixels were visible inside the guide frame, and
``cover_fit`` renders a preview the same way so the two always agree.
"""

import logging
import math
from typing import Tuple

import cv2
import numpy as np

from .geometry import CropRegion, FrameSpec, PhotoGeometry, ScreenGeometry

logger = logging.getLogger(__name__)


def _valid_dimensions(*values: float) -> bool:
    return all(math.isfinite(v) and v > 0 for v in values)


def preview_transform(
    photo: PhotoGeometry,
    screen: ScreenGeometry,
) -> Tuple[float, float, float]:
    """Describe how the cover-fitted preview maps onto the photo.

    Args:
        photo: Captured photo dimensions
        screen: Screen the preview fills

    Returns:
        Tuple of (scale, cropped_x, cropped_y): photo pixels per screen unit
        and the photo pixels hidden on each side of the preview
    """
    screen_aspect = screen.width / screen.height
    photo_aspect = photo.width / photo.height

    if photo_aspect > screen_aspect:
        # Height fills the screen, width overflows
        scale = photo.height / screen.height
        effective_width = photo.width * (screen.height / photo.height)
        return scale, (effective_width - screen.width) / 2 * scale, 0.0
    if photo_aspect < screen_aspect:
        # Width fills the screen, height overflows
        scale = photo.width / screen.width
        effective_height = photo.height * (screen.width / photo.width)
        return scale, 0.0, (effective_height - screen.height) / 2 * scale
    return photo.width / screen.width, 0.0, 0.0


def compute_crop_region(
    photo: PhotoGeometry,
    screen: ScreenGeometry,
    frame: FrameSpec,
) -> CropRegion:
    """Compute the photo pixels that were visible inside the guide frame.

    Args:
        photo: Captured photo dimensions in pixels
        screen: Screen dimensions in logical units
        frame: Screen-space guide frame

    Returns:
        CropRegion clamped to the photo bounds. An empty region means no
        usable crop exists for these inputs.
    """
    if not _valid_dimensions(photo.width, photo.height, screen.width, screen.height):
        logger.warning(
            f"Invalid geometry for crop: photo={photo.width}x{photo.height}, "
            f"screen={screen.width}x{screen.height}"
        )
        return CropRegion(0, 0, 0, 0, clamped=True)
    if not all(math.isfinite(v) for v in (frame.left, frame.top, frame.width, frame.height)):
        logger.warning(f"Invalid guide frame for crop: {frame}")
        return CropRegion(0, 0, 0, 0, clamped=True)

    scale, cropped_x, cropped_y = preview_transform(photo, screen)

    scaled = (
        frame.left * scale + cropped_x,
        frame.top * scale + cropped_y,
        frame.width * scale,
        frame.height * scale,
    )
    if not all(math.isfinite(v) for v in scaled):
        logger.warning(f"Guide frame overflows photo coordinates: {frame}")
        return CropRegion(0, 0, 0, 0, clamped=True)

    crop_x, crop_y, crop_width, crop_height = (max(0, math.floor(v)) for v in scaled)

    clamped = (
        crop_x + crop_width > photo.width
        or crop_y + crop_height > photo.height
    )

    crop_x = min(crop_x, photo.width)
    crop_y = min(crop_y, photo.height)
    crop_width = min(crop_width, photo.width - crop_x)
    crop_height = min(crop_height, photo.height - crop_y)

    if clamped:
        logger.warning(
            f"Crop region adjusted to fit photo bounds: x={crop_x}, y={crop_y}, "
            f"w={crop_width}, h={crop_height}, photo={photo.width}x{photo.height}"
        )

    return CropRegion(
        x=crop_x,
        y=crop_y,
        width=crop_width,
        height=crop_height,
        clamped=clamped,
    )


def cover_fit(image: np.ndarray, screen: ScreenGeometry) -> np.ndarray:
    """Scale and center-crop ``image`` so it exactly fills ``screen``."""
    target_w = int(round(screen.width))
    target_h = int(round(screen.height))
    img_h, img_w = image.shape[:2]

    scale = max(target_w / img_w, target_h / img_h)
    resized_w = max(target_w, int(math.ceil(img_w * scale)))
    resized_h = max(target_h, int(math.ceil(img_h * scale)))
    resized = cv2.resize(image, (resized_w, resized_h), interpolation=cv2.INTER_AREA)

    off_x = (resized_w - target_w) // 2
    off_y = (resized_h - target_h) // 2
    return resized[off_y:off_y + target_h, off_x:off_x + target_w]
