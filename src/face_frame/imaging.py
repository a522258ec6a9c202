"""Image cropping and gallery persistence."""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

import cv2

from .errors import CropFailure, SaveFailure
from .geometry import CropRegion, PhotoGeometry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ImageCropper:
    """Crops an image file to an exact pixel region."""

    def __init__(self, output_dir: Optional[PathLike] = None, jpeg_quality: int = 100):
        """Initialize cropper.

        Args:
            output_dir: Where cropped files are written (system temp dir if None)
            jpeg_quality: JPEG quality for the output (0-100)
        """
        self.output_dir = Path(output_dir) if output_dir else Path(tempfile.gettempdir())
        self.jpeg_quality = jpeg_quality

    def crop(self, path: PathLike, region: CropRegion) -> Path:
        """Write a new image containing exactly ``region`` of ``path``.

        Args:
            path: Source image file
            region: Pixel rectangle inside the source image

        Returns:
            Path of the cropped image

        Raises:
            CropFailure: If the image cannot be read, the region is empty or
                out of bounds, or the output cannot be written
        """
        path = Path(path)
        image = cv2.imread(str(path))
        if image is None:
            raise CropFailure(f"Could not load image: {path}")

        photo = PhotoGeometry.from_image(image)
        if region.is_empty:
            raise CropFailure(f"Empty crop region for {photo.width}x{photo.height} photo")
        if not region.contained_in(photo):
            raise CropFailure(
                f"Crop region {region.x},{region.y} {region.width}x{region.height} "
                f"outside {photo.width}x{photo.height} photo"
            )

        rows, cols = region.as_slices()
        cropped = image[rows, cols]

        self.output_dir.mkdir(parents=True, exist_ok=True)
        output = self.output_dir / f"{path.stem}_crop.jpg"
        if not cv2.imwrite(str(output), cropped, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality]):
            raise CropFailure(f"Could not write cropped image: {output}")

        logger.info(f"Cropped image: {output} ({cropped.shape[1]}x{cropped.shape[0]})")
        return output


class GalleryWriter:
    """Saves images into named albums under a gallery directory."""

    def __init__(self, root: PathLike):
        self.root = Path(root)

    def is_writable(self) -> bool:
        """Check whether images can be stored under the gallery root."""
        existing = self.root
        while not existing.exists():
            if existing.parent == existing:
                return False
            existing = existing.parent
        return existing.is_dir() and os.access(existing, os.W_OK)

    def save(self, path: PathLike, album: str) -> Path:
        """Copy ``path`` into ``album``.

        Args:
            path: Image file to store
            album: Album (sub-directory) name

        Returns:
            Path of the stored image

        Raises:
            SaveFailure: If the album cannot be created or the copy fails
        """
        path = Path(path)
        album_dir = self.root / album
        try:
            album_dir.mkdir(parents=True, exist_ok=True)
            destination = album_dir / path.name
            shutil.copy2(path, destination)
        except OSError as e:
            raise SaveFailure(f"Could not save {path.name} to {album_dir}: {e}") from e

        logger.info(f"Saved to gallery: {destination}")
        return destination
