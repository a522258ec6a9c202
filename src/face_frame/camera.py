"""Camera access for the viewfinder preview and full-resolution captures."""

import logging
import tempfile
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Generator, Optional, Union

import cv2
import numpy as np

from .errors import CaptureFailure, NoCameraDeviceError
from .geometry import PhotoGeometry

logger = logging.getLogger(__name__)

PHOTO_JPEG_QUALITY = 100


class CameraBackend(Enum):
    """Available camera backends."""
    OPENCV = "opencv"
    PICAMERA = "picamera"


@dataclass
class CameraConfig:
    """Camera configuration."""
    width: int = 1280
    height: int = 720
    fps: int = 30
    backend: CameraBackend = CameraBackend.OPENCV
    device: Union[int, str] = 0
    auto_reconnect: bool = True
    reconnect_delay: float = 5.0


@dataclass
class Frame:
    """One image read from the camera."""
    image: np.ndarray
    timestamp: float
    number: int


@dataclass
class CapturedPhoto:
    """A full-resolution photo written to disk."""
    path: Path
    geometry: PhotoGeometry


class Camera:
    """OpenCV or PiCamera2 device used for both preview frames and photos.

    The device is opened lazily on first read. Reads are serialized so a
    capture running on a worker thread can share the camera with the preview
    loop.
    """

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()

        self._device = None
        self._frames_read = 0
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._device is not None

    def open(self) -> bool:
        """Open the configured device.

        Returns:
            True if the device is available
        """
        with self._lock:
            if self._device is None:
                self._device = self._connect()
            return self._device is not None

    def _connect(self):
        if self.config.backend == CameraBackend.PICAMERA:
            return self._connect_picamera()
        return self._connect_opencv()

    def _connect_opencv(self):
        device = self.config.device
        if isinstance(device, str) and device.isdigit():
            device = int(device)

        capture = cv2.VideoCapture(device)
        if not capture.isOpened():
            logger.error(f"Failed to open camera device {device}")
            capture.release()
            return None

        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        capture.set(cv2.CAP_PROP_FPS, self.config.fps)
        capture.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        logger.info(f"Opened OpenCV camera: {device}")
        return capture

    def _connect_picamera(self):
        try:
            from picamera2 import Picamera2
        except ImportError:
            logger.error("picamera2 not installed. Install with: pip install face-frame[raspberry_pi]")
            return None

        try:
            picam = Picamera2()
            picam.configure(picam.create_still_configuration(
                main={"size": (self.config.width, self.config.height), "format": "RGB888"}
            ))
            picam.start()
        except RuntimeError as e:
            logger.error(f"Error opening PiCamera: {e}")
            return None

        logger.info("Opened PiCamera2")
        return picam

    def _disconnect(self) -> None:
        if self._device is None:
            return
        if self.config.backend == CameraBackend.PICAMERA:
            self._device.stop()
            self._device.close()
        else:
            self._device.release()
        self._device = None

    def close(self) -> None:
        """Release the device."""
        with self._lock:
            self._disconnect()
        logger.info("Camera closed")

    def _grab(self) -> Optional[np.ndarray]:
        if self.config.backend == CameraBackend.PICAMERA:
            return cv2.cvtColor(self._device.capture_array(), cv2.COLOR_RGB2BGR)
        ok, image = self._device.read()
        return image if ok else None

    def read(self) -> Optional[Frame]:
        """Read one frame, opening the device if needed.

        Returns:
            Frame, or None if the device is unavailable or returned nothing
        """
        if not self.open():
            return None

        with self._lock:
            image = self._grab()
            if image is None:
                if self.config.auto_reconnect:
                    self._reconnect()
                return None
            self._frames_read += 1
            return Frame(image=image, timestamp=time.time(), number=self._frames_read)

    def _reconnect(self) -> None:
        """Drop and reopen the device (lock held)."""
        logger.warning("Camera disconnected, attempting reconnect...")
        self._disconnect()
        time.sleep(self.config.reconnect_delay)
        self._device = self._connect()
        if self._device is not None:
            logger.info("Camera reconnected successfully")

    def take_photo(self, directory: Optional[Path] = None) -> CapturedPhoto:
        """Capture a single full-resolution photo and write it to disk.

        Args:
            directory: Where to write the photo (system temp dir if None)

        Returns:
            CapturedPhoto with the file path and pixel dimensions

        Raises:
            NoCameraDeviceError: If the camera cannot be opened
            CaptureFailure: If no frame could be read or written
        """
        if not self.open():
            raise NoCameraDeviceError(f"Could not open camera {self.config.device}")

        frame = self.read()
        if frame is None:
            raise CaptureFailure("Camera returned no frame")

        directory = Path(directory) if directory else Path(tempfile.gettempdir())
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"photo_{int(frame.timestamp * 1000)}_{frame.number}.jpg"
        if not cv2.imwrite(str(path), frame.image, [cv2.IMWRITE_JPEG_QUALITY, PHOTO_JPEG_QUALITY]):
            raise CaptureFailure(f"Could not write photo to {path}")

        geometry = PhotoGeometry.from_image(frame.image)
        logger.info(f"Photo captured: {path} ({geometry.width}x{geometry.height})")
        return CapturedPhoto(path=path, geometry=geometry)

    def stream(self, max_retries: int = 5) -> Generator[Frame, None, None]:
        """Yield frames until the camera fails ``max_retries`` reads in a row.

        Without ``auto_reconnect`` the first failed read ends the stream.
        """
        failures = 0
        while True:
            frame = self.read()
            if frame is not None:
                failures = 0
                yield frame
                continue

            failures += 1
            if not self.config.auto_reconnect or failures >= max_retries:
                logger.error(f"Camera stream stopped after {failures} failed read(s)")
                return
            time.sleep(0.5)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
