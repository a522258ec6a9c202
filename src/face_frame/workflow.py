"""Capture and detection workflows.

These tie the camera, detector, cropper and gallery collaborators to the pure
crop mapping and fit evaluation. Collaborator failures are caught here and
turned into display messages; they never propagate to the caller, except for
a missing camera which ends the session.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

from .camera import Camera, CapturedPhoto
from .detection import BaseFaceDetector, first_face
from .display import InstructionDisplay
from .errors import (
    CaptureFailure,
    CropFailure,
    NoCameraDeviceError,
    PermissionDeniedError,
    SaveFailure,
    WorkflowError,
)
from .fit import DEFAULT_POLICY, FitPolicy, Instruction, evaluate_fit
from .geometry import CropRegion, FrameSpec, ScreenGeometry
from .imaging import GalleryWriter, ImageCropper
from .mapping import compute_crop_region

logger = logging.getLogger(__name__)


@dataclass
class PermissionStatus:
    """Result of a permission check."""
    camera: bool
    storage: bool
    error: str = ""

    @property
    def granted(self) -> bool:
        return self.camera and self.storage

    def check(self) -> None:
        """Raise PermissionDeniedError unless both permissions are granted."""
        if not self.granted:
            raise PermissionDeniedError(
                self.error or "Camera and storage permissions are required"
            )


def request_permissions(camera: Camera, gallery: GalleryWriter) -> PermissionStatus:
    """Check camera and storage access.

    Safe to call again after the user fixes access.

    Args:
        camera: Camera to open
        gallery: Gallery the photos will be saved to

    Returns:
        PermissionStatus with the first problem described in ``error``
    """
    camera_ok = camera.open()
    storage_ok = gallery.is_writable()

    if not camera_ok:
        error = "Camera permission denied"
    elif not storage_ok:
        error = "Storage permission denied"
    else:
        error = ""

    if error:
        logger.warning(error)
    return PermissionStatus(camera=camera_ok, storage=storage_ok, error=error)


class FitMonitor:
    """Per-frame face fit evaluation.

    ``process`` is meant to be called from the camera callback for every
    frame; it keeps no state besides what the display does for change
    detection.
    """

    def __init__(
        self,
        detector: BaseFaceDetector,
        display: InstructionDisplay,
        frame: FrameSpec,
        policy: FitPolicy = DEFAULT_POLICY,
    ):
        """Initialize monitor.

        Args:
            detector: Face detector (or FaceDetector facade)
            display: Display receiving instructions
            frame: Detector-space guide frame
            policy: Fit tolerances
        """
        self.detector = detector
        self.display = display
        self.frame = frame
        self.policy = policy

    def evaluate(self, image: np.ndarray) -> Instruction:
        """Detect and evaluate without touching the display."""
        try:
            faces = self.detector.detect(image)
        except Exception as e:
            logger.error(f"Face detection failed: {e}")
            return Instruction.DETECTION_ERROR
        return evaluate_fit(first_face(faces), self.frame, self.policy)

    def process(self, image: np.ndarray) -> Instruction:
        """Evaluate ``image`` and push the instruction to the display."""
        instruction = self.evaluate(image)
        if self.display.show(instruction):
            logger.debug(f"Instruction: {instruction.name}")
        return instruction


class CaptureWorkflow:
    """Capture a photo, crop it to the guide frame and save it.

    Only one capture runs at a time; a call made while another is in progress
    returns immediately.
    """

    def __init__(
        self,
        camera: Camera,
        cropper: ImageCropper,
        gallery: GalleryWriter,
        display: InstructionDisplay,
        screen: ScreenGeometry,
        frame: FrameSpec,
        album: str = "Camera App",
        reset_delay: float = 2.0,
        work_dir: Optional[Path] = None,
    ):
        """Initialize workflow.

        Args:
            camera: Camera used for ``take_photo``
            cropper: Image cropper
            gallery: Gallery writer
            display: Display receiving status messages
            screen: Screen the preview is shown on
            frame: Screen-space guide frame
            album: Gallery album name
            reset_delay: Seconds before returning to idle after a capture
            work_dir: Where full photos are written (system temp dir if None)
        """
        self.camera = camera
        self.cropper = cropper
        self.gallery = gallery
        self.display = display
        self.screen = screen
        self.frame = frame
        self.album = album
        self.reset_delay = reset_delay
        self.work_dir = work_dir

        self._busy = False
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy

    def _acquire(self) -> bool:
        with self._lock:
            if self._busy:
                return False
            self._busy = True
            return True

    def _release(self) -> None:
        with self._lock:
            self._busy = False

    def _take_photo(self) -> CapturedPhoto:
        try:
            return self.camera.take_photo(self.work_dir)
        except (NoCameraDeviceError, CaptureFailure):
            raise
        except Exception as e:
            raise CaptureFailure(str(e)) from e

    def _crop(self, photo: CapturedPhoto) -> Path:
        region = self.crop_region(photo)
        if region.is_empty:
            raise CropFailure("Guide frame does not overlap the photo")
        logger.info(
            f"Cropping frame content: {photo.path} x={region.x} y={region.y} "
            f"w={region.width} h={region.height}"
        )
        try:
            return self.cropper.crop(photo.path, region)
        except CropFailure:
            raise
        except Exception as e:
            raise CropFailure(str(e)) from e

    def _save(self, path: Path) -> Path:
        try:
            return self.gallery.save(path, self.album)
        except SaveFailure:
            raise
        except Exception as e:
            raise SaveFailure(str(e)) from e

    def crop_region(self, photo: CapturedPhoto) -> CropRegion:
        """Map the guide frame onto ``photo``."""
        return compute_crop_region(photo.geometry, self.screen, self.frame)

    def capture(self) -> Optional[Path]:
        """Run one capture.

        Returns:
            Path of the saved image, or None if busy or a step failed

        Raises:
            NoCameraDeviceError: If no camera is available
        """
        if not self._acquire():
            logger.info("Already saving...")
            return None

        saved = None
        fatal = False
        try:
            self.display.set_status("Capturing...")
            photo = self._take_photo()

            self.display.set_status("Processing...")
            cropped = self._crop(photo)

            self.display.set_status("Saving to gallery...")
            saved = self._save(cropped)

            self.display.set_status("Photo saved!")
        except NoCameraDeviceError:
            fatal = True
            self._release()
            self.display.set_status("No camera device found")
            raise
        except WorkflowError as e:
            logger.error(f"Error capturing or cropping photo: {e}")
            self.display.set_status(f"Error: {e}")
        except Exception as e:
            saved = None
            logger.exception(f"Unexpected capture error: {e}")
            self.display.set_status(f"Error: {e}")
        finally:
            if not fatal:
                self.display.reset_after(self.reset_delay, self._release)
        return saved

    def capture_async(self) -> threading.Thread:
        """Run ``capture`` on a background thread."""
        thread = threading.Thread(target=self._capture_logged, daemon=True)
        thread.start()
        return thread

    def _capture_logged(self) -> None:
        try:
            self.capture()
        except NoCameraDeviceError as e:
            logger.error(f"Capture aborted: {e}")

