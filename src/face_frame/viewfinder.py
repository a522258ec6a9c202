#!/usr/bin/env python3
"""Guide Frame Viewfinder.

Live camera preview with a centered guide frame. The camera image is
cover-fitted to the window, face detection runs on the part of the preview
inside the guide frame and the resulting instruction is drawn below it.

Usage:
    python -m face_frame viewfinder [--preset strict] [--camera 0]

Controls:
    SPACE  : Capture, crop to the guide frame and save to the gallery
    D      : Toggle face detection
    Q/ESC  : Quit
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from .camera import Camera, CameraBackend, CameraConfig
from .constants import get_config
from .detection import FaceDetector
from .display import InstructionDisplay
from .errors import PermissionDeniedError
from .fit import FitPolicy
from .geometry import FrameSpec, ScreenGeometry
from .imaging import GalleryWriter, ImageCropper
from .mapping import cover_fit
from .workflow import CaptureWorkflow, FitMonitor, request_permissions

logger = logging.getLogger(__name__)

WINDOW_NAME = "Face Frame - SPACE capture | Q quit"


def frame_bounds(frame: FrameSpec) -> Tuple[int, int, int, int]:
    """Integer (x1, y1, x2, y2) of a screen-space frame."""
    x1 = int(round(frame.left))
    y1 = int(round(frame.top))
    return x1, y1, x1 + int(round(frame.width)), y1 + int(round(frame.height))


def guide_region(preview: np.ndarray, frame: FrameSpec) -> np.ndarray:
    """The part of the preview inside the guide frame (clipped to the preview)."""
    x1, y1, x2, y2 = frame_bounds(frame)
    h, w = preview.shape[:2]
    x1, x2 = min(max(0, x1), w), min(max(0, x2), w)
    y1, y2 = min(max(0, y1), h), min(max(0, y2), h)
    return preview[y1:y2, x1:x2]


def detection_input(
    preview: np.ndarray,
    frame: FrameSpec,
    detection_frame: FrameSpec,
) -> Optional[np.ndarray]:
    """Guide frame ROI resized to the detector frame, None if nothing is visible."""
    roi = guide_region(preview, frame)
    if roi.size == 0:
        return None
    size = (int(detection_frame.width), int(detection_frame.height))
    if roi.shape[1::-1] != size:
        roi = cv2.resize(roi, size)
    return roi


def draw_overlay(
    preview: np.ndarray,
    frame: FrameSpec,
    text: str,
    dim: float = 0.6,
) -> np.ndarray:
    """Dim everything outside the guide frame and draw border and text."""
    output = (preview * (1.0 - dim)).astype(np.uint8)
    x1, y1, x2, y2 = frame_bounds(frame)
    h, w = preview.shape[:2]
    cx1, cy1, cx2, cy2 = max(0, x1), max(0, y1), min(w, x2), min(h, y2)
    output[cy1:cy2, cx1:cx2] = preview[cy1:cy2, cx1:cx2]
    cv2.rectangle(output, (x1, y1), (x2, y2), (255, 255, 255), 3)

    font = cv2.FONT_HERSHEY_SIMPLEX
    (tw, th), _ = cv2.getTextSize(text, font, 0.6, 2)
    tx = max(5, (w - tw) // 2)
    ty = min(h - 20, y2 + 60)
    cv2.rectangle(output, (tx - 10, ty - th - 10), (tx + tw + 10, ty + 10), (0, 0, 0), -1)
    cv2.putText(output, text, (tx, ty), font, 0.6, (255, 255, 255), 2)
    return output


def run_viewfinder(
    camera_id: Optional[int] = None,
    policy: Optional[FitPolicy] = None,
    detect: bool = True,
) -> None:
    """Run the guide frame viewfinder.

    Args:
        camera_id: Camera device ID (config default if None)
        policy: Fit policy (config default if None)
        detect: Run face detection on the guide frame
    """
    config = get_config()
    frame_cfg = config.guide_frame
    cam_cfg = config.camera
    cap_cfg = config.capture
    det_cfg = config.detection

    screen = ScreenGeometry(frame_cfg.screen_width, frame_cfg.screen_height)
    crop_frame = FrameSpec.centered(screen, frame_cfg.crop_size)
    detection_frame = FrameSpec.detector(frame_cfg.detection_size)

    camera = Camera(CameraConfig(
        width=cam_cfg.width,
        height=cam_cfg.height,
        fps=cam_cfg.fps,
        backend=CameraBackend(cam_cfg.backend),
        device=cam_cfg.device if camera_id is None else camera_id,
    ))
    gallery = GalleryWriter(cap_cfg.gallery_dir)
    display = InstructionDisplay(idle_prompt=frame_cfg.idle_prompt)

    try:
        request_permissions(camera, gallery).check()
    except PermissionDeniedError:
        camera.close()
        raise

    workflow = CaptureWorkflow(
        camera=camera,
        cropper=ImageCropper(cap_cfg.work_dir, jpeg_quality=cap_cfg.jpeg_quality),
        gallery=gallery,
        display=display,
        screen=screen,
        frame=crop_frame,
        album=cap_cfg.album,
        reset_delay=cap_cfg.reset_delay,
        work_dir=cap_cfg.work_dir,
    )

    monitor = None
    if detect:
        detector = FaceDetector(
            backend=det_cfg.backend,
            scale_factor=det_cfg.scale_factor,
            min_neighbors=det_cfg.min_neighbors,
            min_size=det_cfg.min_size,
        )
        monitor = FitMonitor(detector, display, detection_frame, policy or config.fit_policy)

    logger.info(
        f"Viewfinder {int(screen.width)}x{int(screen.height)}, "
        f"guide frame {frame_cfg.crop_size}, detection {'on' if detect else 'off'}"
    )

    try:
        for captured in camera.stream():
            preview = cover_fit(captured.image, screen)

            if monitor is not None and detect and not workflow.busy:
                roi = detection_input(preview, crop_frame, detection_frame)
                if roi is not None:
                    monitor.process(roi)

            cv2.imshow(WINDOW_NAME, draw_overlay(preview, crop_frame, display.text))

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q') or key == 27:
                break
            elif key == ord(' '):
                workflow.capture_async()
            elif key == ord('d'):
                if monitor is None:
                    logger.info("Detection was disabled at startup")
                else:
                    detect = not detect
                    display.reset()
                    logger.info(f"Detection: {'ON' if detect else 'OFF'}")
    finally:
        display.cancel_pending()
        camera.close()
        cv2.destroyAllWindows()
