#!/usr/bin/env python3
"""Command line interface for the guide frame camera.

Usage:
    face-frame viewfinder [--camera 0] [--preset strict] [--no-detect]
    face-frame capture [--camera 0]
    face-frame crop --image photo.jpg [--screen 390 844] [--frame-size 350]
    face-frame evaluate --box 125 87.5 175 175 [--frame-size 350] [--preset strict]
    face-frame presets

Examples:
    # Live preview with fit instructions
    face-frame viewfinder

    # Crop an existing photo to what the guide frame showed
    face-frame crop --image photo.jpg --output ./crops

    # Check what a detector box would tell the user
    face-frame evaluate --box 100 100 150 150
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2

from .camera import Camera, CameraBackend, CameraConfig
from .constants import get_config
from .display import InstructionDisplay
from .errors import CropFailure, NoCameraDeviceError, PermissionDeniedError
from .fit import FIT_POLICY_PRESETS, evaluate_fit, get_fit_policy, measure_fit
from .geometry import BoundingBox, FrameSpec, PhotoGeometry, ScreenGeometry
from .imaging import GalleryWriter, ImageCropper
from .mapping import compute_crop_region
from .workflow import CaptureWorkflow

logger = logging.getLogger(__name__)


def _screen(args) -> ScreenGeometry:
    frame_cfg = get_config().guide_frame
    if args.screen:
        return ScreenGeometry(*args.screen)
    return ScreenGeometry(frame_cfg.screen_width, frame_cfg.screen_height)


def _policy(args):
    if args.preset:
        return get_fit_policy(args.preset)
    return get_config().fit_policy


def cmd_viewfinder(args):
    """Run the live viewfinder."""
    from .viewfinder import run_viewfinder

    try:
        run_viewfinder(
            camera_id=args.camera,
            policy=_policy(args),
            detect=not args.no_detect,
        )
    except PermissionDeniedError as e:
        logger.error(f"Permission error: {e}")
        sys.exit(1)


def cmd_capture(args):
    """Capture one photo, crop it to the guide frame and save it."""
    config = get_config()
    cam_cfg = config.camera
    cap_cfg = config.capture
    screen = _screen(args)
    frame_size = args.frame_size or config.guide_frame.crop_size

    display = InstructionDisplay(
        idle_prompt=config.guide_frame.idle_prompt,
        on_change=lambda text: logger.info(text),
    )
    camera = Camera(CameraConfig(
        width=cam_cfg.width,
        height=cam_cfg.height,
        backend=CameraBackend(cam_cfg.backend),
        device=cam_cfg.device if args.camera is None else args.camera,
        auto_reconnect=False,
    ))
    workflow = CaptureWorkflow(
        camera=camera,
        cropper=ImageCropper(cap_cfg.work_dir, jpeg_quality=cap_cfg.jpeg_quality),
        gallery=GalleryWriter(args.gallery or cap_cfg.gallery_dir),
        display=display,
        screen=screen,
        frame=FrameSpec.centered(screen, frame_size),
        album=args.album or cap_cfg.album,
        reset_delay=0,
        work_dir=cap_cfg.work_dir,
    )

    try:
        saved = workflow.capture()
    except NoCameraDeviceError as e:
        logger.error(f"No camera device found: {e}")
        sys.exit(1)
    finally:
        camera.close()

    if saved is None:
        sys.exit(1)
    print(saved)


def cmd_crop(args):
    """Crop an existing photo to the guide frame region."""
    config = get_config()
    image = cv2.imread(args.image)
    if image is None:
        logger.error(f"Could not load image: {args.image}")
        sys.exit(1)

    photo = PhotoGeometry.from_image(image)
    screen = _screen(args)
    frame = FrameSpec.centered(screen, args.frame_size or config.guide_frame.crop_size)
    region = compute_crop_region(photo, screen, frame)
    logger.info(
        f"Photo {photo.width}x{photo.height} -> crop x={region.x} y={region.y} "
        f"w={region.width} h={region.height}{' (clamped)' if region.clamped else ''}"
    )

    cropper = ImageCropper(
        args.output or config.capture.work_dir,
        jpeg_quality=config.capture.jpeg_quality,
    )
    try:
        output = cropper.crop(args.image, region)
    except CropFailure as e:
        logger.error(f"Crop failed: {e}")
        sys.exit(1)
    print(output)


def cmd_evaluate(args):
    """Evaluate a face bounding box against the detection frame."""
    policy = _policy(args)
    frame = FrameSpec.detector(args.frame_size or get_config().guide_frame.detection_size)
    box = BoundingBox(*args.box) if args.box else None

    instruction = evaluate_fit(box, frame, policy)
    if box is not None and box.is_complete and frame.area > 0:
        fit = measure_fit(box, frame, policy)
        logger.info(
            f"offset=({fit.center_offset_x:.1f}, {fit.center_offset_y:.1f}) "
            f"fill={fit.fill_percentage:.3f} centered={fit.is_centered} "
            f"sized={fit.is_right_size} contained={fit.is_contained}"
        )
    print(f"{instruction.name}: {instruction.message}")


def cmd_presets(args):
    """List fit policy presets."""
    for name, policy in FIT_POLICY_PRESETS.items():
        margin = "-" if policy.containment_margin is None else f"{policy.containment_margin:.2f}"
        print(
            f"{name:<8} center={policy.center_tolerance:.2f} "
            f"fill=({policy.min_fill:.2f}, {policy.max_fill:.2f}) containment={margin}"
        )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="face-frame",
        description="Guide frame camera: face fit instructions and frame cropping",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="Path to config.yaml (default: config/config.yaml)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("viewfinder", help="Live preview with fit instructions")
    p.add_argument("--camera", "-c", type=int, default=None, help="Camera device ID")
    p.add_argument("--preset", "-p", choices=list(FIT_POLICY_PRESETS), default=None,
                   help="Fit policy preset (default: from config)")
    p.add_argument("--no-detect", action="store_true", help="Disable face detection")
    p.set_defaults(func=cmd_viewfinder)

    p = subparsers.add_parser("capture", help="Capture, crop and save one photo")
    p.add_argument("--camera", "-c", type=int, default=None, help="Camera device ID")
    p.add_argument("--screen", type=float, nargs=2, metavar=("W", "H"), default=None,
                   help="Screen size the guide frame is drawn on")
    p.add_argument("--frame-size", type=float, default=None, help="Guide frame size")
    p.add_argument("--gallery", type=Path, default=None, help="Gallery directory")
    p.add_argument("--album", type=str, default=None, help="Album name")
    p.set_defaults(func=cmd_capture)

    p = subparsers.add_parser("crop", help="Crop a photo to the guide frame region")
    p.add_argument("--image", "-i", required=True, help="Photo to crop")
    p.add_argument("--screen", type=float, nargs=2, metavar=("W", "H"), default=None,
                   help="Screen size the guide frame is drawn on")
    p.add_argument("--frame-size", type=float, default=None, help="Guide frame size")
    p.add_argument("--output", "-o", type=Path, default=None, help="Output directory")
    p.set_defaults(func=cmd_crop)

    p = subparsers.add_parser("evaluate", help="Evaluate a face box against the frame")
    p.add_argument("--box", type=float, nargs=4, metavar=("X", "Y", "W", "H"), default=None,
                   help="Face bounding box (omit for 'no face')")
    p.add_argument("--frame-size", type=float, default=None, help="Detection frame size")
    p.add_argument("--preset", "-p", choices=list(FIT_POLICY_PRESETS), default=None,
                   help="Fit policy preset (default: from config)")
    p.set_defaults(func=cmd_evaluate)

    p = subparsers.add_parser("presets", help="List fit policy presets")
    p.set_defaults(func=cmd_presets)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if args.config is not None:
        get_config().reload(args.config)

    args.func(args)


if __name__ == "__main__":
    main()
