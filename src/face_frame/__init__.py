"""Guide frame camera.

Maps an on-screen guide frame onto captured photo pixels and tells the user
how to move so their face fits the frame.

Quick Start:
    from face_frame import (
        FrameSpec, PhotoGeometry, ScreenGeometry, BoundingBox,
        compute_crop_region, evaluate_fit,
    )

    screen = ScreenGeometry(390, 844)
    region = compute_crop_region(
        PhotoGeometry(3000, 4000), screen, FrameSpec.centered(screen, 350)
    )
    instruction = evaluate_fit(BoundingBox(100, 100, 150, 150), FrameSpec.detector(350))
"""

from .errors import (
    FaceFrameError,
    PermissionDeniedError,
    NoCameraDeviceError,
    WorkflowError,
    CaptureFailure,
    CropFailure,
    SaveFailure,
)
from .geometry import (
    ScreenGeometry,
    FrameSpec,
    PhotoGeometry,
    BoundingBox,
    CropRegion,
)
from .mapping import compute_crop_region, cover_fit, preview_transform
from .fit import (
    Instruction,
    INSTRUCTION_MESSAGES,
    FitPolicy,
    FitMeasurement,
    DEFAULT_POLICY,
    FIT_POLICY_PRESETS,
    InstructionTracker,
    get_fit_policy,
    measure_fit,
    evaluate_fit,
)
from .display import InstructionDisplay

__version__ = "0.1.0"

__all__ = [
    "FaceFrameError",
    "PermissionDeniedError",
    "NoCameraDeviceError",
    "WorkflowError",
    "CaptureFailure",
    "CropFailure",
    "SaveFailure",
    "ScreenGeometry",
    "FrameSpec",
    "PhotoGeometry",
    "BoundingBox",
    "CropRegion",
    "compute_crop_region",
    "cover_fit",
    "preview_transform",
    "Instruction",
    "INSTRUCTION_MESSAGES",
    "FitPolicy",
    "FitMeasurement",
    "DEFAULT_POLICY",
    "FIT_POLICY_PRESETS",
    "InstructionTracker",
    "get_fit_policy",
    "measure_fit",
    "evaluate_fit",
    "InstructionDisplay",
]
