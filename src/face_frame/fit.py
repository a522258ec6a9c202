"""Face fit evaluation against a detector-space guide frame.

Given the first detected face box, decide whether it is centered and sized
within tolerance and turn that into a single instruction for the user.
Evaluation is stateless; ``InstructionTracker`` is the only place that
remembers the previous result, and only to suppress repeated updates.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from .geometry import BoundingBox, FrameSpec

logger = logging.getLogger(__name__)


class Instruction(Enum):
    """User-facing fit states, in priority order."""
    NO_FACE_DETECTED = "no_face_detected"
    DETECTION_ERROR = "detection_error"
    GOOD_FIT = "good_fit"
    MOVE_TO_CENTER = "move_to_center"
    MOVE_CLOSER = "move_closer"
    MOVE_BACK = "move_back"

    @property
    def message(self) -> str:
        return INSTRUCTION_MESSAGES[self]


INSTRUCTION_MESSAGES: Dict[Instruction, str] = {
    Instruction.GOOD_FIT: "Perfect! Hold still",
    Instruction.MOVE_TO_CENTER: "Move to center",
    Instruction.MOVE_CLOSER: "Move closer",
    Instruction.MOVE_BACK: "Move back",
    Instruction.NO_FACE_DETECTED: "No face detected",
    Instruction.DETECTION_ERROR: "Face detection error",
}


@dataclass(frozen=True)
class FitPolicy:
    """Tolerances for a good fit."""
    # Max center offset as a fraction of the frame size
    center_tolerance: float = 0.2
    # Exclusive bounds on face area / frame area
    min_fill: float = 0.25
    max_fill: float = 0.7
    # Allowed overhang past the frame as a fraction of the face size (None = off)
    containment_margin: Optional[float] = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "FitPolicy":
        """Create from a config dictionary, starting from a named preset."""
        base = get_fit_policy(config.get("preset", "default"))
        return cls(
            center_tolerance=config.get("center_tolerance", base.center_tolerance),
            min_fill=config.get("min_fill", base.min_fill),
            max_fill=config.get("max_fill", base.max_fill),
            containment_margin=config.get("containment_margin", base.containment_margin),
        )


DEFAULT_POLICY = FitPolicy()

FIT_POLICY_PRESETS: Dict[str, FitPolicy] = {
    "default": DEFAULT_POLICY,
    "tight": FitPolicy(center_tolerance=0.15),
    "strict": FitPolicy(
        center_tolerance=0.15,
        min_fill=0.3,
        max_fill=0.8,
        containment_margin=0.1,
    ),
}


def get_fit_policy(name: str) -> FitPolicy:
    """Look up a preset policy by name."""
    if name not in FIT_POLICY_PRESETS:
        raise ValueError(
            f"Unknown fit policy: {name}. "
            f"Available: {list(FIT_POLICY_PRESETS.keys())}"
        )
    return FIT_POLICY_PRESETS[name]


@dataclass(frozen=True)
class FitMeasurement:
    """Intermediate numbers behind an instruction."""
    center_offset_x: float
    center_offset_y: float
    fill_percentage: float
    is_centered: bool
    is_right_size: bool
    is_contained: bool = True


FaceInput = Union[BoundingBox, Mapping[str, Any], None]


def _as_box(face: FaceInput) -> Optional[BoundingBox]:
    if face is None or isinstance(face, BoundingBox):
        return face
    return BoundingBox.from_mapping(face)


def _is_contained(face: BoundingBox, frame: FrameSpec, margin: float) -> bool:
    slack_x = face.width * margin
    slack_y = face.height * margin
    return (
        face.x >= -slack_x
        and face.y >= -slack_y
        and face.x + face.width <= frame.width + slack_x
        and face.y + face.height <= frame.height + slack_y
    )


def measure_fit(
    face: BoundingBox,
    frame: FrameSpec,
    policy: FitPolicy = DEFAULT_POLICY,
) -> FitMeasurement:
    """Measure a complete face box against the frame.

    Args:
        face: Face box with all fields set, in detector space
        frame: Detector-space guide frame with positive area
        policy: Tolerances to apply

    Returns:
        FitMeasurement with offsets, fill ratio and the individual checks
    """
    center_x, center_y = face.center
    offset_x = abs(center_x - frame.width / 2)
    offset_y = abs(center_y - frame.height / 2)
    is_centered = (
        offset_x < frame.width * policy.center_tolerance
        and offset_y < frame.height * policy.center_tolerance
    )

    fill = face.area / frame.area
    is_right_size = policy.min_fill < fill < policy.max_fill

    is_contained = True
    if policy.containment_margin is not None:
        is_contained = _is_contained(face, frame, policy.containment_margin)

    return FitMeasurement(
        center_offset_x=offset_x,
        center_offset_y=offset_y,
        fill_percentage=fill,
        is_centered=is_centered,
        is_right_size=is_right_size,
        is_contained=is_contained,
    )


def evaluate_fit(
    face: FaceInput,
    frame: FrameSpec,
    policy: FitPolicy = DEFAULT_POLICY,
) -> Instruction:
    """Decide which instruction to show for a detected face.

    Args:
        face: First detected face (BoundingBox or detector dict), or None
        frame: Detector-space guide frame
        policy: Tolerances to apply

    Returns:
        The first matching Instruction
    """
    box = _as_box(face)
    if box is None:
        return Instruction.NO_FACE_DETECTED
    if not box.is_complete:
        return Instruction.DETECTION_ERROR
    if not (frame.width > 0 and frame.height > 0 and math.isfinite(frame.area) and frame.area > 0):
        logger.warning(f"Degenerate detection frame: {frame.width}x{frame.height}")
        return Instruction.DETECTION_ERROR

    fit = measure_fit(box, frame, policy)

    if fit.is_centered and fit.is_right_size and fit.is_contained:
        return Instruction.GOOD_FIT
    if not fit.is_centered:
        return Instruction.MOVE_TO_CENTER
    if fit.fill_percentage <= policy.min_fill:
        return Instruction.MOVE_CLOSER
    return Instruction.MOVE_BACK


class InstructionTracker:
    """Remembers the last shown instruction and reports changes only."""

    def __init__(self):
        self.current: Optional[Instruction] = None

    def update(self, instruction: Instruction) -> bool:
        """Record ``instruction``; True if it differs from the previous one."""
        if instruction == self.current:
            return False
        self.current = instruction
        return True

    def reset(self) -> None:
        self.current = None
