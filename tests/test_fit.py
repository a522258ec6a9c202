"""Tests for face fit evaluation."""

import pytest


class TestEvaluateFit:
    """Test cases for evaluate_fit with the default policy."""

    def test_no_face(self, detection_frame):
        """No face gives NO_FACE_DETECTED for any frame."""
        from face_frame import FrameSpec, Instruction, evaluate_fit

        assert evaluate_fit(None, detection_frame) == Instruction.NO_FACE_DETECTED
        assert evaluate_fit(None, FrameSpec.detector(0)) == Instruction.NO_FACE_DETECTED

    @pytest.mark.parametrize("box", [
        {"x": float("nan"), "y": 100, "width": 150, "height": 150},
        {"x": 100, "y": 100, "width": 150},
        {"x": 100, "y": None, "width": 150, "height": 150},
        {"x": "100", "y": 100, "width": 150, "height": 150},
        {},
    ])
    def test_incomplete_box_is_detection_error(self, detection_frame, box):
        """Missing or non-numeric fields give DETECTION_ERROR."""
        from face_frame import Instruction, evaluate_fit

        assert evaluate_fit(box, detection_frame) == Instruction.DETECTION_ERROR

    def test_nan_bounding_box(self, detection_frame):
        from face_frame import BoundingBox, Instruction, evaluate_fit

        box = BoundingBox(x=float("nan"), y=0, width=10, height=10)
        assert evaluate_fit(box, detection_frame) == Instruction.DETECTION_ERROR

    def test_degenerate_frame(self):
        """A zero-area frame does not divide by zero."""
        from face_frame import BoundingBox, FrameSpec, Instruction, evaluate_fit

        box = BoundingBox(0, 0, 10, 10)
        assert evaluate_fit(box, FrameSpec.detector(0)) == Instruction.DETECTION_ERROR

    @pytest.mark.parametrize("size", [1e-200, 1e200, float("inf")])
    def test_frame_area_out_of_range(self, size):
        """Frames whose area underflows or overflows are rejected without raising."""
        from face_frame import BoundingBox, FrameSpec, Instruction, evaluate_fit

        box = BoundingBox(0, 0, 1e-201, 1e-201)
        assert evaluate_fit(box, FrameSpec.detector(size)) == Instruction.DETECTION_ERROR

    def test_centered_small_face_moves_closer(self, detection_frame):
        """Centered 150px face fills ~18% of the frame."""
        from face_frame import BoundingBox, Instruction, evaluate_fit

        box = BoundingBox(x=100, y=100, width=150, height=150)
        assert evaluate_fit(box, detection_frame) == Instruction.MOVE_CLOSER

    def test_centered_tiny_face_moves_closer(self, detection_frame):
        from face_frame import BoundingBox, Instruction, evaluate_fit

        box = BoundingBox(x=125, y=125, width=100, height=100)
        assert evaluate_fit(box, detection_frame) == Instruction.MOVE_CLOSER

    def test_face_filling_frame_moves_back(self, detection_frame):
        from face_frame import BoundingBox, Instruction, evaluate_fit

        box = BoundingBox(x=0, y=0, width=350, height=350)
        assert evaluate_fit(box, detection_frame) == Instruction.MOVE_BACK

    def test_min_fill_boundary_is_exclusive(self, detection_frame):
        """Exactly 25% fill is not enough."""
        from face_frame import BoundingBox, Instruction, evaluate_fit, measure_fit

        box = BoundingBox(x=125, y=87.5, width=175, height=175)
        fit = measure_fit(box, detection_frame)

        assert fit.center_offset_x == 37.5
        assert fit.center_offset_y == 0
        assert fit.is_centered
        assert fit.fill_percentage == 0.25
        assert not fit.is_right_size
        assert evaluate_fit(box, detection_frame) == Instruction.MOVE_CLOSER

    def test_good_fit(self, detection_frame):
        from face_frame import BoundingBox, Instruction, evaluate_fit

        box = BoundingBox(x=75, y=75, width=200, height=200)
        assert evaluate_fit(box, detection_frame) == Instruction.GOOD_FIT

    def test_off_center_face(self, detection_frame):
        """Off-center wins over size problems."""
        from face_frame import BoundingBox, Instruction, evaluate_fit

        assert evaluate_fit(BoundingBox(0, 0, 100, 100), detection_frame) == Instruction.MOVE_TO_CENTER
        assert evaluate_fit(BoundingBox(0, 100, 200, 200), detection_frame) == Instruction.MOVE_TO_CENTER

    def test_center_tolerance_is_exclusive(self, detection_frame):
        """An offset of exactly 20% of the frame is not centered."""
        from face_frame import BoundingBox, Instruction, evaluate_fit

        # center x = 245, offset 70 = 0.2 * 350
        box = BoundingBox(x=145, y=75, width=200, height=200)
        assert evaluate_fit(box, detection_frame) == Instruction.MOVE_TO_CENTER

    def test_accepts_detector_dicts(self, detection_frame):
        from face_frame import Instruction, evaluate_fit

        box = {"x": 75, "y": 75, "width": 200, "height": 200}
        assert evaluate_fit(box, detection_frame) == Instruction.GOOD_FIT

    def test_rectangular_frame(self):
        """Offsets are compared per axis against that axis' size."""
        from face_frame import BoundingBox, FrameSpec, Instruction, evaluate_fit

        frame = FrameSpec.detector(400, 200)
        # center (260, 100): offset x 60 < 80, fill 0.3
        box = BoundingBox(x=160, y=40, width=200, height=120)
        assert evaluate_fit(box, frame) == Instruction.GOOD_FIT


class TestFitPolicies:
    """Test cases for the named policy presets."""

    def test_presets(self):
        from face_frame import FIT_POLICY_PRESETS

        assert set(FIT_POLICY_PRESETS) == {"default", "tight", "strict"}
        assert FIT_POLICY_PRESETS["default"].center_tolerance == 0.2
        assert FIT_POLICY_PRESETS["tight"].center_tolerance == 0.15
        strict = FIT_POLICY_PRESETS["strict"]
        assert (strict.min_fill, strict.max_fill, strict.containment_margin) == (0.3, 0.8, 0.1)

    def test_unknown_preset(self):
        from face_frame import get_fit_policy

        with pytest.raises(ValueError):
            get_fit_policy("lenient")

    def test_tight_tolerance(self, detection_frame):
        """A 60px offset passes the default policy but not the tight one."""
        from face_frame import BoundingBox, Instruction, evaluate_fit, get_fit_policy

        box = BoundingBox(x=135, y=75, width=200, height=200)
        assert evaluate_fit(box, detection_frame, get_fit_policy("default")) == Instruction.GOOD_FIT
        assert evaluate_fit(box, detection_frame, get_fit_policy("tight")) == Instruction.MOVE_TO_CENTER

    def test_strict_fill_bounds(self, detection_frame):
        """73% fill is too much by default but fine for the strict policy."""
        from face_frame import BoundingBox, Instruction, evaluate_fit, get_fit_policy

        box = BoundingBox(x=25, y=25, width=300, height=300)
        assert evaluate_fit(box, detection_frame) == Instruction.MOVE_BACK
        assert evaluate_fit(box, detection_frame, get_fit_policy("strict")) == Instruction.GOOD_FIT

    def test_strict_min_fill(self, detection_frame):
        """28% fill is enough by default but too little for the strict policy."""
        from face_frame import BoundingBox, Instruction, evaluate_fit, get_fit_policy

        # 185x185 = 34225 / 122500 = 0.279
        box = BoundingBox(x=82.5, y=82.5, width=185, height=185)
        assert evaluate_fit(box, detection_frame) == Instruction.GOOD_FIT
        assert evaluate_fit(box, detection_frame, get_fit_policy("strict")) == Instruction.MOVE_CLOSER

    def test_containment(self, detection_frame):
        """A box overhanging the frame by more than 10% fails the strict policy."""
        from face_frame import BoundingBox, Instruction, evaluate_fit, get_fit_policy, measure_fit

        # Centered and 55% fill, but 50px above the frame (limit 45px)
        box = BoundingBox(x=100, y=-50, width=150, height=450)
        strict = get_fit_policy("strict")

        assert evaluate_fit(box, detection_frame) == Instruction.GOOD_FIT
        assert measure_fit(box, detection_frame, strict).is_contained is False
        assert evaluate_fit(box, detection_frame, strict) == Instruction.MOVE_BACK

    def test_containment_within_margin(self, detection_frame):
        from face_frame import BoundingBox, get_fit_policy, measure_fit

        box = BoundingBox(x=-10, y=100, width=200, height=200)
        assert measure_fit(box, detection_frame, get_fit_policy("strict")).is_contained

    def test_from_config(self):
        from face_frame import FitPolicy

        policy = FitPolicy.from_config({"preset": "strict", "max_fill": 0.9})
        assert policy.center_tolerance == 0.15
        assert policy.max_fill == 0.9
        assert policy.containment_margin == 0.1

        assert FitPolicy.from_config({}) == FitPolicy()


class TestInstructions:
    """Test cases for instruction messages and change tracking."""

    def test_every_instruction_has_a_message(self):
        from face_frame import INSTRUCTION_MESSAGES, Instruction

        assert set(INSTRUCTION_MESSAGES) == set(Instruction)
        assert Instruction.GOOD_FIT.message == "Perfect! Hold still"
        assert Instruction.DETECTION_ERROR.message == "Face detection error"

    def test_tracker_reports_changes_only(self):
        from face_frame import Instruction, InstructionTracker

        tracker = InstructionTracker()
        assert tracker.update(Instruction.MOVE_CLOSER) is True
        assert tracker.update(Instruction.MOVE_CLOSER) is False
        assert tracker.update(Instruction.GOOD_FIT) is True
        tracker.reset()
        assert tracker.update(Instruction.GOOD_FIT) is True
