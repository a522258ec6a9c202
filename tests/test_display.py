"""Tests for the instruction display."""

import threading


class TestInstructionDisplay:
    """Test cases for InstructionDisplay."""

    def test_starts_with_idle_prompt(self):
        from face_frame import InstructionDisplay

        display = InstructionDisplay()
        assert display.text == "Fit your face in the frame"
        assert display.instruction is None

    def test_show_emits_on_change_only(self, recorded_display):
        """Repeated instructions do not trigger redundant updates."""
        from face_frame import Instruction

        assert recorded_display.show(Instruction.MOVE_CLOSER) is True
        assert recorded_display.show(Instruction.MOVE_CLOSER) is False
        assert recorded_display.show(Instruction.GOOD_FIT) is True

        assert recorded_display.changes == ["Move closer", "Perfect! Hold still"]
        assert recorded_display.instruction == Instruction.GOOD_FIT

    def test_status_interrupts_instructions(self, recorded_display):
        """After a status message the same instruction is shown again."""
        from face_frame import Instruction

        recorded_display.show(Instruction.MOVE_BACK)
        recorded_display.set_status("Capturing...")
        recorded_display.show(Instruction.MOVE_BACK)

        assert recorded_display.changes == ["Move back", "Capturing...", "Move back"]

    def test_flash_with_zero_duration_resets_immediately(self, recorded_display):
        done = []
        recorded_display.flash("Error: boom", 0, then=lambda: done.append(True))

        assert recorded_display.changes == ["Error: boom", "Fit your face in the frame"]
        assert recorded_display.text == "Fit your face in the frame"
        assert done == [True]

    def test_flash_resets_after_delay(self):
        from face_frame import InstructionDisplay

        reset = threading.Event()
        display = InstructionDisplay(idle_prompt="Ready")
        display.flash("Photo saved!", 0.05, then=reset.set)

        assert display.text == "Photo saved!"
        assert reset.wait(timeout=2.0)
        assert display.text == "Ready"

    def test_cancel_pending_keeps_message(self):
        from face_frame import InstructionDisplay

        display = InstructionDisplay()
        display.flash("Saving to gallery...", 5.0)
        display.cancel_pending()

        assert display.text == "Saving to gallery..."
