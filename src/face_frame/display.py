"""Instruction display state.

Detection callbacks run on the camera thread while the viewfinder draws on the
main thread, so the current text is guarded by a lock. Updates are only pushed
to ``on_change`` when the shown text actually changes.
"""

import logging
import threading
from typing import Callable, Optional

from .fit import Instruction, InstructionTracker

logger = logging.getLogger(__name__)

IDLE_PROMPT = "Fit your face in the frame"


class InstructionDisplay:
    """Holds the text shown to the user."""

    def __init__(
        self,
        idle_prompt: str = IDLE_PROMPT,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        """Initialize display.

        Args:
            idle_prompt: Text shown when nothing else is
            on_change: Called with the new text whenever it changes
        """
        self.idle_prompt = idle_prompt
        self.on_change = on_change

        self._text = idle_prompt
        self._lock = threading.Lock()
        self._tracker = InstructionTracker()
        self._timer: Optional[threading.Timer] = None

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    @property
    def instruction(self) -> Optional[Instruction]:
        """Last instruction shown, None after a status message or reset."""
        with self._lock:
            return self._tracker.current

    def _set(self, text: str) -> None:
        with self._lock:
            changed = text != self._text
            self._text = text
        if changed and self.on_change is not None:
            self.on_change(text)

    def show(self, instruction: Instruction) -> bool:
        """Show a fit instruction.

        Returns:
            True if the instruction differed from the previous one
        """
        with self._lock:
            changed = self._tracker.update(instruction)
        if changed:
            self._set(instruction.message)
        return changed

    def set_status(self, text: str) -> None:
        """Show a workflow status message."""
        self.cancel_pending()
        with self._lock:
            self._tracker.reset()
        self._set(text)

    def flash(
        self,
        text: str,
        duration: float,
        then: Optional[Callable[[], None]] = None,
    ) -> None:
        """Show ``text`` for ``duration`` seconds, then return to idle.

        Args:
            text: Transient message
            duration: Seconds before resetting; <= 0 resets immediately
            then: Called after the reset
        """
        self.set_status(text)
        self.reset_after(duration, then)

    def reset_after(self, duration: float, then: Optional[Callable[[], None]] = None) -> None:
        """Return to the idle prompt after ``duration`` seconds."""
        def _reset():
            try:
                self.reset()
            finally:
                if then is not None:
                    then()

        if duration <= 0:
            _reset()
            return

        self.cancel_pending()
        timer = threading.Timer(duration, _reset)
        timer.daemon = True
        with self._lock:
            self._timer = timer
        timer.start()

    def reset(self) -> None:
        """Show the idle prompt."""
        with self._lock:
            self._tracker.reset()
            self._timer = None
        self._set(self.idle_prompt)

    def cancel_pending(self) -> None:
        """Cancel a scheduled reset, if any."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
