"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def sample_image():
    """Create a sample test image."""
    return np.random.randint(0, 255, (480, 640, 3), dtype=np.uint8)


@pytest.fixture
def portrait_photo(tmp_path):
    """Write a 1080x1920 portrait photo to disk and return its path."""
    image = np.random.randint(0, 255, (1920, 1080, 3), dtype=np.uint8)
    path = tmp_path / "photo.jpg"
    cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def phone_screen():
    """Screen with the same aspect ratio as the portrait photo."""
    from face_frame import ScreenGeometry

    return ScreenGeometry(360, 640)


@pytest.fixture
def detection_frame():
    """350x350 detector-space guide frame."""
    from face_frame import FrameSpec

    return FrameSpec.detector(350)


@pytest.fixture
def recorded_display():
    """InstructionDisplay that records every text change."""
    from face_frame import InstructionDisplay

    changes = []
    display = InstructionDisplay(on_change=changes.append)
    display.changes = changes
    return display


@pytest.fixture
def default_config():
    """Reset the global config to config/config.yaml after the test."""
    from face_frame.constants import get_config

    config = get_config()
    yield config
    config.reload()
