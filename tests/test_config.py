"""Tests for configuration loading."""

from pathlib import Path

import yaml


class TestLoadConfig:
    """Test cases for load_config."""

    def test_missing_file(self, tmp_path):
        from face_frame.constants import load_config

        assert load_config(tmp_path / "missing.yaml") == {}

    def test_invalid_yaml(self, tmp_path):
        from face_frame.constants import load_config

        path = tmp_path / "config.yaml"
        path.write_text("guide_frame: [unclosed")
        assert load_config(path) == {}

    def test_repository_config_structure(self):
        """config/config.yaml has the expected sections."""
        config_path = Path(__file__).parent.parent / "config" / "config.yaml"
        with open(config_path) as f:
            config = yaml.safe_load(f)

        for section in ("guide_frame", "fit_policy", "detection", "camera", "capture"):
            assert section in config


class TestConfigSections:
    """Test cases for typed config sections."""

    def test_defaults(self):
        from face_frame.constants import CaptureConfig, GuideFrameConfig

        frame = GuideFrameConfig.from_config({})
        assert (frame.screen_width, frame.screen_height) == (390, 844)
        assert frame.crop_size == 350
        assert frame.idle_prompt == "Fit your face in the frame"

        capture = CaptureConfig.from_config({})
        assert capture.album == "Camera App"
        assert capture.reset_delay == 2.0
        assert capture.work_dir is None

    def test_overrides(self):
        from face_frame.constants import CameraSettings, DetectionConfig, GuideFrameConfig

        config = {
            "guide_frame": {"screen": [1080, 1920], "crop_size": 600},
            "detection": {"min_size": [40, 40], "min_neighbors": 3},
            "camera": {"resolution": [640, 480], "device": "rtsp://cam"},
        }
        frame = GuideFrameConfig.from_config(config)
        assert (frame.screen_width, frame.screen_height, frame.crop_size) == (1080, 1920, 600)

        detection = DetectionConfig.from_config(config)
        assert detection.min_size == (40, 40)
        assert detection.min_neighbors == 3

        camera = CameraSettings.from_config(config)
        assert (camera.width, camera.height) == (640, 480)
        assert camera.device == "rtsp://cam"


class TestGlobalConfig:
    """Test cases for the Config singleton."""

    def test_singleton(self):
        from face_frame.constants import get_config

        assert get_config() is get_config()

    def test_reload_from_file(self, tmp_path, default_config):
        from face_frame import get_fit_policy

        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "fit_policy": {"preset": "strict"},
            "capture": {"album": "Portraits", "reset_delay": 0.5},
        }))

        default_config.reload(path)

        assert default_config.fit_policy == get_fit_policy("strict")
        assert default_config.capture.album == "Portraits"
        assert default_config.capture.reset_delay == 0.5
        assert default_config.get("capture", "album") == "Portraits"
        assert default_config.get("capture", "missing", default=7) == 7
