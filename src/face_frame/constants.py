"""Centralized constants and configuration loader.

This module provides access to configuration values and sensible defaults
for the guide frame, fit policy, detection, camera and capture workflow.
Values are loaded from config/config.yaml when available, otherwise defaults
are used.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .fit import FitPolicy

logger = logging.getLogger(__name__)

# Path to the default configuration file
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. Uses default if None.

    Returns:
        Configuration dictionary.
    """
    path = config_path or DEFAULT_CONFIG_PATH

    try:
        if path.exists():
            with open(path, "r") as f:
                return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")

    return {}


def _get_nested(config: Dict, *keys: str, default: Any = None) -> Any:
    """Get nested config value with default fallback."""
    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
        if value is None:
            return default
    return value


# ============================================================
# Guide Frame Constants
# ============================================================

@dataclass
class GuideFrameConfig:
    """Guide frame and screen constants."""
    # Viewfinder size in logical units (one unit = one window pixel)
    screen_width: int = 390
    screen_height: int = 844
    # Guide frame size on screen, used for photo cropping
    crop_size: int = 350
    # Guide frame size in detector pixels, used for fit evaluation
    detection_size: int = 350
    # Prompt shown while idle
    idle_prompt: str = "Fit your face in the frame"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "GuideFrameConfig":
        """Create from config dictionary."""
        gf = _get_nested(config, "guide_frame") or {}
        screen = gf.get("screen", [390, 844])

        return cls(
            screen_width=screen[0],
            screen_height=screen[1],
            crop_size=gf.get("crop_size", 350),
            detection_size=gf.get("detection_size", 350),
            idle_prompt=gf.get("idle_prompt", "Fit your face in the frame"),
        )


# ============================================================
# Detection Constants
# ============================================================

@dataclass
class DetectionConfig:
    """Face detection constants."""
    backend: str = "haar_cascade"
    scale_factor: float = 1.1
    min_neighbors: int = 5
    min_size: Tuple[int, int] = (30, 30)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DetectionConfig":
        """Create from config dictionary."""
        det = _get_nested(config, "detection") or {}
        min_size = det.get("min_size", [30, 30])

        return cls(
            backend=det.get("backend", "haar_cascade"),
            scale_factor=det.get("scale_factor", 1.1),
            min_neighbors=det.get("min_neighbors", 5),
            min_size=tuple(min_size),
        )


# ============================================================
# Camera Constants
# ============================================================

@dataclass
class CameraSettings:
    """Camera constants."""
    device: Union[int, str] = 0
    width: int = 1280
    height: int = 720
    fps: int = 30
    backend: str = "opencv"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CameraSettings":
        """Create from config dictionary."""
        cam = _get_nested(config, "camera") or {}
        resolution = cam.get("resolution", [1280, 720])

        return cls(
            device=cam.get("device", 0),
            width=resolution[0],
            height=resolution[1],
            fps=cam.get("fps", 30),
            backend=cam.get("backend", "opencv"),
        )


# ============================================================
# Capture Workflow Constants
# ============================================================

@dataclass
class CaptureConfig:
    """Capture, crop and gallery constants."""
    album: str = "Camera App"
    gallery_dir: Path = Path.home() / "Pictures"
    work_dir: Optional[Path] = None
    # Seconds before a status or error message returns to the idle prompt
    reset_delay: float = 2.0
    jpeg_quality: int = 100

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CaptureConfig":
        """Create from config dictionary."""
        cap = _get_nested(config, "capture") or {}
        gallery_dir = cap.get("gallery_dir")
        work_dir = cap.get("work_dir")

        return cls(
            album=cap.get("album", "Camera App"),
            gallery_dir=Path(gallery_dir).expanduser() if gallery_dir else Path.home() / "Pictures",
            work_dir=Path(work_dir).expanduser() if work_dir else None,
            reset_delay=cap.get("reset_delay", 2.0),
            jpeg_quality=cap.get("jpeg_quality", 100),
        )


# ============================================================
# Global Config Instance (lazy loaded)
# ============================================================

class Config:
    """Global configuration singleton."""

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load()
        return cls._instance

    def _load(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file."""
        self._config = load_config(config_path)
        self._guide_frame: Optional[GuideFrameConfig] = None
        self._fit_policy: Optional[FitPolicy] = None
        self._detection: Optional[DetectionConfig] = None
        self._camera: Optional[CameraSettings] = None
        self._capture: Optional[CaptureConfig] = None

    def reload(self, config_path: Optional[Path] = None) -> None:
        """Reload configuration from file and reset cached sections."""
        self._load(config_path)

    @property
    def guide_frame(self) -> GuideFrameConfig:
        """Get guide frame config."""
        if self._guide_frame is None:
            self._guide_frame = GuideFrameConfig.from_config(self._config)
        return self._guide_frame

    @property
    def fit_policy(self) -> FitPolicy:
        """Get fit policy."""
        if self._fit_policy is None:
            self._fit_policy = FitPolicy.from_config(
                _get_nested(self._config, "fit_policy") or {}
            )
        return self._fit_policy

    @property
    def detection(self) -> DetectionConfig:
        """Get detection config."""
        if self._detection is None:
            self._detection = DetectionConfig.from_config(self._config)
        return self._detection

    @property
    def camera(self) -> CameraSettings:
        """Get camera config."""
        if self._camera is None:
            self._camera = CameraSettings.from_config(self._config)
        return self._camera

    @property
    def capture(self) -> CaptureConfig:
        """Get capture workflow config."""
        if self._capture is None:
            self._capture = CaptureConfig.from_config(self._config)
        return self._capture

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get a config value by key path."""
        return _get_nested(self._config, *keys, default=default)


def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
