"""Geometry configuration: camera, clipping and visibility settings."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .calibration.camera_parameters import CameraParameters
from .polygon.settings import ClippingSettings
from .polygon.visibility import VisibilityClassifier
from .utils.config_loader import DEFAULT_CONFIG_FILE, load_config


@dataclass
class GeometryConfig:
    """
    Everything needed to test and clip the faces of a model.

    Attributes:
        camera: Camera parameters (FOV normals computed unless disabled).
        clipping: Clip planes and distances applied to each polygon.
        visibility: Face visibility classifier.
    """
    camera: CameraParameters
    clipping: ClippingSettings
    visibility: VisibilityClassifier

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "GeometryConfig":
        """
        Build from a configuration dictionary.

        Raises:
            KeyError: If the camera section is missing.
        """
        if "camera" not in config:
            raise KeyError("Config has no 'camera' section")

        return cls(
            camera=CameraParameters.from_config(config["camera"]),
            clipping=ClippingSettings.from_config(config.get("clipping", {})),
            visibility=VisibilityClassifier.from_config(config.get("visibility", {})),
        )

    @classmethod
    def load(
        cls,
        config_path: Union[str, Path] = DEFAULT_CONFIG_FILE,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "GeometryConfig":
        """Load a YAML config file and build the geometry configuration."""
        return cls.from_dict(load_config(config_path, overrides))
