"""Clipping settings shared by the polygons of a tracker."""

from dataclasses import dataclass
from typing import Any, Dict

from .flags import CLIP_ORDER, ClipPlane, check_mask
from .polygon import DEFAULT_FAR_DISTANCE, DEFAULT_NEAR_DISTANCE, Polygon


@dataclass
class ClippingSettings:
    """
    Clip planes and distances applied to polygons.

    Attributes:
        clip_mask: Enabled clip planes.
        near_distance: Near clipping distance (camera Z).
        far_distance: Far clipping distance (camera Z).
    """
    clip_mask: ClipPlane = ClipPlane.NONE
    near_distance: float = DEFAULT_NEAR_DISTANCE
    far_distance: float = DEFAULT_FAR_DISTANCE

    def __post_init__(self):
        self.clip_mask = check_mask(self.clip_mask)
        if self.near_distance <= 0 or self.far_distance <= 0:
            raise ValueError(
                f"Clipping distances must be positive, got "
                f"near={self.near_distance}, far={self.far_distance}"
            )
        if self.near_distance >= self.far_distance:
            raise ValueError(
                f"Near distance ({self.near_distance}) must be below "
                f"far distance ({self.far_distance})"
            )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ClippingSettings":
        """
        Create from the ``clipping`` section of a config.

        Example section:
            clipping:
              planes: [near, far, fov]
              near: 0.001
              far: 100.0
        """
        return cls(
            clip_mask=ClipPlane.from_names(config.get("planes", [])),
            near_distance=float(config.get("near", DEFAULT_NEAR_DISTANCE)),
            far_distance=float(config.get("far", DEFAULT_FAR_DISTANCE)),
        )

    def apply(self, polygon: Polygon) -> None:
        """Configure a polygon with these settings."""
        polygon.clip_mask = self.clip_mask
        polygon.near_distance = self.near_distance
        polygon.far_distance = self.far_distance

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the config representation."""
        return {
            "planes": [plane.name.lower() for plane in CLIP_ORDER if plane & self.clip_mask],
            "near": self.near_distance,
            "far": self.far_distance,
        }
