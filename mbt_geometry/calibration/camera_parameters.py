"""
Camera Parameters Module.

This module holds the intrinsic parameters of a perspective camera without
distortion, the meter/pixel conversions used by the tracker, and the field
of view planes used for frustum clipping.

Mathematical Background:
========================

The intrinsics map normalized image-plane coordinates (x, y) = (X/Z, Y/Z)
to pixel coordinates (u, v).

Meter to pixel:
    u = cx + fx * x
    v = cy + fy * y

Pixel to meter:
    x = (u - cx) / fx
    y = (v - cy) / fy

In image-point notation the row index i is v and the column index j is u.

Field of View Planes:
=====================
The visible frustum is bounded by four planes through the optical center,
each containing one image border. A plane is described by its unit normal
n, oriented towards the inside of the frustum, so a camera-frame point P
is on the visible side when n . P > 0, i.e. when the angle between the
direction of P and n is below 90 degrees.

For an image of size (width, height):

    left:  n ~ ( 1,  0, cx / fx)            contains u = 0
    right: n ~ (-1,  0, (width - cx) / fx)  contains u = width
    up:    n ~ ( 0,  1, cy / fy)            contains v = 0
    down:  n ~ ( 0, -1, (height - cy) / fy) contains v = height

Horizontal FOV: atan(cx / fx) + atan((width - cx) / fx)
Vertical FOV:   atan(cy / fy) + atan((height - cy) / fy)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import numpy as np

from ..errors import FovNotComputedError


@dataclass
class CameraParameters:
    """
    Camera intrinsic parameters and field of view normals.

    Attributes:
        fx: Focal length in x direction (pixels).
        fy: Focal length in y direction (pixels).
        cx: Principal point x coordinate (pixels).
        cy: Principal point y coordinate (pixels).
        width: Image width in pixels.
        height: Image height in pixels.
        fov_normals: Inward unit normals of the left, right, up and down
            FOV planes, filled by compute_fov().

    Example:
        >>> cam = CameraParameters(fx=600.0, fy=600.0, cx=320.0, cy=240.0,
        ...                        width=640, height=480)
        >>> cam.compute_fov()
        >>> left, right, up, down = cam.get_fov_normals()
    """

    fx: float  # Focal length x (pixels)
    fy: float  # Focal length y (pixels)
    cx: float  # Principal point x (pixels)
    cy: float  # Principal point y (pixels)
    width: int  # Image width (pixels)
    height: int  # Image height (pixels)
    fov_normals: List[np.ndarray] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self):
        if self.fx <= 0 or self.fy <= 0:
            raise ValueError(f"Focal lengths must be positive, got ({self.fx}, {self.fy})")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image size must be positive, got {self.width}x{self.height}"
            )

    @property
    def fov_computed(self) -> bool:
        """Whether the field of view normals are available."""
        return len(self.fov_normals) == 4

    def meter_to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        """
        Convert normalized image-plane coordinates to pixels.

        Args:
            x, y: Normalized coordinates (X/Z, Y/Z).

        Returns:
            Tuple[float, float]: (u, v) pixel coordinates.
        """
        u = self.cx + self.fx * x
        v = self.cy + self.fy * y
        return u, v

    def pixel_to_meter(self, u: float, v: float) -> Tuple[float, float]:
        """
        Convert pixel coordinates to normalized image-plane coordinates.

        Returns:
            Tuple[float, float]: (x, y) normalized coordinates.
        """
        x = (u - self.cx) / self.fx
        y = (v - self.cy) / self.fy
        return x, y

    def get_fov(self) -> Tuple[float, float]:
        """
        Calculate the camera field of view.

        Returns:
            Tuple[float, float]: (horizontal_fov, vertical_fov) in radians.
        """
        horizontal_fov = np.arctan(self.cx / self.fx) + np.arctan((self.width - self.cx) / self.fx)
        vertical_fov = np.arctan(self.cy / self.fy) + np.arctan((self.height - self.cy) / self.fy)
        return float(horizontal_fov), float(vertical_fov)

    def compute_fov(self) -> None:
        """
        Compute the inward unit normals of the four FOV planes.

        The normals are stored in the order left, right, up, down.
        """
        normals = [
            np.array([1.0, 0.0, self.cx / self.fx]),
            np.array([-1.0, 0.0, (self.width - self.cx) / self.fx]),
            np.array([0.0, 1.0, self.cy / self.fy]),
            np.array([0.0, -1.0, (self.height - self.cy) / self.fy]),
        ]
        self.fov_normals = [n / np.linalg.norm(n) for n in normals]

    def get_fov_normals(self) -> List[np.ndarray]:
        """
        Get the FOV plane normals.

        Raises:
            FovNotComputedError: If compute_fov() has not been called.
        """
        if not self.fov_computed:
            raise FovNotComputedError(
                "Field of view normals not computed, call compute_fov() first"
            )
        return self.fov_normals

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CameraParameters":
        """
        Create camera parameters from the ``camera`` section of a config.

        Expected keys: fx, fy, cx, cy, width, height and optionally
        compute_fov (default True).

        Raises:
            KeyError: If a required key is missing.
        """
        required = ["fx", "fy", "cx", "cy", "width", "height"]
        missing = [key for key in required if key not in config]
        if missing:
            raise KeyError(f"Camera config missing keys: {missing}")

        cam = cls(
            fx=float(config["fx"]),
            fy=float(config["fy"]),
            cx=float(config["cx"]),
            cy=float(config["cy"]),
            width=int(config["width"]),
            height=int(config["height"]),
        )
        if config.get("compute_fov", True):
            cam.compute_fov()
        return cam

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"CameraParameters(fx={self.fx:.2f}, fy={self.fy:.2f}, "
            f"cx={self.cx:.2f}, cy={self.cy:.2f}, "
            f"width={self.width}, height={self.height}, "
            f"fov_computed={self.fov_computed})"
        )
