"""
3D point with object-frame, camera-frame and normalized image coordinates.

A corner of a model face is given in the object frame (oX, oY, oZ). Moving
it into the camera frame for a pose cMo gives (X, Y, Z):

    [X, Y, Z]^T = R @ [oX, oY, oZ]^T + t

and the perspective projection on the normalized image plane (focal
length 1, principal point at the origin) is:

    x = X / Z
    y = Y / Z

The normalized coordinates are only valid after projection() has been
called for the current camera-frame coordinates.
"""

import dataclasses
from dataclasses import dataclass

import numpy as np

from ..calibration.pose import Pose


@dataclass
class Point3D:
    """
    A model point.

    Attributes:
        oX, oY, oZ: Coordinates in the object frame.
        X, Y, Z: Coordinates in the camera frame.
        x, y: Normalized image-plane coordinates (after projection()).
    """

    oX: float = 0.0
    oY: float = 0.0
    oZ: float = 0.0
    X: float = 0.0
    Y: float = 0.0
    Z: float = 0.0
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_object(cls, oX: float, oY: float, oZ: float) -> "Point3D":
        """Create a point from object-frame coordinates."""
        return cls(oX=float(oX), oY=float(oY), oZ=float(oZ))

    @classmethod
    def from_camera(cls, X: float, Y: float, Z: float) -> "Point3D":
        """Create a point from camera-frame coordinates and project it."""
        point = cls(X=float(X), Y=float(Y), Z=float(Z))
        point.projection()
        return point

    @property
    def object_coordinates(self) -> np.ndarray:
        return np.array([self.oX, self.oY, self.oZ], dtype=np.float64)

    @property
    def camera_coordinates(self) -> np.ndarray:
        return np.array([self.X, self.Y, self.Z], dtype=np.float64)

    def set_camera_coordinates(self, X: float, Y: float, Z: float) -> None:
        self.X, self.Y, self.Z = float(X), float(Y), float(Z)

    def change_frame(self, pose: Pose) -> None:
        """Move the point from the object frame to the camera frame."""
        X, Y, Z = pose.R @ self.object_coordinates + pose.t
        self.set_camera_coordinates(X, Y, Z)

    def projection(self) -> None:
        """
        Compute the normalized image coordinates from (X, Y, Z).

        A point lying on the camera plane (Z == 0) has no projection; its
        normalized coordinates are set to NaN.
        """
        if self.Z == 0:
            self.x = self.y = float("nan")
            return
        self.x = self.X / self.Z
        self.y = self.Y / self.Z

    def copy(self) -> "Point3D":
        return dataclasses.replace(self)

    def __repr__(self) -> str:
        return (
            f"Point3D(o=({self.oX:.4f}, {self.oY:.4f}, {self.oZ:.4f}), "
            f"c=({self.X:.4f}, {self.Y:.4f}, {self.Z:.4f}), "
            f"xy=({self.x:.4f}, {self.y:.4f}))"
        )


def normalize(vector: np.ndarray) -> np.ndarray:
    """Unit vector along vector; a zero vector is returned unchanged."""
    norm = np.linalg.norm(vector)
    if norm == 0:
        return vector
    return vector / norm
