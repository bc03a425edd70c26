"""
Camera Pose Module.

This module represents the pose cMo of the camera with respect to a tracked
object: the rigid transformation that maps points expressed in the object
frame into the camera frame.

Mathematical Background:
========================

Rigid Body Transformation:
--------------------------
A rigid body transformation consists of a rotation R (3x3 orthonormal matrix)
and translation t (3x1 vector). For a point P in the object frame, its
coordinates in the camera frame are:

    P_c = R * P_o + t

This can be written as a 4x4 homogeneous transformation matrix:

    cMo = | R   t |
          | 0   1 |

Inverse Transformation:
-----------------------
The inverse transformation oMc (camera frame to object frame) is:

    cMo^(-1) = | R^T  -R^T * t |
               |  0       1    |

Since R is orthonormal: R^(-1) = R^T

Rotation Vector (theta-u):
--------------------------
A rotation can be given as a vector theta*u (axis u, angle theta). The
matrix follows the Rodrigues formula (computed with scipy Rotation):

    R = I + sin(theta) [u]x + (1 - cos(theta)) [u]x^2

Camera Coordinate Frame:
    - X: Right
    - Y: Down
    - Z: Forward (viewing direction)
    - Origin: At camera optical center
"""

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation


def rotation_from_vector(rvec: Sequence[float]) -> np.ndarray:
    """
    Convert a theta-u rotation vector to a 3x3 rotation matrix.

    Args:
        rvec: Rotation vector (3,), angle in radians times unit axis.

    Returns:
        np.ndarray: 3x3 rotation matrix.
    """
    rvec = np.asarray(rvec, dtype=np.float64).flatten()
    if rvec.shape != (3,):
        raise ValueError(f"Rotation vector must be (3,), got {rvec.shape}")

    return Rotation.from_rotvec(rvec).as_matrix()


@dataclass
class Pose:
    """
    Rigid transformation from the object frame to the camera frame (cMo).

    Attributes:
        R: Rotation matrix (3x3).
        t: Translation vector (3,) - position of the object origin in the camera frame.

    Example:
        >>> pose = Pose(R=np.eye(3), t=np.array([0.0, 0.0, 2.0]))
        >>> pose.transform_points(np.array([0.1, 0.0, 0.0]))
        array([0.1, 0. , 2. ])
    """

    R: np.ndarray = field(default_factory=lambda: np.eye(3))
    t: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        """Validate inputs after initialization."""
        self.R = np.asarray(self.R, dtype=np.float64)
        self.t = np.asarray(self.t, dtype=np.float64).flatten()

        if self.R.shape != (3, 3):
            raise ValueError(f"R must be 3x3, got {self.R.shape}")
        if self.t.shape != (3,):
            raise ValueError(f"t must be (3,), got {self.t.shape}")

    @classmethod
    def identity(cls) -> "Pose":
        return cls()

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> "Pose":
        """
        Create from 4x4 or 3x4 transformation matrix.

        Args:
            T: 4x4 homogeneous or 3x4 transformation matrix.

        Returns:
            Pose: Instance with extracted R and t.
        """
        T = np.asarray(T)
        if T.shape == (4, 4):
            return cls(R=T[:3, :3], t=T[:3, 3])
        elif T.shape == (3, 4):
            return cls(R=T[:, :3], t=T[:, 3])
        else:
            raise ValueError(f"Expected 4x4 or 3x4 matrix, got {T.shape}")

    @classmethod
    def from_translation_rotation_vector(
        cls,
        translation: Sequence[float],
        rvec: Sequence[float],
    ) -> "Pose":
        """
        Create from a translation and a theta-u rotation vector.

        Args:
            translation: (tx, ty, tz).
            rvec: Rotation vector (3,) in radians.
        """
        return cls(R=rotation_from_vector(rvec), t=np.asarray(translation))

    def get_transform_matrix(self) -> np.ndarray:
        """
        Get the 4x4 homogeneous transformation matrix.

            cMo = | R  t |
                  | 0  1 |

        Returns:
            np.ndarray: 4x4 transformation matrix.
        """
        T = np.eye(4, dtype=np.float64)
        T[:3, :3] = self.R
        T[:3, 3] = self.t
        return T

    def inverse(self) -> "Pose":
        """
        Get the inverse transformation (oMc).

        For transformation T = [R, t], the inverse is:
            T^(-1) = [R^T, -R^T @ t]
        """
        R_inv = self.R.T
        t_inv = -R_inv @ self.t
        return Pose(R=R_inv, t=t_inv)

    def compose(self, other: "Pose") -> "Pose":
        """
        Chain this transformation with another.

        If this is T1 and other is T2, result is T2 @ T1
        (applies T1 first, then T2).
        """
        R_combined = other.R @ self.R
        t_combined = other.R @ self.t + other.t
        return Pose(R=R_combined, t=t_combined)

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """
        Transform 3D points from the object frame to the camera frame.

        Args:
            points: 3D points (N, 3) or (3,) in object frame.

        Returns:
            np.ndarray: Points in camera frame, same shape as input.
        """
        points = np.atleast_2d(points)
        transformed = points @ self.R.T + self.t
        return transformed.squeeze()
