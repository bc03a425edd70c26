"""
Camera calibration and pose.

Classes:
    CameraParameters: Intrinsics, meter/pixel conversion and FOV plane normals.
    Pose: Rigid transformation cMo from the object frame to the camera frame.

Standalone Functions:
    rotation_from_vector: Rotation matrix from a theta-u vector.

Example Usage:
    >>> from mbt_geometry.calibration import CameraParameters, Pose
    >>> cam = CameraParameters(fx=600, fy=600, cx=320, cy=240, width=640, height=480)
    >>> cam.compute_fov()
    >>> pose = Pose.from_translation_rotation_vector([0, 0, 1], [0, 0.2, 0])
"""

from .pose import Pose, rotation_from_vector
from .camera_parameters import CameraParameters

__all__ = [
    # Classes
    "CameraParameters",
    "Pose",
    # Standalone functions
    "rotation_from_vector",
]
