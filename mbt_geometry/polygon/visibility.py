"""
Face Visibility Module.

A face is visible when the angle between its normal and the direction from
the face towards the camera is below a threshold alpha.

Face normal (from the first three corners, camera frame):
    e1 = normalize(P1 - P0)
    e2 = normalize(P2 - P1)
    n  = normalize(e1 x e2)

Viewing direction (centroid towards the optical center):
    v = normalize(-mean(P_i))

    angle = acos(v . n)

The face is visible when angle < alpha. When the winding of the faces is not
consistent, wrap_around also accepts faces seen from the back
(pi - angle < alpha).

A face that is not visible but within appear_margin (1 degree by default)
of the threshold is flagged as appearing, so the tracker can prepare it
before it becomes visible and does not flicker at the boundary.
"""

from typing import Any, Dict

import numpy as np

from ..calibration.pose import Pose
from ..utils.logger import LoggerMixin
from .point import normalize
from .polygon import Polygon, PolygonState

DEFAULT_APPEAR_MARGIN = np.radians(1.0)


def compute_face_normal(polygon: Polygon) -> np.ndarray:
    """
    Unit normal of a transformed face, from its first three corners.

    A degenerate face (collinear corners) gives a zero vector.
    """
    polygon.require_state(
        "compute_face_normal", PolygonState.TRANSFORMED, PolygonState.CLIPPED
    )
    if polygon.corner_count < 3:
        raise ValueError(
            f"A face normal needs at least 3 corners, got {polygon.corner_count}"
        )

    p0, p1, p2 = (polygon.get_corner(i).camera_coordinates for i in range(3))
    e1 = normalize(p1 - p0)
    e2 = normalize(p2 - p1)
    return normalize(np.cross(e1, e2))


def compute_view_angle(polygon: Polygon) -> float:
    """
    Angle in radians between the face normal and the direction from the
    face centroid to the camera.
    """
    normal = compute_face_normal(polygon)
    centroid = np.mean([c.camera_coordinates for c in polygon.corners], axis=0)
    view_dir = normalize(-centroid)

    cos_angle = np.clip(np.dot(view_dir, normal), -1.0, 1.0)
    return float(np.arccos(cos_angle))


class VisibilityClassifier(LoggerMixin):
    """
    Decide whether faces are visible or appearing for a pose.

    Attributes:
        alpha: Maximum angle (radians) between face normal and viewing
            direction for a visible face.
        wrap_around: Also accept faces seen from the back.
        appear_margin: Width (radians) of the appearing band above alpha.

    Example:
        >>> classifier = VisibilityClassifier(alpha=np.radians(89))
        >>> if classifier.is_visible(polygon, pose):
        ...     boundary = clipper.compute_clipped_boundary(polygon)
    """

    def __init__(
        self,
        alpha: float,
        wrap_around: bool = False,
        appear_margin: float = DEFAULT_APPEAR_MARGIN,
    ):
        if alpha <= 0:
            raise ValueError(f"alpha must be positive, got {alpha}")
        if appear_margin < 0:
            raise ValueError(f"appear_margin must be non-negative, got {appear_margin}")

        self.alpha = float(alpha)
        self.wrap_around = wrap_around
        self.appear_margin = float(appear_margin)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "VisibilityClassifier":
        """
        Create from the ``visibility`` section of a config.

        Keys: angle_appear_deg (default 89), wrap_around (default False),
        appear_margin_deg (default 1).
        """
        return cls(
            alpha=np.radians(config.get("angle_appear_deg", 89.0)),
            wrap_around=bool(config.get("wrap_around", False)),
            appear_margin=np.radians(config.get("appear_margin_deg", 1.0)),
        )

    def _within(self, angle: float, threshold: float) -> bool:
        if angle < threshold:
            return True
        return self.wrap_around and (np.pi - angle) < threshold

    def is_visible(self, polygon: Polygon, pose: Pose) -> bool:
        """
        Test the visibility of a polygon for a pose.

        Lines (2 corners or fewer) are always visible and never appearing.
        Otherwise the polygon is transformed for the pose and its
        visible/appearing flags are updated.

        Args:
            polygon: Polygon to test.
            pose: Camera pose cMo.

        Returns:
            bool: The new value of polygon.visible.
        """
        if polygon.corner_count <= 2:
            polygon.visible = True
            polygon.appearing = False
            return True

        polygon.transform(pose)
        angle = compute_view_angle(polygon)

        polygon.visible = self._within(angle, self.alpha)
        polygon.appearing = (
            not polygon.visible
            and self._within(angle, self.alpha + self.appear_margin)
        )

        self.logger.debug(
            f"Face {polygon.face_index}: angle={np.degrees(angle):.2f} deg "
            f"visible={polygon.visible} appearing={polygon.appearing}"
        )
        return polygon.visible


def is_visible(
    polygon: Polygon,
    pose: Pose,
    alpha: float,
    wrap_around: bool = False,
) -> bool:
    """
    Test the visibility of a polygon for a pose.

    See VisibilityClassifier.is_visible.
    """
    return VisibilityClassifier(alpha, wrap_around).is_visible(polygon, pose)
