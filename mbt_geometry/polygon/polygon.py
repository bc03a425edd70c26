"""
Polygon of a tracked model.

A polygon is an ordered, fixed-size list of corners forming a closed face
(3 corners or more) or a line segment (2 corners). Each tracked frame the
corners are moved into the camera frame for the current pose, then the
visibility of the face is tested and/or its boundary is clipped against the
view frustum.

The calls must happen in this order for a given pose:

    transform(pose) -> compute_clipped_boundary(...) -> clipped ROI reads

PolygonState tracks where a polygon stands in that sequence, and each step
rejects calls made out of order with PolygonStateError instead of
returning data left over from a previous pose.
"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ..calibration.pose import Pose
from ..errors import PolygonStateError
from .flags import ClipPlane, check_mask
from .point import Point3D

DEFAULT_NEAR_DISTANCE = 0.001
DEFAULT_FAR_DISTANCE = 100.0

ClippedVertex = Tuple[Point3D, ClipPlane]


class PolygonState(Enum):
    """Processing state of a polygon for the current pose."""
    UNINITIALIZED = "uninitialized"
    TRANSFORMED = "transformed"
    CLIPPED = "clipped"


class Polygon:
    """
    A face or line of a tracked model.

    Attributes:
        face_index: Identifier assigned by the caller (-1 when unset).
        visible: Result of the last visibility test.
        appearing: True when the face is just outside the visibility angle.
        corners_inside_prev_count: Last number of corners found inside the image.
        clip_mask: Enabled clip planes.
        near_distance: Near clipping distance along the camera Z axis.
        far_distance: Far clipping distance along the camera Z axis.
        state: Processing state for the current pose.

    Example:
        >>> polygon = Polygon()
        >>> polygon.set_corners([Point3D.from_object(0, 0, 0),
        ...                      Point3D.from_object(0.1, 0, 0),
        ...                      Point3D.from_object(0.1, 0.1, 0)])
        >>> polygon.transform(Pose(t=[0.0, 0.0, 1.0]))
    """

    def __init__(self, face_index: int = -1):
        self.face_index = face_index
        self.visible = False
        self.appearing = False
        self.corners_inside_prev_count = 0

        self._corners: List[Point3D] = []
        self._clip_mask = ClipPlane.NONE
        self._near_distance = DEFAULT_NEAR_DISTANCE
        self._far_distance = DEFAULT_FAR_DISTANCE
        self._clipped_boundary: List[ClippedVertex] = []
        self._state = PolygonState.UNINITIALIZED

    # ------------------------------------------------------------------
    # Corners
    # ------------------------------------------------------------------

    @property
    def corner_count(self) -> int:
        return len(self._corners)

    def __len__(self) -> int:
        return len(self._corners)

    @property
    def corners(self) -> List[Point3D]:
        """Copies of the corners of the polygon."""
        return [corner.copy() for corner in self._corners]

    @property
    def is_line(self) -> bool:
        return len(self._corners) == 2

    def set_corner_count(self, n: int) -> None:
        """
        Resize the polygon to n default corners.

        Any previous corners, transform and clipping result are discarded.

        Raises:
            ValueError: If n is not a non-negative integer.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValueError(f"Corner count must be a non-negative integer, got {n!r}")

        self._corners = [Point3D() for _ in range(n)]
        self._invalidate()

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._corners):
            raise IndexError(
                f"Corner index {index} out of range [0, {len(self._corners) - 1}]"
            )

    def set_corner(self, index: int, point: Point3D) -> None:
        """
        Store a copy of point as corner index.

        Raises:
            IndexError: If index is outside [0, corner_count).
        """
        self._check_index(index)
        self._corners[index] = point.copy()
        self._invalidate()

    def get_corner(self, index: int) -> Point3D:
        """
        Get a copy of a corner. Use set_corner to change it.

        Raises:
            IndexError: If index is outside [0, corner_count).
        """
        self._check_index(index)
        return self._corners[index].copy()

    def set_corners(self, points: Iterable[Point3D]) -> None:
        """Replace all corners at once."""
        points = list(points)
        self.set_corner_count(len(points))
        for i, point in enumerate(points):
            self.set_corner(i, point)

    # ------------------------------------------------------------------
    # Clipping configuration
    # ------------------------------------------------------------------

    @property
    def clip_mask(self) -> ClipPlane:
        return self._clip_mask

    @clip_mask.setter
    def clip_mask(self, mask: int) -> None:
        self._clip_mask = check_mask(mask)
        self._drop_clipping()

    @property
    def near_distance(self) -> float:
        return self._near_distance

    @near_distance.setter
    def near_distance(self, distance: float) -> None:
        distance = float(distance)
        if distance <= 0:
            raise ValueError(f"Near distance must be positive, got {distance}")
        self._near_distance = distance
        self._drop_clipping()

    @property
    def far_distance(self) -> float:
        return self._far_distance

    @far_distance.setter
    def far_distance(self, distance: float) -> None:
        distance = float(distance)
        if distance <= 0:
            raise ValueError(f"Far distance must be positive, got {distance}")
        self._far_distance = distance
        self._drop_clipping()

    def set_clip_mask(self, mask: int) -> None:
        self.clip_mask = mask

    def set_near_distance(self, distance: float) -> None:
        self.near_distance = distance

    def set_far_distance(self, distance: float) -> None:
        self.far_distance = distance

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> PolygonState:
        return self._state

    def require_state(self, operation: str, *allowed: PolygonState) -> None:
        """
        Check the polygon is in one of the allowed states.

        Raises:
            PolygonStateError: If it is not.
        """
        if self._state not in allowed:
            raise PolygonStateError(operation, self._state, allowed)

    def _invalidate(self) -> None:
        self._clipped_boundary = []
        self._state = PolygonState.UNINITIALIZED

    def _drop_clipping(self) -> None:
        if self._state is PolygonState.CLIPPED:
            self._clipped_boundary = []
            self._state = PolygonState.TRANSFORMED

    # ------------------------------------------------------------------
    # Frame transform
    # ------------------------------------------------------------------

    def transform(self, pose: Pose) -> None:
        """
        Move every corner into the camera frame and project it.

        Calling this again fully replaces the camera-frame coordinates, so
        the result only depends on the pose. Any clipped boundary computed
        for a previous pose is discarded.

        Args:
            pose: Camera pose cMo.
        """
        for corner in self._corners:
            corner.change_frame(pose)
            corner.projection()

        self._clipped_boundary = []
        self._state = PolygonState.TRANSFORMED

    # ------------------------------------------------------------------
    # Clipping result
    # ------------------------------------------------------------------

    @property
    def clipped_boundary(self) -> List[ClippedVertex]:
        """
        Clipped boundary as (point, origin flags) pairs.

        Raises:
            PolygonStateError: If the boundary has not been computed for the
                current pose.
        """
        self.require_state("clipped_boundary", PolygonState.CLIPPED)
        return list(self._clipped_boundary)

    def set_clipped_boundary(self, boundary: List[ClippedVertex]) -> None:
        """Store a clipping result computed for the current pose."""
        self.require_state(
            "set_clipped_boundary", PolygonState.TRANSFORMED, PolygonState.CLIPPED
        )
        self._clipped_boundary = list(boundary)
        self._state = PolygonState.CLIPPED

    def get_clipped_points(self) -> List[Point3D]:
        """3D points of the clipped boundary, without their origin flags."""
        return [point for point, _ in self.clipped_boundary]

    # ------------------------------------------------------------------
    # Copy
    # ------------------------------------------------------------------

    def copy(self) -> "Polygon":
        """Return an independent copy of the polygon and all its state."""
        other = Polygon(face_index=self.face_index)
        other.visible = self.visible
        other.appearing = self.appearing
        other.corners_inside_prev_count = self.corners_inside_prev_count
        other._corners = [corner.copy() for corner in self._corners]
        other._clip_mask = self._clip_mask
        other._near_distance = self._near_distance
        other._far_distance = self._far_distance
        other._clipped_boundary = [
            (point.copy(), flags) for point, flags in self._clipped_boundary
        ]
        other._state = self._state
        return other

    def __copy__(self) -> "Polygon":
        return self.copy()

    def __deepcopy__(self, memo: Optional[dict] = None) -> "Polygon":
        return self.copy()

    def __repr__(self) -> str:
        return (
            f"Polygon(face_index={self.face_index}, corners={len(self._corners)}, "
            f"clip_mask={self._clip_mask!r}, state={self._state.name})"
        )
