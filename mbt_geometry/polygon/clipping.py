"""
View Frustum Clipping Module.

This module clips the boundary of a polygon, already moved into the camera
frame, against up to six half-spaces: the near and far planes and the four
field of view planes.

Algorithm:
==========

The boundary is a list of (point, origin flags) pairs, starting from the
corners with no flags. Each enabled plane is applied in turn (NEAR, FAR,
LEFT, RIGHT, UP, DOWN) and the list it produces is the input of the next
plane. For one plane, every edge (v_j, v_j+1) of the closed boundary is
classified:

    both endpoints outside  -> the edge contributes nothing
    both endpoints inside   -> the start vertex is kept
    endpoints straddle      -> the outside endpoint is replaced by the
                               crossing point, tagged with the plane flag

The start vertex of a surviving edge is always emitted. The end vertex is
emitted only when the plane replaced it, since an unchanged end vertex is
emitted as the start of the next edge. A 2-corner polygon (a line) has no
closing edge: both vertices of its first surviving edge are emitted and the
pass ends.

Distance Planes:
----------------
    NEAR keeps Z >= near,  FAR keeps Z <= far
    t = (d - Z1) / (Z2 - Z1)
    P = P1 + t (P2 - P1),  Z = d

Field of View Planes:
---------------------
Each plane goes through the optical center with inward unit normal n. An
endpoint P is inside when the angle between P/|P| and n is below 90 degrees.
The crossing of the segment with the plane n . P = 0 is at:

    t = -(n . P1) / (n . (P2 - P1))
    P = P1 + t (P2 - P1)

Near clipping is always applied before the FOV planes, so points behind
the camera never reach the angle test.

When the denominator of t vanishes (|.| < 1e-12) the edge lies on the
plane within rounding; the crossing is taken at the kept endpoint so no
infinite or NaN coordinates are produced.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..calibration.camera_parameters import CameraParameters
from ..calibration.pose import Pose
from ..utils.logger import LoggerMixin
from .flags import FOV_NORMAL_INDEX, ClipPlane, active_planes
from .point import Point3D, normalize
from .polygon import ClippedVertex, Polygon, PolygonState

# Below this crossing denominator both endpoints lie on the plane; the
# crossing is snapped to the kept endpoint
DEGENERATE_EPSILON = 1e-12

EdgeResult = Optional[Tuple[ClippedVertex, ClippedVertex]]


class FrustumClipper(LoggerMixin):
    """
    Clip polygons against the near, far and field of view planes.

    Attributes:
        camera: Camera parameters. FOV normals must be computed before FOV
            planes are used.

    Example:
        >>> cam = CameraParameters(fx=600, fy=600, cx=320, cy=240, width=640, height=480)
        >>> cam.compute_fov()
        >>> clipper = FrustumClipper(cam)
        >>> polygon.transform(pose)
        >>> boundary = clipper.compute_clipped_boundary(polygon)
    """

    def __init__(self, camera: CameraParameters):
        self.camera = camera

    def compute_clipped_boundary(self, polygon: Polygon) -> List[ClippedVertex]:
        """
        Clip the polygon boundary for its current pose.

        The result is stored on the polygon and returned. A polygon entirely
        outside the kept region gives an empty list.

        Args:
            polygon: Polygon already transformed for the pose of interest.

        Returns:
            List of (point, origin flags) pairs.

        Raises:
            PolygonStateError: If the polygon has not been transformed.
            FovNotComputedError: If FOV planes are enabled but the camera
                FOV normals have not been computed.
        """
        polygon.require_state(
            "compute_clipped_boundary",
            PolygonState.TRANSFORMED,
            PolygonState.CLIPPED,
        )

        boundary: List[ClippedVertex] = [
            (corner.copy(), ClipPlane.NONE) for corner in polygon.corners
        ]

        planes = active_planes(polygon.clip_mask)
        normals = None
        if any(plane in FOV_NORMAL_INDEX for plane in planes):
            normals = self.camera.get_fov_normals()

        for plane in planes:
            boundary = self._clip_pass(
                boundary,
                plane,
                polygon,
                normals[FOV_NORMAL_INDEX[plane]] if plane in FOV_NORMAL_INDEX else None,
            )
            self.logger.debug(
                f"Face {polygon.face_index}: {plane.name} pass -> {len(boundary)} vertices"
            )
            if not boundary:
                break

        polygon.set_clipped_boundary(boundary)
        return polygon.clipped_boundary

    def _clip_pass(
        self,
        boundary: List[ClippedVertex],
        plane: ClipPlane,
        polygon: Polygon,
        normal: Optional[np.ndarray],
    ) -> List[ClippedVertex]:
        """Clip every edge of the boundary against one plane."""
        result: List[ClippedVertex] = []
        count = len(boundary)

        for j in range(count):
            start = boundary[j]
            end = boundary[(j + 1) % count]

            if plane is ClipPlane.NEAR:
                clipped = self._clip_edge_distance(start, end, plane, polygon.near_distance)
            elif plane is ClipPlane.FAR:
                clipped = self._clip_edge_distance(start, end, plane, polygon.far_distance)
            else:
                clipped = self._clip_edge_fov(start, end, plane, normal)

            if clipped is None:
                continue

            (p1, flags1), (p2, flags2) = clipped
            p1.projection()
            result.append((p1, flags1))

            if flags2 != end[1] or polygon.is_line:
                p2.projection()
                result.append((p2, flags2))

            if polygon.is_line:
                break

        return result

    def _crossing_parameter(
        self,
        numerator: float,
        denominator: float,
        start_outside: bool,
        plane: ClipPlane,
    ) -> float:
        """
        Parameter t of the crossing point P1 + t (P2 - P1) of a straddling edge.

        A vanishing denominator means the edge lies on the plane; the
        crossing is then the kept endpoint.
        """
        if abs(denominator) < DEGENERATE_EPSILON:
            self.logger.debug(f"Degenerate edge on {plane.name} plane, snapping to kept endpoint")
            return 1.0 if start_outside else 0.0
        return float(numerator / denominator)

    def _clip_edge_distance(
        self,
        start: ClippedVertex,
        end: ClippedVertex,
        plane: ClipPlane,
        distance: float,
    ) -> EdgeResult:
        """Clip an edge against the near or far plane."""
        (p1, flags1), (p2, flags2) = start, end

        if plane is ClipPlane.FAR:
            outside1, outside2 = p1.Z > distance, p2.Z > distance
        else:
            outside1, outside2 = p1.Z < distance, p2.Z < distance

        if outside1 and outside2:
            return None
        if not outside1 and not outside2:
            return (p1.copy(), flags1), (p2.copy(), flags2)

        t = self._crossing_parameter(distance - p1.Z, p2.Z - p1.Z, outside1, plane)
        crossing = Point3D(
            X=(p2.X - p1.X) * t + p1.X,
            Y=(p2.Y - p1.Y) * t + p1.Y,
            Z=distance,
        )

        if outside1:
            return (crossing, flags1 | plane), (p2.copy(), flags2)
        return (p1.copy(), flags1), (crossing, flags2 | plane)

    def _clip_edge_fov(
        self,
        start: ClippedVertex,
        end: ClippedVertex,
        plane: ClipPlane,
        normal: np.ndarray,
    ) -> EdgeResult:
        """Clip an edge against a field of view plane through the optical center."""
        (p1, flags1), (p2, flags2) = start, end
        c1 = p1.camera_coordinates
        c2 = p2.camera_coordinates

        beta1 = np.arccos(np.clip(np.dot(normalize(c1), normal), -1.0, 1.0))
        beta2 = np.arccos(np.clip(np.dot(normalize(c2), normal), -1.0, 1.0))
        outside1 = beta1 >= np.pi / 2
        outside2 = beta2 >= np.pi / 2

        if outside1 and outside2:
            return None
        if not outside1 and not outside2:
            return (p1.copy(), flags1), (p2.copy(), flags2)

        direction = c2 - c1
        t = self._crossing_parameter(
            -np.dot(normal, c1), np.dot(normal, direction), outside1, plane
        )
        X, Y, Z = c1 + t * direction
        crossing = Point3D(X=float(X), Y=float(Y), Z=float(Z))

        if outside1:
            return (crossing, flags1 | plane), (p2.copy(), flags2)
        return (p1.copy(), flags1), (crossing, flags2 | plane)

    def clip_points(
        self,
        points: Sequence[Point3D],
        pose: Pose,
        clip_mask: int,
        near: float = 0.001,
        far: float = 100.0,
    ) -> List[Point3D]:
        """
        Clip an arbitrary point set in one shot.

        Only the distances whose plane is set in clip_mask are applied, the
        others keep the polygon defaults.

        Args:
            points: Corners in the object frame.
            pose: Camera pose cMo.
            clip_mask: Planes to clip against.
            near: Near clipping distance.
            far: Far clipping distance.

        Returns:
            Clipped points in the camera frame.
        """
        clip_mask = ClipPlane(clip_mask)

        polygon = Polygon()
        polygon.set_corners(points)
        polygon.clip_mask = clip_mask
        if clip_mask & ClipPlane.NEAR:
            polygon.near_distance = near
        if clip_mask & ClipPlane.FAR:
            polygon.far_distance = far

        polygon.transform(pose)
        self.compute_clipped_boundary(polygon)
        return polygon.get_clipped_points()


# =============================================================================
# Standalone Functions
# =============================================================================

def compute_clipped_boundary(
    polygon: Polygon,
    camera: CameraParameters,
) -> List[ClippedVertex]:
    """
    Clip a transformed polygon against its enabled planes.

    See FrustumClipper.compute_clipped_boundary.
    """
    return FrustumClipper(camera).compute_clipped_boundary(polygon)


def get_clipped_polygon(
    points: Sequence[Point3D],
    pose: Pose,
    clip_mask: int,
    camera: CameraParameters,
    near: float = 0.001,
    far: float = 100.0,
) -> List[Point3D]:
    """
    Clip a point set for a pose without keeping a polygon around.

    Args:
        points: Corners in the object frame.
        pose: Camera pose cMo.
        clip_mask: Planes to clip against.
        camera: Camera parameters (FOV normals needed for FOV planes).
        near: Near clipping distance, used when NEAR is in clip_mask.
        far: Far clipping distance, used when FAR is in clip_mask.

    Returns:
        List[Point3D]: Clipped points in the camera frame, empty when the
        polygon is entirely clipped away.

    Example:
        >>> square = [Point3D.from_object(x, y, 0.0)
        ...           for x, y in [(-1, -1), (1, -1), (1, 1), (-1, 1)]]
        >>> clipped = get_clipped_polygon(square, pose, ClipPlane.ALL, cam)
    """
    return FrustumClipper(camera).clip_points(points, pose, clip_mask, near, far)
