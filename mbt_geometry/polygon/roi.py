"""
Region of Interest Module.

Maps the corners of a polygon, or its clipped boundary, to pixel
coordinates and provides the image-containment tests used by the tracker
to decide whether a face has enough support in the image.

Image points use (i, j) = (row, column) = (v, u).
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..calibration.camera_parameters import CameraParameters
from ..calibration.pose import Pose
from .clipping import FrustumClipper
from .flags import ClipPlane
from .polygon import Polygon, PolygonState

INT_MAX = 2**31 - 1

# A region is rejected only when fewer than this many points are inside...
MIN_POINTS_INSIDE = 3
# ...and fewer than this fraction of its points
MIN_RATIO_INSIDE = 0.7


@dataclass
class ImagePoint:
    """A point in the image, i is the row (v) and j the column (u)."""
    i: float
    j: float

    @property
    def u(self) -> float:
        return self.j

    @property
    def v(self) -> float:
        return self.i

    def is_inside(self, height: int, width: int) -> bool:
        return 0 <= self.i < height and 0 <= self.j < width


def _to_image_point(camera: CameraParameters, x: float, y: float) -> ImagePoint:
    u, v = camera.meter_to_pixel(x, y)
    return ImagePoint(i=v, j=u)


# =============================================================================
# Standalone Functions
# =============================================================================

def get_image_roi(
    polygon: Polygon,
    camera: CameraParameters,
    pose: Optional[Pose] = None,
) -> List[ImagePoint]:
    """
    Project the corners of a polygon to pixels, without clipping.

    Args:
        polygon: Polygon to project.
        camera: Camera parameters.
        pose: If given, the polygon is transformed for this pose first.

    Returns:
        List[ImagePoint]: One point per corner, in corner order.

    Raises:
        PolygonStateError: If no pose is given and the polygon has not been
            transformed.
    """
    if pose is not None:
        polygon.transform(pose)
    polygon.require_state("get_image_roi", PolygonState.TRANSFORMED, PolygonState.CLIPPED)

    return [_to_image_point(camera, c.x, c.y) for c in polygon.corners]


def get_clipped_image_roi(
    polygon: Polygon,
    camera: CameraParameters,
    pose: Optional[Pose] = None,
    with_flags: bool = False,
) -> Union[List[ImagePoint], List[Tuple[ImagePoint, ClipPlane]]]:
    """
    Project the clipped boundary of a polygon to pixels.

    Args:
        polygon: Polygon whose boundary has been clipped.
        camera: Camera parameters.
        pose: If given, the polygon is transformed and clipped for this pose
            first.
        with_flags: Also return the origin flags of each vertex.

    Returns:
        Image points, or (image point, origin flags) pairs when with_flags.

    Raises:
        PolygonStateError: If no pose is given and the boundary has not been
            computed for the current pose.
    """
    if pose is not None:
        polygon.transform(pose)
        FrustumClipper(camera).compute_clipped_boundary(polygon)
    polygon.require_state("get_clipped_image_roi", PolygonState.CLIPPED)

    roi = []
    for point, flags in polygon.clipped_boundary:
        point.projection()
        image_point = _to_image_point(camera, point.x, point.y)
        roi.append((image_point, flags) if with_flags else image_point)
    return roi


def bounding_box(points: Sequence[ImagePoint]) -> Tuple[int, int, int, int]:
    """
    Axis-aligned bounding box of image points.

    A negative coordinate means the region crosses the image border: the
    minimum on that axis is then set to 1 rather than the negative value.
    Maxima are only taken from strictly positive coordinates.

    Returns:
        Tuple[int, int, int, int]: (i_min, i_max, j_min, j_max), truncated
        toward zero.
    """
    i_min: float = INT_MAX
    i_max: float = 0
    j_min: float = INT_MAX
    j_max: float = 0

    for point in points:
        if i_min > point.i:
            i_min = point.i
        if point.i < 0:
            i_min = 1
        if point.i > 0 and i_max < point.i:
            i_max = point.i

        if j_min > point.j:
            j_min = point.j
        if point.j < 0:
            j_min = 1  # border
        if point.j > 0 and j_max < point.j:
            j_max = point.j

    return int(i_min), int(i_max), int(j_min), int(j_max)


def count_corners_inside_image(
    polygon: Polygon,
    height: int,
    width: int,
    camera: CameraParameters,
) -> int:
    """
    Count the corners in front of the camera that project inside the image.

    The count is also stored in polygon.corners_inside_prev_count.

    Raises:
        PolygonStateError: If the polygon has not been transformed.
    """
    polygon.require_state(
        "count_corners_inside_image", PolygonState.TRANSFORMED, PolygonState.CLIPPED
    )

    count = 0
    for corner in polygon.corners:
        if corner.Z > 0 and _to_image_point(camera, corner.x, corner.y).is_inside(height, width):
            count += 1

    polygon.corners_inside_prev_count = count
    return count


def is_region_inside_image(
    height: int,
    width: int,
    points: Sequence[ImagePoint],
) -> bool:
    """
    Check whether a region has enough points inside the image.

    The region is rejected only when fewer than 3 of its points are inside
    AND those are fewer than 70% of its points.
    """
    inside = sum(1 for point in points if point.is_inside(height, width))

    if inside < MIN_POINTS_INSIDE and inside < MIN_RATIO_INSIDE * len(points):
        return False
    return True


# =============================================================================
# ROIProjector Class
# =============================================================================

class ROIProjector:
    """
    Image-space views of polygons for one camera.

    Attributes:
        camera: Camera parameters.

    Example:
        >>> projector = ROIProjector(cam)
        >>> roi = projector.get_clipped_image_roi(polygon, pose=pose)
        >>> i_min, i_max, j_min, j_max = projector.bounding_box(roi)
    """

    def __init__(self, camera: CameraParameters):
        self.camera = camera

    def get_image_roi(
        self,
        polygon: Polygon,
        pose: Optional[Pose] = None,
    ) -> List[ImagePoint]:
        return get_image_roi(polygon, self.camera, pose)

    def get_clipped_image_roi(
        self,
        polygon: Polygon,
        pose: Optional[Pose] = None,
        with_flags: bool = False,
    ) -> Union[List[ImagePoint], List[Tuple[ImagePoint, ClipPlane]]]:
        return get_clipped_image_roi(polygon, self.camera, pose, with_flags)

    def count_corners_inside_image(self, polygon: Polygon) -> int:
        """Count corners inside this camera's image."""
        return count_corners_inside_image(
            polygon, self.camera.height, self.camera.width, self.camera
        )

    def is_region_inside_image(self, points: Sequence[ImagePoint]) -> bool:
        return is_region_inside_image(self.camera.height, self.camera.width, points)

    @staticmethod
    def bounding_box(points: Sequence[ImagePoint]) -> Tuple[int, int, int, int]:
        return bounding_box(points)
