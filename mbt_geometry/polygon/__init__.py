"""
Polygon visibility, frustum clipping and image regions of interest.

Classes:
    Point3D: Model point with object, camera and normalized coordinates.
    Polygon: Face or line of a model, with its clipping configuration.
    ClipPlane: Clip plane bit flags.
    FrustumClipper: Clip polygons against near, far and FOV planes.
    VisibilityClassifier: Visible/appearing test of a face for a pose.
    ROIProjector: Image-space regions and containment tests.
    ClippingSettings: Clip mask and distances applied to polygons.

Standalone Functions:
    compute_clipped_boundary, get_clipped_polygon: Clipping.
    is_visible, compute_view_angle: Visibility.
    get_image_roi, get_clipped_image_roi, bounding_box,
    count_corners_inside_image, is_region_inside_image: Regions of interest.

Example Usage:
    >>> polygon = Polygon(face_index=0)
    >>> polygon.set_corners(corners)
    >>> polygon.clip_mask = ClipPlane.NEAR | ClipPlane.FOV
    >>> if VisibilityClassifier(alpha=np.radians(89)).is_visible(polygon, pose):
    ...     FrustumClipper(cam).compute_clipped_boundary(polygon)
    ...     roi = get_clipped_image_roi(polygon, cam)
"""

from .flags import ClipPlane, CLIP_ORDER, active_planes
from .point import Point3D
from .polygon import Polygon, PolygonState
from .clipping import FrustumClipper, compute_clipped_boundary, get_clipped_polygon
from .visibility import VisibilityClassifier, compute_view_angle, is_visible
from .roi import (
    ImagePoint,
    ROIProjector,
    bounding_box,
    count_corners_inside_image,
    get_clipped_image_roi,
    get_image_roi,
    is_region_inside_image,
)
from .settings import ClippingSettings

__all__ = [
    # Classes
    "ClipPlane",
    "Point3D",
    "Polygon",
    "PolygonState",
    "FrustumClipper",
    "VisibilityClassifier",
    "ImagePoint",
    "ROIProjector",
    "ClippingSettings",
    # Standalone functions
    "CLIP_ORDER",
    "active_planes",
    "compute_clipped_boundary",
    "get_clipped_polygon",
    "is_visible",
    "compute_view_angle",
    "get_image_roi",
    "get_clipped_image_roi",
    "bounding_box",
    "count_corners_inside_image",
    "is_region_inside_image",
]
