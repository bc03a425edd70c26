"""
Tests for face visibility.

The test face is a unit square whose normal points towards the camera. The
object is rotated about the camera Y axis by theta and pushed 2m along Z,
which makes the view angle of the face exactly theta.
"""

import numpy as np
import pytest

from mbt_geometry.calibration.pose import Pose
from mbt_geometry.errors import PolygonStateError
from mbt_geometry.polygon import (
    Point3D,
    Polygon,
    VisibilityClassifier,
    compute_view_angle,
    is_visible,
)
from mbt_geometry.polygon.visibility import compute_face_normal


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def face():
    polygon = Polygon(face_index=0)
    polygon.set_corners([
        Point3D.from_object(-0.5, 0.5, 0.0),
        Point3D.from_object(0.5, 0.5, 0.0),
        Point3D.from_object(0.5, -0.5, 0.0),
        Point3D.from_object(-0.5, -0.5, 0.0),
    ])
    return polygon


def pose_at(theta):
    c, s = np.cos(theta), np.sin(theta)
    R = np.array([
        [c, 0, s],
        [0, 1, 0],
        [-s, 0, c],
    ])
    return Pose(R=R, t=np.array([0.0, 0.0, 2.0]))


ALPHA = np.pi / 2


# =============================================================================
# Test view angle
# =============================================================================

class TestViewAngle:
    """Tests for the face normal and view angle."""

    def test_face_normal_towards_camera(self, face):
        face.transform(pose_at(0.0))

        assert np.allclose(compute_face_normal(face), [0.0, 0.0, -1.0])

    @pytest.mark.parametrize("theta", [0.0, 0.3, 1.2, 2.5])
    def test_view_angle_equals_rotation(self, face, theta):
        face.transform(pose_at(theta))

        assert np.isclose(compute_view_angle(face), theta, atol=1e-9)

    def test_view_angle_requires_transform(self, face):
        with pytest.raises(PolygonStateError):
            compute_view_angle(face)


# =============================================================================
# Test VisibilityClassifier
# =============================================================================

class TestVisibilityClassifier:
    """Tests for the visible / appearing classification."""

    def test_just_inside_threshold(self, face):
        classifier = VisibilityClassifier(alpha=ALPHA)

        assert classifier.is_visible(face, pose_at(ALPHA - 1e-6))
        assert face.visible
        assert not face.appearing

    def test_appearing_band(self, face):
        classifier = VisibilityClassifier(alpha=ALPHA)

        assert not classifier.is_visible(face, pose_at(ALPHA + np.radians(0.5)))
        assert not face.visible
        assert face.appearing

    def test_just_above_threshold_is_appearing(self, face):
        """The appearing band includes its lower end at alpha."""
        classifier = VisibilityClassifier(alpha=ALPHA)

        assert not classifier.is_visible(face, pose_at(ALPHA + 1e-6))
        assert face.appearing

    def test_beyond_appearing_band(self, face):
        classifier = VisibilityClassifier(alpha=ALPHA)

        assert not classifier.is_visible(face, pose_at(ALPHA + np.radians(2.0)))
        assert not face.visible
        assert not face.appearing

    def test_visible_and_appearing_exclusive(self, face):
        classifier = VisibilityClassifier(alpha=np.radians(60))

        for theta in np.linspace(0.0, np.pi, 37):
            classifier.is_visible(face, pose_at(theta))
            assert not (face.visible and face.appearing)

    def test_custom_margin(self, face):
        classifier = VisibilityClassifier(alpha=ALPHA, appear_margin=np.radians(5.0))

        classifier.is_visible(face, pose_at(ALPHA + np.radians(3.0)))

        assert face.appearing

    def test_back_face_without_wrap_around(self, face):
        classifier = VisibilityClassifier(alpha=0.5)

        assert not classifier.is_visible(face, pose_at(np.pi - 0.1))

    def test_back_face_with_wrap_around(self, face):
        classifier = VisibilityClassifier(alpha=0.5, wrap_around=True)

        assert classifier.is_visible(face, pose_at(np.pi - 0.1))

    def test_back_face_appearing_with_wrap_around(self, face):
        """Back faces get the same appearing band on the far side of pi - alpha."""
        classifier = VisibilityClassifier(alpha=0.5, wrap_around=True)

        assert not classifier.is_visible(face, pose_at(np.pi - 0.5 - np.radians(0.5)))
        assert face.appearing

    def test_back_face_beyond_band_with_wrap_around(self, face):
        classifier = VisibilityClassifier(alpha=0.5, wrap_around=True)

        assert not classifier.is_visible(face, pose_at(np.pi - 0.5 - np.radians(2.0)))
        assert not face.appearing

    def test_back_face_not_appearing_without_wrap_around(self, face):
        classifier = VisibilityClassifier(alpha=0.5)

        classifier.is_visible(face, pose_at(np.pi - 0.5 - np.radians(0.5)))

        assert not face.visible
        assert not face.appearing

    def test_line_always_visible(self):
        """A 2-corner polygon is visible without being transformed."""
        line = Polygon()
        line.set_corners([Point3D.from_object(0, 0, 0), Point3D.from_object(1, 0, 0)])
        line.appearing = True

        assert VisibilityClassifier(alpha=0.01).is_visible(line, pose_at(3.0))
        assert line.visible
        assert not line.appearing

    def test_transforms_polygon(self, face):
        VisibilityClassifier(alpha=ALPHA).is_visible(face, pose_at(0.0))

        assert np.allclose(face.get_corner(1).camera_coordinates, [0.5, 0.5, 2.0])

    def test_invalid_alpha(self):
        with pytest.raises(ValueError):
            VisibilityClassifier(alpha=0.0)

    def test_from_config(self):
        classifier = VisibilityClassifier.from_config({
            "angle_appear_deg": 80.0,
            "wrap_around": True,
        })

        assert np.isclose(classifier.alpha, np.radians(80.0))
        assert classifier.wrap_around
        assert np.isclose(classifier.appear_margin, np.radians(1.0))

    def test_free_function(self, face):
        assert is_visible(face, pose_at(0.2), alpha=ALPHA)
        assert face.visible
