"""
Tests for camera parameters and poses.

Test Coverage:
- Meter/pixel conversions and construction from config
- Field of view normals: orientation and inside/outside tests
- Pose construction, inverse and composition
"""

import numpy as np
import pytest


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def simple_camera():
    """Simple 100x100 camera with centered principal point."""
    from mbt_geometry.calibration.camera_parameters import CameraParameters

    return CameraParameters(
        fx=100.0, fy=100.0,
        cx=50.0, cy=50.0,
        width=100, height=100,
    )


@pytest.fixture
def offset_camera():
    """Camera with off-center principal point and non-square pixels."""
    from mbt_geometry.calibration.camera_parameters import CameraParameters

    return CameraParameters(
        fx=600.0, fy=580.0,
        cx=300.0, cy=260.0,
        width=640, height=480,
    )


def rotation_y(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, 0, s],
        [0, 1, 0],
        [-s, 0, c],
    ])


# =============================================================================
# Test CameraParameters
# =============================================================================

class TestCameraParameters:
    """Tests for CameraParameters class."""

    def test_meter_to_pixel(self, simple_camera):
        """Normalized (0.1, -0.2) maps to (60, 30)."""
        u, v = simple_camera.meter_to_pixel(0.1, -0.2)

        assert np.isclose(u, 60.0)
        assert np.isclose(v, 30.0)

    def test_pixel_to_meter_inverts_meter_to_pixel(self, offset_camera):
        """pixel_to_meter undoes meter_to_pixel."""
        u, v = offset_camera.meter_to_pixel(0.25, -0.13)
        x, y = offset_camera.pixel_to_meter(u, v)

        assert np.isclose(x, 0.25)
        assert np.isclose(y, -0.13)

    def test_fov_calculation(self, simple_camera):
        """Centered 100x100 camera with f=100 has 2*atan(0.5) FOV."""
        fov_h, fov_v = simple_camera.get_fov()
        expected_fov = 2 * np.arctan(50 / 100)

        assert np.isclose(fov_h, expected_fov)
        assert np.isclose(fov_v, expected_fov)

    def test_invalid_focal_length(self):
        from mbt_geometry.calibration.camera_parameters import CameraParameters

        with pytest.raises(ValueError):
            CameraParameters(fx=0.0, fy=100.0, cx=50.0, cy=50.0, width=100, height=100)

    def test_from_config_computes_fov(self):
        from mbt_geometry.calibration.camera_parameters import CameraParameters

        cam = CameraParameters.from_config({
            "fx": 100, "fy": 100, "cx": 50, "cy": 50, "width": 100, "height": 100,
        })

        assert cam.fov_computed

    def test_from_config_missing_key(self):
        from mbt_geometry.calibration.camera_parameters import CameraParameters

        with pytest.raises(KeyError):
            CameraParameters.from_config({"fx": 100, "fy": 100})


# =============================================================================
# Test FOV normals
# =============================================================================

class TestFovNormals:
    """Tests for the field of view plane normals."""

    def test_not_computed_by_default(self, simple_camera):
        from mbt_geometry.errors import FovNotComputedError

        assert not simple_camera.fov_computed
        with pytest.raises(FovNotComputedError):
            simple_camera.get_fov_normals()

    def test_normals_are_unit_vectors(self, offset_camera):
        offset_camera.compute_fov()

        normals = offset_camera.get_fov_normals()

        assert len(normals) == 4
        for normal in normals:
            assert np.isclose(np.linalg.norm(normal), 1.0)

    def test_optical_axis_inside_all_planes(self, offset_camera):
        """The optical axis is on the visible side of every plane."""
        offset_camera.compute_fov()
        axis = np.array([0.0, 0.0, 1.0])

        for normal in offset_camera.get_fov_normals():
            assert np.dot(axis, normal) > 0

    def test_image_border_rays_lie_on_planes(self, offset_camera):
        """Rays through the image borders are orthogonal to their plane normal."""
        offset_camera.compute_fov()
        left, right, up, down = offset_camera.get_fov_normals()
        cam = offset_camera

        def ray(u, v):
            x, y = cam.pixel_to_meter(u, v)
            return np.array([x, y, 1.0])

        assert np.isclose(np.dot(ray(0, 100), left), 0.0)
        assert np.isclose(np.dot(ray(cam.width, 100), right), 0.0)
        assert np.isclose(np.dot(ray(200, 0), up), 0.0)
        assert np.isclose(np.dot(ray(200, cam.height), down), 0.0)

    def test_points_outside_image_are_outside_planes(self, simple_camera):
        """A point projecting left of the image is behind the left plane only."""
        simple_camera.compute_fov()
        left, right, up, down = simple_camera.get_fov_normals()

        # Projects to u = 50 + 100 * (-1) = -50
        point = np.array([-1.0, 0.0, 1.0])

        assert np.dot(point, left) < 0
        assert np.dot(point, right) > 0
        assert np.dot(point, up) > 0
        assert np.dot(point, down) > 0


# =============================================================================
# Test Pose
# =============================================================================

class TestPose:
    """Tests for the Pose class."""

    def test_identity(self):
        from mbt_geometry.calibration.pose import Pose

        pose = Pose.identity()

        assert np.allclose(pose.get_transform_matrix(), np.eye(4))

    def test_invalid_rotation_shape(self):
        from mbt_geometry.calibration.pose import Pose

        with pytest.raises(ValueError):
            Pose(R=np.eye(2))

    def test_from_matrix_roundtrip(self):
        from mbt_geometry.calibration.pose import Pose

        T = np.eye(4)
        T[:3, :3] = rotation_y(0.3)
        T[:3, 3] = [0.1, -0.2, 1.5]

        pose = Pose.from_matrix(T)

        assert np.allclose(pose.get_transform_matrix(), T)

    def test_from_matrix_invalid_shape(self):
        from mbt_geometry.calibration.pose import Pose

        with pytest.raises(ValueError):
            Pose.from_matrix(np.eye(3))

    def test_rotation_vector_matches_rotation_matrix(self):
        """theta-u (0, a, 0) is a rotation of a about Y."""
        from mbt_geometry.calibration.pose import Pose

        pose = Pose.from_translation_rotation_vector([0, 0, 1], [0, 0.4, 0])

        assert np.allclose(pose.R, rotation_y(0.4), atol=1e-12)
        assert np.allclose(pose.t, [0, 0, 1])

    def test_zero_rotation_vector(self):
        from mbt_geometry.calibration.pose import rotation_from_vector

        assert np.allclose(rotation_from_vector([0, 0, 0]), np.eye(3))

    def test_rotation_is_orthonormal(self):
        from mbt_geometry.calibration.pose import rotation_from_vector

        R = rotation_from_vector([0.3, -1.2, 0.7])

        assert np.allclose(R.T @ R, np.eye(3), atol=1e-10)
        assert np.isclose(np.linalg.det(R), 1.0, atol=1e-10)

    def test_transform_points(self):
        from mbt_geometry.calibration.pose import Pose

        pose = Pose(R=np.eye(3), t=np.array([1.0, 2.0, 3.0]))
        points = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])

        assert np.allclose(pose.transform_points(points), [[1, 2, 3], [2, 3, 4]])

    def test_inverse_roundtrip(self):
        from mbt_geometry.calibration.pose import Pose

        pose = Pose(R=rotation_y(np.pi / 6), t=np.array([1.5, -0.5, 2.0]))
        point = np.array([5.0, 3.0, 10.0])

        recovered = pose.inverse().transform_points(pose.transform_points(point))

        assert np.allclose(recovered, point, atol=1e-10)

    def test_compose(self):
        """compose applies self first, then other."""
        from mbt_geometry.calibration.pose import Pose

        first = Pose(R=rotation_y(0.2), t=np.array([0.0, 1.0, 0.0]))
        second = Pose(R=rotation_y(-0.5), t=np.array([0.3, 0.0, 2.0]))
        point = np.array([1.0, 2.0, 3.0])

        combined = first.compose(second)

        expected = second.transform_points(first.transform_points(point))
        assert np.allclose(combined.transform_points(point), expected)
