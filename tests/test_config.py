"""
Tests for configuration loading.

Test Coverage:
- YAML loading, includes and deep merge
- Clipping settings from config
- Full geometry configuration from the default config file
"""

import numpy as np
import pytest

from mbt_geometry.config import GeometryConfig
from mbt_geometry.polygon import ClipPlane, ClippingSettings, Point3D, Polygon
from mbt_geometry.utils.config_loader import ConfigLoader, get_nested, load_config


# =============================================================================
# Test ConfigLoader
# =============================================================================

class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_load(self, tmp_path):
        (tmp_path / "cfg.yaml").write_text("clipping:\n  near: 0.1\n  far: 10.0\n")

        config = ConfigLoader(tmp_path).load("cfg.yaml")

        assert config == {"clipping": {"near": 0.1, "far": 10.0}}

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader(tmp_path).load("missing.yaml")

    def test_load_empty_file(self, tmp_path):
        (tmp_path / "empty.yaml").write_text("")

        assert ConfigLoader(tmp_path).load("empty.yaml") == {}

    def test_load_non_mapping(self, tmp_path):
        (tmp_path / "list.yaml").write_text("- 1\n- 2\n")

        with pytest.raises(ValueError):
            ConfigLoader(tmp_path).load("list.yaml")

    def test_include(self, tmp_path):
        (tmp_path / "camera.yaml").write_text("fx: 500.0\nfy: 500.0\n")
        (tmp_path / "main.yaml").write_text("camera: !include camera.yaml\n")

        config = ConfigLoader(tmp_path).load("main.yaml")

        assert config["camera"] == {"fx": 500.0, "fy": 500.0}

    def test_cached_config_not_shared(self, tmp_path):
        (tmp_path / "cfg.yaml").write_text("clipping:\n  near: 0.1\n")
        loader = ConfigLoader(tmp_path)

        first = loader.load("cfg.yaml")
        first["clipping"]["near"] = 5.0

        assert loader.load("cfg.yaml")["clipping"]["near"] == 0.1

    def test_merge(self):
        loader = ConfigLoader()
        base = {"camera": {"fx": 1.0, "fy": 2.0}, "clipping": {"near": 0.1}}
        override = {"camera": {"fx": 3.0}, "visibility": {"wrap_around": True}}

        merged = loader.merge(base, override)

        assert merged == {
            "camera": {"fx": 3.0, "fy": 2.0},
            "clipping": {"near": 0.1},
            "visibility": {"wrap_around": True},
        }
        assert base["camera"]["fx"] == 1.0

    def test_save_roundtrip(self, tmp_path):
        loader = ConfigLoader(tmp_path)
        config = {"clipping": {"planes": ["near", "left"], "near": 0.2}}

        loader.save(config, tmp_path / "out" / "saved.yaml")

        assert loader.load("out/saved.yaml") == config

    def test_get_nested(self):
        config = {"clipping": {"near": 0.1}}

        assert get_nested(config, "clipping.near") == 0.1
        assert get_nested(config, "clipping.far", 100.0) == 100.0
        assert get_nested(config, "camera.fx") is None

    def test_load_config_overrides(self):
        config = load_config("default.yaml", {"clipping": {"near": 0.05}})

        assert config["clipping"]["near"] == 0.05
        assert config["clipping"]["far"] == 100.0


# =============================================================================
# Test ClippingSettings
# =============================================================================

class TestClippingSettings:
    """Tests for ClippingSettings."""

    def test_from_config(self):
        settings = ClippingSettings.from_config({
            "planes": ["near", "fov"],
            "near": 0.01,
            "far": 50.0,
        })

        assert settings.clip_mask == ClipPlane.NEAR | ClipPlane.FOV
        assert settings.near_distance == 0.01
        assert settings.far_distance == 50.0

    def test_defaults(self):
        settings = ClippingSettings.from_config({})

        assert settings.clip_mask == ClipPlane.NONE
        assert settings.near_distance == 0.001
        assert settings.far_distance == 100.0

    @pytest.mark.parametrize("near, far", [(0.0, 10.0), (5.0, 1.0), (1.0, 1.0)])
    def test_invalid_distances(self, near, far):
        with pytest.raises(ValueError):
            ClippingSettings(ClipPlane.NEAR, near, far)

    def test_undefined_plane_bits(self):
        with pytest.raises(ValueError):
            ClippingSettings(clip_mask=64)

    def test_apply(self):
        polygon = Polygon()
        polygon.set_corners([Point3D(), Point3D(), Point3D()])
        settings = ClippingSettings(ClipPlane.ALL, 0.5, 20.0)

        settings.apply(polygon)

        assert polygon.clip_mask == ClipPlane.ALL
        assert polygon.near_distance == 0.5
        assert polygon.far_distance == 20.0

    def test_to_dict(self):
        settings = ClippingSettings(ClipPlane.NEAR | ClipPlane.DOWN, 0.5, 20.0)

        assert settings.to_dict() == {"planes": ["near", "down"], "near": 0.5, "far": 20.0}


# =============================================================================
# Test GeometryConfig
# =============================================================================

class TestGeometryConfig:
    """Tests for the full geometry configuration."""

    def test_load_default(self):
        geometry = GeometryConfig.load()

        assert geometry.camera.width == 640
        assert geometry.camera.height == 480
        assert geometry.camera.fov_computed
        assert geometry.clipping.clip_mask == ClipPlane.NEAR | ClipPlane.FAR | ClipPlane.FOV
        assert np.isclose(geometry.visibility.alpha, np.radians(89.0))
        assert not geometry.visibility.wrap_around

    def test_from_dict_requires_camera(self):
        with pytest.raises(KeyError):
            GeometryConfig.from_dict({"clipping": {}})

    def test_from_dict(self):
        geometry = GeometryConfig.from_dict({
            "camera": {"fx": 100, "fy": 100, "cx": 50, "cy": 50,
                       "width": 100, "height": 100, "compute_fov": False},
            "visibility": {"angle_appear_deg": 70.0},
        })

        assert not geometry.camera.fov_computed
        assert geometry.clipping.clip_mask == ClipPlane.NONE
        assert np.isclose(geometry.visibility.alpha, np.radians(70.0))
