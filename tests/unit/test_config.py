"""
Unit Tests for Configuration
============================

Author: Robokin Project Team
License: MIT
"""

import numpy as np
import pytest

from robokin.config import (
    DEFAULT_CONFIG,
    FrankaSettings,
    KinematicsConfig,
    NumericalSettings,
)


class TestNumericalSettings:
    """Tests for NumericalSettings."""

    def test_defaults(self):
        """Default budgets and line search."""
        settings = NumericalSettings()
        assert settings.max_iterations == 400
        assert len(settings.line_search_scales) == 20
        assert np.isclose(settings.line_search_scales[-1], 1.9)

    def test_invalid_steps(self):
        """min_step must stay below max_step."""
        with pytest.raises(ValueError):
            NumericalSettings(min_step=0.5, max_step=0.3)

    def test_empty_line_search(self):
        """An empty line search is rejected."""
        with pytest.raises(ValueError):
            NumericalSettings(line_search_scales=())


class TestFrankaSettings:
    """Tests for FrankaSettings."""

    def test_redundant_axis_range(self):
        """Redundant axis indexes one of seven joints."""
        with pytest.raises(ValueError):
            FrankaSettings(redundant_axis=7)


class TestKinematicsConfig:
    """Tests for KinematicsConfig."""

    def test_defaults(self):
        """Default tolerances."""
        assert DEFAULT_CONFIG.angle_tolerance == 0.001
        assert DEFAULT_CONFIG.franka.redundant_axis == 2

    def test_invalid_tolerance(self):
        """Tolerances must be positive."""
        with pytest.raises(ValueError):
            KinematicsConfig(angle_tolerance=0.0)

    def test_from_dict(self):
        """Nested dictionaries build nested settings."""
        config = KinematicsConfig.from_dict({
            "angle_tolerance": 0.01,
            "numerical": {"max_iterations": 50},
        })
        assert config.angle_tolerance == 0.01
        assert config.numerical.max_iterations == 50
        assert config.franka == FrankaSettings()

    def test_yaml_roundtrip(self, tmp_path):
        """Saved configuration loads back unchanged."""
        config = KinematicsConfig(
            singularity_tolerance=1e-3,
            numerical=NumericalSettings(line_search_scales=(0.5, 1.0)),
        )
        path = tmp_path / "kinematics.yaml"
        config.to_yaml(str(path))

        loaded = KinematicsConfig.from_yaml(str(path))
        assert loaded == config

    def test_empty_yaml(self, tmp_path):
        """An empty file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert KinematicsConfig.from_yaml(str(path)) == KinematicsConfig()
