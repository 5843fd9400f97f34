"""
Kinematics Configuration
========================

Tuning constants for the kinematic solvers, grouped in dataclasses that
can be loaded from and saved to YAML.

Example:
    >>> config = KinematicsConfig.from_yaml("kinematics.yaml")
    >>> solver = create_solver(robot, config)

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Tuple

import yaml


def _default_scales() -> Tuple[float, ...]:
    return tuple(0.1 * i for i in range(20))


@dataclass
class NumericalSettings:
    """
    Settings for the generic Jacobian pseudo-inverse solver.

    Attributes:
        max_iterations: Outer Newton iterations before giving up
        max_retries: Perturbation retries when the Jacobian is singular
        jacobian_step: Finite-difference step (rad)
        perturbation: Joint nudge applied on a singular Jacobian (rad)
        min_step: Joint update below which the last step is taken and
            iteration stops (rad)
        max_step: Largest joint update allowed per iteration (rad)
        line_search_scales: Step multipliers tried in the line search
        pivot_tolerance: Smallest LU pivot treated as non-singular
        position_tolerance: Convergence threshold on position (mm)
        rotation_tolerance: Convergence threshold on orientation (rad)
    """
    max_iterations: int = 400
    max_retries: int = 20
    jacobian_step: float = 1e-3
    perturbation: float = 1e-3
    min_step: float = 1e-5
    max_step: float = 0.3
    line_search_scales: Tuple[float, ...] = field(default_factory=_default_scales)
    pivot_tolerance: float = 1e-6
    position_tolerance: float = 1e-3
    rotation_tolerance: float = 1e-6

    def __post_init__(self) -> None:
        """Validate settings."""
        self.line_search_scales = tuple(float(s) for s in self.line_search_scales)
        if self.max_iterations <= 0 or self.max_retries <= 0:
            raise ValueError("iteration budgets must be positive")
        if self.jacobian_step <= 0:
            raise ValueError("jacobian_step must be positive")
        if not 0 < self.min_step < self.max_step:
            raise ValueError("require 0 < min_step < max_step")
        if not self.line_search_scales or any(s < 0 for s in self.line_search_scales):
            raise ValueError("line_search_scales must be non-empty and non-negative")


@dataclass
class FrankaSettings:
    """
    Settings shared by the 7-axis Franka strategies.

    Attributes:
        redundant_axis: Joint index held by the null-space term
        max_iterations: Iterations of the null-space solver
        tolerance: Squared pose error (m², rad²) counted as converged
        null_space_gain: Gain pulling the redundant joint to its target
        line_search_scales: Step multipliers tried in the line search
        toolbox_iterations: Iteration limit passed to the toolbox solver
        toolbox_tolerance: Residual tolerance passed to the toolbox solver
    """
    redundant_axis: int = 2
    max_iterations: int = 100
    tolerance: float = 1e-10
    null_space_gain: float = 5.0
    line_search_scales: Tuple[float, ...] = field(default_factory=_default_scales)
    toolbox_iterations: int = 100
    toolbox_tolerance: float = 1e-10

    def __post_init__(self) -> None:
        """Validate settings."""
        self.line_search_scales = tuple(float(s) for s in self.line_search_scales)
        if not 0 <= self.redundant_axis < 7:
            raise ValueError("redundant_axis must index one of 7 joints")
        if self.max_iterations <= 0 or self.toolbox_iterations <= 0:
            raise ValueError("iteration budgets must be positive")
        if self.tolerance <= 0 or self.toolbox_tolerance <= 0:
            raise ValueError("tolerances must be positive")


@dataclass
class KinematicsConfig:
    """
    Master configuration for kinematic resolution.

    Attributes:
        angle_tolerance: Largest joint difference (rad) for a joint target
            to be classified as a known configuration
        singularity_tolerance: Threshold on |sin θ5| and similar terms
            below which a closed-form solver reports a singularity
        numerical: Generic numerical solver settings
        franka: Franka solver settings
    """
    angle_tolerance: float = 0.001
    singularity_tolerance: float = 1e-4
    numerical: NumericalSettings = field(default_factory=NumericalSettings)
    franka: FrankaSettings = field(default_factory=FrankaSettings)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.angle_tolerance <= 0:
            raise ValueError("angle_tolerance must be positive")
        if self.singularity_tolerance <= 0:
            raise ValueError("singularity_tolerance must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KinematicsConfig":
        """Build a configuration from a nested dictionary."""
        data = dict(data or {})
        numerical = NumericalSettings(**data.pop("numerical", {}))
        franka = FrankaSettings(**data.pop("franka", {}))
        return cls(numerical=numerical, franka=franka, **data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["numerical"]["line_search_scales"] = list(self.numerical.line_search_scales)
        data["franka"]["line_search_scales"] = list(self.franka.line_search_scales)
        return data

    @classmethod
    def from_yaml(cls, path: str) -> "KinematicsConfig":
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            KinematicsConfig instance
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    def to_yaml(self, path: str) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to save configuration
        """
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)


DEFAULT_CONFIG = KinematicsConfig()
