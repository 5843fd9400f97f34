"""
Kinematic Solutions
===================

Immutable result of resolving a target, and the mutable builder the
solvers fill in while resolving.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..geometry import FloatArray, Transform
from ..mechanisms.targets import RobotConfigurations


@dataclass(frozen=True)
class KinematicSolution:
    """
    Joint values, frames and diagnostics for one target.

    Attributes:
        joints: Joint values (read-only array)
        planes: Base pose followed by one frame per joint, in world
            coordinates (group solutions append the tool plane)
        errors: Soft diagnostics, empty on a clean solve
        configuration: Branch used (or detected for joint targets)
    """
    joints: FloatArray
    planes: Tuple[Transform, ...] = ()
    errors: Tuple[str, ...] = ()
    configuration: RobotConfigurations = RobotConfigurations.NONE

    def __post_init__(self) -> None:
        joints = np.array(self.joints, dtype=float)
        joints.setflags(write=False)
        object.__setattr__(self, "joints", joints)
        object.__setattr__(self, "planes", tuple(Transform(p.matrix) for p in self.planes))
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def ok(self) -> bool:
        """True when no diagnostics were reported."""
        return not self.errors


@dataclass
class SolutionBuilder:
    """Mutable accumulator turned into a :class:`KinematicSolution`."""
    joints: FloatArray
    planes: List[Optional[Transform]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    configuration: RobotConfigurations = RobotConfigurations.NONE

    @classmethod
    def for_dof(cls, dof: int) -> "SolutionBuilder":
        return cls(joints=np.zeros(dof), planes=[None] * (dof + 1))

    def extend_errors(self, errors: Sequence[str]) -> None:
        self.errors.extend(errors)

    def build(self) -> KinematicSolution:
        if any(p is None for p in self.planes):
            raise RuntimeError("solution planes were not fully computed")
        return KinematicSolution(
            joints=self.joints,
            planes=tuple(self.planes),
            errors=tuple(self.errors),
            configuration=self.configuration,
        )
