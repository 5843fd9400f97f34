"""
Targets
=======

Motion targets and their attributes: tool, work frame, robot
configuration flags and joint unwrapping helpers.

Targets are value objects. Re-expressing a target in another frame
produces a new target (``dataclasses.replace``); nothing here is
mutated by the solvers.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag, auto
from typing import Optional, Sequence, Tuple

import numpy as np

from ..geometry import FloatArray, Transform, normalize_angle


class RobotConfigurations(IntFlag):
    """Branch selector for closed-form inverse kinematics."""
    NONE = 0
    SHOULDER = 1
    ELBOW = 2
    WRIST = 4
    UNDEFINED = 8


class Motions(Enum):
    """Motion type used to reach a target."""
    JOINT = auto()
    LINEAR = auto()
    CIRCULAR = auto()
    SPLINE = auto()


# =============================================================================
# Target Attributes
# =============================================================================

@dataclass(frozen=True)
class Tool:
    """
    End effector mounted on the robot flange.

    Attributes:
        tcp: Tool centre point relative to the flange
        name: Tool name
        weight: Mass (kg)
        centroid: Centre of mass relative to the flange (mm)
    """
    tcp: Transform = field(default_factory=Transform)
    name: str = "DefaultTool"
    weight: float = 0.0
    centroid: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Frame:
    """
    Work frame a Cartesian target is expressed in.

    A frame may be coupled to a moving mechanism: either an external
    mechanism inside the same group (``coupled_mechanism``) or another
    group's robot flange (``coupled_group`` alone).

    Attributes:
        pose: Frame pose in world (or coupled plane) coordinates
        coupled_mechanism: Index into the group's external mechanisms
        coupled_group: Index of the mechanical group it is coupled to
        name: Frame name
    """
    pose: Transform = field(default_factory=Transform)
    coupled_mechanism: Optional[int] = None
    coupled_group: Optional[int] = None
    name: str = "DefaultFrame"

    @property
    def is_coupled(self) -> bool:
        return self.coupled_group is not None


# =============================================================================
# Targets
# =============================================================================

@dataclass(frozen=True)
class Target:
    """
    Common target fields.

    Attributes:
        tool: Tool used at this target
        frame: Work frame
        external: Values for external axes, indexed by ``number - 6``
    """
    tool: Tool = field(default_factory=Tool)
    frame: Frame = field(default_factory=Frame)
    external: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "external", tuple(float(v) for v in self.external))


@dataclass(frozen=True)
class JointTarget(Target):
    """Target given as explicit joint values of the robot arm."""
    joints: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "joints", tuple(float(v) for v in self.joints))


@dataclass(frozen=True)
class CartesianTarget(Target):
    """
    Target given as a tool pose.

    Attributes:
        pose: Tool pose relative to the work frame
        configuration: Branch selector; ``None`` picks the branch closest
            to the previous joints
        motion: Motion type
    """
    pose: Transform = field(default_factory=Transform)
    configuration: Optional[RobotConfigurations] = None
    motion: Motions = Motions.JOINT


# =============================================================================
# Joint Unwrapping
# =============================================================================

def absolute_joint(value: float) -> float:
    """Angle equivalent to ``value`` on (-π, π]."""
    return normalize_angle(value)


def absolute_joints(
    joints: Sequence[float],
    prev_joints: Sequence[float]
) -> FloatArray:
    """
    Unwrap joint angles towards previous values.

    Each result is equivalent to ``joints[i]`` modulo 2π and lies within
    π of ``prev_joints[i]``.
    """
    result = np.empty(len(joints))
    for i, (value, prev) in enumerate(zip(joints, prev_joints)):
        diff = absolute_joint(value) - absolute_joint(prev)
        if abs(diff) > np.pi:
            diff -= np.sign(diff) * 2.0 * np.pi
        result[i] = prev + diff
    return result
