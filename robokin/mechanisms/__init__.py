"""
Mechanisms Module
=================

Read-only mechanism definitions and motion targets.

Key Components:
    - Joints: DH geometry, limits and numbering
    - Mechanisms: robot arms, positioners, tracks, custom axes
    - MechanicalGroup: a robot and its external axes
    - Targets: joint and Cartesian targets with tool and frame

Author: Robokin Project Team
License: MIT
"""

from .joints import (
    EXTERNAL_AXIS_OFFSET,
    JointKind,
    JointLimits,
    Joint,
)

from .mechanism import (
    MechanismError,
    SolverKind,
    Mechanism,
    RobotArm,
    Positioner,
    Track,
    Custom,
)

from .group import MechanicalGroup

from .targets import (
    RobotConfigurations,
    Motions,
    Tool,
    Frame,
    Target,
    JointTarget,
    CartesianTarget,
    absolute_joint,
    absolute_joints,
)

__all__ = [
    # Joints
    "EXTERNAL_AXIS_OFFSET",
    "JointKind",
    "JointLimits",
    "Joint",
    # Mechanisms
    "MechanismError",
    "SolverKind",
    "Mechanism",
    "RobotArm",
    "Positioner",
    "Track",
    "Custom",
    "MechanicalGroup",
    # Targets
    "RobotConfigurations",
    "Motions",
    "Tool",
    "Frame",
    "Target",
    "JointTarget",
    "CartesianTarget",
    "absolute_joint",
    "absolute_joints",
]
