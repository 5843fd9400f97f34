"""
Robokin
=======

Kinematics engine for industrial and collaborative robot cells: joint
and Cartesian targets are resolved into joint values, link frames,
configuration branches and diagnostics.

Example:
    >>> from robokin import RobotArm, MechanicalGroup, RobotCell, CellKinematics
    >>> cell = RobotCell("Cell", [MechanicalGroup(0, [RobotArm.ur5e()])])
    >>> solutions = CellKinematics(cell).resolve([target])

Author: Robokin Project Team
License: MIT
"""

from .config import KinematicsConfig, NumericalSettings, FrankaSettings
from .geometry import Transform
from .mechanisms import (
    Joint,
    JointKind,
    JointLimits,
    MechanismError,
    SolverKind,
    RobotArm,
    Positioner,
    Track,
    Custom,
    MechanicalGroup,
    RobotConfigurations,
    Motions,
    Tool,
    Frame,
    JointTarget,
    CartesianTarget,
)
from .kinematics import (
    KinematicSolution,
    create_solver,
    MechanicalGroupKinematics,
    CellError,
    RobotCell,
    CellKinematics,
)

__version__ = "0.1.0"

__all__ = [
    "KinematicsConfig",
    "NumericalSettings",
    "FrankaSettings",
    "Transform",
    "Joint",
    "JointKind",
    "JointLimits",
    "MechanismError",
    "SolverKind",
    "RobotArm",
    "Positioner",
    "Track",
    "Custom",
    "MechanicalGroup",
    "RobotConfigurations",
    "Motions",
    "Tool",
    "Frame",
    "JointTarget",
    "CartesianTarget",
    "KinematicSolution",
    "create_solver",
    "MechanicalGroupKinematics",
    "CellError",
    "RobotCell",
    "CellKinematics",
]
