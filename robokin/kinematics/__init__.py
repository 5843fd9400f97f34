"""
Kinematics Module
=================

Forward and inverse kinematics for mechanisms, mechanical groups and
cells.

Key Components:
    - KinematicSolution: immutable joints, planes and diagnostics
    - Robot solvers: spherical wrist, offset wrist, numerical, Franka
    - External solvers: positioner, track, custom
    - MechanicalGroupKinematics / CellKinematics: composition and coupling

Author: Robokin Project Team
License: MIT
"""

from .solution import KinematicSolution, SolutionBuilder
from .base import MechanismKinematics
from .robot import RobotKinematics, squared_difference
from .externals import (
    ExternalKinematics,
    PositionerKinematics,
    TrackKinematics,
    CustomKinematics,
)
from .spherical_wrist import SphericalWristKinematics
from .offset_wrist import OffsetWristKinematics
from .numerical import NumericalKinematics, pose_error, pseudo_inverse
from .franka import (
    FrankaAnalyticalKinematics,
    FrankaNumericalKinematics,
    FrankaToolboxKinematics,
)
from .unsupported import UnsupportedKinematics
from .factory import create_solver
from .group import MechanicalGroupKinematics
from .cell import CellError, RobotCell, CellKinematics

__all__ = [
    # Results
    "KinematicSolution",
    "SolutionBuilder",
    # Bases
    "MechanismKinematics",
    "RobotKinematics",
    "squared_difference",
    # Externals
    "ExternalKinematics",
    "PositionerKinematics",
    "TrackKinematics",
    "CustomKinematics",
    # Robot solvers
    "SphericalWristKinematics",
    "OffsetWristKinematics",
    "NumericalKinematics",
    "pose_error",
    "pseudo_inverse",
    "FrankaAnalyticalKinematics",
    "FrankaNumericalKinematics",
    "FrankaToolboxKinematics",
    "UnsupportedKinematics",
    "create_solver",
    # Composition
    "MechanicalGroupKinematics",
    "CellError",
    "RobotCell",
    "CellKinematics",
]
