"""
Solver Dispatch
===============

Maps every mechanism variant (and, for robot arms, every
:class:`SolverKind`) to exactly one solver class.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from typing import Dict, Optional, Type

from ..config import KinematicsConfig
from ..mechanisms.mechanism import (
    Custom,
    Mechanism,
    MechanismError,
    Positioner,
    RobotArm,
    SolverKind,
    Track,
)
from .base import MechanismKinematics
from .externals import CustomKinematics, PositionerKinematics, TrackKinematics
from .franka import (
    FrankaAnalyticalKinematics,
    FrankaNumericalKinematics,
    FrankaToolboxKinematics,
)
from .numerical import NumericalKinematics
from .offset_wrist import OffsetWristKinematics
from .robot import RobotKinematics
from .spherical_wrist import SphericalWristKinematics
from .unsupported import UnsupportedKinematics

ROBOT_SOLVERS: Dict[SolverKind, Type[RobotKinematics]] = {
    SolverKind.SPHERICAL_WRIST: SphericalWristKinematics,
    SolverKind.OFFSET_WRIST: OffsetWristKinematics,
    SolverKind.NUMERICAL: NumericalKinematics,
    SolverKind.FRANKA_ANALYTICAL: FrankaAnalyticalKinematics,
    SolverKind.FRANKA_NUMERICAL: FrankaNumericalKinematics,
    SolverKind.FRANKA_TOOLBOX: FrankaToolboxKinematics,
    SolverKind.UNSUPPORTED: UnsupportedKinematics,
}

EXTERNAL_SOLVERS: Dict[type, Type[MechanismKinematics]] = {
    Positioner: PositionerKinematics,
    Track: TrackKinematics,
    Custom: CustomKinematics,
}


def create_solver(
    mechanism: Mechanism,
    config: Optional[KinematicsConfig] = None
) -> MechanismKinematics:
    """
    Create the solver for a mechanism.

    Args:
        mechanism: Robot arm or external mechanism
        config: Optional solver configuration

    Returns:
        MechanismKinematics instance

    Raises:
        MechanismError: If no solver is registered for the mechanism
    """
    if isinstance(mechanism, RobotArm):
        solver = ROBOT_SOLVERS.get(mechanism.solver)
    else:
        solver = EXTERNAL_SOLVERS.get(type(mechanism))
    if solver is None:
        raise MechanismError(f"No kinematic solver for {mechanism!r}")
    return solver(mechanism, config)
