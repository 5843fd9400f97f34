"""
Mechanisms
==========

Read-only descriptions of robot arms and external axes. A mechanism owns
its joints, its base pose and the rest pose of every joint. Solving is
done elsewhere (see ``robokin.kinematics``); these classes carry no
solver state.

Variants:
    - RobotArm: 6 or 7 revolute axes, solved by the strategy named in
      its ``solver`` field
    - Positioner: one or two rotary axes carrying a workpiece
    - Track: up to three linear axes (X, Y, Z), usually moving a robot
    - Custom: axes without known geometry

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum, auto
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ..geometry import Transform
from .joints import Joint, JointKind, JointLimits

logger = logging.getLogger(__name__)


class MechanismError(ValueError):
    """Raised for mechanism definitions that cannot be solved."""
    pass


class SolverKind(Enum):
    """Inverse kinematics strategy of a robot arm."""
    SPHERICAL_WRIST = auto()
    OFFSET_WRIST = auto()
    NUMERICAL = auto()
    FRANKA_ANALYTICAL = auto()
    FRANKA_NUMERICAL = auto()
    FRANKA_TOOLBOX = auto()
    UNSUPPORTED = auto()


_SIX_AXIS_SOLVERS = (SolverKind.SPHERICAL_WRIST, SolverKind.OFFSET_WRIST)
_FRANKA_SOLVERS = (
    SolverKind.FRANKA_ANALYTICAL,
    SolverKind.FRANKA_NUMERICAL,
    SolverKind.FRANKA_TOOLBOX,
)


# =============================================================================
# Base Mechanism
# =============================================================================

class Mechanism:
    """
    Base class for all mechanisms.

    Attributes:
        name: Model name
        manufacturer: Manufacturer name
        payload: Rated payload (kg)
        base_pose: Pose of the mechanism base in its parent coordinates
        joints: Joints with ``index`` assigned and ``number`` defaulted
        moves_robot: Whether the robot of the group rides on this mechanism
    """

    def __init__(
        self,
        name: str,
        joints: Sequence[Joint],
        base_pose: Optional[Transform] = None,
        manufacturer: str = "Other",
        payload: float = 0.0,
        moves_robot: bool = False
    ) -> None:
        if not joints:
            raise MechanismError(f"{name}: a mechanism needs at least one joint")

        self.name = name
        self.manufacturer = manufacturer
        self.payload = payload
        self.base_pose = base_pose if base_pose is not None else Transform()
        self.moves_robot = moves_robot
        self.joints: Tuple[Joint, ...] = tuple(
            replace(joint, index=i, number=i if joint.number is None else joint.number)
            for i, joint in enumerate(joints)
        )

        numbers = np.array([joint.number for joint in self.joints], dtype=int)
        numbers.setflags(write=False)
        self.joint_numbers = numbers

        self.start_poses: Tuple[Transform, ...] = tuple(self._start_poses())

    @property
    def dof(self) -> int:
        """Number of joints."""
        return len(self.joints)

    @property
    def joint_limits(self) -> List[JointLimits]:
        return [joint.limits for joint in self.joints]

    def _start_poses(self) -> List[Transform]:
        """Rest pose of every joint in mechanism coordinates."""
        return [Transform() for _ in self.joints]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, dof={self.dof})"


# =============================================================================
# Robot Arm
# =============================================================================

class RobotArm(Mechanism):
    """
    Serial robot arm with 6 or 7 revolute axes.

    Example:
        >>> robot = RobotArm.ur5e()
        >>> robot.solver
        <SolverKind.OFFSET_WRIST: 2>
    """

    def __init__(
        self,
        name: str,
        joints: Sequence[Joint],
        solver: SolverKind = SolverKind.SPHERICAL_WRIST,
        base_pose: Optional[Transform] = None,
        manufacturer: str = "Other",
        payload: float = 0.0,
        use_modified_dh: bool = False,
        redundant_axis: Optional[int] = None
    ) -> None:
        super().__init__(name, joints, base_pose, manufacturer, payload)
        self.solver = solver
        self.use_modified_dh = use_modified_dh
        self.redundant_axis = redundant_axis
        self._validate()
        logger.info(f"RobotArm {name} with {self.dof} axes, solver {solver.name}")

    def _validate(self) -> None:
        if self.dof not in (6, 7):
            raise MechanismError(f"{self.name}: robot arms need 6 or 7 axes, got {self.dof}")
        if any(not joint.is_revolute for joint in self.joints):
            raise MechanismError(f"{self.name}: robot arm axes must be revolute")
        if self.solver in _SIX_AXIS_SOLVERS and self.dof != 6:
            raise MechanismError(f"{self.name}: {self.solver.name} needs 6 axes")
        if self.solver in _FRANKA_SOLVERS and self.dof != 7:
            raise MechanismError(f"{self.name}: {self.solver.name} needs 7 axes")
        if self.redundant_axis is not None and not 0 <= self.redundant_axis < self.dof:
            raise MechanismError(f"{self.name}: redundant axis {self.redundant_axis} out of range")

    @classmethod
    def from_dh(
        cls,
        name: str,
        a: Sequence[float],
        d: Sequence[float],
        alpha: Sequence[float],
        limits: Optional[Sequence[Tuple[float, float]]] = None,
        theta: Optional[Sequence[float]] = None,
        signs: Optional[Sequence[int]] = None,
        **kwargs: Any
    ) -> "RobotArm":
        """
        Build an arm from DH parameter lists.

        Args:
            name: Model name
            a, d, alpha: Per-axis DH values (mm, rad)
            limits: Optional (lower, upper) pairs; defaults to ±π
            theta: Optional per-axis angle offsets
            signs: Optional per-axis signs
            **kwargs: Forwarded to the constructor

        Returns:
            RobotArm instance
        """
        n = len(a)
        if not len(d) == len(alpha) == n:
            raise MechanismError(f"{name}: a, d and alpha must have the same length")
        limits = limits or [(-np.pi, np.pi)] * n
        theta = theta or [0.0] * n
        signs = signs or [1] * n
        joints = [
            Joint(
                a=a[i], d=d[i], alpha=alpha[i], theta=theta[i], sign=signs[i],
                limits=JointLimits(*limits[i]),
            )
            for i in range(n)
        ]
        return cls(name, joints, **kwargs)

    @classmethod
    def spherical_wrist(
        cls,
        name: str,
        a: Sequence[float],
        d: Sequence[float],
        limits: Optional[Sequence[Tuple[float, float]]] = None,
        **kwargs: Any
    ) -> "RobotArm":
        """
        Industrial arm with a spherical wrist.

        Uses the twist pattern α = [π/2, 0, π/2, -π/2, π/2, 0]. Only
        a1..a3, d1, d4 and d6 enter the closed form.
        """
        alpha = [np.pi/2, 0.0, np.pi/2, -np.pi/2, np.pi/2, 0.0]
        return cls.from_dh(name, a, d, alpha, limits, solver=SolverKind.SPHERICAL_WRIST, **kwargs)

    @classmethod
    def ur5e(cls, **kwargs: Any) -> "RobotArm":
        """Universal Robots UR5e (offset wrist)."""
        a = [0.0, -425.0, -392.2, 0.0, 0.0, 0.0]
        d = [162.5, 0.0, 0.0, 133.3, 99.7, 99.6]
        alpha = [np.pi/2, 0.0, 0.0, np.pi/2, -np.pi/2, 0.0]
        limits = [(-2 * np.pi, 2 * np.pi)] * 6
        kwargs.setdefault("manufacturer", "UR")
        kwargs.setdefault("payload", 5.0)
        return cls.from_dh("UR5e", a, d, alpha, limits, solver=SolverKind.OFFSET_WRIST, **kwargs)

    @classmethod
    def franka(
        cls,
        solver: SolverKind = SolverKind.FRANKA_NUMERICAL,
        **kwargs: Any
    ) -> "RobotArm":
        """Franka Emika Panda (modified DH, 7 axes)."""
        a = [0.0, 0.0, 0.0, 82.5, -82.5, 0.0, 88.0]
        d = [333.0, 0.0, 316.0, 0.0, 384.0, 0.0, 107.0]
        alpha = [0.0, -np.pi/2, np.pi/2, np.pi/2, -np.pi/2, np.pi/2, np.pi/2]
        limits = [
            (-2.8973, 2.8973),
            (-1.7628, 1.7628),
            (-2.8973, 2.8973),
            (-3.0718, -0.0698),
            (-2.8973, 2.8973),
            (-0.0175, 3.7525),
            (-2.8973, 2.8973),
        ]
        kwargs.setdefault("manufacturer", "FrankaEmika")
        kwargs.setdefault("payload", 3.0)
        return cls.from_dh(
            "Panda", a, d, alpha, limits,
            solver=solver, use_modified_dh=True, **kwargs
        )


# =============================================================================
# External Mechanisms
# =============================================================================

class Positioner(Mechanism):
    """
    Rotary workpiece positioner with one or two axes.

    One axis rotates about Z at (a0, 0, d0). With two axes the first
    tilts about -Y at (0, 0, d0) and the second rotates about Z at
    (0, a1, d0 + d1).
    """

    def __init__(self, name: str, joints: Sequence[Joint], **kwargs: Any) -> None:
        if len(joints) not in (1, 2):
            raise MechanismError(f"{name}: positioners have one or two axes")
        if any(not joint.is_revolute for joint in joints):
            raise MechanismError(f"{name}: positioner axes must be revolute")
        super().__init__(name, joints, **kwargs)
        logger.info(f"Positioner {name} with {self.dof} axes")

    def _start_poses(self) -> List[Transform]:
        j = self.joints
        if len(j) == 1:
            return [Transform.translation([j[0].a, 0.0, j[0].d])]
        tilt = Transform.from_plane([0.0, 0.0, j[0].d], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0])
        turn = Transform.translation([0.0, j[1].a, j[0].d + j[1].d])
        return [tilt, turn]


class Track(Mechanism):
    """Linear track with up to three axes translating along X, Y, Z."""

    def __init__(self, name: str, joints: Sequence[Joint], **kwargs: Any) -> None:
        if not 1 <= len(joints) <= 3:
            raise MechanismError(f"{name}: tracks have one to three axes")
        if any(joint.is_revolute for joint in joints):
            raise MechanismError(f"{name}: track axes must be prismatic")
        kwargs.setdefault("moves_robot", True)
        super().__init__(name, joints, **kwargs)
        logger.info(f"Track {name} with {self.dof} axes")

    def _start_poses(self) -> List[Transform]:
        poses = []
        origin = np.zeros(3)
        for joint in self.joints:
            origin = origin + np.array([joint.a, 0.0, joint.d])
            poses.append(Transform.translation(origin))
        return poses

    @classmethod
    def linear(
        cls,
        name: str,
        length: float,
        number: int = 6,
        **kwargs: Any
    ) -> "Track":
        """Single-axis track of the given travel length (mm)."""
        joint = Joint(kind=JointKind.PRISMATIC, limits=JointLimits(0.0, length),
                      max_speed=1000.0, number=number)
        return cls(name, [joint], **kwargs)


class Custom(Mechanism):
    """External axes without known geometry."""

    def __init__(self, name: str, joints: Sequence[Joint], **kwargs: Any) -> None:
        super().__init__(name, joints, **kwargs)
        logger.info(f"Custom mechanism {name} with {self.dof} axes")
