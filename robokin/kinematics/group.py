"""
Mechanical Group Kinematics
===========================

Resolves a robot together with its external mechanisms:

    1. Externals first, each mounted on the cell base
    2. An external with ``moves_robot`` becomes the robot's base
    3. A frame coupled to one of the group's externals (or a plane
       supplied by the cell) is re-expressed on that moving plane
    4. The robot is solved last and the tool plane is appended

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

import numpy as np

from ..config import KinematicsConfig
from ..geometry import Transform
from ..mechanisms.group import MechanicalGroup
from ..mechanisms.mechanism import MechanismError
from ..mechanisms.targets import RobotConfigurations, Target
from .factory import create_solver
from .solution import KinematicSolution

logger = logging.getLogger(__name__)


class MechanicalGroupKinematics:
    """
    Solver for one mechanical group.

    Example:
        >>> group = MechanicalGroup(0, [RobotArm.ur5e(), Track.linear("Track", 3000)])
        >>> solution = MechanicalGroupKinematics(group).resolve(target)
        >>> solution.joints        # robot axes 0-5, track axis 6
    """

    def __init__(
        self,
        group: MechanicalGroup,
        config: Optional[KinematicsConfig] = None
    ) -> None:
        self.group = group
        self.config = config
        self._externals = [create_solver(m, config) for m in group.externals]
        self._robot = create_solver(group.robot, config) if group.robot is not None else None
        logger.info(f"MechanicalGroupKinematics ready for {group.name}")

    def resolve(
        self,
        target: Target,
        prev_joints: Optional[Sequence[float]] = None,
        coupled_plane: Optional[Transform] = None,
        base_pose: Optional[Transform] = None
    ) -> KinematicSolution:
        """
        Resolve a target for the whole group.

        Args:
            target: Target for the group's robot (externals read
                ``target.external``)
            prev_joints: Previous group joint values, indexed by number
            coupled_plane: Moving plane the target's frame is attached
                to, supplied by the cell for cross-group couplings
            base_pose: Cell base pose

        Returns:
            KinematicSolution with the group's joints, every mechanism's
            planes in order (externals, robot) and the tool plane

        Raises:
            MechanismError: If the frame is coupled to a mechanism the group
                does not have
        """
        n = self.group.dof
        joints = np.zeros(n)
        planes: List[Transform] = []
        errors: List[str] = []
        configuration = RobotConfigurations.NONE

        prev = None
        if prev_joints is not None:
            prev = np.asarray(prev_joints, dtype=float).flatten()
            if len(prev) != n:
                errors.append(
                    f"Previous joints set but contain {len(prev)} value(s), "
                    f"should contain {n} values."
                )
                prev = None

        frame = target.frame
        coupled_index = None
        if frame.coupled_mechanism is not None and frame.coupled_group == self.group.index:
            coupled_index = frame.coupled_mechanism
            if not 0 <= coupled_index < len(self.group.externals):
                raise MechanismError(
                    f"{self.group.name}: frame coupled to unknown mechanism {coupled_index}"
                )

        robot_base = base_pose
        for index, (mechanism, solver) in enumerate(zip(self.group.externals, self._externals)):
            numbers = mechanism.joint_numbers
            solution = solver.resolve(
                target,
                prev[numbers] if prev is not None else None,
                base_pose,
            )
            joints[numbers] = solution.joints
            planes.extend(solution.planes)
            errors.extend(solution.errors)

            if index == coupled_index:
                coupled_plane = solution.planes[-1]
            if mechanism.moves_robot:
                robot_base = solution.planes[-1]

        if coupled_plane is not None:
            target = replace(target, frame=replace(frame, pose=coupled_plane @ frame.pose))

        if self._robot is not None:
            numbers = self.group.robot.joint_numbers
            solution = self._robot.resolve(
                target,
                prev[numbers] if prev is not None else None,
                robot_base,
            )
            joints[numbers] = solution.joints
            planes.extend(solution.planes)
            errors.extend(solution.errors)
            configuration = solution.configuration

        planes.append(planes[-1] @ target.tool.tcp)

        return KinematicSolution(
            joints=joints,
            planes=tuple(planes),
            errors=tuple(errors),
            configuration=configuration,
        )
