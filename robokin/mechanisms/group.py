"""
Mechanical Groups
=================

A mechanical group is one robot arm (optional) plus the external
mechanisms sharing its controller numbering.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .joints import Joint
from .mechanism import Mechanism, MechanismError, RobotArm

logger = logging.getLogger(__name__)


class MechanicalGroup:
    """
    Robot arm plus external mechanisms with group-wide joint numbers.

    Joint numbers must be unique and contiguous from 0 so that a group
    joint vector can be indexed directly by ``Joint.number``.

    Attributes:
        index: Position of this group inside its cell
        robot: The group's robot arm, if any
        externals: External mechanisms in declaration order
        joints: All joints ordered by group number
    """

    def __init__(self, index: int, mechanisms: Sequence[Mechanism], name: str = "") -> None:
        robots = [m for m in mechanisms if isinstance(m, RobotArm)]
        if len(robots) > 1:
            raise MechanismError("A mechanical group holds at most one robot arm")
        if not mechanisms:
            raise MechanismError("A mechanical group needs at least one mechanism")

        self.index = index
        self.name = name or f"Group{index}"
        self.robot: Optional[RobotArm] = robots[0] if robots else None
        self.externals: Tuple[Mechanism, ...] = tuple(
            m for m in mechanisms if not isinstance(m, RobotArm)
        )

        joints: List[Joint] = [j for m in self.mechanisms for j in m.joints]
        numbers = sorted(j.number for j in joints)
        if numbers != list(range(len(joints))):
            raise MechanismError(
                f"{self.name}: joint numbers must be unique and contiguous from 0, got {numbers}"
            )
        self.joints: Tuple[Joint, ...] = tuple(sorted(joints, key=lambda j: j.number))

        logger.info(f"MechanicalGroup {self.name} with {len(self.joints)} joints")

    @property
    def mechanisms(self) -> Tuple[Mechanism, ...]:
        """Externals first, then the robot (resolution order)."""
        return self.externals + ((self.robot,) if self.robot is not None else ())

    @property
    def dof(self) -> int:
        return len(self.joints)
