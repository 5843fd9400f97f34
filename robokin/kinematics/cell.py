"""
Robot Cell Kinematics
=====================

Resolves every mechanical group of a cell for one set of targets.

A target whose frame is coupled to another group (``coupled_group`` set,
``coupled_mechanism`` unset) follows that group's robot flange. Groups
are therefore resolved in dependency order: providers before the groups
coupled to them, otherwise in input order. Results are returned in input
order.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..config import KinematicsConfig
from ..geometry import Transform
from ..mechanisms.group import MechanicalGroup
from ..mechanisms.targets import Target
from .group import MechanicalGroupKinematics
from .solution import KinematicSolution

logger = logging.getLogger(__name__)


class CellError(ValueError):
    """Raised for target sets a cell cannot resolve."""
    pass


class RobotCell:
    """
    A set of mechanical groups sharing one base.

    Attributes:
        name: Cell name
        groups: Mechanical groups; ``groups[i].index`` must equal ``i``
        base_pose: World pose of the cell
    """

    def __init__(
        self,
        name: str,
        groups: Sequence[MechanicalGroup],
        base_pose: Optional[Transform] = None
    ) -> None:
        if not groups:
            raise CellError(f"{name}: a cell needs at least one mechanical group")
        for i, group in enumerate(groups):
            if group.index != i:
                raise CellError(f"{name}: group at position {i} has index {group.index}")
        self.name = name
        self.groups = tuple(groups)
        self.base_pose = base_pose if base_pose is not None else Transform()


class CellKinematics:
    """
    Solver for a whole cell.

    Example:
        >>> kinematics = CellKinematics(cell)
        >>> solutions = kinematics.resolve([target_a, target_b])
        >>> [s.errors for s in solutions]
    """

    def __init__(self, cell: RobotCell, config: Optional[KinematicsConfig] = None) -> None:
        self.cell = cell
        self._groups = [MechanicalGroupKinematics(g, config) for g in cell.groups]
        logger.info(f"CellKinematics ready for {cell.name} with {len(self._groups)} groups")

    def resolve(
        self,
        targets: Sequence[Target],
        prev_joints: Optional[Sequence[Optional[Sequence[float]]]] = None
    ) -> List[KinematicSolution]:
        """
        Resolve one target per group.

        Args:
            targets: One target per group, in group order
            prev_joints: Optional previous joints per group (entries may
                be None)

        Returns:
            One KinematicSolution per group, in group order

        Raises:
            CellError: On count mismatches or invalid couplings
        """
        count = len(self._groups)
        if len(targets) != count:
            raise CellError(f"Expected {count} target(s), got {len(targets)}")
        if prev_joints is not None and len(prev_joints) != count:
            raise CellError(f"Expected {count} previous joint set(s), got {len(prev_joints)}")

        providers = self._providers(targets)
        solutions: Dict[int, KinematicSolution] = {}

        for index in self._order(providers):
            provider = providers.get(index)
            coupled_plane = solutions[provider].planes[-2] if provider is not None else None
            solutions[index] = self._groups[index].resolve(
                targets[index],
                prev_joints[index] if prev_joints is not None else None,
                coupled_plane,
                self.cell.base_pose,
            )

        return [solutions[i] for i in range(count)]

    def _providers(self, targets: Sequence[Target]) -> Dict[int, int]:
        """Group index -> index of the group whose flange it follows."""
        providers = {}
        for index, target in enumerate(targets):
            frame = target.frame
            if frame.coupled_group is None:
                continue
            if not 0 <= frame.coupled_group < len(self._groups):
                raise CellError(f"Frame coupled to unknown group {frame.coupled_group}")
            if frame.coupled_mechanism is not None:
                if frame.coupled_group != index:
                    raise CellError("Frames can only be coupled to mechanisms of their own group")
                if not 0 <= frame.coupled_mechanism < len(self.cell.groups[index].externals):
                    raise CellError(f"Frame coupled to unknown mechanism {frame.coupled_mechanism}")
                continue
            if frame.coupled_group == index:
                raise CellError("Cannot couple a robot with itself")
            if self.cell.groups[frame.coupled_group].robot is None:
                raise CellError(f"Group {frame.coupled_group} has no robot to couple to")
            providers[index] = frame.coupled_group
        return providers

    def _order(self, providers: Dict[int, int]) -> List[int]:
        """Dependency order, providers first."""
        order: List[int] = []
        visiting = set()

        def visit(index: int) -> None:
            if index in order:
                return
            if index in visiting:
                raise CellError("Circular coupling between mechanical groups")
            visiting.add(index)
            if index in providers:
                visit(providers[index])
            visiting.discard(index)
            order.append(index)

        for index in range(len(self._groups)):
            visit(index)
        return order
