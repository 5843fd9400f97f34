"""
Mechanism Kinematics Base
=========================

Shared resolution skeleton for every mechanism solver:

    1. Validate previous joints (soft error and ignore on mismatch)
    2. Place the mechanism base in world coordinates
    3. Compute joint values              (variant specific)
    4. Check joint ranges                (soft errors, never clamps)
    5. Compute joint frames              (variant specific)
    6. Move the frames from mechanism to world coordinates

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np

from ..config import DEFAULT_CONFIG, KinematicsConfig
from ..geometry import FloatArray, Transform
from ..mechanisms.mechanism import Mechanism
from ..mechanisms.targets import Target
from .solution import KinematicSolution, SolutionBuilder

logger = logging.getLogger(__name__)


class MechanismKinematics(ABC):
    """
    Base class of all mechanism solvers.

    Subclasses implement :meth:`_set_joints` and :meth:`_set_planes`.
    ``_set_planes`` fills ``builder.planes[1:]`` in mechanism coordinates;
    the base class moves them into the world.
    """

    def __init__(
        self,
        mechanism: Mechanism,
        config: Optional[KinematicsConfig] = None
    ) -> None:
        self.mechanism = mechanism
        self.config = config or DEFAULT_CONFIG

    @property
    def dof(self) -> int:
        return self.mechanism.dof

    def resolve(
        self,
        target: Target,
        prev_joints: Optional[Sequence[float]] = None,
        base_pose: Optional[Transform] = None
    ) -> KinematicSolution:
        """
        Resolve a target into joint values and frames.

        Args:
            target: Joint or Cartesian target
            prev_joints: Previous joint values used for branch selection
                and angle unwrapping
            base_pose: Pose the mechanism base is mounted on (world)

        Returns:
            KinematicSolution; problems are reported in ``errors``
        """
        builder = SolutionBuilder.for_dof(self.dof)
        prev = self._check_previous(prev_joints, builder)

        base = self.mechanism.base_pose
        if base_pose is not None:
            base = base_pose @ base
        builder.planes[0] = base

        self._set_joints(builder, target, prev)
        self._check_ranges(builder)
        self._set_planes(builder, target)

        for i in range(1, len(builder.planes)):
            builder.planes[i] = base @ builder.planes[i]

        return builder.build()

    def _check_previous(
        self,
        prev_joints: Optional[Sequence[float]],
        builder: SolutionBuilder
    ) -> Optional[FloatArray]:
        if prev_joints is None:
            return None
        prev = np.asarray(prev_joints, dtype=float).flatten()
        if len(prev) != self.dof:
            builder.errors.append(
                f"Previous joints set but contain {len(prev)} value(s), "
                f"should contain {self.dof} values."
            )
            return None
        return prev

    def _check_ranges(self, builder: SolutionBuilder) -> None:
        for joint, value in zip(self.mechanism.joints, builder.joints):
            if not joint.limits.is_within(value):
                builder.errors.append(f"Axis {joint.number + 1} is outside the permitted range.")

    @abstractmethod
    def _set_joints(
        self,
        builder: SolutionBuilder,
        target: Target,
        prev_joints: Optional[FloatArray]
    ) -> None:
        """Fill ``builder.joints`` (and errors/configuration)."""

    @abstractmethod
    def _set_planes(self, builder: SolutionBuilder, target: Target) -> None:
        """Fill ``builder.planes[1:]`` in mechanism coordinates."""
