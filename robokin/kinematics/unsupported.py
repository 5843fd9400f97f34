"""
Unsupported Arm Kinematics
==========================

Placeholder for arms whose inverse kinematics has not been derived.
Forward kinematics works; Cartesian targets return the previous joints
(or zeros) with an explicit error instead of raising.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..geometry import FloatArray, Transform
from ..mechanisms.targets import RobotConfigurations
from .robot import RobotKinematics


class UnsupportedKinematics(RobotKinematics):
    """Forward-only solver."""

    def inverse_kinematics(
        self,
        pose: Transform,
        configuration: RobotConfigurations,
        external: Sequence[float],
        prev_joints: Optional[FloatArray] = None
    ) -> Tuple[FloatArray, List[str]]:
        joints = np.zeros(self.dof) if prev_joints is None else np.array(prev_joints, dtype=float)
        return joints, [f"Inverse kinematics not implemented for {self.mechanism.name}."]
