"""
Joint Definitions
=================

Immutable joint descriptions: DH geometry, kind, sign, range and
numbering inside a mechanical group.

Numbering:
    ``index`` is the 0-based position of the joint inside its mechanism.
    ``number`` is the 0-based position inside the mechanical group; robot
    arm axes come first, external axes start at 6 and read their values
    from ``Target.external[number - 6]``.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

import numpy as np

EXTERNAL_AXIS_OFFSET = 6


class JointKind(Enum):
    """Joint actuation type."""
    REVOLUTE = auto()
    PRISMATIC = auto()


@dataclass(frozen=True)
class JointLimits:
    """
    Permitted joint range.

    Attributes:
        lower: Lower position limit (rad or mm)
        upper: Upper position limit (rad or mm)
    """
    lower: float = -np.pi
    upper: float = np.pi

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.lower > self.upper:
            raise ValueError(f"lower ({self.lower}) must be <= upper ({self.upper})")

    def clamp(self, value: float) -> float:
        """Clamp value to position limits."""
        return float(np.clip(value, self.lower, self.upper))

    def is_within(self, value: float, margin: float = 0.0) -> bool:
        """Check if value is within limits with optional margin."""
        return (self.lower + margin) <= value <= (self.upper - margin)

    def range(self) -> float:
        """Get joint range."""
        return self.upper - self.lower

    def center(self) -> float:
        """Get center of joint range."""
        return (self.lower + self.upper) / 2


@dataclass(frozen=True)
class Joint:
    """
    A single joint of a mechanism.

    Attributes:
        kind: Revolute or prismatic
        a: Link length (mm)
        d: Link offset (mm)
        alpha: Link twist (rad)
        theta: Constant angle offset (rad)
        sign: +1 or -1, direction of the joint value relative to DH
        limits: Permitted range
        max_speed: Maximum speed (rad/s or mm/s)
        index: Position inside the owning mechanism
        number: Position inside the mechanical group
        mesh: Opaque display geometry, carried but never interpreted
    """
    kind: JointKind = JointKind.REVOLUTE
    a: float = 0.0
    d: float = 0.0
    alpha: float = 0.0
    theta: float = 0.0
    sign: int = 1
    limits: JointLimits = field(default_factory=JointLimits)
    max_speed: float = np.pi
    index: int = 0
    number: Optional[int] = None
    mesh: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate joint."""
        if not isinstance(self.kind, JointKind):
            raise ValueError(f"Unknown joint kind: {self.kind!r}")
        if self.sign not in (1, -1):
            raise ValueError(f"sign must be +1 or -1, got {self.sign}")
        if self.max_speed <= 0:
            raise ValueError("max_speed must be positive")

    @property
    def is_revolute(self) -> bool:
        return self.kind is JointKind.REVOLUTE

    @property
    def external_index(self) -> int:
        """Position of this joint's value in ``Target.external``."""
        return (self.number if self.number is not None else self.index) - EXTERNAL_AXIS_OFFSET

    def dh_theta(self, value: float) -> float:
        """DH angle for a joint value."""
        if self.is_revolute:
            return self.sign * value + self.theta
        return self.theta

    def dh_d(self, value: float) -> float:
        """DH offset for a joint value."""
        if self.is_revolute:
            return self.d
        return self.d + self.sign * value

    def joint_value(self, dh_theta: float) -> float:
        """Inverse of :meth:`dh_theta` for revolute joints."""
        return self.sign * (dh_theta - self.theta)
