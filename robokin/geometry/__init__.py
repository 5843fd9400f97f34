"""
Geometry Module
===============

Rigid transforms, angle helpers, and Denavit-Hartenberg chain builders.

Author: Robokin Project Team
License: MIT
"""

from .transform import (
    FloatArray,
    Transform,
    normalize_angle,
    dh_transform,
    modified_dh_transform,
    dh_chain,
)

__all__ = [
    "FloatArray",
    "Transform",
    "normalize_angle",
    "dh_transform",
    "modified_dh_transform",
    "dh_chain",
]
