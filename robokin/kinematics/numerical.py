"""
Numerical Kinematics
====================

Iterative inverse kinematics for arbitrary 6 or 7 axis arms using a
finite-difference Jacobian and its pseudo-inverse.

Algorithm:
    1. Seed from previous joints, or the middle of every joint range
    2. Build the 6xN Jacobian by finite differences; if its
       pseudo-inverse is singular, nudge every joint and retry
    3. Newton step Δq = J⁺ · e, with e = [position error, orientation error]
    4. Clamp the largest component of Δq to ``max_step``
    5. Line search over ``line_search_scales`` for the lowest error
    6. Stop when the error is within tolerance, the step vanishes, or
       the iteration budget runs out

    Pseudo-inverse from the normal equations, solved by LU factorisation
    (Gaussian elimination with partial pivoting):
        J⁺ = Jᵀ (J Jᵀ)⁻¹    (fewer rows than columns)
        J⁺ = (Jᵀ J)⁻¹ Jᵀ    (otherwise)

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy import linalg

from ..geometry import FloatArray, Transform
from ..mechanisms.targets import RobotConfigurations
from .robot import RobotKinematics

logger = logging.getLogger(__name__)


WRAP_TOLERANCE = 5e-7


def orientation_error(current: FloatArray, target: FloatArray, wrap: bool = True) -> FloatArray:
    """
    Small-angle rotation vector taking ``current`` onto ``target``.

    Equal to ½ Σ_k (current[:, k] × target[:, k]), split into the two
    row-product halves v and w. Near a half turn the halves cancel; if
    every |v_i| matches |w_i| and the signs disagree, w is flipped so
    the solver still gets a usable direction.
    """
    f, t = current, target
    v = np.array([t[2] @ f[1], t[0] @ f[2], t[1] @ f[0]])
    w = -np.array([t[1] @ f[2], t[2] @ f[0], t[0] @ f[1]])

    if wrap and np.all(np.abs(np.abs(v) - np.abs(w)) <= WRAP_TOLERANCE):
        w = np.where(v * w < 0, -w, w)

    return 0.5 * (v + w)


def pose_error(current: FloatArray, target: FloatArray, wrap: bool = True) -> FloatArray:
    """Stacked [position, orientation] error between two 4x4 poses."""
    return np.concatenate([
        target[:3, 3] - current[:3, 3],
        orientation_error(current[:3, :3], target[:3, :3], wrap),
    ])


def pseudo_inverse(jacobian: FloatArray, tolerance: float) -> Optional[FloatArray]:
    """
    Normal-equation pseudo-inverse, or ``None`` when singular.

    Args:
        jacobian: M x N matrix
        tolerance: Smallest acceptable |pivot| of the LU factorisation

    Returns:
        N x M pseudo-inverse, or None
    """
    rows, cols = jacobian.shape
    wide = rows < cols
    normal = jacobian @ jacobian.T if wide else jacobian.T @ jacobian
    if not np.all(np.isfinite(normal)):
        return None
    lu, piv = linalg.lu_factor(normal, check_finite=False)
    if np.min(np.abs(np.diag(lu))) < tolerance:
        return None
    if wide:
        return jacobian.T @ linalg.lu_solve((lu, piv), np.eye(rows), check_finite=False)
    return linalg.lu_solve((lu, piv), jacobian.T, check_finite=False)


class NumericalKinematics(RobotKinematics):
    """
    Generic iterative solver.

    Works on standard or modified DH chains. With a ``redundant_axis``
    on the arm, that joint is held at ``target.external[0]`` (or its
    previous value) and removed from the Jacobian.
    """

    solution_count = 1

    def _flange(self, joints: FloatArray) -> FloatArray:
        return self.frames(joints)[-1]

    def jacobian(self, joints: FloatArray, flange: Optional[FloatArray] = None) -> FloatArray:
        """
        Finite-difference Jacobian (6 x N).

        Linear rows in mm/rad, angular rows in rad/rad.
        """
        step = self.config.numerical.jacobian_step
        if flange is None:
            flange = self._flange(joints)
        J = np.zeros((6, self.dof))
        for i in range(self.dof):
            moved = joints.copy()
            moved[i] += step
            J[:, i] = pose_error(flange, self._flange(moved), wrap=False) / step
        return J

    def inverse_kinematics(
        self,
        pose: Transform,
        configuration: RobotConfigurations,
        external: Sequence[float],
        prev_joints: Optional[FloatArray] = None
    ) -> Tuple[FloatArray, List[str]]:
        settings = self.config.numerical
        target = pose.matrix

        q = np.array(prev_joints if prev_joints is not None else self._mid, dtype=float)
        redundant = self.mechanism.redundant_axis
        if redundant is not None and len(external) > 0:
            q[redundant] = external[0]
        free = [i for i in range(self.dof) if i != redundant]

        for iteration in range(settings.max_iterations):
            for _ in range(settings.max_retries):
                flange = self._flange(q)
                pinv = pseudo_inverse(self.jacobian(q, flange)[:, free], settings.pivot_tolerance)
                if pinv is not None:
                    break
                q[free] += settings.perturbation
            else:
                logger.warning(f"{self.mechanism.name}: Jacobian singular after retries")
                return q, ["Target near singularity."]

            error = pose_error(flange, target)
            if self._converged(error):
                logger.debug(f"Numerical IK converged in {iteration + 1} iterations")
                return q, []

            step = np.zeros(self.dof)
            step[free] = pinv @ error
            largest = np.max(np.abs(step))
            if largest < settings.min_step:
                q = q + step
                break
            if largest > settings.max_step:
                step *= settings.max_step / largest

            best_scale, best_cost = 0.0, float(error @ error)
            for scale in settings.line_search_scales:
                trial = pose_error(self._flange(q + scale * step), target)
                cost = float(trial @ trial)
                if cost < best_cost:
                    best_scale, best_cost = scale, cost

            if best_scale == 0.0:
                break
            q = q + best_scale * step

        error = pose_error(self._flange(q), target)
        if self._converged(error):
            return q, []
        logger.warning(f"Numerical IK did not converge, final error {np.linalg.norm(error):.4g}")
        return q, ["Target out of reach."]

    def _converged(self, error: FloatArray) -> bool:
        settings = self.config.numerical
        return (
            np.linalg.norm(error[:3]) < settings.position_tolerance
            and np.linalg.norm(error[3:]) < settings.rotation_tolerance
        )
