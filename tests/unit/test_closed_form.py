"""
Unit Tests for Closed-Form Robot Kinematics
===========================================

Tests for the spherical wrist and offset wrist solvers, the shared
resolution steps (branch search, unwrapping, range checks, joint target
classification) and the forward-only fallback.

Author: Robokin Project Team
License: MIT
"""

import numpy as np
import pytest

from robokin.geometry import Transform
from robokin.kinematics import (
    OffsetWristKinematics,
    SphericalWristKinematics,
    UnsupportedKinematics,
    create_solver,
    squared_difference,
)
from robokin.mechanisms import (
    CartesianTarget,
    Frame,
    JointTarget,
    RobotArm,
    RobotConfigurations,
    SolverKind,
    Target,
    Tool,
)


def all_branches(solver, pose):
    """Joint vectors of every configuration branch."""
    return [
        solver.inverse_kinematics(pose, RobotConfigurations(i), ())
        for i in range(solver.solution_count)
    ]


# =============================================================================
# Spherical Wrist
# =============================================================================

class TestSphericalWrist:
    """Tests for SphericalWristKinematics."""

    @pytest.fixture
    def solver(self, industrial_arm):
        return create_solver(industrial_arm)

    def test_factory(self, solver):
        """Spherical wrist arms get the closed-form solver."""
        assert isinstance(solver, SphericalWristKinematics)
        assert solver.solution_count == 8

    def test_every_branch_reaches_pose(self, solver, industrial_joints):
        """All eight branches reproduce the flange pose."""
        pose = solver.forward_kinematics(industrial_joints)
        for joints, errors in all_branches(solver, pose):
            assert errors == []
            assert solver.forward_kinematics(joints).is_close(pose)

    def test_exactly_one_branch_matches(self, solver, industrial_joints):
        """Branches are distinct and one of them is the original."""
        pose = solver.forward_kinematics(industrial_joints)
        matches = [
            joints for joints, _ in all_branches(solver, pose)
            if squared_difference(joints, industrial_joints) < 1e-12
        ]
        assert len(matches) == 1

    def test_closest_branch_with_previous(self, solver, industrial_joints):
        """Without a configuration the branch nearest the previous joints wins."""
        pose = solver.forward_kinematics(industrial_joints)
        target = CartesianTarget(pose=pose)
        solution = solver.resolve(target, prev_joints=industrial_joints + 0.01)

        assert solution.ok
        assert np.allclose(solution.joints, industrial_joints, atol=1e-9)

    def test_repeatable(self, solver, industrial_joints):
        """Resolving the same target twice gives identical output."""
        target = CartesianTarget(pose=solver.forward_kinematics(industrial_joints))
        prev = industrial_joints + 0.01
        first = solver.resolve(target, prev_joints=prev)
        second = solver.resolve(target, prev_joints=prev)

        assert np.array_equal(first.joints, second.joints)
        assert first.configuration == second.configuration
        assert first.errors == second.errors

    def test_unwraps_towards_previous(self, solver, industrial_joints):
        """Joint values follow the previous joints across ±π."""
        prev = industrial_joints.copy()
        prev[5] += 2 * np.pi
        pose = solver.forward_kinematics(industrial_joints)

        solution = solver.resolve(CartesianTarget(pose=pose), prev_joints=prev)
        assert np.isclose(solution.joints[5], industrial_joints[5] + 2 * np.pi)
        assert "Axis 6 is outside the permitted range." in solution.errors

    def test_tool_and_frame(self, solver, industrial_joints):
        """Targets are expressed in the frame and refer to the tool centre."""
        tcp = Transform.from_position_rpy([0, 0, 80], [0, 0, 0.3])
        frame = Transform.from_position_rpy([200, -100, 50], [0, 0, 0.5])
        flange = solver.forward_kinematics(industrial_joints)
        pose = frame.inverse() @ flange @ tcp

        target = CartesianTarget(tool=Tool(tcp=tcp), frame=Frame(pose=frame), pose=pose)
        solution = solver.resolve(target, prev_joints=industrial_joints)

        assert solution.ok
        assert np.allclose(solution.joints, industrial_joints, atol=1e-9)
        assert solution.planes[-1].is_close(flange)

    def test_planes(self, solver, industrial_joints):
        """One base plane plus one plane per joint."""
        base = Transform.translation([1000, 0, 0])
        solution = solver.resolve(JointTarget(joints=industrial_joints), base_pose=base)

        assert len(solution.planes) == 7
        assert solution.planes[0].is_close(base)
        expected = base @ solver.forward_kinematics(industrial_joints)
        assert solution.planes[-1].is_close(expected)

    def test_out_of_reach(self, solver):
        """Far targets are reported, not raised."""
        target = CartesianTarget(pose=Transform.translation([5000, 0, 400]))
        solution = solver.resolve(target)
        assert "Target out of reach." in solution.errors

    def test_overhead_singularity(self, solver):
        """Wrist centre on axis 1."""
        target = CartesianTarget(pose=Transform.translation([0, 0, 900]))
        solution = solver.resolve(target)
        assert "Near overhead singularity." in solution.errors

    def test_wrist_singularity(self, solver):
        """Axis 5 at zero locks axis 4 and lets axis 6 absorb the rotation."""
        joints = np.array([0.2, -0.3, 0.4, 0.0, 0.0, 0.6])
        pose = solver.forward_kinematics(joints)
        solution = solver.resolve(CartesianTarget(pose=pose), prev_joints=joints)

        assert "Near wrist singularity." in solution.errors
        assert solution.joints[3] == 0.0
        assert solution.planes[-1].is_close(pose, position_tolerance=1e-4)


# =============================================================================
# Joint Targets
# =============================================================================

class TestJointTargets:
    """Tests for joint target resolution."""

    @pytest.fixture
    def solver(self, industrial_arm):
        return create_solver(industrial_arm)

    def test_configuration_detected(self, solver, industrial_joints):
        """The detected branch solves back to the same joints."""
        solution = solver.resolve(JointTarget(joints=industrial_joints))
        assert solution.ok
        assert solution.configuration != RobotConfigurations.UNDEFINED

        pose = solver.forward_kinematics(industrial_joints)
        target = CartesianTarget(pose=pose, configuration=solution.configuration)
        again = solver.resolve(target)
        assert np.allclose(again.joints, industrial_joints, atol=1e-9)
        assert again.configuration == solution.configuration

    def test_singular_configuration_undefined(self, solver):
        """Joint sets no branch reproduces are UNDEFINED."""
        joints = [0.2, -0.3, 0.4, 0.7, 0.0, 0.6]
        solution = solver.resolve(JointTarget(joints=joints))
        assert solution.configuration == RobotConfigurations.UNDEFINED

    def test_out_of_range(self, solver):
        """Range violations are reported with 1-based axis numbers."""
        solution = solver.resolve(JointTarget(joints=[0.0, 4.0, 0.3, 0.0, 0.5, 0.0]))
        assert "Axis 2 is outside the permitted range." in solution.errors
        assert solution.joints[1] == 4.0

    def test_wrong_length(self, solver):
        """Short joint targets are padded and reported."""
        solution = solver.resolve(JointTarget(joints=[0.1, 0.2]))
        assert "Joint target contains 2 value(s), should contain 6 values." in solution.errors
        assert len(solution.joints) == 6

    def test_previous_mismatch(self, solver, industrial_joints):
        """Previous joints of the wrong length are ignored."""
        solution = solver.resolve(JointTarget(joints=industrial_joints), prev_joints=[0.0, 0.0])
        assert solution.errors == (
            "Previous joints set but contain 2 value(s), should contain 6 values.",
        )

    def test_solution_is_immutable(self, solver, industrial_joints):
        """Returned joints cannot be modified."""
        solution = solver.resolve(JointTarget(joints=industrial_joints))
        with pytest.raises(ValueError):
            solution.joints[0] = 1.0

    def test_unsupported_target(self, solver):
        """Bare targets are neither joint nor Cartesian."""
        with pytest.raises(TypeError):
            solver.resolve(Target())


# =============================================================================
# Offset Wrist
# =============================================================================

class TestOffsetWrist:
    """Tests for OffsetWristKinematics on the UR5e."""

    @pytest.fixture
    def solver(self, ur5e):
        return create_solver(ur5e)

    def test_factory(self, solver):
        """UR arms get the offset wrist solver."""
        assert isinstance(solver, OffsetWristKinematics)

    def test_clean_branches_reach_pose(self, solver, ur5e_joints):
        """Every branch solved without errors reproduces the flange pose."""
        pose = solver.forward_kinematics(ur5e_joints)
        clean = [joints for joints, errors in all_branches(solver, pose) if not errors]
        assert clean
        for joints in clean:
            assert solver.forward_kinematics(joints).is_close(pose)

    def test_exactly_one_branch_matches(self, solver, ur5e_joints):
        """Branches are distinct and one of them is the original."""
        pose = solver.forward_kinematics(ur5e_joints)
        matches = [
            joints for joints, _ in all_branches(solver, pose)
            if squared_difference(joints, ur5e_joints) < 1e-12
        ]
        assert len(matches) == 1

    def test_closest_branch_with_previous(self, solver, ur5e_joints):
        """Continuity along a path."""
        pose = solver.forward_kinematics(ur5e_joints)
        solution = solver.resolve(CartesianTarget(pose=pose), prev_joints=ur5e_joints - 0.02)
        assert solution.ok
        assert np.allclose(solution.joints, ur5e_joints, atol=1e-9)

    def test_out_of_reach(self, solver):
        """Far targets are reported, not raised."""
        solution = solver.resolve(CartesianTarget(pose=Transform.translation([3000, 500, 200])))
        assert "Target out of reach." in solution.errors

    def test_wrist_singularity(self, solver):
        """Axis 5 at zero is a warning, and the pose is still reached."""
        joints = np.array([0.4, -1.1, 1.3, -0.9, 0.0, 0.3])
        pose = solver.forward_kinematics(joints)
        solution = solver.resolve(CartesianTarget(pose=pose), prev_joints=joints)

        assert "Near wrist singularity." in solution.errors
        assert "Target out of reach." not in solution.errors
        assert solver.forward_kinematics(solution.joints).is_close(pose)

    def test_overhead_singularity(self, solver):
        """Wrist centre on the axis 1 line."""
        _, errors = solver.inverse_kinematics(
            Transform.translation([0, 0, 600]), RobotConfigurations.NONE, ()
        )
        assert "Near overhead singularity." in errors


# =============================================================================
# Unsupported
# =============================================================================

class TestUnsupported:
    """Tests for the forward-only fallback."""

    @pytest.fixture
    def solver(self):
        robot = RobotArm.from_dh(
            "Mystery", [0, 100, 0, 0, 0, 0], [300, 0, 0, 0, 0, 50], [0.3] * 6,
            solver=SolverKind.UNSUPPORTED,
        )
        return create_solver(robot)

    def test_cartesian_reports_error(self, solver):
        """Cartesian targets return zeros with an error."""
        solution = solver.resolve(CartesianTarget(pose=Transform.translation([100, 0, 0])))
        assert isinstance(solver, UnsupportedKinematics)
        assert solution.errors == ("Inverse kinematics not implemented for Mystery.",)
        assert np.allclose(solution.joints, 0.0)

    def test_joint_target_forward(self, solver):
        """Forward kinematics still works."""
        joints = [0.1, 0.2, 0.3, 0.4, 0.5, 0.6]
        solution = solver.resolve(JointTarget(joints=joints))
        assert solution.planes[-1].is_close(solver.forward_kinematics(joints))
