"""
Unit Tests for Cell Kinematics
==============================

Tests for multi-group resolution and cross-group frame coupling.

Author: Robokin Project Team
License: MIT
"""

import numpy as np
import pytest

from robokin.geometry import Transform
from robokin.kinematics import CellError, CellKinematics, RobotCell, create_solver
from robokin.mechanisms import (
    CartesianTarget,
    Frame,
    Joint,
    JointTarget,
    MechanicalGroup,
    Positioner,
    RobotArm,
)


@pytest.fixture
def ur_base():
    """UR5e facing the industrial arm from 1200 mm away."""
    return Transform.translation([1200, 0, 0]) @ Transform.rotation_about(np.pi, [0, 0, 1])


@pytest.fixture
def cell(industrial_arm, ur_base):
    """Group 0: UR5e following group 1's flange. Group 1: industrial arm."""
    ur5e = RobotArm.ur5e(base_pose=ur_base)
    return RobotCell("Cell", [
        MechanicalGroup(0, [ur5e], name="Follower"),
        MechanicalGroup(1, [industrial_arm], name="Holder"),
    ])


class TestRobotCell:
    """Tests for RobotCell construction."""

    def test_group_indices(self, industrial_arm):
        """Group indices must match positions."""
        with pytest.raises(CellError):
            RobotCell("Cell", [MechanicalGroup(1, [industrial_arm])])

    def test_empty(self):
        """A cell needs groups."""
        with pytest.raises(CellError):
            RobotCell("Cell", [])


class TestCellKinematics:
    """Tests for CellKinematics."""

    def test_coupled_to_other_flange(self, cell, ur_base, industrial_joints, ur5e_joints):
        """A coupled frame follows the provider's flange, resolved first."""
        kinematics = CellKinematics(cell)

        holder_flange = create_solver(cell.groups[1].robot).forward_kinematics(industrial_joints)
        follower_world = ur_base @ create_solver(cell.groups[0].robot).forward_kinematics(ur5e_joints)
        pose = holder_flange.inverse() @ follower_world

        targets = [
            CartesianTarget(pose=pose, frame=Frame(coupled_group=1)),
            JointTarget(joints=industrial_joints),
        ]
        solutions = kinematics.resolve(targets, [ur5e_joints + 0.01, None])

        assert solutions[0].ok
        assert np.allclose(solutions[0].joints, ur5e_joints, atol=1e-9)
        assert np.allclose(solutions[1].joints, industrial_joints)
        assert solutions[1].planes[-2].is_close(holder_flange)

    def test_uncoupled_differs(self, cell, industrial_joints, ur5e_joints, ur_base):
        """Without coupling the same pose is read in world coordinates."""
        holder_flange = create_solver(cell.groups[1].robot).forward_kinematics(industrial_joints)
        follower_world = ur_base @ create_solver(cell.groups[0].robot).forward_kinematics(ur5e_joints)
        pose = holder_flange.inverse() @ follower_world

        targets = [CartesianTarget(pose=pose), JointTarget(joints=industrial_joints)]
        solutions = CellKinematics(cell).resolve(targets, [ur5e_joints + 0.01, None])
        assert not np.allclose(solutions[0].joints, ur5e_joints, atol=1e-3)

    def test_independent_groups(self, cell, industrial_joints, ur5e_joints):
        """Uncoupled groups resolve in input order."""
        targets = [JointTarget(joints=ur5e_joints), JointTarget(joints=industrial_joints)]
        solutions = CellKinematics(cell).resolve(targets)
        assert np.allclose(solutions[0].joints, ur5e_joints)
        assert np.allclose(solutions[1].joints, industrial_joints)

    def test_target_count(self, cell, ur5e_joints):
        """One target per group."""
        with pytest.raises(CellError):
            CellKinematics(cell).resolve([JointTarget(joints=ur5e_joints)])

    def test_previous_count(self, cell, ur5e_joints, industrial_joints):
        """One previous joint set per group."""
        targets = [JointTarget(joints=ur5e_joints), JointTarget(joints=industrial_joints)]
        with pytest.raises(CellError):
            CellKinematics(cell).resolve(targets, [None])

    def test_self_coupling(self, cell, ur5e_joints, industrial_joints):
        """A robot cannot follow its own flange."""
        targets = [
            CartesianTarget(frame=Frame(coupled_group=0)),
            JointTarget(joints=industrial_joints),
        ]
        with pytest.raises(CellError, match="Cannot couple a robot with itself"):
            CellKinematics(cell).resolve(targets)

    def test_circular_coupling(self, cell):
        """Groups cannot follow each other."""
        targets = [
            CartesianTarget(frame=Frame(coupled_group=1)),
            CartesianTarget(frame=Frame(coupled_group=0)),
        ]
        with pytest.raises(CellError, match="Circular"):
            CellKinematics(cell).resolve(targets)

    def test_unknown_group(self, cell, industrial_joints):
        """Couplings must name an existing group."""
        targets = [
            CartesianTarget(frame=Frame(coupled_group=5)),
            JointTarget(joints=industrial_joints),
        ]
        with pytest.raises(CellError):
            CellKinematics(cell).resolve(targets)

    def test_mechanism_in_other_group(self, industrial_arm, ur_base, industrial_joints):
        """Mechanism couplings stay inside their group."""
        positioner = Positioner("Turntable", [Joint(a=800.0, d=400.0, number=6)])
        cell = RobotCell("Cell", [
            MechanicalGroup(0, [RobotArm.ur5e(base_pose=ur_base)]),
            MechanicalGroup(1, [industrial_arm, positioner]),
        ])
        targets = [
            CartesianTarget(frame=Frame(coupled_group=1, coupled_mechanism=0)),
            JointTarget(joints=industrial_joints, external=(0.0,)),
        ]
        with pytest.raises(CellError):
            CellKinematics(cell).resolve(targets)
