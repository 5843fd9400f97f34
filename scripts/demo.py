#!/usr/bin/env python3
"""
Robokin Demo
============

Demonstrates kinematic resolution for a small robot cell:
1. Closed-form inverse kinematics and branch selection
2. Numerical and Franka solvers
3. A robot on a linear track
4. Two groups, one following the other's flange

Usage:
    python scripts/demo.py
    python scripts/demo.py --config kinematics.yaml
    python scripts/demo.py --cell-only --verbose

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import numpy as np

from robokin import (
    CartesianTarget,
    CellKinematics,
    Frame,
    JointTarget,
    KinematicsConfig,
    MechanicalGroup,
    MechanicalGroupKinematics,
    RobotArm,
    RobotCell,
    RobotConfigurations,
    SolverKind,
    Track,
    Transform,
    create_solver,
)

# Configure logging
logging.basicConfig(
    level=logging.WARNING, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

INDUSTRIAL_A = [0.0, -300.0, 0.0, 0.0, 0.0, 0.0]
INDUSTRIAL_D = [400.0, 0.0, 0.0, 300.0, 0.0, 100.0]


def print_header(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def print_solution(label: str, solution) -> None:
    """Print joints, configuration and diagnostics of a solution."""
    print(f"   {label}: {np.round(np.degrees(solution.joints), 2)}")
    print(f"   Configuration: {solution.configuration!r}")
    if solution.errors:
        for error in solution.errors:
            print(f"   ⚠️  {error}")
    else:
        print("   ✅ No errors")


def run_closed_form_demo(config: KinematicsConfig) -> None:
    """Solve every branch of a spherical wrist arm for one pose."""
    print_header("🔧 CLOSED-FORM DEMO")

    robot = RobotArm.spherical_wrist("Industrial", INDUSTRIAL_A, INDUSTRIAL_D)
    solver = create_solver(robot, config)
    joints = np.array([0.1, -0.2, 0.3, 0.0, 0.5, 0.0])

    pose = solver.forward_kinematics(joints)
    print(f"\n📐 Flange position: {np.round(pose.position, 2)}")

    print("\n🎯 Branches:")
    for index in range(solver.solution_count):
        configuration = RobotConfigurations(index)
        branch, errors = solver.inverse_kinematics(pose, configuration, ())
        status = "⚠️ " + "; ".join(errors) if errors else "✅"
        print(f"   {configuration!r:45s} {np.round(np.degrees(branch), 1)} {status}")

    print("\n🔁 Closest to previous joints:")
    solution = solver.resolve(CartesianTarget(pose=pose), prev_joints=joints + 0.05)
    print_solution("Joints (deg)", solution)

    print("\n🚫 Out of reach:")
    solution = solver.resolve(CartesianTarget(pose=Transform.translation([5000, 0, 400])))
    print_solution("Joints (deg)", solution)


def run_redundant_demo(config: KinematicsConfig) -> None:
    """Solve the same Panda pose with the three 7-axis strategies."""
    print_header("🦾 FRANKA DEMO")

    joints = np.array([0.3, -0.5, 0.2, -2.0, 0.4, 1.8, 0.6])
    reference = create_solver(RobotArm.franka(), config)
    pose = reference.forward_kinematics(joints)

    for kind, external in [
        (SolverKind.FRANKA_ANALYTICAL, (joints[6],)),
        (SolverKind.FRANKA_NUMERICAL, (joints[2],)),
        (SolverKind.FRANKA_TOOLBOX, (joints[2],)),
    ]:
        print(f"\n🧮 {kind.name}:")
        try:
            solver = create_solver(RobotArm.franka(kind), config)
        except ImportError as e:
            print(f"   ⏭️  Skipped ({e})")
            continue
        solution = solver.resolve(
            CartesianTarget(pose=pose, external=external), prev_joints=joints + 0.02
        )
        print_solution("Joints (deg)", solution)


def run_track_demo(config: KinematicsConfig) -> None:
    """UR5e riding on a linear track."""
    print_header("🛤️  TRACK DEMO")

    group = MechanicalGroup(0, [RobotArm.ur5e(), Track.linear("Track", 3000.0)])
    kinematics = MechanicalGroupKinematics(group, config)

    joints = np.array([0.4, -1.1, 1.3, -0.9, 1.2, 0.3])
    prev = np.append(joints, 0.0)
    flange = create_solver(group.robot, config).forward_kinematics(joints)

    for travel in (0.0, 500.0, 1000.0):
        pose = Transform.translation([travel, 0, 0]) @ flange
        solution = kinematics.resolve(CartesianTarget(pose=pose, external=(travel,)), prev)
        print(f"\n📍 Track at {travel:.0f} mm:")
        print_solution("Joints", solution)
        prev = solution.joints


def run_cell_demo(config: KinematicsConfig) -> None:
    """Two groups, the UR5e working on a part held by the industrial arm."""
    print_header("🏭 CELL DEMO")

    holder = RobotArm.spherical_wrist("Holder", INDUSTRIAL_A, INDUSTRIAL_D)
    ur_base = Transform.translation([1200, 0, 0]) @ Transform.rotation_about(np.pi, [0, 0, 1])
    follower = RobotArm.ur5e(base_pose=ur_base)
    cell = RobotCell("Cell", [
        MechanicalGroup(0, [follower], name="Follower"),
        MechanicalGroup(1, [holder], name="Holder"),
    ])
    kinematics = CellKinematics(cell, config)

    holder_joints = np.array([0.1, -0.2, 0.3, 0.0, 0.5, 0.0])
    follower_joints = np.array([0.4, -1.1, 1.3, -0.9, 1.2, 0.3])
    holder_flange = create_solver(holder, config).forward_kinematics(holder_joints)
    follower_world = ur_base @ create_solver(follower, config).forward_kinematics(follower_joints)

    # Follower target expressed on the holder's flange
    pose = holder_flange.inverse() @ follower_world
    targets = [
        CartesianTarget(pose=pose, frame=Frame(coupled_group=1)),
        JointTarget(joints=holder_joints),
    ]

    solutions = kinematics.resolve(targets, [follower_joints, None])
    for group, solution in zip(cell.groups, solutions):
        print(f"\n🤖 {group.name}:")
        print_solution("Joints (deg)", solution)


def run_full_demo(config: KinematicsConfig) -> None:
    """Run every demonstration."""
    try:
        run_closed_form_demo(config)
        run_redundant_demo(config)
        run_track_demo(config)
        run_cell_demo(config)

        print("\n" + "=" * 60)
        print("✨ DEMO COMPLETE!")
        print("=" * 60)
        print("\nRun tests with: pytest tests/ -v")

    except Exception as e:
        logger.error(f"Demo error: {e}")
        raise


def load_config(path: Optional[str]) -> KinematicsConfig:
    if path is None:
        return KinematicsConfig()
    logger.info(f"Loading configuration from {path}")
    return KinematicsConfig.from_yaml(path)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Robokin Kinematics Demonstration")
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="YAML kinematics configuration"
    )
    parser.add_argument(
        "--closed-form-only", action="store_true", help="Run only the closed-form demo"
    )
    parser.add_argument(
        "--cell-only", action="store_true", help="Run only the cell demo"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)

    if args.closed_form_only:
        run_closed_form_demo(config)
    elif args.cell_only:
        run_cell_demo(config)
    else:
        run_full_demo(config)


if __name__ == "__main__":
    main()
