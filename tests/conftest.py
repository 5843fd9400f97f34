"""
Pytest Configuration and Fixtures
==================================

Shared test configuration and fixtures for all test modules.
Handles path setup for importing the robokin package.

Author: Robokin Project Team
License: MIT
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from robokin.mechanisms import RobotArm, SolverKind


# =============================================================================
# Robot Fixtures
# =============================================================================

INDUSTRIAL_A = [0.0, -300.0, 0.0, 0.0, 0.0, 0.0]
INDUSTRIAL_D = [400.0, 0.0, 0.0, 300.0, 0.0, 100.0]
INDUSTRIAL_ALPHA = [np.pi/2, 0.0, np.pi/2, -np.pi/2, np.pi/2, 0.0]


@pytest.fixture
def industrial_arm():
    """Spherical wrist arm used throughout the closed-form tests."""
    return RobotArm.spherical_wrist("Industrial", INDUSTRIAL_A, INDUSTRIAL_D)


@pytest.fixture
def numerical_arm():
    """Same geometry solved by the generic numerical solver."""
    return RobotArm.from_dh(
        "IndustrialNumerical", INDUSTRIAL_A, INDUSTRIAL_D, INDUSTRIAL_ALPHA,
        solver=SolverKind.NUMERICAL,
    )


@pytest.fixture
def industrial_joints():
    """Generic, non-singular joint vector for the industrial arm."""
    return np.array([0.1, -0.2, 0.3, 0.0, 0.5, 0.0])


@pytest.fixture
def ur5e():
    """Universal Robots UR5e."""
    return RobotArm.ur5e()


@pytest.fixture
def ur5e_joints():
    """Generic joint vector for the UR5e."""
    return np.array([0.4, -1.1, 1.3, -0.9, 1.2, 0.3])


@pytest.fixture
def franka_joints():
    """Generic joint vector within the Panda's ranges."""
    return np.array([0.3, -0.5, 0.2, -2.0, 0.4, 1.8, 0.6])


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Add custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
