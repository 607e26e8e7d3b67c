#!/usr/bin/env python3
"""Demo script listing all IK solutions for a pose of the KUKA KR6 R700 sixx.

The pose is produced by forward kinematics of the joint angles given on the
command line (radians), then solved back with the closed-form IK.

Usage:
    python examples/demo_ik.py
    python examples/demo_ik.py 0 0.1 0.2 0.3 0.4 0.5
"""

from __future__ import annotations

import logging
import sys

import numpy as np
from rich.console import Console

from opwpy.kinematics import kuka_kr6_r700_sixx
from opwpy.utils.display import print_solutions


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    console = Console()

    if len(sys.argv) == 7:
        joint_angles = np.array([float(v) for v in sys.argv[1:]])
    else:
        joint_angles = np.array([0.0, 0.1, 0.2, 0.3, 0.4, 0.5])

    solver = kuka_kr6_r700_sixx()
    pose = solver.forward(joint_angles)
    console.print(f"Position [m]: {np.round(pose.position, 4)}")
    console.print(f"Quaternion (x, y, z, w): {np.round(pose.quaternion, 4)}")

    print_solutions(solver, solver.inverse(pose), console=console)
    print_solutions(solver, solver.inverse_closest(pose, joint_angles), console=console)


if __name__ == "__main__":
    main()
