import numpy as np
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from opwpy.kinematics.solver import IKResult, OPWSolver


def solutions_table(solver: OPWSolver, result: IKResult, degrees: bool = True) -> Table:
    """Build a rich table with one row per IK solution, labelled by joint name."""
    unit = "deg" if degrees else "rad"
    table = Table(title=f"IK Solutions ({result.code.value}, {len(result)} found)")
    table.add_column("Branch", style="cyan", no_wrap=True)
    for name in solver.joint_names:
        table.add_column(escape(f"{name} [{unit}]"), style="magenta", justify="right")

    for branch, q in zip(result.branch_indices, result.solutions):
        values = np.rad2deg(q) if degrees else q
        table.add_row(str(branch), *(f"{v:.3f}" for v in values))
    return table


def print_solutions(
    solver: OPWSolver,
    result: IKResult,
    degrees: bool = True,
    console: Console | None = None,
) -> None:
    console = console or Console()
    console.print(solutions_table(solver, result, degrees=degrees))
