from .display import print_solutions, solutions_table

__all__ = [
    "print_solutions",
    "solutions_table",
]
