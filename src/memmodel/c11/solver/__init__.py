"""Solver abstraction layer for the memory-model checker."""

from .base import SolverBackend
from .result import CheckResult, SolverResult
from .z3_solver import Z3Solver

__all__ = [
    "SolverBackend",
    "CheckResult",
    "SolverResult",
    "Z3Solver",
]
