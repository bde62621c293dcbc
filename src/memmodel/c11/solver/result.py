"""
Solver check result types.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any


class SolverResult(Enum):
    """Result from SMT solver check."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


@dataclass
class CheckResult:
    """Result of one satisfiability check.

    Attributes:
        result: Raw solver result (SAT/UNSAT/UNKNOWN)
        model: Solver model when the result is SAT
        solver_time_ms: Time taken by solver in milliseconds
        solver_name: Name of the solver backend used
    """
    result: SolverResult = SolverResult.UNKNOWN
    model: Optional[Any] = None
    solver_time_ms: float = 0.0
    solver_name: str = "unknown"

    @property
    def is_sat(self) -> bool:
        return self.result == SolverResult.SAT

    def __str__(self) -> str:
        return f"{self.result.value} ({self.solver_name}, {self.solver_time_ms:.2f}ms)"
