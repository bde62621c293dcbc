"""
Z3 SMT solver backend implementation.
"""
import time
from typing import Any, Iterable, Optional
import z3

from .result import CheckResult, SolverResult


class Z3Solver:
    """Z3 solver backend wrapper.

    Provides the incremental interface the enumeration loop needs on top of
    a single ``z3.Solver`` instance.
    """

    def __init__(self, solver: Optional[z3.Solver] = None):
        """Initialize Z3 solver instance.

        Args:
            solver: Existing ``z3.Solver`` to wrap (a fresh one by default)
        """
        self.solver = solver if solver is not None else z3.Solver()
        self._last_result = SolverResult.UNKNOWN

    def add_constraint(self, constraint: Any) -> None:
        """Add a Z3 constraint to the solver.

        Args:
            constraint: Z3 boolean expression
        """
        self.solver.add(constraint)

    def add_constraints(self, constraints: Iterable[Any]) -> None:
        """Add a batch of Z3 constraints."""
        for constraint in constraints:
            self.solver.add(constraint)

    def check(self) -> SolverResult:
        """Check satisfiability of constraints."""
        result = self.solver.check()
        if result == z3.sat:
            self._last_result = SolverResult.SAT
        elif result == z3.unsat:
            self._last_result = SolverResult.UNSAT
        else:
            self._last_result = SolverResult.UNKNOWN
        return self._last_result

    def check_sat(self) -> CheckResult:
        """Check satisfiability of constraints.

        Returns:
            CheckResult with status, model (when sat) and timing
        """
        start_time = time.time()
        result = self.check()
        elapsed_ms = (time.time() - start_time) * 1000

        return CheckResult(
            result=result,
            model=self.solver.model() if result == SolverResult.SAT else None,
            solver_time_ms=elapsed_ms,
            solver_name="z3",
        )

    def model(self) -> Optional[z3.ModelRef]:
        """Model of the last check, or None when it was not satisfiable."""
        if self._last_result != SolverResult.SAT:
            return None
        return self.solver.model()

    def push(self) -> None:
        """Push a new assertion scope."""
        self.solver.push()

    def pop(self) -> None:
        """Pop the most recent assertion scope."""
        self.solver.pop()
        self._last_result = SolverResult.UNKNOWN

    def reset(self) -> None:
        """Reset solver state."""
        self.solver.reset()
        self._last_result = SolverResult.UNKNOWN

    def num_scopes(self) -> int:
        """Number of currently open push scopes."""
        return self.solver.num_scopes()

    def assertions(self) -> list:
        """Currently asserted constraints."""
        return list(self.solver.assertions())
