"""
Abstract base interface for SMT solver backends.
"""
from typing import Protocol, Any, Iterable, Optional
from .result import CheckResult, SolverResult


class SolverBackend(Protocol):
    """Protocol defining the interface the encoder and enumerator rely on.

    The enumeration loop needs incremental assertion, scoped push/pop and
    access to the model of the last satisfiable check.
    """

    def add_constraint(self, constraint: Any) -> None:
        """Add a constraint to the solver.

        Args:
            constraint: Solver-specific boolean term
        """
        ...

    def add_constraints(self, constraints: Iterable[Any]) -> None:
        """Add several constraints in one batch."""
        ...

    def check(self) -> SolverResult:
        """Check satisfiability of the asserted constraints."""
        ...

    def check_sat(self) -> CheckResult:
        """Check satisfiability and capture the model and timing.

        Returns:
            CheckResult with sat/unsat/unknown status and the model when sat
        """
        ...

    def model(self) -> Optional[Any]:
        """Model of the last satisfiable check, or None."""
        ...

    def push(self) -> None:
        """Push a new assertion scope."""
        ...

    def pop(self) -> None:
        """Pop the most recent assertion scope."""
        ...

    def reset(self) -> None:
        """Reset the solver state, clearing all constraints."""
        ...
