"""
Memory-model abstraction.

A memory model turns a pre-execution into solver assertions and reads
concrete executions back out of the solver's models. C11 is the only
model provided.
"""
from typing import Any, Optional, Protocol

from .encoding.encoder import C11Encoding, add_assertions, compute_executions
from .enumeration.enumerator import EnumerationSummary, extract_executions
from .enumeration.options import EnumerationOptions
from .preexec.preexec import PreExecution
from .solver.base import SolverBackend
from .solver.z3_solver import Z3Solver


class MemoryModel(Protocol):
    """Protocol for axiomatic memory models.

    Implementations encode consistency axioms for a pre-execution and
    enumerate the executions the solver finds consistent.
    """

    name: str

    def compute_executions(self, preexec: PreExecution) -> Any:
        """Encode ``preexec``.

        Args:
            preexec: Finalized pre-execution

        Returns:
            Model-specific encoding
        """
        ...

    def add_assertions(self, solver: SolverBackend, encoding: Any) -> None:
        """Assert the axioms of ``encoding`` on ``solver``."""
        ...

    def extract_executions(self,
                           solver: SolverBackend,
                           encoding: Any,
                           ret_value: Any = None,
                           *,
                           options: Optional[EnumerationOptions] = None) -> EnumerationSummary:
        """Enumerate the consistent executions of ``encoding``."""
        ...


class C11MemoryModel:
    """The C11 model."""

    name = "c11"

    def compute_executions(self, preexec: PreExecution) -> C11Encoding:
        return compute_executions(preexec)

    def add_assertions(self, solver: SolverBackend, encoding: C11Encoding) -> None:
        add_assertions(solver, encoding)

    def extract_executions(self,
                           solver: SolverBackend,
                           encoding: C11Encoding,
                           ret_value: Any = None,
                           *,
                           options: Optional[EnumerationOptions] = None) -> EnumerationSummary:
        return extract_executions(solver, encoding, ret_value, options=options)


def enumerate_executions(preexec: PreExecution,
                         ret_value: Any = None,
                         *,
                         solver: Optional[SolverBackend] = None,
                         options: Optional[EnumerationOptions] = None,
                         model: Optional[MemoryModel] = None) -> EnumerationSummary:
    """Encode ``preexec`` and enumerate all of its consistent executions.

    Args:
        preexec: Finalized pre-execution
        ret_value: Term reported as each execution's return value
        solver: Solver to use (a fresh ``Z3Solver`` by default)
        options: Reporting options
        model: Memory model (C11 by default)

    Returns:
        EnumerationSummary of the run

    Raises:
        UnsupportedMemoryOrderError: If an action uses ``memory_order_consume``
    """
    if model is None:
        model = C11MemoryModel()
    if solver is None:
        solver = Z3Solver()
    encoding = model.compute_executions(preexec)
    model.add_assertions(solver, encoding)
    return model.extract_executions(solver, encoding, ret_value, options=options)
