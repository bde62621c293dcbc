"""
Axiomatic C11 memory-model checker.

This package encodes the pre-execution of a concurrent program as z3
constraints, enumerates its consistent executions and flags data races and
unsequenced races.
"""

__version__ = "0.1.0"

from .errors import MemoryModelError, UnsupportedMemoryOrderError
from .solver import (
    SolverBackend,
    CheckResult,
    SolverResult,
    Z3Solver,
)
from .preexec import (
    INITIAL_TID,
    MemoryOrder,
    Polarity,
    Load,
    Store,
    RMW,
    Fence,
    BmcAction,
    PreExecution,
    PreExecutionBuilder,
)
from .encoding import C11Encoding, compute_executions, add_assertions
from .enumeration import (
    EnumerationOptions,
    EnumerationSummary,
    Execution,
    extract_executions,
)
from .memory_model import MemoryModel, C11MemoryModel, enumerate_executions

__all__ = [
    "MemoryModelError",
    "UnsupportedMemoryOrderError",
    "SolverBackend",
    "CheckResult",
    "SolverResult",
    "Z3Solver",
    "INITIAL_TID",
    "MemoryOrder",
    "Polarity",
    "Load",
    "Store",
    "RMW",
    "Fence",
    "BmcAction",
    "PreExecution",
    "PreExecutionBuilder",
    "C11Encoding",
    "compute_executions",
    "add_assertions",
    "EnumerationOptions",
    "EnumerationSummary",
    "Execution",
    "extract_executions",
    "MemoryModel",
    "C11MemoryModel",
    "enumerate_executions",
]
