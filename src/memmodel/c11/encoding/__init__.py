"""
Axiomatic encoding of the C11 memory model into z3.
"""

from .sorts import SortTranslator
from .functions import C11Decls, C11Functions
from .encoder import (
    C11Encoding,
    C11Encoder,
    compute_executions,
    add_assertions,
    mk_and,
    mk_or,
)

__all__ = [
    "SortTranslator",
    "C11Decls",
    "C11Functions",
    "C11Encoding",
    "C11Encoder",
    "compute_executions",
    "add_assertions",
    "mk_and",
    "mk_or",
]
