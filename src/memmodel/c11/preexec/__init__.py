"""
Action model and pre-execution construction.
"""

from .actions import (
    INITIAL_TID,
    MemoryOrder,
    Polarity,
    Action,
    Load,
    Store,
    RMW,
    Fence,
    BmcAction,
    as_term,
    mk_bmc_action,
    format_action,
    format_bmc_action,
)
from .preexec import (
    ActionRel,
    PreExecution,
    add_action,
    add_initial_action,
    guard_action,
    guard_preexec,
    combine_preexecs,
    combine_preexecs_and_sb,
    compute_sb,
    format_preexec,
)
from .relations import (
    find_rel,
    compute_maximal,
    compute_minimal,
    compute_asw,
    filter_asw,
)
from .builder import PreExecutionBuilder

__all__ = [
    "INITIAL_TID",
    "MemoryOrder",
    "Polarity",
    "Action",
    "Load",
    "Store",
    "RMW",
    "Fence",
    "BmcAction",
    "as_term",
    "mk_bmc_action",
    "format_action",
    "format_bmc_action",
    "ActionRel",
    "PreExecution",
    "add_action",
    "add_initial_action",
    "guard_action",
    "guard_preexec",
    "combine_preexecs",
    "combine_preexecs_and_sb",
    "compute_sb",
    "format_preexec",
    "find_rel",
    "compute_maximal",
    "compute_minimal",
    "compute_asw",
    "filter_asw",
    "PreExecutionBuilder",
]
