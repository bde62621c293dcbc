"""Enumeration of consistent executions, race classification and DOT output."""
from .dot import action_label, generate_dot, node_letter, write_dot
from .enumerator import (
    EnumerationSummary,
    extract_execution,
    extract_executions,
    write_execution_graphs,
)
from .execution import (
    AidPair,
    Execution,
    ExecutionWitness,
    find_data_races,
    find_unsequenced_races,
    same_location,
)
from .options import EnumerationOptions

__all__ = [
    "AidPair",
    "EnumerationOptions",
    "EnumerationSummary",
    "Execution",
    "ExecutionWitness",
    "action_label",
    "extract_execution",
    "extract_executions",
    "find_data_races",
    "find_unsequenced_races",
    "generate_dot",
    "node_letter",
    "same_location",
    "write_dot",
    "write_execution_graphs",
]
