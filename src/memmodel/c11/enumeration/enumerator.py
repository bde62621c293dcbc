"""
Enumeration of the consistent executions of an encoding.

Each satisfiable check yields one model. The model is turned into a
concrete :class:`Execution` and its guard/rf/mo choices are blocked before
the next check, until the solver reports that no further execution exists.
All blocking clauses live in one push/pop scope, so the solver is left with
only the axioms of the encoding afterwards.
"""
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set
import z3

from ..encoding.encoder import C11Encoding, mk_and
from ..preexec.actions import Action
from ..solver.result import SolverResult
from ..solver.z3_solver import Z3Solver
from .dot import write_dot
from .execution import (
    AidPair,
    Execution,
    ExecutionWitness,
    find_data_races,
    find_unsequenced_races,
)
from .options import EnumerationOptions

logger = logging.getLogger(__name__)


@dataclass
class EnumerationSummary:
    """Outcome of one enumeration run.

    Attributes:
        executions: Consistent executions, in discovery order
        last_result: Result of the check that ended the loop (UNSAT when
            enumeration is exhaustive, UNKNOWN when the solver gave up)
        solver_time_ms: Accumulated solver time
        graph_files: DOT files written for the executions
    """
    executions: List[Execution] = field(default_factory=list)
    last_result: SolverResult = SolverResult.UNSAT
    solver_time_ms: float = 0.0
    graph_files: List[Path] = field(default_factory=list)

    @property
    def num_executions(self) -> int:
        return len(self.executions)

    @property
    def num_races(self) -> int:
        """Number of executions with at least one data or unsequenced race."""
        return sum(1 for e in self.executions if not e.race_free)

    @property
    def is_complete(self) -> bool:
        return self.last_result == SolverResult.UNSAT

    @property
    def return_values(self) -> List[Any]:
        return [e.return_value for e in self.executions if e.return_value is not None]

    def distinct_return_values(self) -> List[str]:
        """Printed return values, without duplicates, in discovery order."""
        seen: List[str] = []
        for value in self.return_values:
            text = str(value)
            if text not in seen:
                seen.append(text)
        return seen

    def format_summary(self) -> str:
        lines = [
            f"# consistent executions: {self.num_executions}",
            f"# executions with races: {self.num_races}",
            "Return values: " + ", ".join(self.distinct_return_values()),
        ]
        if not self.is_complete:
            lines.append(f"Enumeration stopped early: solver returned {self.last_result.value}")
        return "\n".join(lines)


def _concretize(action: Action, interp: Callable[[Any], Any], encoding: C11Encoding) -> Action:
    """Copy of ``action`` with address and values replaced by model values."""
    if not action.has_address:
        return action
    fns = encoding.fns
    e = encoding.event(action.aid)
    changes: Dict[str, Any] = {"address": interp(fns.addr(e))}
    if action.is_read:
        changes["read_value"] = interp(fns.rval(e))
    if action.is_write:
        changes["write_value"] = interp(fns.wval(e))
    return replace(action, **changes)


def extract_execution(model: z3.ModelRef,
                      encoding: C11Encoding,
                      ret_value: Any = None) -> Execution:
    """Build the concrete execution described by ``model``.

    Args:
        model: Satisfying model of the encoding's assertions
        encoding: Encoding the model belongs to
        ret_value: Term whose value in the model is the program result

    Returns:
        Execution with its blocking clause
    """
    def interp(term: Any) -> Any:
        return model.eval(term, model_completion=True)

    def holds(term: Any) -> bool:
        return z3.is_true(interp(term))

    return_value = interp(ret_value) if ret_value is not None else None
    if encoding.is_empty:
        return Execution(actions=(), threads=(), guards={}, sb=frozenset(),
                         asw=frozenset(), witness=ExecutionWitness(),
                         return_value=return_value,
                         blocking_clause=z3.BoolVal(False))

    fns = encoding.fns
    guards = {aid: holds(fns.guard(e)) for aid, e in encoding.event_map.items()}
    enabled = [encoding.action_map[aid] for aid in encoding.event_map if guards[aid]]
    program = [a for a in enabled if a.aid not in encoding.initial_aids]

    def edges(rel: Callable[[Any, Any], Any]) -> Set[AidPair]:
        return {(a.aid, b.aid)
                for a in program for b in program
                if holds(rel(encoding.event(a.aid), encoding.event(b.aid)))}

    # Blocking literals range over every enabled event, initial ones included.
    rf_literals = []
    rf_edges: Set[AidPair] = set()
    for r in enabled:
        if not r.is_read:
            continue
        er = encoding.event(r.aid)
        src = interp(fns.rf_inv(er))
        rf_literals.append(fns.rf_inv(er) == src)
        src_aid = next(aid for aid, e in encoding.event_map.items() if e.eq(src))
        if src_aid not in encoding.initial_aids:
            rf_edges.add((src_aid, r.aid))

    mo_literals = []
    writes = [a for a in enabled if a.is_write]
    for w1 in writes:
        for w2 in writes:
            e1, e2 = encoding.event(w1.aid), encoding.event(w2.aid)
            if w1.aid != w2.aid and holds(fns.mo(e1, e2)):
                mo_literals.append(fns.mo(e1, e2))
    mo_edges = edges(fns.mo)

    guard_literals = [fns.guard(e) == z3.BoolVal(guards[aid])
                      for aid, e in encoding.event_map.items()]
    blocking = z3.Not(mk_and(guard_literals + rf_literals + mo_literals))

    concrete = tuple(_concretize(a.action, interp, encoding) for a in program)
    sb = edges(fns.sb)
    hb = edges(fns.hb)

    execution = Execution(
        actions=concrete,
        threads=tuple(sorted({a.tid for a in concrete})),
        guards=guards,
        sb=frozenset(sb),
        asw=frozenset(edges(fns.asw)),
        witness=ExecutionWitness(rf=frozenset(rf_edges),
                                 mo=frozenset(mo_edges),
                                 sc=frozenset(edges(fns.sc))),
        sw=frozenset(edges(fns.sw)),
        hb=frozenset(hb),
        data_races=find_data_races(concrete, hb),
        unseq_races=find_unsequenced_races(concrete, sb),
        return_value=return_value,
        blocking_clause=blocking,
    )
    return execution


def write_execution_graphs(executions: List[Execution],
                           options: EnumerationOptions) -> List[Path]:
    """One ``<prefix>_<i>.dot`` per execution that has program actions."""
    out_dir = options.resolved_graph_dir()
    files = []
    for i, execution in enumerate(executions):
        if not execution.actions:
            continue
        path = out_dir / f"{options.graph_prefix}_{i}.dot"
        files.append(write_dot(execution, path, title=f"execution {i}"))
    return files


def extract_executions(solver: Any,
                       encoding: C11Encoding,
                       ret_value: Any = None,
                       *,
                       options: Optional[EnumerationOptions] = None) -> EnumerationSummary:
    """Enumerate every consistent execution of ``encoding``.

    The encoding's assertions must already be on ``solver``.

    Args:
        solver: ``SolverBackend`` (a bare ``z3.Solver`` is wrapped)
        encoding: Encoding produced by ``compute_executions``
        ret_value: Term reported as each execution's return value
        options: Reporting options (``EnumerationOptions.from_env()`` if None)

    Returns:
        EnumerationSummary of the run
    """
    if isinstance(solver, z3.Solver):
        solver = Z3Solver(solver)
    if options is None:
        options = EnumerationOptions.from_env()

    summary = EnumerationSummary()
    solver.push()
    try:
        while True:
            check = solver.check_sat()
            summary.solver_time_ms += check.solver_time_ms
            if not check.is_sat:
                summary.last_result = check.result
                break
            execution = extract_execution(check.model, encoding, ret_value)
            summary.executions.append(execution)
            logger.debug("Return value: %s", execution.return_value)
            if execution.data_races:
                logger.debug("Data races: %s", sorted(execution.data_races))
            if execution.unseq_races:
                logger.debug("Unsequenced races: %s", sorted(execution.unseq_races))
            solver.add_constraint(execution.blocking_clause)
    finally:
        solver.pop()

    if summary.last_result == SolverResult.UNKNOWN:
        logger.warning("Solver returned unknown after %d executions; enumeration is incomplete",
                       summary.num_executions)

    if options.write_graphs:
        summary.graph_files = write_execution_graphs(summary.executions, options)
    if options.echo_summary:
        print(summary.format_summary())
    return summary
