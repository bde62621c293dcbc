"""
Pre-executions: the memory actions a program may perform, before any
reads-from or modification order has been chosen.

Pre-executions are values. Every combinator returns a new object, and list
order inside a pre-execution carries no ordering meaning: program order is
only what ``sb`` and ``asw`` say.
"""
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Tuple

from .actions import BmcAction, format_bmc_action

ActionRel = Tuple[BmcAction, BmcAction]


@dataclass(frozen=True)
class PreExecution:
    """Actions plus the relations fixed by the program text.

    Attributes:
        actions: Actions of the program threads
        initial_actions: Actions initialising memory before any thread runs
        sb: Sequenced-before pairs (same thread)
        asw: Additional-synchronizes-with pairs (thread creation / join)
    """
    actions: Tuple[BmcAction, ...] = ()
    initial_actions: Tuple[BmcAction, ...] = ()
    sb: Tuple[ActionRel, ...] = ()
    asw: Tuple[ActionRel, ...] = ()

    @property
    def all_actions(self) -> List[BmcAction]:
        return list(self.initial_actions) + list(self.actions)

    def __str__(self) -> str:
        return format_preexec(self)


def add_action(action: BmcAction, preexec: PreExecution) -> PreExecution:
    return replace(preexec, actions=(action,) + preexec.actions)


def add_initial_action(action: BmcAction, preexec: PreExecution) -> PreExecution:
    return replace(preexec, initial_actions=(action,) + preexec.initial_actions)


def guard_action(guard: Any, action: BmcAction) -> BmcAction:
    return action.guarded(guard)


def guard_preexec(guard: Any, preexec: PreExecution) -> PreExecution:
    """Conjoin ``guard`` onto the guard of every (non-initial) action.

    Used when merging the two arms of a conditional: each arm is guarded by
    its branch condition so only one arm is enabled in any model.
    """
    return replace(preexec, actions=tuple(a.guarded(guard) for a in preexec.actions))


def combine_preexecs(preexecs: Iterable[PreExecution]) -> PreExecution:
    """Union of several pre-executions.

    No deduplication is done: callers guarantee disjoint aids.
    """
    actions: List[BmcAction] = []
    initial_actions: List[BmcAction] = []
    sb: List[ActionRel] = []
    asw: List[ActionRel] = []
    for preexec in preexecs:
        actions.extend(preexec.actions)
        initial_actions.extend(preexec.initial_actions)
        sb.extend(preexec.sb)
        asw.extend(preexec.asw)
    return PreExecution(
        actions=tuple(actions),
        initial_actions=tuple(initial_actions),
        sb=tuple(sb),
        asw=tuple(asw),
    )


def compute_sb(xs: Iterable[BmcAction], ys: Iterable[BmcAction]) -> List[ActionRel]:
    """Every pair of ``xs`` x ``ys`` that belongs to the same thread."""
    ys = list(ys)
    return [(x, y) for x in xs for y in ys if x.tid == y.tid]


def combine_preexecs_and_sb(p1: PreExecution, p2: PreExecution) -> PreExecution:
    """Sequential composition: ``p1`` followed by ``p2``.

    Besides the union, every action of ``p1`` is sequenced before every
    action of ``p2`` running on the same thread.
    """
    combined = combine_preexecs([p1, p2])
    extra_sb = compute_sb(p1.actions, p2.actions)
    return replace(combined, sb=tuple(extra_sb) + combined.sb)


def format_actionrel(rel: ActionRel) -> str:
    a, b = rel
    return f"({a.aid},{b.aid})"


def format_preexec(preexec: PreExecution) -> str:
    lines: List[str] = [">>Initial:"]
    lines.extend(format_bmc_action(a) for a in preexec.initial_actions)
    lines.append(">>Actions:")
    lines.extend(format_bmc_action(a) for a in preexec.actions)
    lines.append(">>SB:")
    lines.extend(format_actionrel(r) for r in preexec.sb)
    lines.append(">>ASW:")
    lines.extend(format_actionrel(r) for r in preexec.asw)
    return "\n".join(lines)
