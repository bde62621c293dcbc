"""
Producer-side construction of pre-executions.

A symbolic executor walking a program uses one builder: it hands out unique
action ids, remembers which thread spawned which, and tracks the path
condition of the branch currently being explored.
"""
import itertools
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional, Sequence

import z3

from .actions import (
    INITIAL_TID,
    BmcAction,
    Fence,
    Load,
    MemoryOrder,
    Polarity,
    RMW,
    Store,
    as_term,
)
from .preexec import (
    ActionRel,
    PreExecution,
    combine_preexecs,
    combine_preexecs_and_sb,
)
from .relations import compute_asw, filter_asw


class PreExecutionBuilder:
    """Allocates aids/tids and creates guarded actions.

    Example:
        >>> b = PreExecutionBuilder()
        >>> t = b.fresh_tid()
        >>> w = b.store(t, MemoryOrder.RELAXED, 0x10, 1)
        >>> r = b.load(t, MemoryOrder.RELAXED, 0x10, z3.Int("r"))
        >>> pre = b.sequence([w, r])
    """

    def __init__(self, first_aid: int = 0):
        self._aids = itertools.count(first_aid)
        self._tids = itertools.count(0)
        self._guards: List[Any] = []
        self.parent_tids: Dict[int, int] = {}

    def fresh_aid(self) -> int:
        return next(self._aids)

    def fresh_tid(self, parent: Optional[int] = None) -> int:
        """Allocate a thread id, recording ``parent`` as its creator."""
        tid = next(self._tids)
        if parent is not None:
            self.parent_tids[tid] = parent
        return tid

    @contextmanager
    def guarded(self, cond: Any) -> Iterator[None]:
        """Actions created inside the block are enabled only under ``cond``."""
        self._guards.append(cond)
        try:
            yield
        finally:
            self._guards.pop()

    def current_guard(self) -> Any:
        if not self._guards:
            return z3.BoolVal(True)
        if len(self._guards) == 1:
            return self._guards[0]
        return z3.And(*self._guards)

    def _wrap(self, action, polarity: Polarity) -> BmcAction:
        return BmcAction(polarity, self.current_guard(), action)

    def load(self, tid: int, order: MemoryOrder, address: Any, value: Any,
             polarity: Polarity = Polarity.POS) -> BmcAction:
        return self._wrap(Load(self.fresh_aid(), tid, order, as_term(address), as_term(value)),
                          polarity)

    def store(self, tid: int, order: MemoryOrder, address: Any, value: Any,
              polarity: Polarity = Polarity.POS) -> BmcAction:
        return self._wrap(Store(self.fresh_aid(), tid, order, as_term(address), as_term(value)),
                          polarity)

    def rmw(self, tid: int, order: MemoryOrder, address: Any, read_value: Any,
            write_value: Any, polarity: Polarity = Polarity.POS) -> BmcAction:
        return self._wrap(RMW(self.fresh_aid(), tid, order, as_term(address),
                              as_term(read_value), as_term(write_value)),
                          polarity)

    def fence(self, tid: int, order: MemoryOrder,
              polarity: Polarity = Polarity.POS) -> BmcAction:
        return self._wrap(Fence(self.fresh_aid(), tid, order), polarity)

    def initial_store(self, address: Any, value: Any) -> BmcAction:
        """Non-atomic initialising write, enabled unconditionally."""
        action = Store(self.fresh_aid(), INITIAL_TID, MemoryOrder.NA,
                       as_term(address), as_term(value))
        return BmcAction(Polarity.POS, z3.BoolVal(True), action)

    def sequence(self, actions: Sequence[BmcAction],
                 initial_actions: Sequence[BmcAction] = ()) -> PreExecution:
        """Straight-line code: each action sequenced before the later ones."""
        result = PreExecution(initial_actions=tuple(initial_actions))
        for action in actions:
            result = combine_preexecs_and_sb(result, PreExecution(actions=(action,)))
        return result

    def spawn_edges(self, parent: PreExecution, child: PreExecution) -> List[ActionRel]:
        """asw edges from the parent's last action to the child's first."""
        candidates = compute_asw(parent.actions, child.actions,
                                 parent.sb, child.sb, self.parent_tids)
        return filter_asw(candidates, list(parent.sb) + list(child.sb))

    def join_edges(self, child: PreExecution, parent: PreExecution) -> List[ActionRel]:
        """asw edges from the child's last action to the parent's next one."""
        candidates = compute_asw(child.actions, parent.actions,
                                 child.sb, parent.sb, self.parent_tids)
        return filter_asw(candidates, list(child.sb) + list(parent.sb))

    def fork(self, parent: PreExecution, child: PreExecution) -> PreExecution:
        """Union of parent and child plus the spawn edge between them."""
        combined = combine_preexecs([parent, child])
        return replace(combined, asw=combined.asw + tuple(self.spawn_edges(parent, child)))

    def join(self, child: PreExecution, parent: PreExecution) -> PreExecution:
        """Union of a finished child and the parent code after the join."""
        combined = combine_preexecs([child, parent])
        return replace(combined, asw=combined.asw + tuple(self.join_edges(child, parent)))
