"""
Concrete executions extracted from solver models, and race classification.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Sequence, Set, Tuple

from ..preexec.actions import INITIAL_TID, Action

AidPair = Tuple[int, int]


@dataclass(frozen=True)
class ExecutionWitness:
    """The choices the solver made: reads-from, modification and SC order."""
    rf: FrozenSet[AidPair] = frozenset()
    mo: FrozenSet[AidPair] = frozenset()
    sc: FrozenSet[AidPair] = frozenset()


@dataclass(frozen=True, eq=False)
class Execution:
    """One consistent execution, with every symbolic term resolved.

    Relations are sets of (aid, aid) pairs restricted to enabled,
    non-initial actions. Races are unordered pairs stored as (low, high).
    """
    actions: Tuple[Action, ...]
    threads: Tuple[int, ...]
    guards: Dict[int, bool]
    sb: FrozenSet[AidPair]
    asw: FrozenSet[AidPair]
    witness: ExecutionWitness
    sw: FrozenSet[AidPair] = frozenset()
    hb: FrozenSet[AidPair] = frozenset()
    data_races: FrozenSet[AidPair] = frozenset()
    unseq_races: FrozenSet[AidPair] = frozenset()
    return_value: Any = None
    blocking_clause: Any = field(default=None, repr=False)

    @property
    def rf(self) -> FrozenSet[AidPair]:
        return self.witness.rf

    @property
    def mo(self) -> FrozenSet[AidPair]:
        return self.witness.mo

    @property
    def sc(self) -> FrozenSet[AidPair]:
        return self.witness.sc

    @property
    def race_free(self) -> bool:
        return not self.data_races and not self.unseq_races

    def action(self, aid: int) -> Action:
        for a in self.actions:
            if a.aid == aid:
                return a
        raise KeyError(aid)

    def signature(self) -> Tuple[FrozenSet[Tuple[int, bool]], FrozenSet[AidPair], FrozenSet[AidPair]]:
        """The guard/rf/mo choices the blocking clause excludes."""
        return frozenset(self.guards.items()), self.rf, self.mo


def same_location(a: Action, b: Action) -> bool:
    """Both actions access memory at structurally equal concrete addresses."""
    if not (a.has_address and b.has_address):
        return False
    addr_a, addr_b = a.address, b.address
    if hasattr(addr_a, "eq"):
        return addr_a.eq(addr_b)
    return addr_a == addr_b


def _unordered(a: Action, b: Action) -> AidPair:
    return (a.aid, b.aid) if a.aid <= b.aid else (b.aid, a.aid)


def _conflicting_pairs(actions: Sequence[Action]) -> Iterable[Tuple[Action, Action]]:
    """Distinct same-location pairs with at least one write."""
    for i, a in enumerate(actions):
        for b in actions[i + 1:]:
            if a.aid == b.aid:
                continue
            if (a.is_write or b.is_write) and same_location(a, b):
                yield a, b


def find_data_races(actions: Sequence[Action], hb: Set[AidPair]) -> FrozenSet[AidPair]:
    """Conflicting accesses of different threads, not both atomic, hb-unordered."""
    races = set()
    for a, b in _conflicting_pairs(actions):
        if a.tid == b.tid:
            continue
        if a.is_atomic and b.is_atomic:
            continue
        if (a.aid, b.aid) in hb or (b.aid, a.aid) in hb:
            continue
        races.add(_unordered(a, b))
    return frozenset(races)


def find_unsequenced_races(actions: Sequence[Action], sb: Set[AidPair]) -> FrozenSet[AidPair]:
    """Conflicting accesses of the same program thread, sb-unordered."""
    races = set()
    for a, b in _conflicting_pairs(actions):
        if a.tid != b.tid or a.tid == INITIAL_TID:
            continue
        if (a.aid, b.aid) in sb or (b.aid, a.aid) in sb:
            continue
        races.add(_unordered(a, b))
    return frozenset(races)
