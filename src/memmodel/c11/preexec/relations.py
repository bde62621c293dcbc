"""
Relation-combination utilities.

Used at fork/join points to derive the additional-synchronizes-with edges
between the program-order-last action of one thread and the
program-order-first action of the other.
"""
from typing import Iterable, List, Mapping, Sequence

from .actions import BmcAction
from .preexec import ActionRel


def find_rel(pair: ActionRel, rel: Iterable[ActionRel]) -> bool:
    """Membership test by aid (actions are not compared structurally)."""
    a, b = pair
    return any(a.aid == x.aid and b.aid == y.aid for x, y in rel)


def not_related(rel: Sequence[ActionRel], candidates: Iterable[ActionRel]) -> List[ActionRel]:
    return [p for p in candidates if not find_rel(p, rel)]


def compute_maximal(actions: Iterable[BmcAction], rel: Iterable[ActionRel]) -> List[int]:
    """Aids of ``actions`` with no outgoing edge in ``rel``."""
    not_maximal = {a.aid for a, _ in rel}
    return [a.aid for a in actions if a.aid not in not_maximal]


def compute_minimal(actions: Iterable[BmcAction], rel: Iterable[ActionRel]) -> List[int]:
    """Aids of ``actions`` with no incoming edge in ``rel``."""
    not_minimal = {b.aid for _, b in rel}
    return [a.aid for a in actions if a.aid not in not_minimal]


def compute_asw(xs: Sequence[BmcAction],
                ys: Sequence[BmcAction],
                sb_xs: Iterable[ActionRel],
                sb_ys: Iterable[ActionRel],
                parent_tids: Mapping[int, int]) -> List[ActionRel]:
    """Candidate asw edges from ``xs`` to ``ys``.

    A pair (x, y) is a candidate when the threads of x and y are in a
    parent/child relationship (in either direction of ``parent_tids``), x is
    maximal in ``xs`` w.r.t. ``sb_xs`` and y is minimal in ``ys`` w.r.t.
    ``sb_ys``.

    The result over-approximates: (a, y) and (b, y) may both be present even
    if (a, b) is in sb. Pass it through :func:`filter_asw`.

    Args:
        xs: Actions before the boundary
        ys: Actions after the boundary
        sb_xs: Sequenced-before edges among ``xs``
        sb_ys: Sequenced-before edges among ``ys``
        parent_tids: Mapping from child thread id to parent thread id

    Returns:
        List of candidate (x, y) pairs
    """
    maximal = set(compute_maximal(xs, sb_xs))
    minimal = set(compute_minimal(ys, sb_ys))
    result: List[ActionRel] = []
    for x in xs:
        for y in ys:
            related = (parent_tids.get(x.tid) == y.tid
                       or parent_tids.get(y.tid) == x.tid)
            if related and x.aid in maximal and y.aid in minimal:
                result.append((x, y))
    return result


def filter_asw(asw: Sequence[ActionRel], sb: Sequence[ActionRel]) -> List[ActionRel]:
    """Keep only the sharpest edge of each fork/join boundary.

    An edge (a, b) is dropped if there is another edge (a, y) with (b, y) in
    ``sb``, or another edge (x, b) with (a, x) in ``sb``.
    """
    sb_pairs = {(x.aid, y.aid) for x, y in sb}

    def dominated(a: BmcAction, b: BmcAction) -> bool:
        for x, y in asw:
            if a.aid == x.aid and (b.aid, y.aid) in sb_pairs:
                return True
            if b.aid == y.aid and (a.aid, x.aid) in sb_pairs:
                return True
        return False

    return [(a, b) for a, b in asw if not dominated(a, b)]
