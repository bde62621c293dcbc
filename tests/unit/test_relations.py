"""
Tests for the fork/join relation utilities.
"""
import z3

from memmodel.c11.preexec import (
    MemoryOrder,
    PreExecutionBuilder,
    compute_asw,
    compute_maximal,
    compute_minimal,
    filter_asw,
    find_rel,
)


def _two_threads():
    """Parent thread p1 -> p2 and child thread c1 -> c2."""
    b = PreExecutionBuilder()
    parent = b.fresh_tid()
    child = b.fresh_tid(parent=parent)
    p1 = b.store(parent, MemoryOrder.NA, 0, 1)
    p2 = b.store(parent, MemoryOrder.NA, 1, 1)
    c1 = b.load(child, MemoryOrder.NA, 0, z3.Int('a'))
    c2 = b.load(child, MemoryOrder.NA, 1, z3.Int('b'))
    return b, (p1, p2), (c1, c2)


def _aids(pairs):
    return [(a.aid, b.aid) for a, b in pairs]


def test_maximal_and_minimal():
    """Test that the ends of a sb chain are found."""
    _, (p1, p2), _ = _two_threads()
    sb = [(p1, p2)]

    assert compute_maximal([p1, p2], sb) == [p2.aid]
    assert compute_minimal([p1, p2], sb) == [p1.aid]
    assert compute_maximal([p1, p2], []) == [p1.aid, p2.aid]


def test_find_rel_compares_aids():
    """Test that membership is decided by aid."""
    _, (p1, p2), (c1, _) = _two_threads()

    assert find_rel((p1, p2), [(p1, p2)])
    assert not find_rel((p2, p1), [(p1, p2)])
    assert not find_rel((p1, c1), [(p1, p2)])


def test_compute_asw_spawn():
    """Test that the spawn edge joins the parent's last and the child's first action."""
    b, (p1, p2), (c1, c2) = _two_threads()

    asw = compute_asw([p1, p2], [c1, c2], [(p1, p2)], [(c1, c2)], b.parent_tids)

    assert _aids(asw) == [(p2.aid, c1.aid)]


def test_compute_asw_join():
    """Test that join edges are found with the child on the left."""
    b, (p1, p2), (c1, c2) = _two_threads()

    asw = compute_asw([c1, c2], [p1, p2], [(c1, c2)], [(p1, p2)], b.parent_tids)

    assert _aids(asw) == [(c2.aid, p1.aid)]


def test_compute_asw_unrelated_threads():
    """Test that threads without a parent/child relation get no edge."""
    b = PreExecutionBuilder()
    t0 = b.fresh_tid()
    t1 = b.fresh_tid()
    x = b.store(t0, MemoryOrder.NA, 0, 1)
    y = b.store(t1, MemoryOrder.NA, 0, 2)

    assert compute_asw([x], [y], [], [], b.parent_tids) == []


def test_filter_asw_keeps_one_edge():
    """Test dominance pruning over every candidate across one boundary."""
    _, (p1, p2), (c1, c2) = _two_threads()
    candidates = [(p1, c1), (p1, c2), (p2, c1), (p2, c2)]
    sb = [(p1, p2), (c1, c2)]

    assert _aids(filter_asw(candidates, sb)) == [(p2.aid, c2.aid)]


def test_filter_asw_single_edge_untouched():
    """Test that a lone edge survives."""
    _, (p1, p2), (c1, c2) = _two_threads()
    sb = [(p1, p2), (c1, c2)]

    assert _aids(filter_asw([(p2, c1)], sb)) == [(p2.aid, c1.aid)]


def test_filter_asw_independent_boundaries():
    """Test that edges of unrelated boundaries do not prune each other."""
    _, (p1, p2), (c1, c2) = _two_threads()

    kept = filter_asw([(p1, c1), (p2, c2)], [])

    assert _aids(kept) == [(p1.aid, c1.aid), (p2.aid, c2.aid)]
