"""
Tests for pre-execution combinators.
"""
import z3

from memmodel.c11.preexec import (
    MemoryOrder,
    PreExecution,
    PreExecutionBuilder,
    add_action,
    add_initial_action,
    combine_preexecs,
    combine_preexecs_and_sb,
    compute_sb,
    format_preexec,
    guard_preexec,
)


def _aids(pairs):
    return sorted((a.aid, b.aid) for a, b in pairs)


def test_add_action_prepends():
    """Test that add_action and add_initial_action prepend."""
    b = PreExecutionBuilder()
    w = b.store(0, MemoryOrder.NA, 0, 1)
    r = b.load(0, MemoryOrder.NA, 0, z3.Int('r'))
    init = b.initial_store(0, 0)

    pre = add_action(r, add_action(w, PreExecution()))
    pre = add_initial_action(init, pre)

    assert [a.aid for a in pre.actions] == [r.aid, w.aid]
    assert [a.aid for a in pre.initial_actions] == [init.aid]
    assert [a.aid for a in pre.all_actions] == [init.aid, r.aid, w.aid]


def test_combine_preexecs_is_plain_union():
    """Test that combining concatenates every component."""
    b = PreExecutionBuilder()
    p1 = b.sequence([b.store(0, MemoryOrder.NA, 0, 1), b.store(0, MemoryOrder.NA, 1, 1)])
    p2 = b.sequence([b.load(1, MemoryOrder.NA, 0, z3.Int('r'))],
                    initial_actions=[b.initial_store(0, 0)])

    combined = combine_preexecs([p1, p2])

    assert len(combined.actions) == 3
    assert len(combined.initial_actions) == 1
    assert _aids(combined.sb) == _aids(p1.sb)
    assert combined.asw == ()


def test_combine_preexecs_and_sb_same_thread_only():
    """Test that sequential composition orders same-thread actions only."""
    b = PreExecutionBuilder()
    a0 = b.store(0, MemoryOrder.NA, 0, 1)
    a1 = b.store(1, MemoryOrder.NA, 0, 2)
    c0 = b.load(0, MemoryOrder.NA, 0, z3.Int('x'))
    c1 = b.load(1, MemoryOrder.NA, 0, z3.Int('y'))

    seq = combine_preexecs_and_sb(PreExecution(actions=(a0, a1)),
                                  PreExecution(actions=(c0, c1)))

    assert _aids(seq.sb) == sorted([(a0.aid, c0.aid), (a1.aid, c1.aid)])
    assert _aids(compute_sb([a0, a1], [c0])) == [(a0.aid, c0.aid)]


def test_guard_preexec_skips_initial_actions():
    """Test that branch guards only apply to program actions."""
    b = PreExecutionBuilder()
    c = z3.Bool('c')
    pre = b.sequence([b.store(0, MemoryOrder.NA, 0, 1)],
                     initial_actions=[b.initial_store(0, 0)])

    guarded = guard_preexec(c, pre)

    assert guarded.actions[0].guard.eq(z3.And(c, z3.BoolVal(True)))
    assert guarded.initial_actions[0].guard.eq(z3.BoolVal(True))
    assert pre.actions[0].guard.eq(z3.BoolVal(True))


def test_format_preexec():
    """Test the sectioned textual form of a pre-execution."""
    b = PreExecutionBuilder()
    pre = b.sequence([b.store(0, MemoryOrder.RELAXED, 16, 1),
                      b.load(0, MemoryOrder.RELAXED, 16, 1)],
                     initial_actions=[b.initial_store(16, 0)])

    text = format_preexec(pre)

    assert text.splitlines() == [
        ">>Initial:",
        "Action(Store(2,-1,NA,16,0))",
        ">>Actions:",
        "Action(Store(0,0,relaxed,16,1))",
        "Action(Load(1,0,relaxed,16,1))",
        ">>SB:",
        "(0,1)",
        ">>ASW:",
    ]
    assert str(pre) == text
