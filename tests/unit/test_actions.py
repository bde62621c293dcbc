"""
Tests for the action model.
"""
import pytest
import z3

from memmodel.c11.errors import MemoryModelError, UnsupportedMemoryOrderError
from memmodel.c11.preexec import (
    INITIAL_TID,
    RMW,
    BmcAction,
    Fence,
    Load,
    MemoryOrder,
    Polarity,
    Store,
    as_term,
    format_action,
    format_bmc_action,
    mk_bmc_action,
)


def test_as_term_lifts_scalars():
    """Test that ints and bools become z3 numerals and terms pass through."""
    assert as_term(3).eq(z3.IntVal(3))
    assert as_term(True).eq(z3.BoolVal(True))
    x = z3.Int('x')
    assert as_term(x) is x
    with pytest.raises(TypeError):
        as_term("x")


def test_memory_order_classes():
    """Test atomic / release / acquire classification."""
    assert not MemoryOrder.NA.is_atomic
    assert MemoryOrder.RELAXED.is_atomic
    assert MemoryOrder.RELEASE.is_release_like
    assert MemoryOrder.ACQ_REL.is_release_like
    assert MemoryOrder.SEQ_CST.is_release_like
    assert not MemoryOrder.ACQUIRE.is_release_like
    assert MemoryOrder.ACQUIRE.is_acquire_like
    assert MemoryOrder.SEQ_CST.is_acquire_like
    assert not MemoryOrder.RELAXED.is_acquire_like
    assert str(MemoryOrder.SEQ_CST) == "seq_cst"


def test_consume_is_unsupported():
    """Test that interpreting memory_order_consume raises."""
    with pytest.raises(UnsupportedMemoryOrderError) as exc_info:
        MemoryOrder.CONSUME.checked()
    assert exc_info.value.order is MemoryOrder.CONSUME
    assert isinstance(exc_info.value, MemoryModelError)
    assert isinstance(exc_info.value, NotImplementedError)
    assert "CONSUME" in str(exc_info.value)

    with pytest.raises(UnsupportedMemoryOrderError):
        MemoryOrder.CONSUME.is_acquire_like
    with pytest.raises(UnsupportedMemoryOrderError):
        str(MemoryOrder.CONSUME)


def test_action_predicates():
    """Test the derived predicates of each action kind."""
    load = Load(0, 0, MemoryOrder.ACQUIRE, as_term(1), z3.Int('v'))
    store = Store(1, 0, MemoryOrder.NA, as_term(1), as_term(2))
    rmw = RMW(2, 1, MemoryOrder.ACQ_REL, as_term(1), as_term(2), as_term(3))
    fence = Fence(3, 1, MemoryOrder.SEQ_CST)

    assert load.is_read and not load.is_write and load.has_address
    assert store.is_write and not store.is_read and not store.is_atomic
    assert rmw.is_read and rmw.is_write and rmw.is_atomic
    assert fence.is_fence and not fence.has_address
    assert not fence.is_read and not fence.is_write
    assert Store(4, INITIAL_TID, MemoryOrder.NA, as_term(0), as_term(0)).is_initial
    assert not store.is_initial


def test_access_fields_are_required():
    """Test that memory accesses cannot be built without address and values."""
    with pytest.raises(TypeError):
        Load(0, 0, MemoryOrder.RELAXED)
    with pytest.raises(TypeError):
        Store(1, 0, MemoryOrder.RELAXED, as_term(0))
    with pytest.raises(TypeError):
        RMW(2, 0, MemoryOrder.RELAXED, as_term(0), as_term(1))
    assert Fence(3, 0, MemoryOrder.SEQ_CST).is_fence


def test_bmc_action_delegates():
    """Test that BmcAction forwards to its wrapped action."""
    c = z3.Bool('c')
    rmw = mk_bmc_action(RMW(7, 2, MemoryOrder.RELAXED, as_term(0), as_term(0), as_term(1)),
                        guard=c, polarity=Polarity.NEG)

    assert rmw.aid == 7
    assert rmw.tid == 2
    assert rmw.is_rmw
    assert rmw.is_read and rmw.is_write and rmw.is_atomic
    assert not rmw.is_pos
    assert rmw.guard is c


def test_bmc_action_guarded():
    """Test that guarding conjoins onto the existing guard."""
    c = z3.Bool('c')
    d = z3.Bool('d')
    action = BmcAction(Polarity.POS, c, Fence(0, 0, MemoryOrder.RELEASE))

    guarded = action.guarded(d)

    assert guarded.guard.eq(z3.And(d, c))
    assert guarded.action is action.action
    assert action.guard is c


def test_default_guard_is_true():
    """Test that an omitted guard means always enabled."""
    action = mk_bmc_action(Fence(0, 0, MemoryOrder.SEQ_CST))
    assert z3.is_true(action.guard)
    assert action.is_pos


def test_format_action():
    """Test the textual form of actions."""
    assert format_action(Load(0, 1, MemoryOrder.RELAXED, as_term(16), as_term(1))) \
        == "Load(0,1,relaxed,16,1)"
    assert format_action(Store(1, 1, MemoryOrder.NA, as_term(16), as_term(2))) \
        == "Store(1,1,NA,16,2)"
    assert format_action(RMW(2, 0, MemoryOrder.ACQ_REL, as_term(16), as_term(2), as_term(3))) \
        == "RMW(2,0,acq_rel,16,2,3)"
    assert format_action(Fence(3, 0, MemoryOrder.SEQ_CST)) == "F(3,0,seq_cst)"

    bmc = mk_bmc_action(Fence(3, 0, MemoryOrder.SEQ_CST))
    assert format_bmc_action(bmc) == "Action(F(3,0,seq_cst))"
    assert format_bmc_action(bmc, with_guard=True) == "Action(+,True,F(3,0,seq_cst))"
