"""
Sort translator from the action model to z3 sorts.

Mapping:
    events        -> EnumSort with one constant per action (named by aid)
    action kind   -> EnumSort {Load, Store, RMW, Fence}
    memory order  -> EnumSort {NA, Seq_cst, Relaxed, Release, Acquire, Acq_rel}
    address/value -> sort of the producer's terms (Int when there are none)

Every translator instance creates sorts under fresh names so that several
encodings can live in the same z3 context.
"""
import itertools
from typing import Any, Dict, List, Sequence, Tuple
import z3

from ..preexec.actions import BmcAction, Fence, Load, MemoryOrder, RMW, Store, as_term

_instance_ids = itertools.count()

_EVENT_KINDS = (Load, Store, RMW, Fence)

_MEMORY_ORDERS = (
    MemoryOrder.NA,
    MemoryOrder.SEQ_CST,
    MemoryOrder.RELAXED,
    MemoryOrder.RELEASE,
    MemoryOrder.ACQUIRE,
    MemoryOrder.ACQ_REL,
)


class SortTranslator:
    """Creates the enumeration sorts one encoding is built over."""

    def __init__(self):
        self.uid = next(_instance_ids)
        self.event_type_sort, consts = z3.EnumSort(
            self.name("EventType"), [self.name(k.kind) for k in _EVENT_KINDS])
        self._event_types: Dict[type, Any] = dict(zip(_EVENT_KINDS, consts))

        self.memory_order_sort, consts = z3.EnumSort(
            self.name("MemoryOrder"), [self.name(o.name) for o in _MEMORY_ORDERS])
        self._memory_orders: Dict[MemoryOrder, Any] = dict(zip(_MEMORY_ORDERS, consts))

    def name(self, base: str) -> str:
        """Name made unique to this translator."""
        return f"{base}!{self.uid}"

    def event_sort(self, actions: Sequence[BmcAction]) -> Tuple[z3.SortRef, List[z3.ExprRef]]:
        """Enumeration sort with one event constant per action, in order.

        Args:
            actions: Non-empty list of actions with distinct aids

        Returns:
            The sort and its constants, aligned with ``actions``
        """
        return z3.EnumSort(self.name("Event"),
                           [self.name(f"E_{a.aid}") for a in actions])

    def event_type(self, action: BmcAction) -> z3.ExprRef:
        return self._event_types[type(action.action)]

    def event_type_const(self, kind: type) -> z3.ExprRef:
        return self._event_types[kind]

    def memory_order(self, action: BmcAction) -> z3.ExprRef:
        return self.memory_order_const(action.memory_order)

    def memory_order_const(self, order: MemoryOrder) -> z3.ExprRef:
        return self._memory_orders[order.checked()]


def address_sort(actions: Sequence[BmcAction]) -> z3.SortRef:
    """Sort of the first address term, Int when no action has one."""
    for a in actions:
        if a.has_address:
            return as_term(a.action.address).sort()
    return z3.IntSort()


def value_sort(actions: Sequence[BmcAction]) -> z3.SortRef:
    """Sort of the first read or written value, Int when there is none."""
    for a in actions:
        if a.is_read:
            return as_term(a.action.read_value).sort()
        if a.is_write:
            return as_term(a.action.write_value).sort()
    return z3.IntSort()
