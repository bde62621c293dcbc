"""
Memory actions and their guarded wrappers.

An action is one memory event a program may perform: a load, a store, a
read-modify-write or a fence. Addresses and values are opaque z3 terms
produced by the symbolic executor; the checker only ever compares them.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar, Optional

import z3

from ..errors import UnsupportedMemoryOrderError


INITIAL_TID = -1
"""Thread id reserved for the actions that initialise memory."""


class MemoryOrder(Enum):
    """C11 memory orders."""
    NA = "NA"
    RELAXED = "relaxed"
    RELEASE = "release"
    ACQUIRE = "acquire"
    ACQ_REL = "acq_rel"
    SEQ_CST = "seq_cst"
    CONSUME = "consume"

    def checked(self) -> "MemoryOrder":
        """Return self, raising for orders the model cannot interpret."""
        if self is MemoryOrder.CONSUME:
            raise UnsupportedMemoryOrderError(self)
        return self

    @property
    def is_atomic(self) -> bool:
        return self.checked() is not MemoryOrder.NA

    @property
    def is_release_like(self) -> bool:
        return self.checked() in (MemoryOrder.RELEASE, MemoryOrder.ACQ_REL, MemoryOrder.SEQ_CST)

    @property
    def is_acquire_like(self) -> bool:
        return self.checked() in (MemoryOrder.ACQUIRE, MemoryOrder.ACQ_REL, MemoryOrder.SEQ_CST)

    def __str__(self) -> str:
        return self.checked().value


class Polarity(Enum):
    """Branch outcome an action was produced under."""
    POS = "+"
    NEG = "-"


def as_term(value: Any) -> z3.ExprRef:
    """Lift plain Python scalars to z3 numerals; z3 terms pass through."""
    if isinstance(value, z3.ExprRef):
        return value
    if isinstance(value, bool):
        return z3.BoolVal(value)
    if isinstance(value, int):
        return z3.IntVal(value)
    raise TypeError(f"Cannot use {value!r} as a solver term")


@dataclass(frozen=True, eq=False)
class Action:
    """Common fields of every memory action.

    Attributes:
        aid: Globally unique action id (allocation order carries no meaning)
        tid: Thread id, ``INITIAL_TID`` for initialising actions
        memory_order: Memory order of the access or fence
    """
    aid: int
    tid: int
    memory_order: MemoryOrder

    kind: ClassVar[str] = "?"

    @property
    def is_read(self) -> bool:
        return False

    @property
    def is_write(self) -> bool:
        return False

    @property
    def has_address(self) -> bool:
        return False

    @property
    def is_fence(self) -> bool:
        return False

    @property
    def is_atomic(self) -> bool:
        return self.memory_order.is_atomic

    @property
    def is_initial(self) -> bool:
        return self.tid == INITIAL_TID


@dataclass(frozen=True, eq=False)
class Load(Action):
    address: Any
    read_value: Any

    kind: ClassVar[str] = "Load"

    @property
    def is_read(self) -> bool:
        return True

    @property
    def has_address(self) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class Store(Action):
    address: Any
    write_value: Any

    kind: ClassVar[str] = "Store"

    @property
    def is_write(self) -> bool:
        return True

    @property
    def has_address(self) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class RMW(Action):
    address: Any
    read_value: Any
    write_value: Any

    kind: ClassVar[str] = "RMW"

    @property
    def is_read(self) -> bool:
        return True

    @property
    def is_write(self) -> bool:
        return True

    @property
    def has_address(self) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class Fence(Action):
    kind: ClassVar[str] = "Fence"

    @property
    def is_fence(self) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class BmcAction:
    """An action together with the path condition it is enabled under.

    Disabled actions stay in the pre-execution; the encoder turns ``guard``
    into a per-event enabledness predicate.

    Attributes:
        polarity: Branch outcome that produced the action
        guard: z3 boolean path condition
        action: The wrapped memory action
    """
    polarity: Polarity
    guard: Any
    action: Action

    @property
    def aid(self) -> int:
        return self.action.aid

    @property
    def tid(self) -> int:
        return self.action.tid

    @property
    def memory_order(self) -> MemoryOrder:
        return self.action.memory_order

    @property
    def is_read(self) -> bool:
        return self.action.is_read

    @property
    def is_write(self) -> bool:
        return self.action.is_write

    @property
    def has_address(self) -> bool:
        return self.action.has_address

    @property
    def is_fence(self) -> bool:
        return self.action.is_fence

    @property
    def is_rmw(self) -> bool:
        return isinstance(self.action, RMW)

    @property
    def is_atomic(self) -> bool:
        return self.action.is_atomic

    @property
    def is_pos(self) -> bool:
        return self.polarity is Polarity.POS

    def guarded(self, cond: Any) -> "BmcAction":
        """Conjoin ``cond`` onto the existing guard."""
        return replace(self, guard=z3.And(cond, self.guard))


def mk_bmc_action(action: Action,
                  guard: Optional[Any] = None,
                  polarity: Polarity = Polarity.POS) -> BmcAction:
    """Wrap an action; an omitted guard means always enabled."""
    return BmcAction(polarity, z3.BoolVal(True) if guard is None else guard, action)


def format_action(action: Action) -> str:
    order = str(action.memory_order)
    if isinstance(action, Load):
        return f"Load({action.aid},{action.tid},{order},{action.address},{action.read_value})"
    if isinstance(action, Store):
        return f"Store({action.aid},{action.tid},{order},{action.address},{action.write_value})"
    if isinstance(action, RMW):
        return (f"RMW({action.aid},{action.tid},{order},{action.address},"
                f"{action.read_value},{action.write_value})")
    return f"F({action.aid},{action.tid},{order})"


def format_bmc_action(bmc_action: BmcAction, with_guard: bool = False) -> str:
    if with_guard:
        return (f"Action({bmc_action.polarity.value},{bmc_action.guard},"
                f"{format_action(bmc_action.action)})")
    return f"Action({format_action(bmc_action.action)})"
