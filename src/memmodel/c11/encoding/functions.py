"""
Uninterpreted declarations of the C11 encoding and the derived relations
built on top of them.

Stored relations (sb, asw, rf_dag, rs, sw, hb, psc_base, psc_f) are boolean
functions over pairs of events. ``mo``, ``sc`` and the acyclicity order over
sb | rf come from integer clocks, ``rf`` from its functional inverse, and
``fr``/``eco`` are plain expressions over ``rf`` and ``mo``.
"""
from dataclasses import dataclass
from typing import Any
import z3

from ..preexec.actions import Load, MemoryOrder, RMW, Store
from .sorts import SortTranslator


@dataclass
class C11Decls:
    """Function declarations of one encoding."""
    aid: z3.FuncDeclRef
    guard: z3.FuncDeclRef
    etype: z3.FuncDeclRef
    memord: z3.FuncDeclRef
    addr: z3.FuncDeclRef
    rval: z3.FuncDeclRef
    wval: z3.FuncDeclRef

    sb: z3.FuncDeclRef
    asw: z3.FuncDeclRef
    mo_clk: z3.FuncDeclRef
    rf_inv: z3.FuncDeclRef

    rs: z3.FuncDeclRef
    rf_dag: z3.FuncDeclRef
    sw: z3.FuncDeclRef
    hb: z3.FuncDeclRef

    sc_clk: z3.FuncDeclRef
    psc_base: z3.FuncDeclRef
    psc_f: z3.FuncDeclRef

    sbrf_clk: z3.FuncDeclRef

    @classmethod
    def declare(cls,
                events: z3.SortRef,
                sorts: SortTranslator,
                addr_sort: z3.SortRef,
                val_sort: z3.SortRef) -> "C11Decls":
        boolean = z3.BoolSort()
        integer = z3.IntSort()

        def fn(name: str, *sig: z3.SortRef) -> z3.FuncDeclRef:
            return z3.Function(sorts.name(name), *sig)

        return cls(
            aid=fn("aid", events, integer),
            guard=fn("guard", events, boolean),
            etype=fn("etype", events, sorts.event_type_sort),
            memord=fn("memord", events, sorts.memory_order_sort),
            addr=fn("addr", events, addr_sort),
            rval=fn("rval", events, val_sort),
            wval=fn("wval", events, val_sort),
            sb=fn("sb", events, events, boolean),
            asw=fn("asw", events, events, boolean),
            mo_clk=fn("mo_clk", events, integer),
            rf_inv=fn("rf_inv", events, events),
            rs=fn("rs", events, events, boolean),
            rf_dag=fn("rf_dag", events, events, boolean),
            sw=fn("sw", events, events, boolean),
            hb=fn("hb", events, events, boolean),
            sc_clk=fn("sc_clk", events, integer),
            psc_base=fn("psc_base", events, events, boolean),
            psc_f=fn("psc_f", events, events, boolean),
            sbrf_clk=fn("sbrf_clk", events, integer),
        )


class C11Functions:
    """Applications of the declarations, plus the derived relations."""

    def __init__(self, decls: C11Decls, sorts: SortTranslator):
        self.decls = decls
        self._load = sorts.event_type_const(Load)
        self._store = sorts.event_type_const(Store)
        self._rmw = sorts.event_type_const(RMW)
        self._seq_cst = sorts.memory_order_const(MemoryOrder.SEQ_CST)

    # Accessors
    def aid(self, e: Any) -> z3.ExprRef:
        return self.decls.aid(e)

    def guard(self, e: Any) -> z3.BoolRef:
        return self.decls.guard(e)

    def etype(self, e: Any) -> z3.ExprRef:
        return self.decls.etype(e)

    def addr(self, e: Any) -> z3.ExprRef:
        return self.decls.addr(e)

    def memord(self, e: Any) -> z3.ExprRef:
        return self.decls.memord(e)

    def rval(self, e: Any) -> z3.ExprRef:
        return self.decls.rval(e)

    def wval(self, e: Any) -> z3.ExprRef:
        return self.decls.wval(e)

    def is_read(self, e: Any) -> z3.BoolRef:
        return z3.Or(self.etype(e) == self._load, self.etype(e) == self._rmw)

    def is_write(self, e: Any) -> z3.BoolRef:
        return z3.Or(self.etype(e) == self._store, self.etype(e) == self._rmw)

    def same_loc(self, e1: Any, e2: Any) -> z3.BoolRef:
        return z3.And(z3.Or(self.is_read(e1), self.is_write(e1)),
                      z3.Or(self.is_read(e2), self.is_write(e2)),
                      self.addr(e1) == self.addr(e2))

    # Pre-execution relations
    def sb(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.sb(e1, e2)

    def asw(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.asw(e1, e2)

    # Witness relations
    def mo_clk(self, e: Any) -> z3.ArithRef:
        return self.decls.mo_clk(e)

    def mo(self, e1: Any, e2: Any) -> z3.BoolRef:
        return z3.And(self.mo_clk(e1) < self.mo_clk(e2),
                      self.is_write(e1),
                      self.is_write(e2),
                      self.same_loc(e1, e2))

    def rf_inv(self, e: Any) -> z3.ExprRef:
        return self.decls.rf_inv(e)

    def rf(self, e1: Any, e2: Any) -> z3.BoolRef:
        return z3.And(self.is_read(e2), self.rf_inv(e2) == e1)

    def sc_clk(self, e: Any) -> z3.ArithRef:
        return self.decls.sc_clk(e)

    def sc(self, e1: Any, e2: Any) -> z3.BoolRef:
        return z3.And(self.sc_clk(e1) < self.sc_clk(e2),
                      self.memord(e1) == self._seq_cst,
                      self.memord(e2) == self._seq_cst)

    # Derived relations
    def rf_dag(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.rf_dag(e1, e2)

    def rs(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.rs(e1, e2)

    def fr(self, e1: Any, e2: Any) -> z3.BoolRef:
        # (rf^-1 ; mo) \ id
        return z3.And(self.is_read(e1),
                      e1 != e2,
                      self.mo(self.rf_inv(e1), e2))

    def eco(self, e1: Any, e2: Any) -> z3.BoolRef:
        # rf | mo | fr | mo;rf | fr;rf
        return z3.Or(self.rf(e1, e2),
                     self.mo(e1, e2),
                     self.fr(e1, e2),
                     z3.And(self.is_read(e2), self.mo(e1, self.rf_inv(e2))),
                     z3.And(self.is_read(e2), self.fr(e1, self.rf_inv(e2))))

    def sw(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.sw(e1, e2)

    def hb(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.hb(e1, e2)

    def psc_base(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.psc_base(e1, e2)

    def psc_f(self, e1: Any, e2: Any) -> z3.BoolRef:
        return self.decls.psc_f(e1, e2)

    def sbrf_clk(self, e: Any) -> z3.ArithRef:
        return self.decls.sbrf_clk(e)
