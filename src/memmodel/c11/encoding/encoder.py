"""
C11 axiomatic encoding of a pre-execution.

Events form a finite enumeration sort, one constant per action. The
relations of the model are uninterpreted functions over that sort, pinned
down by assertions:

- accessors and the pre-execution relations (sb, asw) are asserted exactly;
- rf_dag, rs, sw and hb are asserted as fixed-point equivalences, one per
  pair of events, and left for the solver to resolve;
- the consistency axioms (well-formedness, coherence, atomicity, SC order)
  are asserted as implications over all pairs of events.

Every constraint on an event is conditional on its ``guard``, so actions of
branches not taken stay in the encoding but are inert.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple
import z3

from ..preexec.actions import BmcAction, MemoryOrder, as_term
from ..preexec.preexec import PreExecution
from .functions import C11Decls, C11Functions
from .sorts import SortTranslator, address_sort, value_sort

logger = logging.getLogger(__name__)

AidPair = Tuple[int, int]


def mk_and(terms: Iterable[z3.BoolRef]) -> z3.BoolRef:
    terms = list(terms)
    if not terms:
        return z3.BoolVal(True)
    if len(terms) == 1:
        return terms[0]
    return z3.And(terms)


def mk_or(terms: Iterable[z3.BoolRef]) -> z3.BoolRef:
    terms = list(terms)
    if not terms:
        return z3.BoolVal(False)
    if len(terms) == 1:
        return terms[0]
    return z3.Or(terms)


@dataclass
class C11Encoding:
    """Solver-resident encoding of one pre-execution.

    Attributes:
        event_sort: Enumeration sort of events (None for an empty pre-execution)
        event_map: Mapping from aid to event constant
        action_map: Mapping from aid to the action it encodes
        initial_aids: Aids of the initialising actions
        decls: Uninterpreted function declarations
        fns: Function applications and derived relations
        sections: Assertions grouped by the axiom they encode
    """
    event_sort: Optional[z3.SortRef] = None
    event_map: Dict[int, z3.ExprRef] = field(default_factory=dict)
    action_map: Dict[int, BmcAction] = field(default_factory=dict)
    initial_aids: FrozenSet[int] = frozenset()
    decls: Optional[C11Decls] = None
    fns: Optional[C11Functions] = None
    sections: Dict[str, List[z3.BoolRef]] = field(default_factory=dict)

    @property
    def assertions(self) -> List[z3.BoolRef]:
        return [a for section in self.sections.values() for a in section]

    @property
    def is_empty(self) -> bool:
        return not self.event_map

    def event(self, aid: int) -> z3.ExprRef:
        return self.event_map[aid]


class C11Encoder:
    """Builds the C11 encoding of a finalized pre-execution."""

    def __init__(self, preexec: PreExecution):
        self.preexec = preexec
        self.all_actions: List[BmcAction] = preexec.all_actions
        self.initial_aids = frozenset(a.aid for a in preexec.initial_actions)

        self.sorts: Optional[SortTranslator] = None
        self.fns: Optional[C11Functions] = None
        self.events: List[z3.ExprRef] = []
        self.event_map: Dict[int, z3.ExprRef] = {}

        self._sb_pairs: Set[AidPair] = set()
        self._scb_cache: Dict[AidPair, z3.BoolRef] = {}

    def ev(self, action: BmcAction) -> z3.ExprRef:
        return self.event_map[action.aid]

    def encode(self) -> C11Encoding:
        # Unsupported orders are fatal before anything is declared.
        for action in self.all_actions:
            action.memory_order.checked()

        logger.debug("# actions: %d", len(self.all_actions))
        if not self.all_actions:
            return C11Encoding(initial_aids=self.initial_aids)

        self.sorts = SortTranslator()
        event_sort, self.events = self.sorts.event_sort(self.all_actions)
        self.event_map = {a.aid: e for a, e in zip(self.all_actions, self.events)}

        decls = C11Decls.declare(event_sort, self.sorts,
                                 address_sort(self.all_actions),
                                 value_sort(self.all_actions))
        self.fns = C11Functions(decls, self.sorts)

        self._sb_pairs = self._sb_with_initial()

        sections: Dict[str, List[z3.BoolRef]] = {}
        sections.update(self._accessor_asserts())
        sections["sb"] = self._sb_asserts()
        sections["asw"] = self._asw_asserts()
        sections["rf_dag"] = self._rf_dag_asserts()
        sections["rs"] = self._rs_asserts()
        sections["sw"] = self._sw_asserts()
        sections["hb"] = self._hb_asserts()
        sections["psc_base"] = self._psc_base_asserts()
        sections["psc_f"] = self._psc_f_asserts()
        sections["sc_clk"] = self._sc_clk_asserts()
        sections["well_formed_rf"] = self._well_formed_rf()
        sections["mo_init"] = self._mo_init()
        sections["well_formed_mo"] = self._well_formed_mo()
        sections["coherence"] = self._coherence()
        sections["atomic1"] = self._atomic1()
        sections["atomic2"] = self._atomic2()
        sections["sbrf_clk"] = self._sbrf_clk()

        logger.debug("# assertions: %d", sum(len(s) for s in sections.values()))

        return C11Encoding(
            event_sort=event_sort,
            event_map=dict(self.event_map),
            action_map={a.aid: a for a in self.all_actions},
            initial_aids=self.initial_aids,
            decls=decls,
            fns=self.fns,
            sections=sections,
        )

    # ---- action classes ---------------------------------------------------

    def _reads(self) -> List[BmcAction]:
        return [a for a in self.all_actions if a.is_read]

    def _writes(self) -> List[BmcAction]:
        return [a for a in self.all_actions if a.is_write]

    def _atomic_writes(self) -> List[BmcAction]:
        return [a for a in self._writes() if a.is_atomic]

    def _fences(self) -> List[BmcAction]:
        return [a for a in self.all_actions if a.is_fence]

    def _sc_actions(self) -> List[BmcAction]:
        return [a for a in self.all_actions if a.memory_order is MemoryOrder.SEQ_CST]

    def _pairs(self) -> List[Tuple[BmcAction, BmcAction]]:
        return [(a, b) for a in self.all_actions for b in self.all_actions]

    # ---- accessors --------------------------------------------------------

    def _accessor_asserts(self) -> Dict[str, List[z3.BoolRef]]:
        fns = self.fns
        acts = self.all_actions
        return {
            "aid": [fns.aid(self.ev(a)) == a.aid for a in acts],
            "guard": [fns.guard(self.ev(a)) == z3.simplify(as_term(a.guard)) for a in acts],
            "etype": [fns.etype(self.ev(a)) == self.sorts.event_type(a) for a in acts],
            "addr": [fns.addr(self.ev(a)) == as_term(a.action.address)
                     for a in acts if a.has_address],
            "memord": [fns.memord(self.ev(a)) == self.sorts.memory_order(a) for a in acts],
            "rval": [fns.rval(self.ev(a)) == z3.simplify(as_term(a.action.read_value))
                     for a in acts if a.is_read],
            "wval": [fns.wval(self.ev(a)) == z3.simplify(as_term(a.action.write_value))
                     for a in acts if a.is_write],
        }

    # ---- pre-execution relations ------------------------------------------

    def _sb_with_initial(self) -> Set[AidPair]:
        """Program sb plus initialisation before every memory access."""
        pairs = {(a.aid, b.aid) for a, b in self.preexec.sb}
        for i in self.preexec.initial_actions:
            for a in self.preexec.actions:
                if a.is_read or a.is_write:
                    pairs.add((i.aid, a.aid))
        return pairs

    def _exact(self, rel, pairs: Set[AidPair]) -> List[z3.BoolRef]:
        return [rel(self.ev(a), self.ev(b)) == z3.BoolVal((a.aid, b.aid) in pairs)
                for a, b in self._pairs()]

    def _sb_asserts(self) -> List[z3.BoolRef]:
        return self._exact(self.fns.sb, self._sb_pairs)

    def _asw_asserts(self) -> List[z3.BoolRef]:
        return self._exact(self.fns.asw, {(a.aid, b.aid) for a, b in self.preexec.asw})

    # ---- release sequences and synchronisation ----------------------------

    def _rf_dag_asserts(self) -> List[z3.BoolRef]:
        """[W & ~NA] ; rf*, chaining through enabled RMWs."""
        fns = self.fns
        rmws = [self.ev(a) for a in self._reads() if a.is_rmw]
        heads = {a.aid for a in self._atomic_writes()}
        tails = {a.aid for a in self._reads()} | heads

        asserts = []
        for a, b in self._pairs():
            ea, eb = self.ev(a), self.ev(b)
            if a.aid in heads and b.aid in tails:
                chained = [z3.And(fns.guard(c), fns.rf(ea, c), fns.rf_dag(c, eb)) for c in rmws]
                body = z3.And(fns.guard(ea), fns.guard(eb),
                              mk_or([z3.BoolVal(a.aid == b.aid), fns.rf(ea, eb)] + chained))
            elif a.aid == b.aid:
                body = fns.guard(ea)
            else:
                body = z3.BoolVal(False)
            asserts.append(fns.rf_dag(ea, eb) == body)
        return asserts

    def _rs_asserts(self) -> List[z3.BoolRef]:
        """[W] ; (sb & loc)? ; [W & ~NA] ; rf*"""
        fns = self.fns
        atomic_writes = [self.ev(a) for a in self._atomic_writes()]
        heads = {a.aid for a in self._writes()}
        tails = {a.aid for a in self._reads()} | {a.aid for a in self._atomic_writes()}

        asserts = []
        for a, b in self._pairs():
            ea, eb = self.ev(a), self.ev(b)
            if a.aid in heads and b.aid in tails:
                via_sb = [z3.And(fns.guard(c), fns.sb(ea, c), fns.rf_dag(c, eb),
                                 fns.same_loc(ea, c))
                          for c in atomic_writes]
                body = z3.And(fns.guard(ea), fns.guard(eb),
                              mk_or([z3.BoolVal(a.aid == b.aid), fns.rf_dag(ea, eb)] + via_sb))
            else:
                body = z3.BoolVal(False)
            asserts.append(fns.rs(ea, eb) == body)
        return asserts

    def _fence_successor_writes(self) -> Dict[int, List[BmcAction]]:
        """Fence aid -> writes sequenced after it."""
        result: Dict[int, List[BmcAction]] = {}
        for a, b in self.preexec.sb:
            if a.is_fence and b.is_write:
                result.setdefault(a.aid, []).append(b)
        return result

    def _fence_predecessor_reads(self) -> Dict[int, List[BmcAction]]:
        """Fence aid -> atomic reads sequenced before it."""
        result: Dict[int, List[BmcAction]] = {}
        for a, b in self.preexec.sb:
            if a.is_read and a.is_atomic and b.is_fence:
                result.setdefault(b.aid, []).append(a)
        return result

    def _sw_asserts(self) -> List[z3.BoolRef]:
        """[REL|ACQ_REL|SC] ; ([F] ; sb)? ; rs ; rf ; [R & ~NA] ; (sb ; [F])? ; [ACQ|ACQ_REL|SC]

        asw edges always synchronise.
        """
        fns = self.fns
        heads = {a.aid for a in self._fences() + self._writes()
                 if a.memory_order.is_release_like}
        tails = {a.aid for a in self._fences() + self._reads()
                 if a.memory_order.is_acquire_like}
        f_sb_w = self._fence_successor_writes()
        r_sb_f = self._fence_predecessor_reads()

        asserts = []
        for a, b in self._pairs():
            ea, eb = self.ev(a), self.ev(b)
            if a.aid not in heads or b.aid not in tails:
                asserts.append(fns.sw(ea, eb) == fns.asw(ea, eb))
                continue

            # Writes heading the release sequence, reads ending the rf edge.
            sources = f_sb_w.get(a.aid, []) if a.is_fence else [a]
            targets = r_sb_f.get(b.aid, []) if b.is_fence else [b]
            synchronising = []
            for w in sources:
                for r in targets:
                    ew, er = self.ev(w), self.ev(r)
                    synchronising.append(z3.And(fns.guard(ew), fns.guard(er),
                                                fns.rs(ew, fns.rf_inv(er))))
            body = z3.And(fns.guard(ea), fns.guard(eb),
                          mk_or([fns.asw(ea, eb)] + synchronising))
            asserts.append(fns.sw(ea, eb) == body)
        return asserts

    def _hb_asserts(self) -> List[z3.BoolRef]:
        """hb = (sb | sw)+, unfolded one step per pair."""
        fns = self.fns
        asserts = []
        for a, b in self._pairs():
            ea, eb = self.ev(a), self.ev(b)
            steps = [z3.And(fns.guard(c), z3.Or(fns.sb(ea, c), fns.sw(ea, c)), fns.hb(c, eb))
                     for c in self.events]
            body = z3.And(fns.guard(ea), fns.guard(eb),
                          mk_or([fns.sb(ea, eb), fns.sw(ea, eb)] + steps))
            asserts.append(fns.hb(ea, eb) == body)
        return asserts

    # ---- SC order ---------------------------------------------------------

    def _scb(self, x: BmcAction, y: BmcAction) -> z3.BoolRef:
        """sb | sb|neq-loc ; hb ; sb|neq-loc | hb & loc | mo | fr"""
        key = (x.aid, y.aid)
        if key in self._scb_cache:
            return self._scb_cache[key]

        fns = self.fns
        ex, ey = self.ev(x), self.ev(y)
        sb_succ = [c for c in self.all_actions if (x.aid, c.aid) in self._sb_pairs]
        sb_pred = [d for d in self.all_actions if (d.aid, y.aid) in self._sb_pairs]
        through_hb = [z3.And(fns.guard(self.ev(c)), fns.guard(self.ev(d)),
                             z3.Not(fns.same_loc(ex, self.ev(c))),
                             fns.hb(self.ev(c), self.ev(d)),
                             z3.Not(fns.same_loc(self.ev(d), ey)))
                      for c in sb_succ for d in sb_pred]

        scb = mk_or([fns.sb(ex, ey)]
                    + through_hb
                    + [z3.And(fns.hb(ex, ey), fns.same_loc(ex, ey)),
                       fns.mo(ex, ey),
                       fns.fr(ex, ey)])
        self._scb_cache[key] = scb
        return scb

    def _psc_base_asserts(self) -> List[z3.BoolRef]:
        fns = self.fns
        sc_aids = {a.aid for a in self._sc_actions()}
        asserts = []
        for a1, a2 in self._pairs():
            e1, e2 = self.ev(a1), self.ev(a2)
            if a1.aid not in sc_aids or a2.aid not in sc_aids:
                asserts.append(fns.psc_base(e1, e2) == z3.BoolVal(False))
                continue

            singular = []
            for x in self.all_actions:
                ex = self.ev(x)
                if a1.is_fence:
                    singular.append(z3.And(fns.guard(ex), fns.hb(e1, ex), self._scb(x, a2)))
                if a2.is_fence:
                    singular.append(z3.And(fns.guard(ex), self._scb(a1, x), fns.hb(ex, e2)))

            double = []
            if a1.is_fence and a2.is_fence:
                for x, y in self._pairs():
                    ex, ey = self.ev(x), self.ev(y)
                    double.append(z3.And(fns.guard(ex), fns.guard(ey),
                                         fns.hb(e1, ex), self._scb(x, y), fns.hb(ey, e2)))

            premise = z3.And(fns.guard(e1), fns.guard(e2),
                             mk_or([self._scb(a1, a2)] + singular + double))
            asserts.append(fns.psc_base(e1, e2) == premise)
            asserts.append(z3.Implies(fns.psc_base(e1, e2), fns.sc_clk(e1) < fns.sc_clk(e2)))
        return asserts

    def _psc_f_asserts(self) -> List[z3.BoolRef]:
        fns = self.fns
        sc_fences = {a.aid for a in self._fences() if a.memory_order is MemoryOrder.SEQ_CST}
        asserts = []
        for f1, f2 in self._pairs():
            e1, e2 = self.ev(f1), self.ev(f2)
            if f1.aid not in sc_fences or f2.aid not in sc_fences:
                asserts.append(fns.psc_f(e1, e2) == z3.BoolVal(False))
                continue
            hb_eco_hb = [z3.And(fns.guard(x), fns.guard(y),
                                fns.hb(e1, x), fns.eco(x, y), fns.hb(y, e2))
                         for x in self.events for y in self.events]
            premise = z3.And(fns.guard(e1), fns.guard(e2),
                             mk_or([fns.hb(e1, e2)] + hb_eco_hb))
            asserts.append(fns.psc_f(e1, e2) == premise)
            asserts.append(z3.Implies(fns.psc_f(e1, e2), fns.sc_clk(e1) < fns.sc_clk(e2)))
        return asserts

    def _sc_clk_asserts(self) -> List[z3.BoolRef]:
        """Enabled SC events sit at distinct points of the total S order."""
        fns = self.fns
        sc = [self.ev(a) for a in self._sc_actions()]
        return [z3.Implies(z3.And(fns.guard(e1), fns.guard(e2)),
                           fns.sc_clk(e1) != fns.sc_clk(e2))
                for i, e1 in enumerate(sc) for e2 in sc[i + 1:]]

    # ---- well-formedness --------------------------------------------------

    def _well_formed_rf(self) -> List[z3.BoolRef]:
        """Every enabled read reads an enabled same-address write of its value."""
        fns = self.fns
        asserts = []
        for a in self._reads():
            e = self.ev(a)
            src = fns.rf_inv(e)
            asserts.append(z3.Implies(fns.guard(e),
                                      z3.And(fns.is_write(src),
                                             fns.same_loc(e, src),
                                             fns.rval(e) == fns.wval(src),
                                             fns.guard(src))))
        return asserts

    def _mo_init(self) -> List[z3.BoolRef]:
        return [self.fns.mo_clk(self.ev(a)) == 0 for a in self.preexec.initial_actions]

    def _well_formed_mo(self) -> List[z3.BoolRef]:
        fns = self.fns
        writes = self._writes()
        return [z3.Implies(z3.And(fns.guard(self.ev(w1)), fns.guard(self.ev(w2)),
                                  fns.same_loc(self.ev(w1), self.ev(w2))),
                           fns.mo_clk(self.ev(w1)) != fns.mo_clk(self.ev(w2)))
                for w1 in writes for w2 in writes if w1.aid != w2.aid]

    # ---- consistency axioms -----------------------------------------------

    def _coherence(self) -> List[z3.BoolRef]:
        """irreflexive (hb ; eco?)"""
        fns = self.fns
        return [z3.Not(z3.And(fns.guard(ea), fns.guard(eb), fns.hb(ea, eb),
                              mk_or([z3.BoolVal(ea.eq(eb)), fns.eco(eb, ea)])))
                for ea in self.events for eb in self.events]

    def _atomic1(self) -> List[z3.BoolRef]:
        """irreflexive eco"""
        fns = self.fns
        return [z3.Not(z3.And(fns.guard(e), fns.eco(e, e))) for e in self.events]

    def _atomic2(self) -> List[z3.BoolRef]:
        """irreflexive (fr ; mo)"""
        fns = self.fns
        return [z3.Not(z3.And(fns.guard(ea), fns.guard(eb), fns.fr(ea, eb), fns.mo(eb, ea)))
                for ea in self.events for eb in self.events]

    def _sbrf_clk(self) -> List[z3.BoolRef]:
        """sb | rf is acyclic: a strictly increasing clock along it."""
        fns = self.fns
        return [z3.Implies(z3.And(fns.guard(ea), fns.guard(eb),
                                  z3.Or(fns.sb(ea, eb), fns.rf(ea, eb))),
                           fns.sbrf_clk(ea) < fns.sbrf_clk(eb))
                for ea in self.events for eb in self.events]


def compute_executions(preexec: PreExecution) -> C11Encoding:
    """Encode ``preexec`` under the C11 model.

    Raises:
        UnsupportedMemoryOrderError: If an action uses ``memory_order_consume``
    """
    return C11Encoder(preexec).encode()


def add_assertions(solver, encoding: C11Encoding) -> None:
    """Assert every axiom of ``encoding`` on ``solver``."""
    solver.add_constraints(encoding.assertions)
