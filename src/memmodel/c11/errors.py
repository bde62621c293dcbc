"""
Exception types raised by the C11 memory-model checker.
"""


class MemoryModelError(Exception):
    """Base class for errors raised by the memory-model core."""


class UnsupportedMemoryOrderError(MemoryModelError, NotImplementedError):
    """Raised when an action carries a memory order the model does not cover.

    The C11 encoding has no semantics for ``memory_order_consume``; seeing it
    means the producer handed over something outside the modelled fragment.
    """

    def __init__(self, order):
        self.order = order
        super().__init__(f"Memory order not supported by the C11 model: {getattr(order, 'name', order)}")
