"""
Order id sequence for one order replica.
"""

from typing import Any, Dict, Iterable


class OrderIdSequence:
    """Process-local, monotonic order id counter.

    Neither replica knows the other's counter. Fast-forwarding past every
    replicated id keeps the two sequences from handing out an id the peer
    has already used.
    """

    def __init__(self, start: int = 1):
        self._next = max(1, start)

    @classmethod
    def from_orders(cls, orders: Iterable[Dict[str, Any]]) -> "OrderIdSequence":
        ids = [order["id"] for order in orders if isinstance(order.get("id"), int)]
        return cls(max(ids) + 1 if ids else 1)

    def peek(self) -> int:
        return self._next

    def next_id(self) -> int:
        order_id = self._next
        self._next += 1
        return order_id

    def advance_past(self, order_id: int) -> None:
        self._next = max(self._next, order_id + 1)
