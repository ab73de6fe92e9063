"""Dataset: the whole persisted document of orders.

The dataset also owns the stock-pool index: every bottle name maps to
all bottles carrying it, across every order.  Names never change, so the
index is built once when the dataset is assembled.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bottletrack.domain.exceptions import OrderNotFoundError
from bottletrack.domain.model.order import Bottle, Order


@dataclass
class Dataset:

    orders: list[Order] = field(default_factory=list)
    extra: dict = field(default_factory=dict)
    _stock_pools: dict[str, list[Bottle]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._stock_pools = {}
        for order in self.orders:
            for bottle in order.bottles():
                self._stock_pools.setdefault(bottle.bottle_name, []).append(bottle)

    def find_order(self, order_number: str) -> Order:
        for order in self.orders:
            if order.order_number == order_number:
                return order
        raise OrderNotFoundError(order_number)

    def bottles_named(self, bottle_name: str) -> list[Bottle]:
        return list(self._stock_pools.get(bottle_name, []))

    def draw_stock(self, bottle_name: str, units: int) -> None:
        """Take *units* out of the shared pool for *bottle_name*.

        Every bottle with that name in every order is decremented,
        each floored at zero.
        """
        for bottle in self._stock_pools.get(bottle_name, []):
            bottle.draw_stock(units)
