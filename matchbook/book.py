"""A price-time priority limit order book."""

from __future__ import annotations

from bisect import insort
from collections import deque
from collections.abc import Iterator, Mapping
from typing import Deque, Dict, List, Optional

from matchbook.order import Order, OrderType, Side


class _PriceLevels(Mapping):
    """Price levels of one side of the book, iterated best price first.

    Each level is a FIFO queue of resting orders.
    """

    def __init__(self, highest_first: bool) -> None:
        # Keys are stored so that the best level is always last in the list.
        self._sign = 1.0 if highest_first else -1.0
        self._keys: List[float] = []
        self._levels: Dict[float, Deque[Order]] = {}

    def __getitem__(self, price: float) -> Deque[Order]:
        return self._levels[price]

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[float]:
        for key in reversed(self._keys):
            yield self._sign * key

    def append(self, order: Order) -> None:
        """Queue ``order`` at the back of its price level."""
        price = order.target_price
        level = self._levels.get(price)
        if level is None:
            insort(self._keys, self._sign * price)
            level = self._levels[price] = deque()
        level.append(order)

    def best(self) -> Optional[float]:
        """Price of the best level, or None when this side is empty."""
        if not self._keys:
            return None
        return self._sign * self._keys[-1]

    def discard_best(self) -> None:
        """Drop the best price level."""
        key = self._keys.pop()
        del self._levels[self._sign * key]


class Book:
    """Order book holding resting limit orders and matching incoming ones."""

    def __init__(self) -> None:
        self.asks = _PriceLevels(highest_first=False)
        self.bids = _PriceLevels(highest_first=True)

    def add_order(self, order: Order) -> None:
        """Match ``order`` against the book; rest what is left of a limit order.

        Market orders never rest: whatever cannot be filled is dropped and
        the order is notified.
        """
        if order.order_type is OrderType.MARKET:
            self.match(order)
            order.notify()
            return
        self.match(order)
        if order.unexecuted_quantity != 0:
            side = self.asks if order.side is Side.SELL else self.bids
            side.append(order)

    def match(self, order: Order) -> None:
        """Fill ``order`` against the opposite side while prices cross."""
        levels = self.bids if order.side is Side.SELL else self.asks
        while (price := levels.best()) is not None:
            queue = levels[price]
            while queue:
                resting = queue[0]
                if order.side is Side.BUY:
                    can_cross = order.target_price >= resting.target_price
                else:
                    can_cross = order.target_price <= resting.target_price
                if not can_cross:
                    return

                quantity = min(order.unexecuted_quantity, resting.unexecuted_quantity)
                resting.execute(quantity, price)
                order.execute(quantity, price)

                if resting.unexecuted_quantity == 0:
                    queue.popleft()
                if order.unexecuted_quantity == 0:
                    if not queue:
                        levels.discard_best()
                    return
                if resting.unexecuted_quantity != 0:
                    # Neither side progressed; nothing more can be filled here.
                    return
            levels.discard_best()

    @staticmethod
    def _format_side(levels: _PriceLevels) -> List[str]:
        lines = ["ID\t\tPrice\t\tSize"]
        for price in levels:
            for order in levels[price]:
                lines.append(
                    f"{order.order_id}\t\t{order.target_price:g}"
                    f"\t\t{order.unexecuted_quantity}"
                )
        return lines

    def format_orders(self) -> str:
        """Text listing of the resting limit orders on both sides."""
        lines = ["Limit Orders Sell:"]
        lines.extend(self._format_side(self.asks))
        lines.append("Limit Orders Buy:")
        lines.extend(self._format_side(self.bids))
        return "\n".join(lines) + "\n"

    def show_orders(self) -> None:
        """Print the resting limit orders on both sides."""
        print(self.format_orders(), end="")