"""Orders and their execution state."""

from __future__ import annotations

import enum
import math
import sys
import time

TICK_SIZE = 0.05


class Side(enum.Enum):
    """Whether the instrument is being bought or sold."""

    BUY = "buy"
    SELL = "sell"


class OrderType(enum.Enum):
    """The kinds of order the book accepts."""

    LIMIT = "limit"
    MARKET = "market"


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def round_to_tick(price: float) -> float:
    """Round a price to the nearest multiple of the tick size."""
    return _round_half_away(price / TICK_SIZE) * TICK_SIZE


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


class Order:
    """A buy or sell order together with how much of it has executed."""

    __slots__ = (
        "order_id",
        "side",
        "order_type",
        "target_price",
        "target_quantity",
        "executed_price",
        "executed_quantity",
        "unexecuted_quantity",
        "timestamp",
        "notified",
    )

    def __init__(
        self,
        order_id: int,
        side: Side,
        order_type: OrderType,
        target_quantity: int,
        target_price: float = 0.0,
    ) -> None:
        self.order_id = order_id
        self.side = side
        self.order_type = order_type
        self.target_quantity = target_quantity
        self.target_price = round_to_tick(target_price)
        self.executed_price = 0.0
        self.executed_quantity = 0
        self.unexecuted_quantity = target_quantity
        self.timestamp = _now_millis()
        self.notified = False
        if order_type is OrderType.MARKET:
            # Market orders accept liquidity at any price.
            if side is Side.BUY:
                self.target_price = sys.float_info.max
            else:
                self.target_price = -sys.float_info.max

    def execute(self, quantity: int, price: float) -> None:
        """Fill ``quantity`` units at ``price``, updating the average fill price.

        Raises ValueError when the fill is not allowed for this order.
        """
        if price < 0.0 or quantity <= 0:
            raise ValueError("price or quantity is negative or zero")
        if self.order_type is OrderType.LIMIT:
            if self.side is Side.BUY and price > self.target_price:
                raise ValueError("price above target price for limit buy")
            if self.side is Side.SELL and price < self.target_price:
                raise ValueError("price below target price for limit sell")
        if quantity > self.unexecuted_quantity:
            raise ValueError("quantity to execute exceeds outstanding quantity")

        total_value = self.executed_price * self.executed_quantity + price * quantity
        self.executed_price = total_value / (self.executed_quantity + quantity)
        self.executed_quantity += quantity
        self.unexecuted_quantity -= quantity

        if self.unexecuted_quantity == 0 and self.order_type is OrderType.LIMIT:
            self.notify()

    def notify(self) -> None:
        """Mark the order as reported back to whoever placed it."""
        self.notified = True

    def __repr__(self) -> str:
        return (
            f"Order(order_id={self.order_id!r}, side={self.side.name}, "
            f"order_type={self.order_type.name}, "
            f"target_quantity={self.target_quantity!r}, "
            f"target_price={self.target_price!r}, "
            f"unexecuted_quantity={self.unexecuted_quantity!r})"
        )

    def __str__(self) -> str:
        return "\n".join(
            (
                f"OrderID: {self.order_id}",
                f"Side: {'Buy' if self.side is Side.BUY else 'Sell'}",
                "Order Type: "
                f"{'Limit' if self.order_type is OrderType.LIMIT else 'Market'}",
                f"Target Price: {self.target_price:g}",
                f"Target Quantity: {self.target_quantity}",
                f"Execution Price: {self.executed_price:g}",
                f"Execution Quantity: {self.executed_quantity}",
                f"Timestamp: {self.timestamp}",
                "---------------------------",
            )
        )