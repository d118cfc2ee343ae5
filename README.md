# matchbook

A small limit order book that matches by price and then by time of arrival. It
also has a fixed-size single-producer single-consumer queue for feeding orders
into the book, and a benchmark that measures match latency and throughput.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Orders (`matchbook.order`)

```python
from matchbook.order import Order, Side, OrderType

bid = Order(1, Side.BUY, OrderType.LIMIT, 100, 5.0)
ask = Order(2, Side.SELL, OrderType.MARKET, 40)
```

`Order(order_id, side, order_type, target_quantity, target_price=0.0)` builds an
order. Limit prices are rounded to the nearest tick of 0.05 (`round_to_tick`,
with halves rounded away from zero). A market order accepts any price: its
`target_price` is set to the largest float for a buy and to the most negative
float for a sell.

`Order.execute(quantity, price)` fills part or all of an order. It updates
`executed_quantity`, `unexecuted_quantity` and the average fill price in
`executed_price`. It raises `ValueError` when the quantity is not positive,
when the price is negative, when the price is beyond a limit order's target
price, or when the quantity is more than what is still open. When a limit order
is filled completely, `notify()` is called, which sets `notified` to `True`.

`str(order)` gives a multi-line description of the order.

## The book (`matchbook.book`)

```python
from matchbook.book import Book

book = Book()
book.add_order(bid)
book.add_order(ask)   # fills 40 of the resting bid at 5.0
book.show_orders()
```

`add_order` first matches the incoming order against the other side of the
book (`Book.match`). The best price goes first, and at one price the oldest
order goes first. Fills take place at the resting order's price level. What is
left of a limit order rests in the book; what is left of a market order is
dropped, and the market order is notified.

The resting orders are in `book.asks` (lowest price first) and `book.bids`
(highest price first). Each maps a price to a queue of orders in arrival order.
`format_orders()` returns the table that `show_orders()` prints.

## The queue (`matchbook.ring`)

```python
from matchbook.ring import SpscQueue

queue = SpscQueue(1024)
queue.push(bid)       # False when full
item = queue.pop()    # None when empty
```

`SpscQueue` wraps a `Ring`, a fixed-size circular buffer. A ring of size `N`
holds at most `N - 1` items: one slot always stays empty so that a full ring
can be told apart from an empty one. `len()` gives the number of items held.

## Benchmark (`matchbook.benchmark`)

```
matchbook-bench --orders 100000 --starting-limits 10000 --seed 1
```

The benchmark first fills a book with random limit orders. It then sends random
limit and market orders (prices and quantities from 1 to 1,000,000) from a
producer thread through an `SpscQueue` to a consumer thread that matches them.
At the end it prints the average latency, the 99th-percentile latency and the
throughput.

Options:

- `--orders` – total number of orders to send (default 100,000,000)
- `--starting-limits` – limit orders placed in the book beforehand (default 1,000,000)
- `--buffer-size` – size of the queue between the threads (default 16,384)
- `--seed` – seed for the random order generator

The defaults are large and take a long time to run; smaller values are
practical for a quick measurement. The same run is available from Python with
`run_benchmark(num_orders, starting_limits, buffer_size, rng)`, which returns a
`BenchmarkResult`, and `format_report(result)`.

## What it does not do

The book keeps everything in memory. It has no way to cancel or amend an
order, no storage, and no network interface. `notify()` only marks an order as
notified; it sends no message to anyone.