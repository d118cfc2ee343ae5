"""Throughput and latency benchmark for the order book."""

from __future__ import annotations

import argparse
import math
import random
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from matchbook.book import Book
from matchbook.order import Order, OrderType, Side
from matchbook.ring import SpscQueue

MAX_SPIN_ATTEMPTS = 1_000
PRICE_RANGE = 1_000_000
QUANTITY_RANGE = 1_000_000


@dataclass(frozen=True)
class BenchmarkResult:
    """Summary statistics of one benchmark run."""

    average_latency_us: float
    p99_latency_us: float
    throughput: float
    matched: int
    total_orders: int


def random_int(rng: random.Random, top: int) -> int:
    """Uniform random integer from 1 to ``top`` inclusive."""
    return rng.randint(1, top)


def _coin_flip(rng: random.Random) -> bool:
    return rng.random() < 0.5


def add_limits(book: Book, count: int, rng: random.Random) -> None:
    """Add ``count`` random limit orders to ``book``."""
    for order_id in range(count):
        price = random_int(rng, PRICE_RANGE)
        quantity = random_int(rng, QUANTITY_RANGE)
        side = Side.SELL if _coin_flip(rng) else Side.BUY
        book.add_order(
            Order(order_id, side, OrderType.LIMIT, quantity, float(price))
        )


def make_orders(count: int, rng: random.Random) -> List[Order]:
    """Build ``count`` random orders, half limit and half market on average."""
    orders = []
    for order_id in range(count):
        quantity = random_int(rng, QUANTITY_RANGE)
        order_type = OrderType.LIMIT if _coin_flip(rng) else OrderType.MARKET
        side = Side.SELL if _coin_flip(rng) else Side.BUY
        if order_type is OrderType.LIMIT:
            price = float(random_int(rng, PRICE_RANGE))
            orders.append(Order(order_id, side, order_type, quantity, price))
        else:
            orders.append(Order(order_id, side, order_type, quantity))
    return orders


def run_benchmark(
    num_orders: int,
    starting_limits: int,
    buffer_size: int,
    rng: random.Random,
) -> BenchmarkResult:
    """Feed random orders through a queue into a book and time each one."""
    if num_orders < 1:
        raise ValueError("number of orders must be at least 1")

    book = Book()
    add_limits(book, starting_limits, rng)
    orders = make_orders(num_orders, rng)
    queue: SpscQueue[Order] = SpscQueue(buffer_size)

    start_times: List[Optional[int]] = [None] * num_orders
    end_times: List[Optional[int]] = [None] * num_orders

    def produce() -> None:
        for index, order in enumerate(orders):
            while not queue.push(order):
                time.sleep(0)
            start_times[index] = time.perf_counter_ns()

    def consume() -> None:
        idle = 0
        while idle < MAX_SPIN_ATTEMPTS:
            order = queue.pop()
            if order is None:
                idle += 1
                time.sleep(0)
                continue
            idle = 0
            book.add_order(order)
            end_times[order.order_id] = time.perf_counter_ns()

    bench_start = time.perf_counter_ns()
    producer = threading.Thread(target=produce)
    consumer = threading.Thread(target=consume)
    producer.start()
    consumer.start()
    producer.join()
    consumer.join()
    bench_end = time.perf_counter_ns()

    match_times = [
        end - start if end is not None and start is not None else 0
        for start, end in zip(start_times, end_times)
    ]

    matched = [t for t in match_times if t != 0]
    if matched:
        average_us = sum(matched) / (len(matched) * 1_000)
    else:
        average_us = math.nan

    match_times.sort()
    p99_us = match_times[int(0.99 * len(match_times))] / 1_000

    elapsed_ns = max(bench_end - bench_start, 1)
    throughput = len(match_times) * 1_000_000_000.0 / elapsed_ns

    return BenchmarkResult(
        average_latency_us=average_us,
        p99_latency_us=p99_us,
        throughput=throughput,
        matched=len(matched),
        total_orders=num_orders,
    )


def format_report(result: BenchmarkResult) -> str:
    """Human-readable summary of a benchmark run."""
    return (
        f"Average Match Latency: {result.average_latency_us:.2f} μs\n"
        f"P99 Match Latency: {result.p99_latency_us:.2f} μs\n"
        f"Throughput: {result.throughput:.2f} matches/sec\n"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the benchmark from the command line and print its report."""
    parser = argparse.ArgumentParser(description="Benchmark the order book.")
    parser.add_argument("--orders", type=int, default=100_000_000,
                        help="total number of orders to execute")
    parser.add_argument("--starting-limits", type=int, default=1_000_000,
                        help="limit orders placed in the book beforehand")
    parser.add_argument("--buffer-size", type=int, default=16_384,
                        help="size of the queue between producer and consumer")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the random order generator")
    args = parser.parse_args(argv)

    if args.orders < 1:
        parser.error("--orders must be at least 1")
    if args.buffer_size < 1:
        parser.error("--buffer-size must be at least 1")

    result = run_benchmark(
        args.orders, args.starting_limits, args.buffer_size, random.Random(args.seed)
    )
    print(format_report(result), end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())