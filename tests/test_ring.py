import threading

import pytest

from matchbook.order import Order, OrderType, Side
from matchbook.ring import Ring, SpscQueue


def _advance(ring, steps):
    for _ in range(steps):
        assert ring.push(object())
        assert ring.pop() is not None


def test_push_without_wrap():
    r = Ring(10)
    o = Order(5, Side.BUY, OrderType.MARKET, 10)
    assert r.push(o)
    assert r.tail == 1
    assert r.pop().order_id == o.order_id


def test_push_fails_when_full():
    r = Ring(1)
    o = Order(5, Side.BUY, OrderType.MARKET, 1)
    assert r.push(o) is False
    assert len(r) == 0


def test_push_handles_wrap_around():
    r = Ring(3)
    _advance(r, 2)
    assert r.head == 2
    assert r.tail == 2

    o = Order(5, Side.BUY, OrderType.MARKET, 1)
    assert r.push(o)
    assert r.tail == 0
    assert r.pop().order_id == o.order_id
    assert r.head == 0


def test_pop_without_wrap():
    r = Ring(10)
    o1 = Order(5, Side.BUY, OrderType.LIMIT, 1000)
    o2 = Order(6, Side.SELL, OrderType.LIMIT, 1100)
    r.push(o1)
    r.push(o2)
    popped = r.pop()
    assert popped.order_id == o1.order_id
    assert r.head == 1


def test_pop_with_wrap_around():
    r = Ring(10)
    _advance(r, 9)
    o1 = Order(10, Side.BUY, OrderType.LIMIT, 1000)
    assert r.push(o1)
    assert r.push(Order(11, Side.BUY, OrderType.LIMIT, 1000))
    assert r.head == 9
    assert r.tail == 1
    popped = r.pop()
    assert popped.order_id == o1.order_id
    assert r.head == 0


def test_pop_empty_returns_none():
    r = Ring(10)
    assert r.pop() is None


def test_size_one_and_size_two_rings():
    r1 = Ring(1)
    r2 = Ring(2)
    o = Order(1, Side.BUY, OrderType.LIMIT, 1000, 5)

    assert r1.push(o) is False
    assert r1.pop() is None

    assert r2.push(o) is True
    assert r2.push(o) is False
    popped = r2.pop()
    assert popped is not None
    assert popped.target_price == 5
    assert r2.pop() is None


def test_capacity_is_size_minus_one():
    r = Ring(4)
    assert [r.push(i) for i in range(5)] == [True, True, True, False, False]
    assert len(r) == 3
    assert [r.pop() for _ in range(4)] == [0, 1, 2, None]


def test_invalid_size_raises():
    with pytest.raises(ValueError):
        Ring(0)


def test_queue_preserves_fifo_order():
    q = SpscQueue(8)
    for i in range(5):
        assert q.push(i)
    assert len(q) == 5
    assert [q.pop() for _ in range(6)] == [0, 1, 2, 3, 4, None]


def test_concurrent_push_pop_sum_is_multiple_of_ten():
    q = SpscQueue(1024)
    o = Order(1, Side.BUY, OrderType.LIMIT, 10)
    n = 1000
    total = 0
    pushed = []

    def produce():
        for _ in range(n):
            pushed.append(q.push(o))

    def consume():
        nonlocal total
        for _ in range(n):
            popped = q.pop()
            if popped is not None:
                total += popped.unexecuted_quantity

    producer = threading.Thread(target=produce)
    consumer = threading.Thread(target=consume)
    producer.start()
    consumer.start()
    producer.join()
    consumer.join()
    assert total % 10 == 0
    assert pushed == [True] * n

    drained = 0
    while (item := q.pop()) is not None:
        drained += item.unexecuted_quantity
    assert total + drained == 10 * n
    assert len(q) == 0


def test_concurrent_transfer_delivers_every_item_in_order():
    q = SpscQueue(16)
    n = 5000
    received = []

    def produce():
        for i in range(n):
            while not q.push(i):
                pass

    def consume():
        while len(received) < n:
            item = q.pop()
            if item is not None:
                received.append(item)

    producer = threading.Thread(target=produce)
    consumer = threading.Thread(target=consume)
    producer.start()
    consumer.start()
    producer.join(timeout=30)
    consumer.join(timeout=30)
    assert received == list(range(n))
    assert q.pop() is None
    assert len(q) == 0