import numpy as np

from admitsim.queues import PriorityQueue
from admitsim.users import User


def test_peek_on_empty_queue_returns_none():
    queue = PriorityQueue()

    assert queue.peek_highest_priority() is None
    assert queue.is_empty()
    assert queue.size() == 0


def test_peek_prefers_lowest_value_then_arrival_order():
    queue = PriorityQueue()
    b = User("B", 3)
    c = User("C", 1)
    d = User("D", 2)
    e = User("E", 1)
    for user in (b, c, d, e):
        queue.enqueue(user)

    assert queue.peek_highest_priority() is c
    assert queue.snapshot() == (c, e, d, b)
    assert list(queue) == [c, e, d, b]


def test_peek_does_not_mutate():
    queue = PriorityQueue()
    queue.enqueue(User("A", 2))

    queue.peek_highest_priority()
    queue.peek_highest_priority()

    assert queue.size() == 1


def test_peek_matches_stable_sort_for_random_sequences():
    rng = np.random.default_rng(11)
    for _ in range(50):
        queue = PriorityQueue()
        arrived = []
        for i in range(int(rng.integers(1, 30))):
            user = User(f"u{i}", int(rng.integers(-1, 6)))
            queue.enqueue(user)
            arrived.append(user)

            expected = sorted(arrived, key=lambda u: u.priority)[0]
            assert queue.peek_highest_priority() is expected

        assert queue.snapshot() == tuple(sorted(arrived, key=lambda u: u.priority))


def test_unknown_priorities_still_order():
    queue = PriorityQueue()
    low = User("low", 7)
    top = User("top", 0)
    high = User("high", 1)
    for user in (low, top, high):
        queue.enqueue(user)

    assert queue.snapshot() == (top, high, low)


def test_remove_by_identity():
    queue = PriorityQueue()
    first = User("twin", 2)
    second = User("twin", 2)
    queue.enqueue(first)
    queue.enqueue(second)

    assert queue.remove(second) is True
    assert queue.snapshot() == (first,)
    assert second not in queue
    assert first in queue


def test_remove_absent_user_returns_false():
    queue = PriorityQueue()
    queue.enqueue(User("A", 2))

    assert queue.remove(User("A", 2)) is False
    assert queue.size() == 1
