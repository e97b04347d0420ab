"""Waiting pool of users ordered for admission.

The pool keeps its entries sorted at all times, so iterating it, taking a
snapshot, or peeking at the head all agree on the same admission order:
ascending priority value first, then arrival order.
"""
from __future__ import annotations

from bisect import insort
from itertools import count
from typing import Iterator

from admitsim.users import User


class QueueEntry:
    """
    A waiting user together with its arrival sequence number.
    Entries sort by ``(priority, sequence)`` so equal priorities keep arrival order.
    """

    __slots__ = ("user", "sequence", "key")

    def __init__(self, user: User, sequence: int):
        self.user = user
        self.sequence = sequence
        self.key = (user.priority, sequence)

    def __lt__(self, other_entry: "QueueEntry"):
        return self.key < other_entry.key

    def __repr__(self) -> str:
        return f"QueueEntry({self.user}, sequence={self.sequence})"


class PriorityQueue:
    """Unbounded pool of users waiting for a connection slot."""

    def __init__(self):
        self._entries: list[QueueEntry] = []
        self._sequence = count()

    def enqueue(self, user: User) -> None:
        """Add ``user`` behind every waiting user of the same or better priority."""
        insort(self._entries, QueueEntry(user, next(self._sequence)))

    def peek_highest_priority(self) -> User | None:
        """Return the next user to admit without removing it, or ``None`` when empty."""
        if not self._entries:
            return None
        return self._entries[0].user

    def remove(self, user: User) -> bool:
        """Remove ``user`` (matched by identity). Returns ``False`` if it is not waiting."""
        for i, entry in enumerate(self._entries):
            if entry.user is user:
                del self._entries[i]
                return True
        return False

    def size(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def snapshot(self) -> tuple[User, ...]:
        """Waiting users in admission order."""
        return tuple(entry.user for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[User]:
        return iter(self.snapshot())

    def __contains__(self, user) -> bool:
        return any(entry.user is user for entry in self._entries)

    def __repr__(self) -> str:
        return f"PriorityQueue({[str(u) for u in self.snapshot()]})"
