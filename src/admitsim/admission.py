"""Admission and eviction decisions over a bounded set of connection slots.

:class:`AdmissionController` owns a :class:`~admitsim.queues.PriorityQueue` of
waiting users and a :class:`ConnectedSet` of users holding a slot. Each call to
:meth:`AdmissionController.process_one_admission` admits at most one user.
A HIGH priority candidate facing a full server preempts the lowest-priority
occupant, unless every occupant is HIGH priority as well.

None of the operations raise for expected states. An empty queue, a full
server, or an unknown user all come back as ``None`` or ``False``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from admitsim.log_cfg import logger
from admitsim.queues import PriorityQueue
from admitsim.users import HIGH, User

__all__ = [
    "Admitted", "Evicted", "Disconnected", "AdmissionOutcome",
    "ConnectedSet", "AdmissionController",
]


@dataclass(frozen=True)
class Admitted:
    """A user moved from the queue into a slot."""

    user: User


@dataclass(frozen=True)
class Evicted:
    """A connected user removed to make room for ``by``."""

    user: User
    by: User

    @property
    def reason(self) -> str:
        return f"preempted by {self.by.name}"


@dataclass(frozen=True)
class Disconnected:
    """A connected user that left on its own."""

    user: User


@dataclass(frozen=True)
class AdmissionOutcome:
    """Result of one admission step: the admission and, for a preemption, the eviction before it."""

    admitted: Admitted
    evicted: Evicted | None = None

    @property
    def user(self) -> User:
        return self.admitted.user

    @property
    def preempted(self) -> bool:
        return self.evicted is not None


def _validate_capacity(max_connections) -> int:
    if isinstance(max_connections, bool) or not isinstance(max_connections, int):
        raise TypeError("max_connections must be an integer.")
    if max_connections <= 0:
        raise ValueError("max_connections must be positive.")
    return max_connections


class ConnectedSet:
    """Users currently holding a slot; never more than ``capacity`` of them.

    Iteration follows connection order, which is also the tie-break used when
    several occupants share the lowest priority.
    """

    def __init__(self, capacity: int):
        self.capacity = _validate_capacity(capacity)
        self._users: list[User] = []

    def add(self, user: User) -> bool:
        """Insert ``user``. Refuses (and returns ``False``) when full or already connected."""
        if user in self:
            return False
        if len(self._users) >= self.capacity:
            logger.error("Refused to connect %s: all %s slots are taken", user.name, self.capacity)
            return False
        self._users.append(user)
        return True

    def remove(self, user: User) -> bool:
        for i, connected in enumerate(self._users):
            if connected is user:
                del self._users[i]
                return True
        return False

    def lowest_priority_occupant(self) -> User | None:
        """The occupant with the largest priority value; the earliest connected wins ties."""
        lowest: User | None = None
        for user in self._users:
            if lowest is None or user.priority > lowest.priority:
                lowest = user
        return lowest

    def size(self) -> int:
        return len(self._users)

    def is_full(self) -> bool:
        return len(self._users) >= self.capacity

    def snapshot(self) -> tuple[User, ...]:
        return tuple(self._users)

    def __len__(self) -> int:
        return len(self._users)

    def __iter__(self) -> Iterator[User]:
        return iter(self.snapshot())

    def __contains__(self, user) -> bool:
        return any(connected is user for connected in self._users)


class AdmissionController:
    """Moves users from the waiting queue into connection slots.

    Parameters
    ----------
    max_connections : int
        Number of slots. Fixed for the lifetime of the controller.
    queue : PriorityQueue, optional
        Waiting pool to draw from. A fresh one is created when omitted.
    """

    def __init__(self, max_connections: int, queue: PriorityQueue | None = None):
        self.connected = ConnectedSet(max_connections)
        self.queue = queue if queue is not None else PriorityQueue()

    @property
    def max_connections(self) -> int:
        return self.connected.capacity

    @property
    def free_slots(self) -> int:
        return self.max_connections - self.connected.size()

    def is_full(self) -> bool:
        return self.connected.is_full()

    def enqueue(self, user: User) -> None:
        """Put a newly arrived user in the waiting queue."""
        self.queue.enqueue(user)
        if user.priority == HIGH:
            logger.info("%s has arrived! Added to queue with highest priority.", user.name)
        else:
            logger.info("New user added to queue: %s", user)

    def process_one_admission(self) -> AdmissionOutcome | None:
        """Try to admit the highest-priority waiting user.

        Returns
        -------
        AdmissionOutcome or None
            The admission (with the eviction that made room for it, if any),
            or ``None`` when the queue is empty or the candidate has to keep
            waiting.
        """
        candidate = self.queue.peek_highest_priority()
        if candidate is None:
            return None

        if candidate in self.connected:
            # already holds a slot; the duplicate queue entry is dropped
            self.queue.remove(candidate)
            logger.debug("%s is already connected", candidate.name)
            return None

        evicted = None
        if candidate.priority == HIGH and self.connected.is_full():
            evicted = self._preempt_for(candidate)

        if self.connected.is_full():
            return None

        self.queue.remove(candidate)
        added = self.connected.add(candidate)
        assert added, f"slot available but {candidate.name} was not connected"
        logger.info("%s connected to the server (%s/%s)", candidate.name,
                    self.connected.size(), self.max_connections)
        return AdmissionOutcome(admitted=Admitted(candidate), evicted=evicted)

    def _preempt_for(self, candidate: User) -> Evicted | None:
        victim = self.connected.lowest_priority_occupant()
        if victim is None or victim.priority <= HIGH:
            return None
        self.connected.remove(victim)
        logger.warning("%s was disconnected to make room for high-priority user %s",
                       victim.name, candidate.name)
        return Evicted(user=victim, by=candidate)

    def disconnect(self, user: User) -> Disconnected | None:
        """Remove a connected user. Returns ``None`` if ``user`` holds no slot.

        Freed slots are filled by the next :meth:`process_one_admission` call,
        not by this one.
        """
        if not self.connected.remove(user):
            return None
        logger.info("%s disconnected from the server", user.name)
        return Disconnected(user)

    def queued_users(self) -> tuple[User, ...]:
        """Waiting users in admission order."""
        return self.queue.snapshot()

    def connected_users(self) -> tuple[User, ...]:
        """Connected users in connection order."""
        return self.connected.snapshot()
