"""Sources of arrival and departure commands for the simulation driver.

A source is asked, once per tick, which users arrive and which connected users
leave. :class:`RandomEventSource` reproduces the traffic of the interactive
console simulator; :class:`ScriptedEventSource` replays a fixed script and is
what the tests and worked examples use.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Mapping, Protocol, Union

import numpy as np

from admitsim.dist import make_bernoulli, randint
from admitsim.users import HIGH, User

if TYPE_CHECKING:  # pragma: no cover - type hinting only
    from admitsim.admission import AdmissionController
    from admitsim.config import SimulationConfig


class EventSource(Protocol):
    def arrivals(self, tick: int, controller: "AdmissionController") -> list[User]:
        ...

    def departures(self, tick: int, controller: "AdmissionController") -> list[User]:
        ...


class RandomEventSource:
    """Random arrivals and departures driven by a :class:`SimulationConfig`.

    Each tick an ordinary user arrives with ``arrival_chance`` (priority drawn
    uniformly from ``arrival_priorities``), a HIGH priority user arrives with
    ``vip_chance``, and with ``disconnect_chance`` one connected user picked at
    random leaves.
    """

    def __init__(self, config: "SimulationConfig", rng: np.random.Generator | None = None):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self._arrival = make_bernoulli(config.arrival_chance)
        self._vip = make_bernoulli(config.vip_chance)
        self._departure = make_bernoulli(config.disconnect_chance)
        self._priority = randint(*config.arrival_priorities)

    def _user_name(self) -> str:
        # four hex digits, like a truncated GUID
        return f"{self.config.user_prefix}{int(self.rng.integers(0, 16 ** 4)):04x}"

    def arrivals(self, tick: int, controller: "AdmissionController") -> list[User]:
        users = []
        if self._arrival.sample(self.rng):
            users.append(User(self._user_name(), self._priority.sample(self.rng)))
        if self._vip.sample(self.rng):
            users.append(User(self.config.vip_name, HIGH))
        return users

    def departures(self, tick: int, controller: "AdmissionController") -> list[User]:
        connected = controller.connected_users()
        if not connected or not self._departure.sample(self.rng):
            return []
        return [connected[int(self.rng.integers(len(connected)))]]


class ScriptedEventSource:
    """Replay arrivals and departures keyed by tick number.

    Parameters
    ----------
    arrivals : mapping of int to iterable of User
        Users arriving at each tick.
    departures : mapping of int to iterable of User or str
        Users leaving at each tick. Names are resolved against the users
        connected at that moment; names that match nobody are ignored.
    """

    def __init__(
        self,
        arrivals: Mapping[int, Iterable[User]] | None = None,
        departures: Mapping[int, Iterable[Union[User, str]]] | None = None,
    ):
        self._arrivals = {tick: list(users) for tick, users in (arrivals or {}).items()}
        self._departures = {tick: list(users) for tick, users in (departures or {}).items()}

    @property
    def last_tick(self) -> int:
        ticks = list(self._arrivals) + list(self._departures)
        return max(ticks, default=-1)

    def arrivals(self, tick: int, controller: "AdmissionController") -> list[User]:
        return list(self._arrivals.get(tick, []))

    def departures(self, tick: int, controller: "AdmissionController") -> list[User]:
        leaving = []
        connected = controller.connected_users()
        for item in self._departures.get(tick, []):
            if isinstance(item, User):
                leaving.append(item)
                continue
            for user in connected:
                if user.name == item and user not in leaving:
                    leaving.append(user)
                    break
        return leaving
