"""Settings for a simulated server and the traffic driving it."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Tuple

from admitsim.dist import _validate_positive, _validate_probability


@dataclass
class SimulationConfig:
    """Container for everything a :class:`~admitsim.simulation.Simulation` needs.

    Attributes
    ----------
    max_connections : int
        Number of connection slots on the server.
    arrival_chance : float
        Chance per tick that an ordinary user arrives.
    arrival_priorities : tuple[int, int]
        Inclusive range ordinary arrivals draw their priority from.
    vip_chance : float
        Chance per tick that a HIGH priority user arrives.
    vip_name : str
        Name given to HIGH priority arrivals.
    user_prefix : str
        Prefix of generated names for ordinary arrivals.
    disconnect_chance : float
        Chance per tick that one randomly chosen connected user leaves.
    tick_delay : tuple[float, float]
        Bounds of the uniform pause between ticks, in simulated seconds.
    seed : int, optional
        Seed of the random generator; ``None`` draws fresh entropy.
    """

    max_connections: int = 5
    arrival_chance: float = 0.2
    arrival_priorities: Tuple[int, int] = (2, 3)
    vip_chance: float = 0.02
    vip_name: str = "The King"
    user_prefix: str = "User_"
    disconnect_chance: float = 0.10
    tick_delay: Tuple[float, float] = (0.5, 1.5)
    seed: int | None = None

    def __post_init__(self):
        if isinstance(self.max_connections, bool) or not isinstance(self.max_connections, int):
            raise TypeError("max_connections must be an integer.")
        _validate_positive(self.max_connections, "max_connections")
        _validate_probability(self.arrival_chance, "arrival_chance")
        _validate_probability(self.vip_chance, "vip_chance")
        _validate_probability(self.disconnect_chance, "disconnect_chance")

        self.arrival_priorities = tuple(self.arrival_priorities)
        if len(self.arrival_priorities) != 2 or self.arrival_priorities[0] > self.arrival_priorities[1]:
            raise ValueError("arrival_priorities must be a (low, high) pair with low <= high.")

        self.tick_delay = tuple(float(v) for v in self.tick_delay)
        if len(self.tick_delay) != 2 or self.tick_delay[0] < 0 or self.tick_delay[0] > self.tick_delay[1]:
            raise ValueError("tick_delay must be a (min, max) pair with 0 <= min <= max.")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationConfig":
        """Build a config from plain data, rejecting keys it does not know."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
