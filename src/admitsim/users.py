"""Users and priority classes.

A user is an immutable record made of a session-unique identifier and a
priority class. Lower priority values are served first. The values 1, 2 and 3
carry the names HIGH, NORMAL and LOW; any other integer is accepted, labelled
UNKNOWN, and still takes part in ordering.
"""
from __future__ import annotations

from dataclasses import dataclass

from admitsim._utils import _swap_dict_keys_values

__all__ = [
    "HIGH", "NORMAL", "LOW", "UNKNOWN", "PRIORITY_NAMES",
    "User", "priority_name", "parse_priority",
]

HIGH = 1
NORMAL = 2
LOW = 3

PRIORITY_NAMES: dict[int, str] = {HIGH: "HIGH", NORMAL: "NORMAL", LOW: "LOW"}
PRIORITY_VALUES: dict[str, int] = _swap_dict_keys_values(PRIORITY_NAMES)

UNKNOWN = "UNKNOWN"


def priority_name(priority: int) -> str:
    """Return the label of a priority class (``"UNKNOWN"`` outside 1-3)."""
    return PRIORITY_NAMES.get(priority, UNKNOWN)


def parse_priority(value: int | str) -> int:
    """Accept a priority as an integer or as one of the names HIGH/NORMAL/LOW.

    Raises
    ------
    ValueError
        If a string is neither a known name nor an integer literal.
    """
    if isinstance(value, bool):
        raise TypeError("Priority must be an integer or a priority name.")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.upper() in PRIORITY_VALUES:
        return PRIORITY_VALUES[text.upper()]
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Priority '{value}' is not recognized.") from None


@dataclass(frozen=True, eq=False)
class User:
    """A user waiting for, or holding, a connection slot.

    Users compare by identity: two arrivals that happen to share a name are
    still different users.

    Attributes
    ----------
    name : str
        Identifier, unique per session.
    priority : int
        Priority class; smaller values are served first.
    """

    name: str
    priority: int

    def __post_init__(self):
        if not isinstance(self.priority, int) or isinstance(self.priority, bool):
            raise TypeError("User priority must be an integer.")

    @property
    def priority_name(self) -> str:
        return priority_name(self.priority)

    def __str__(self) -> str:
        return f"[{self.priority_name}] {self.name}"
