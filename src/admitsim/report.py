"""Status output and run snapshots.

The helpers in this module read a controller or a finished simulation and turn
it into something to show: the console status block, a JSON-friendly
:class:`RunSnapshot`, or a matplotlib occupancy chart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from admitsim._utils import _fmt_users

_RULE = "-" * 22


def format_status(controller) -> str:
    """Render the "Current Status" block for a controller.

    Connected users are listed in connection order, waiting users in
    admission order.
    """
    connected = controller.connected_users()
    queued = controller.queued_users()

    lines = ["", "--- Current Status ---"]
    lines.append(f"Connected Users ({len(connected)}/{controller.max_connections}):")
    if connected:
        lines.extend(f"  - {row}" for row in _fmt_users(connected))
    else:
        lines.append("  (No users currently connected)")

    lines.append(f"Users in Queue ({len(queued)}):")
    if queued:
        lines.extend(f"  - {row}" for row in _fmt_users(queued))
    else:
        lines.append("  (The queue is empty)")
    lines.append(_RULE)
    return "\n".join(lines) + "\n"


def _to_jsonable(value: Any) -> Any:
    """Recursively coerce values into JSON-serializable objects.

    Pandas and NumPy containers are converted to built-in Python equivalents.
    """

    if isinstance(value, dict):
        return {key: _to_jsonable(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_jsonable(val) for val in value]
    if isinstance(value, (np.integer, np.floating, np.bool_)):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, pd.DataFrame):
        return _to_jsonable(value.to_dict(orient="records"))
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


def _user_record(user) -> dict[str, Any]:
    return {"name": user.name, "priority": user.priority, "label": user.priority_name}


@dataclass
class RunSnapshot:
    """Snapshot of a simulation for reports and tests.

    Groups environment metadata, the users in each state, the per-tick status
    log, and the raw event log into one object that can be serialized.
    """

    environment: dict[str, Any]
    connected: list[dict[str, Any]]
    queued: list[dict[str, Any]]
    status_log: list[dict[str, Any]]
    logs: list[dict[str, Any]]

    def as_dict(self) -> dict[str, Any]:
        """Convert the snapshot into a JSON-friendly dictionary."""

        return _to_jsonable(
            {
                "environment": self.environment,
                "connected": self.connected,
                "queued": self.queued,
                "status_log": self.status_log,
                "logs": self.logs,
            }
        )


def collect_run_data(sim) -> RunSnapshot:
    """Create a snapshot from a simulation's controller and logs.

    Parameters
    ----------
    sim : admitsim.simulation.Simulation
        Simulation to read. It does not need to have finished.
    """
    env = sim.env
    controller = sim.controller
    environment: dict[str, Any] = {
        "name": getattr(env, "name", "Environment"),
        "run_id": getattr(env, "current_run_id", None),
        "planned_runs": getattr(env, "planned_runs", None),
        "time": getattr(env, "now", None),
        "ticks": sim.tick_count,
        "max_connections": controller.max_connections,
        "average_utilization": sim.average_utilization(),
        "average_queue_length": sim.average_queue_length(),
        "counts": sim.counts(),
    }
    run_history = getattr(env, "run_history", [])
    if run_history:
        environment["run_history"] = run_history

    return RunSnapshot(
        environment=environment,
        connected=[_user_record(u) for u in controller.connected_users()],
        queued=[_user_record(u) for u in controller.queued_users()],
        status_log=sim.status_log().to_dict(orient="records"),
        logs=list(env.event_log),
    )


def plot_occupancy(sim, ax=None):
    """Step plot of connected and queued users over simulation time.

    Returns the matplotlib axes so callers can save or further decorate it.
    """
    if ax is None:
        _, ax = plt.subplots()
    log = sim.status_log()
    ax.step(log["time"], log["connected"], where="post", color="g", label="connected")
    ax.step(log["time"], log["queued"], where="post", color="y", label="queued")
    ax.axhline(sim.config.max_connections, color="r", linestyle="--", label="max connections")
    ax.set_xlabel("simulation time")
    ax.set_ylabel("users")
    ax.set_title("Server occupancy")
    ax.legend()
    return ax
