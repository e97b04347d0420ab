"""Observers that capture what a simulation did.

Register a recorder on an :class:`~admitsim.simulation.Environment` with
:meth:`~admitsim.simulation.Environment.register_observer`. The environment
calls whichever of the :class:`SimulationObserver` callbacks the recorder
implements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from queue import Queue
from typing import Any, Protocol

from admitsim.report import collect_run_data


class SimulationObserver(Protocol):  # pragma: no cover - interface only
    def on_run_started(self, env, run_id=None, start_time=None):
        ...

    def on_run_finished(self, env, run_id=None, start_time=None, end_time=None, duration=None):
        ...

    def on_user_arrived(self, user, time: float):
        ...

    def on_user_admitted(self, user, time: float):
        ...

    def on_user_evicted(self, user, by, time: float):
        ...

    def on_user_disconnected(self, user, time: float):
        ...

    def on_tick(self, simulation, report):
        ...

    def on_log_event(self, event: dict[str, Any]):
        ...


@dataclass
class RunRecorder:
    """Recorder that snapshots run data after execution.

    ``simulation`` is picked up from the first tick it sees; the snapshot is
    taken when the run finishes and stored in ``run_data``.
    """

    run_data: dict[str, Any] = field(default_factory=dict)
    ticks_seen: int = 0
    _simulation: Any | None = None

    def on_tick(self, simulation, report):
        self._simulation = simulation
        self.ticks_seen += 1

    def on_run_finished(self, env, run_id=None, start_time=None, end_time=None, duration=None):
        """Collect a final snapshot when the run ends."""
        if self._simulation is None:
            return
        self.run_data = collect_run_data(self._simulation).as_dict()


class StreamingRunRecorder(RunRecorder):
    """Recorder that publishes every log event, then the final snapshot, to a queue.

    Messages are dictionaries with an ``event`` key: ``"log"`` for each
    structured log event and ``"run_finished"`` once the run ends.
    """

    def __init__(self, event_queue: Queue | None = None):
        super().__init__()
        self.event_queue: Queue = event_queue or Queue()

    def on_log_event(self, event: dict[str, Any]):
        self.event_queue.put({"event": "log", "log": event})

    def on_run_finished(self, env, run_id=None, start_time=None, end_time=None, duration=None):
        """Forward the final snapshot through the event queue."""

        super().on_run_finished(env, run_id=run_id, start_time=start_time, end_time=end_time, duration=duration)
        self.event_queue.put({"event": "run_finished", "run_data": self.run_data})
