"""Discrete-event driver for the admission controller.

This module wraps :mod:`simpy` with an :class:`Environment` that carries
observer hooks and a structured event log, and a :class:`Simulation` that runs
the server's tick loop inside it. Every tick performs, in order:

1. arrivals reported by the event source are queued,
2. one admission attempt (possibly preempting a connected user),
3. departures reported by the event source are disconnected,
4. the status is logged (and optionally printed).

The loop then sleeps for a pacing delay drawn from ``config.tick_delay``
before starting the next tick. Ticks never overlap, so the controller is only
ever touched by one step at a time.

Example
-------
>>> from admitsim import Simulation, SimulationConfig
>>> sim = Simulation(SimulationConfig(max_connections=3, seed=7))
>>> sim.run(ticks=20)
>>> bool(sim.status_log()["connected"].max() <= 3)
True
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING
from numpy import array, append, nansum
from numpy.random import default_rng
from pandas import DataFrame
import simpy

if TYPE_CHECKING:  # pragma: no cover - type hinting only
    from admitsim.recorder import SimulationObserver
    from admitsim.events import EventSource

from admitsim.admission import AdmissionController, AdmissionOutcome, Disconnected
from admitsim.config import SimulationConfig
from admitsim.dist import make_uniform
from admitsim.events import RandomEventSource, ScriptedEventSource
from admitsim.log_cfg import logger
from admitsim.report import format_status
from admitsim.users import User


@dataclass
class TickReport:
    """What happened during one tick."""

    tick: int
    time: float
    arrivals: list[User] = field(default_factory=list)
    outcome: AdmissionOutcome | None = None
    departures: list[Disconnected] = field(default_factory=list)


class Environment(simpy.Environment):
    """Simulation environment with observer hooks and logging helpers.

    Observers are notified of run boundaries and of every user event; the same
    events are kept as dictionaries in :attr:`event_log`.
    """

    def __init__(self, name: str = "Environment"):
        super().__init__()
        self.name = name

        # Run-level bookkeeping
        self.run_number: int = 0
        self.planned_runs: int | None = None
        self.run_history: list[dict[str, Any]] = []
        self.current_run_id: int | None = None

        self.event_log: list[dict[str, Any]] = []
        self._observers: list["SimulationObserver"] = []

    # ------------------------------------------------------------------
    # Observer helpers
    # ------------------------------------------------------------------
    def register_observer(self, observer: "SimulationObserver"):
        """Register a new simulation observer."""
        self._observers.append(observer)

    def _notify_observers(self, method_name: str, **kwargs):
        """Invoke a method on all observers if they implement it."""
        for observer in self._observers:
            if hasattr(observer, method_name):
                getattr(observer, method_name)(**kwargs)

    # ------------------------------------------------------------------
    # Structured environment-level logging
    # ------------------------------------------------------------------
    def log_event(
        self,
        source_type: str,
        source_id: Any,
        message: str,
        time: float | None = None,
        metadata: dict | None = None,
    ):
        """Send a structured log event to observers and store it on the env."""
        event_time = time if time is not None else self.now
        run_id = self.current_run_id

        meta = dict(metadata or {})
        if run_id is not None:
            meta.setdefault("run_id", run_id)

        event = {
            "time": event_time,
            "run_id": run_id,
            "source_type": source_type,
            "source_id": source_id,
            "message": message,
            "metadata": meta,
        }
        self.event_log.append(event)
        self._notify_observers("on_log_event", event=event)
        return event

    def run(self, *args, **kwargs):
        """Run the event loop once, with per-run metadata.

        Wraps :meth:`simpy.Environment.run` and additionally numbers the run,
        records it in :attr:`run_history`, notifies observers through
        ``on_run_started`` / ``on_run_finished`` and accepts a ``num_runs``
        hint (planned total runs in the experiment).
        """
        num_runs_hint = kwargs.pop("num_runs", None)
        if num_runs_hint is not None:
            self.planned_runs = int(num_runs_hint)

        self.run_number += 1
        run_id = self.run_number
        self.current_run_id = run_id

        start_time = self.now
        self._notify_observers("on_run_started", env=self, run_id=run_id, start_time=start_time)
        logger.debug("Run %s started", run_id)

        result = super().run(*args, **kwargs)

        end_time = self.now
        duration = end_time - start_time
        logger.debug("Run %s finished at sim time %s", run_id, end_time)

        self.run_history.append(
            {
                "run_id": run_id,
                "start_time": start_time,
                "end_time": end_time,
                "duration": duration,
            }
        )
        self.log_event(
            source_type="environment",
            source_id="run",
            message="Run finished",
            metadata={"simulation_time": end_time, "duration": duration},
        )
        self._notify_observers(
            "on_run_finished",
            env=self,
            run_id=run_id,
            start_time=start_time,
            end_time=end_time,
            duration=duration,
        )
        return result


class Simulation:
    """A capacity-limited server fed by an event source.

    Parameters
    ----------
    config : SimulationConfig, optional
        Server size and traffic settings. Defaults to :class:`SimulationConfig`.
    source : EventSource, optional
        Where arrivals and departures come from. Defaults to a
        :class:`~admitsim.events.RandomEventSource` seeded from ``config.seed``.
    env : Environment, optional
        Environment hosting the tick loop. A new one is created when omitted.
    print_status : bool, optional
        When ``True``, print the status block after every tick.
    log : bool, optional
        When ``True``, record every tick in the status log and every user
        event in the environment's event log.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        source: "EventSource | None" = None,
        env: Environment | None = None,
        print_status: bool = False,
        log: bool = True,
    ):
        self.config = config if config is not None else SimulationConfig()
        self.env = env if env is not None else Environment()
        self.rng = default_rng(self.config.seed)
        self.source = source if source is not None else RandomEventSource(self.config, self.rng)
        self.controller = AdmissionController(self.config.max_connections)
        self.print_status = print_status
        self.log = log
        self.tick_count = 0
        self._process: simpy.events.Process | None = None
        self._tick_target: int | None = None

        low, high = self.config.tick_delay
        self._pacing = make_uniform(low, high) if low < high else None

        # time, tick, connected, queued
        self._status_log = array([[0, 0, 0, 0]])

    def __repr__(self) -> str:
        return f"Simulation(max_connections={self.config.max_connections}, ticks={self.tick_count})"

    # ------------------------------------------------------------------
    # One tick
    # ------------------------------------------------------------------
    def step(self) -> TickReport:
        """Run a single tick immediately, at the current simulation time."""
        tick = self.tick_count
        report = TickReport(tick=tick, time=self.env.now)

        for user in self.source.arrivals(tick, self.controller):
            self.controller.enqueue(user)
            report.arrivals.append(user)
            self._record("arrived", user, tick)
            self.env._notify_observers("on_user_arrived", user=user, time=self.env.now)

        outcome = self.controller.process_one_admission()
        report.outcome = outcome
        if outcome is not None:
            if outcome.evicted is not None:
                evicted = outcome.evicted
                self._record("evicted", evicted.user, tick, by=evicted.by.name)
                self.env._notify_observers("on_user_evicted", user=evicted.user, by=evicted.by, time=self.env.now)
            self._record("admitted", outcome.user, tick)
            self.env._notify_observers("on_user_admitted", user=outcome.user, time=self.env.now)

        for user in self.source.departures(tick, self.controller):
            departure = self.controller.disconnect(user)
            if departure is None:
                continue
            report.departures.append(departure)
            self._record("disconnected", user, tick)
            self.env._notify_observers("on_user_disconnected", user=user, time=self.env.now)

        if self.log:
            self._status_log = append(
                self._status_log,
                [[self.env.now, tick, self.controller.connected.size(), self.controller.queue.size()]],
                axis=0,
            )
        if self.print_status:
            print(format_status(self.controller))

        self.env._notify_observers("on_tick", simulation=self, report=report)
        self.tick_count += 1
        return report

    def _record(self, event: str, user: User, tick: int, by: str | None = None):
        if not self.log:
            return
        metadata = {"tick": tick, "event": event, "user": user.name, "priority": user.priority}
        if by is not None:
            metadata["by"] = by
        message = f"{user.name} {event}" if by is None else f"{user.name} {event} by {by}"
        self.env.log_event(source_type="user", source_id=user.name, message=message, metadata=metadata)

    def _delay(self) -> float:
        if self._pacing is None:
            return self.config.tick_delay[0]
        return float(self._pacing.sample(self.rng))

    def _tick_loop(self):
        # the target is re-read after every pause so a resumed run can move it
        while self._tick_target is None or self.tick_count < self._tick_target:
            self.step()
            if self._tick_target is not None and self.tick_count >= self._tick_target:
                break
            yield self.env.timeout(self._delay())

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------
    def run(self, until: float | None = None, ticks: int | None = None, **kwargs):
        """Run the tick loop.

        Parameters
        ----------
        until : float, optional
            Stop the environment at this simulation time.
        ticks : int, optional
            Number of further ticks to run. A scripted source defaults to
            running through its last scripted tick.

        Calling ``run`` again while the tick loop is paused (for instance
        after an ``until`` bound) resumes that same loop; a second loop is
        only started once the previous one has finished.

        Raises
        ------
        ValueError
            If neither bound is given for a source that never ends, or if
            ``ticks`` is negative.
        """
        if ticks is not None and ticks < 0:
            raise ValueError("ticks must be >= 0")
        if ticks is not None:
            target = self.tick_count + ticks
        elif isinstance(self.source, ScriptedEventSource):
            target = self.source.last_tick + 1
        else:
            target = None
        if target is None and until is None:
            raise ValueError("an open-ended event source needs `until` or `ticks`")

        self._tick_target = target
        if target is not None and target <= self.tick_count:
            return self.env.run(until=until, **kwargs) if until is not None else None

        if self._process is None or not self._process.is_alive:
            self._process = self.env.process(self._tick_loop())
        return self.env.run(until=until if until is not None else self._process, **kwargs)

    # ------------------------------------------------------------------
    # Logs and statistics
    # ------------------------------------------------------------------
    def status_log(self) -> DataFrame:
        """Return a DataFrame with one row per tick: time, tick, connected, queued, free."""
        df = DataFrame(data=self._status_log[1:, :], columns=["time", "tick", "connected", "queued"])
        df["tick"] = df["tick"].astype(int)
        df["connected"] = df["connected"].astype(int)
        df["queued"] = df["queued"].astype(int)
        df["free"] = self.config.max_connections - df["connected"]
        return df

    def event_frame(self) -> DataFrame:
        """Return the user events (arrived, admitted, evicted, disconnected) as a DataFrame."""
        rows = []
        for event in self.env.event_log:
            if event.get("source_type") != "user":
                continue
            meta = event.get("metadata", {})
            rows.append(
                {
                    "time": event["time"],
                    "tick": meta.get("tick"),
                    "event": meta.get("event"),
                    "user": meta.get("user"),
                    "priority": meta.get("priority"),
                    "by": meta.get("by"),
                }
            )
        return DataFrame(rows, columns=["time", "tick", "event", "user", "priority", "by"])

    def _time_weighted(self, column: str) -> float:
        l = self.status_log()
        if len(l) == 0:
            return 0.0
        values = l[column].values.astype(float)
        span = l["time"].values[-1] - l["time"].values[0]
        if len(l) == 1 or span <= 0:
            return float(values.mean())
        d = l["time"].values[1:] - l["time"].values[:-1]
        return float(nansum(d * values[:-1]) / span)

    def average_utilization(self) -> float:
        """Time-weighted share of slots in use across the logged ticks."""
        return self._time_weighted("connected") / self.config.max_connections

    def average_queue_length(self) -> float:
        """Time-weighted number of waiting users across the logged ticks."""
        return self._time_weighted("queued")

    def counts(self) -> dict[str, int]:
        """Number of arrivals, admissions, evictions and disconnections so far."""
        frame = self.event_frame()
        totals = {"arrived": 0, "admitted": 0, "evicted": 0, "disconnected": 0}
        for name, value in frame["event"].value_counts().items():
            totals[name] = int(value)
        return totals
