"""Tests for recorder behavior."""

import json

from admitsim.config import SimulationConfig
from admitsim.events import ScriptedEventSource
from admitsim.recorder import RunRecorder, StreamingRunRecorder
from admitsim.simulation import Simulation
from admitsim.users import User


def _build_simulation():
    return Simulation(
        SimulationConfig(max_connections=1, tick_delay=(1.0, 1.0)),
        source=ScriptedEventSource(arrivals={0: [User("A", 3)], 1: [User("K", 1), User("B", 2)]}),
    )


def test_run_recorder_collects_snapshot():
    sim = _build_simulation()
    recorder = RunRecorder()
    sim.env.register_observer(recorder)
    sim.run()

    data = recorder.run_data
    assert recorder.ticks_seen == 2
    assert data["environment"]["max_connections"] == 1
    assert data["environment"]["counts"]["evicted"] == 1
    assert data["connected"] == [{"name": "K", "priority": 1, "label": "HIGH"}]
    assert data["queued"] == [{"name": "B", "priority": 2, "label": "NORMAL"}]
    assert len(data["status_log"]) == 2
    json.dumps(data)


def test_streaming_recorder_publishes_events_then_snapshot():
    sim = _build_simulation()
    recorder = StreamingRunRecorder()
    sim.env.register_observer(recorder)
    sim.run()

    messages = []
    while not recorder.event_queue.empty():
        messages.append(recorder.event_queue.get_nowait())

    assert messages[-1]["event"] == "run_finished"
    assert messages[-1]["run_data"]["environment"]["ticks"] == 2
    user_events = [m["log"]["metadata"]["event"] for m in messages
                   if m["event"] == "log" and m["log"]["source_type"] == "user"]
    assert user_events == ["arrived", "admitted", "arrived", "arrived", "evicted", "admitted"]


def test_recorder_without_ticks_keeps_empty_data():
    sim = Simulation(SimulationConfig(), source=ScriptedEventSource())
    recorder = RunRecorder()
    sim.env.register_observer(recorder)
    sim.env.run(until=1)

    assert recorder.run_data == {}
