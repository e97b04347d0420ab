"""
Server Admission Example - a full server, a King, and a slot freed later

This example replays a fixed script against a server with two slots:

- t=0: Alice (NORMAL) and Bob (LOW) arrive and both get a slot, one per tick
- t=2: Carol (NORMAL) arrives and has to wait, the server is full
- t=3: The King (HIGH) arrives and preempts Bob, the lowest-priority occupant
- t=5: Alice leaves; Carol takes her slot on the next tick

Expected Behavior:
Bob is evicted at t=3, The King is connected at t=3, Carol is connected at t=6.
"""
import admitsim
from admitsim import LogConfig, ScriptedEventSource, Simulation, SimulationConfig, User
from admitsim.report import collect_run_data

LogConfig(enabled=True)

alice = User("Alice", admitsim.NORMAL)
bob = User("Bob", admitsim.LOW)
carol = User("Carol", admitsim.NORMAL)
king = User("The King", admitsim.HIGH)

source = ScriptedEventSource(
    arrivals={0: [alice, bob], 2: [carol], 3: [king]},
    departures={5: ["Alice"], 7: []},
)

sim = Simulation(SimulationConfig(max_connections=2, tick_delay=(1.0, 1.0)), source=source, print_status=True)
admitsim.run(sim)

print(sim.event_frame())
print(collect_run_data(sim).environment["counts"])
