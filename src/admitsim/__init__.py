"""admitsim models admission control for a capacity-limited server: users wait in a priority queue and are admitted into a fixed number of connection slots, with HIGH priority arrivals able to preempt lower-priority occupants.
"""
from admitsim.users import *
from admitsim.queues import PriorityQueue
from admitsim.admission import *
from admitsim.config import SimulationConfig
from admitsim.events import RandomEventSource, ScriptedEventSource
from admitsim.simulation import Environment, Simulation, TickReport
from admitsim.log_cfg import LogConfig, log_config, logger
from admitsim.runner import run

__version__ = "1.0.0"
