"""Simulation layer: engine, controller, spawning, and headless sessions."""

from turmite_world.simulation.controller import FrameUpdate, SimulationController
from turmite_world.simulation.engine import Engine, MachineSnapshot
from turmite_world.simulation.runner import SessionResult, build_summary, run_session
from turmite_world.simulation.spawning import resolve_plan, spawn_machines, validate_kinds

__all__ = [
    "Engine",
    "FrameUpdate",
    "MachineSnapshot",
    "SessionResult",
    "SimulationController",
    "build_summary",
    "resolve_plan",
    "run_session",
    "spawn_machines",
    "validate_kinds",
]
