"""Simulator singleton and dependency injection."""

from typing import Optional

from stats_simulator.simulation.simulator import Simulator

simulator: Optional[Simulator] = None


def init_simulator():
    """Initializes the simulator singleton."""
    global simulator
    simulator = Simulator()


def get_simulator() -> Simulator:
    """FastAPI dependency that provides the singleton simulator."""
    if simulator is None:
        init_simulator()
    return simulator
