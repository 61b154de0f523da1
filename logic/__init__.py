# logic/__init__.py

"""Execution engine.

This package provides:
  • Simulation: start/fire/stop runs over a snapshot of a choreography
  • SimulationState: IDLE or RUNNING
  • apply_relation: the per-relation marking update rule
"""

from .simulation import Simulation, SimulationState, apply_relation

__all__ = [
    "Simulation",
    "SimulationState",
    "apply_relation",
]
