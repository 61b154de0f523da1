# logic/simulation.py

"""
Simulation: runs DCR marking semantics on a snapshot of a choreography.

Starting a run deep-copies the committed choreography and derives, for every
event, ``executed = False`` and ``executable = included and no Condition or
Milestone relation targets it``. Firing an executable event applies the
effect of each outgoing relation to its target's marking and marks the fired
event as executed. Stopping discards the snapshot; the committed choreography
is never written by a run.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from model.choreography import Choreography
from model.marking import Marking
from model.relation import RelationType
from utils.logger import get_logger

logger = get_logger(__name__)

_GATING = (RelationType.CONDITION, RelationType.MILESTONE)


class SimulationState(Enum):
    IDLE = auto()
    RUNNING = auto()


def apply_relation(rtype: RelationType, marking: Marking) -> str:
    """Apply one relation's effect to its target marking; returns a short trace."""
    if rtype is RelationType.EXCLUDE:
        marking.included = False
        marking.executable = False
        return "excluded"
    if rtype is RelationType.INCLUDE:
        marking.included = True
        marking.executable = True
        return "included"
    if rtype is RelationType.CONDITION:
        marking.executable = True
        return "enabled"
    if rtype is RelationType.RESPONSE:
        marking.pending = True
        return "pending"
    # Milestones only gate the initial marking; spawns have no marking effect.
    return ""


@dataclass(slots=True)
class Simulation:
    """A start/fire/stop state machine over a committed choreography.

    Attributes:
      choreography: the committed model; read once per ``start``.
      state: IDLE or RUNNING.
      snapshot: the working copy while RUNNING, else None.
      history: ids of the events fired in the current run, in order.
    """
    choreography: Choreography
    state: SimulationState = SimulationState.IDLE
    snapshot: Optional[Choreography] = None
    history: List[str] = field(default_factory=list)

    @property
    def running(self) -> bool:
        return self.state is SimulationState.RUNNING

    def start(self) -> Choreography:
        """Snapshot the committed model and derive the initial run marking."""
        if self.running:
            return self.snapshot

        run = self.choreography.copy()
        gated = {r.target for r in run.relations.values() if r.type in _GATING}
        for event in run.events.values():
            event.marking.executed = False
            event.marking.executable = event.marking.included and event.id not in gated

        self.snapshot = run
        self.history.clear()
        self.state = SimulationState.RUNNING
        logger.simulation_toggled(True)
        logger.debug(f"Initially executable: {self.executable_events()}")
        return run

    def fire(self, event_id: str) -> bool:
        """Fire one event on the snapshot.

        Returns:
            False (and changes nothing) if no run is active or the event is
            not executable, True otherwise

        Raises:
            KeyError: the event does not exist
        """
        if not self.running:
            return False
        run = self.snapshot
        event = run.events[event_id]
        if not event.marking.executable:
            logger.debug(f"    {event_id} is not executable; firing ignored")
            return False

        effects = []
        for rel in run.outgoing(event_id):
            effect = apply_relation(rel.type, run.node(rel.target).marking)
            if effect:
                effects.append(f"{rel.target} {effect}")

        event.marking.executed = True
        self.history.append(event_id)
        logger.event_fired(event_id, ", ".join(effects))
        return True

    def stop(self) -> None:
        """Discard the run; the committed choreography is left as it was."""
        if not self.running:
            return
        self.snapshot = None
        self.history.clear()
        self.state = SimulationState.IDLE
        logger.simulation_toggled(False)

    def marking(self, event_id: str) -> Marking:
        """Current marking of an event: the run marking while RUNNING."""
        source = self.snapshot if self.running else self.choreography
        return source.node(event_id).marking

    def executable_events(self) -> List[str]:
        if not self.running:
            return []
        return [e.id for e in self.snapshot.events.values() if e.marking.executable]
