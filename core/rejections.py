# core/rejections.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Reasons an edit can be refused

"""Reasons a structural edit is refused.

Refused edits never raise: the engine leaves the choreography untouched,
records an advisory line naming one of these reasons, and returns a falsy
value to the caller.
"""

from enum import Enum


class RejectionReason(Enum):
    """Why an edit was refused."""

    DUPLICATE_RELATION = "duplicate relation"
    SPAWN_TARGET = "spawn target is not a subprocess"
    PROTECTED_RELATION = "relation is owned by a choice"
    SELF_PARENT = "node cannot contain itself"
    CYCLIC_PARENT = "parent is a descendant of the node"
    NOT_A_CONTAINER = "parent is not a container"
    EMPTY_CONTAINER = "container needs at least one child"
    NO_INITIATORS = "event needs at least one initiator"
    DUPLICATE_ROLE = "role already exists"
    SIMULATION_RUNNING = "simulation is running"

    def __str__(self) -> str:
        return self.value
