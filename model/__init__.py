# model/__init__.py

"""
Domain objects for DCR choreographies: events with their markings and value
shapes, typed relations, nest/subprocess containers, roles, per-kind id pools
and the owning Choreography aggregate. These types carry no editing logic;
structural edits go through ``core`` and runs through ``logic``.
"""

from .shapes import Field, InputShape, PRIMITIVE_TYPES
from .marking import Marking
from .event import Event, EventData, EventKind
from .relation import Relation, RelationType, RELATION_SYMBOLS, relation_id
from .container import Container, ContainerKind, NestType
from .role import Parameter, Role, PARAMETER_TYPES
from .id_pool import IdPool
from .choreography import Choreography, Node
from .sample import build_sample_choreography, SAMPLE_SECURITY

__all__ = [
    "Field",
    "InputShape",
    "PRIMITIVE_TYPES",
    "Marking",
    "Event",
    "EventData",
    "EventKind",
    "Relation",
    "RelationType",
    "RELATION_SYMBOLS",
    "relation_id",
    "Container",
    "ContainerKind",
    "NestType",
    "Parameter",
    "Role",
    "PARAMETER_TYPES",
    "IdPool",
    "Choreography",
    "Node",
    "build_sample_choreography",
    "SAMPLE_SECURITY",
]
