# model/choreography.py

"""
The owned choreography aggregate: every event, container, relation and role,
the security lattice text, free-text documentation and the per-kind id pools.
Engines receive it by reference; nothing in the package keeps a module-level
instance.
"""

from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from .container import Container, ContainerKind
from .event import Event
from .id_pool import IdPool
from .relation import Relation, RelationType
from .role import Role

Node = Union[Event, Container]


@dataclass(slots=True)
class Choreography:
    events: Dict[str, Event] = field(default_factory=dict)
    containers: Dict[str, Container] = field(default_factory=dict)
    relations: Dict[str, Relation] = field(default_factory=dict)
    roles: List[Role] = field(default_factory=list)
    security: str = ""
    documentation: str = ""
    event_ids: IdPool = field(default_factory=lambda: IdPool("e"))
    nest_ids: IdPool = field(default_factory=lambda: IdPool("n"))
    subprocess_ids: IdPool = field(default_factory=lambda: IdPool("s"))

    # ---- lookup ----
    def node(self, node_id: str) -> Node:
        """Return the event or container with this id (KeyError if absent)."""
        if node_id in self.events:
            return self.events[node_id]
        return self.containers[node_id]

    def has_node(self, node_id: str) -> bool:
        return node_id in self.events or node_id in self.containers

    def nodes(self) -> Iterator[Node]:
        yield from self.containers.values()
        yield from self.events.values()

    def children(self, container_id: str) -> List[str]:
        return [n.id for n in self.nodes() if n.parent == container_id]

    def role(self, name: str) -> Optional[Role]:
        return next((r for r in self.roles if r.name == name), None)

    # ---- relations ----
    def find_relation(
        self, source: str, target: str, rtype: RelationType
    ) -> Optional[Relation]:
        for rel in self.relations.values():
            if rel.key == (source, target, rtype):
                return rel
        return None

    def outgoing(self, node_id: str) -> List[Relation]:
        return [r for r in self.relations.values() if r.source == node_id]

    def incoming(self, node_id: str) -> List[Relation]:
        return [r for r in self.relations.values() if r.target == node_id]

    def scoped_relations(self, container_id: str) -> List[Relation]:
        return [r for r in self.relations.values() if r.scope == container_id]

    # ---- id pools ----
    def pool_for(self, node: Node) -> IdPool:
        if isinstance(node, Event):
            return self.event_ids
        if node.kind is ContainerKind.NEST:
            return self.nest_ids
        return self.subprocess_ids

    def copy(self) -> Choreography:
        return copy.deepcopy(self)

    def __len__(self) -> int:
        return len(self.events) + len(self.containers)
