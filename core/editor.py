# core/editor.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Mutation and query surface over one choreography

"""Editor facade over a choreography, its simulation and its generated code.

Every structural edit the application layer can request goes through a
``ChoreographyEditor``. Successful edits record an advisory log line;
refused edits record the ``RejectionReason`` instead and return a falsy
value. Referencing an id that does not exist raises ``KeyError``.

While a simulation is running the committed choreography is frozen: every
mutation is refused with ``SIMULATION_RUNNING``.

Advisory lines go to the shared logger history (``get_logger().logs()``),
not to a per-editor log.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from codegen.generator import GeneratedCode, generate
from logic.simulation import Simulation
from model.choreography import Choreography, Node
from model.container import Container, ContainerKind, NestType
from model.event import Event, EventData, EventKind
from model.marking import Marking
from model.relation import Relation, RelationType, relation_id
from model.role import Parameter, Role
from model.shapes import InputShape
from parser.rehydrator import rehydrate
from utils.logger import get_logger
from . import containment
from .rejections import RejectionReason

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ChoreographySummary:
    """Event count (containers excluded) and the declared role names."""

    events_count: int
    roles: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.events_count} events, roles: {', '.join(self.roles) or '-'}"


class ChoreographyEditor:
    """Owns a ``Choreography`` and serializes every edit to it.

    Attributes:
        choreography: The committed model
        simulation: Run state machine bound to the committed model
        last_code: Output of the most recent ``generate`` call, if any
    """

    def __init__(self, choreography: Optional[Choreography] = None):
        self.choreography = choreography if choreography is not None else Choreography()
        self.simulation = Simulation(self.choreography)
        self.last_code: Optional[GeneratedCode] = None

    # ---- guards ----
    def _reject(self, reason: RejectionReason, message: str) -> None:
        logger.rejected(reason.name, f"{message} ({reason}).")

    def _frozen(self, action: str) -> bool:
        if self.simulation.running:
            self._reject(RejectionReason.SIMULATION_RUNNING, f"Cannot {action}")
            return True
        return False

    def _parent_rejection(self, node_ids: Iterable[str], parent: Optional[str]) -> Optional[RejectionReason]:
        if parent is None:
            return None
        if parent not in self.choreography.containers:
            return RejectionReason.NOT_A_CONTAINER
        for node_id in node_ids:
            reason = containment.reparent_rejection(self.choreography, node_id, parent)
            if reason is not None:
                return reason
        return None

    # ---- queries ----
    def get_node(self, node_id: str) -> Node:
        return self.choreography.node(node_id)

    def get_relation(self, rel_id: str) -> Relation:
        return self.choreography.relations[rel_id]

    def children(self, container_id: str) -> List[str]:
        self.choreography.containers[container_id]
        return self.choreography.children(container_id)

    def family(self, container_id: str) -> Set[str]:
        self.choreography.containers[container_id]
        return containment.family(self.choreography, container_id)

    def summary(self) -> ChoreographySummary:
        return ChoreographySummary(
            len(self.choreography.events),
            tuple(role.name for role in self.choreography.roles),
        )

    # ---- events ----
    def create_event(
        self,
        kind: EventKind,
        initiators: Iterable[str],
        receivers: Iterable[str] = (),
        name: str = "",
        security: str = "",
        input: Optional[InputShape] = None,
        expression: Optional[str] = None,
        parent: Optional[str] = None,
        label: Optional[str] = None,
    ) -> Optional[str]:
        """Create an event; its label defaults to its id.

        Returns:
            The new event id, or None if the edit was refused
        """
        if self._frozen("add an event"):
            return None
        initiators = list(initiators)
        if not initiators:
            self._reject(RejectionReason.NO_INITIATORS, "Cannot add event")
            return None
        if parent is not None and parent not in self.choreography.containers:
            self._reject(RejectionReason.NOT_A_CONTAINER, f"Invalid parent {parent} for new event")
            return None

        chor = self.choreography
        event_id = chor.event_ids.allocate()
        chor.events[event_id] = Event(
            event_id,
            label or event_id,
            name,
            security,
            kind,
            input,
            expression,
            initiators,
            list(receivers),
            parent=parent,
        )
        logger.advise(f"{kind.title} event added: {event_id}.")
        if parent is not None:
            containment.sync_choice_exclusions(chor, parent)
        return event_id

    def update_event(self, event_id: str, data: EventData) -> bool:
        """Replace an event's line-level content (label, name, value, parties, marking)."""
        event = self.choreography.events[event_id]
        if self._frozen(f"update {event_id}"):
            return False
        if not data.initiators:
            self._reject(RejectionReason.NO_INITIATORS, f"Cannot update {event_id}")
            return False
        event.apply(data)
        logger.advise(f"Event {event_id} updated.")
        return True

    def delete_event(self, event_id: str) -> List[str]:
        self.choreography.events[event_id]
        return self.delete_nodes([event_id])

    # ---- containers ----
    def create_container(
        self,
        kind: ContainerKind,
        children: Iterable[str],
        nest_type: Optional[NestType] = None,
        parent: Optional[str] = None,
        label: Optional[str] = None,
    ) -> Optional[str]:
        """Wrap existing nodes in a new nest or subprocess.

        A container never exists without children, so the nodes to wrap are
        given up front. They are moved out of their current parents, which
        may cascade the removal of emptied ones.

        Returns:
            The new container id, or None if the edit was refused
        """
        if self._frozen("add a container"):
            return None
        chor = self.choreography
        children = list(dict.fromkeys(children))
        for child in children:
            chor.node(child)
        if not children:
            self._reject(RejectionReason.EMPTY_CONTAINER, f"Cannot add {kind.value}")
            return None
        if parent in children:
            self._reject(RejectionReason.SELF_PARENT, f"Invalid parent {parent} for new {kind.value}")
            return None
        reason = self._parent_rejection(children, parent)
        if reason is not None:
            self._reject(reason, f"Invalid parent {parent} for new {kind.value}")
            return None

        container = Container("", "", kind, nest_type, parent=parent)
        container.id = chor.pool_for(container).allocate()
        container.label = label or container.id
        chor.containers[container.id] = container
        logger.advise(f"{kind.value.capitalize()} added: {container.id}.")

        for child in children:
            containment.reparent(chor, child, container.id)
        containment.sync_choice_exclusions(chor, container.id)
        if parent is not None:
            containment.sync_choice_exclusions(chor, parent)
        return container.id

    def update_container(
        self,
        container_id: str,
        label: Optional[str] = None,
        marking: Optional[Marking] = None,
    ) -> bool:
        """Relabel a container and/or set its marking.

        A new marking's ``included``/``pending`` flags are copied to every
        direct child event.
        """
        container = self.choreography.containers[container_id]
        if self._frozen(f"update {container_id}"):
            return False
        if label is not None:
            container.label = label
        if marking is not None:
            container.marking = marking.persistent()
            for child in self.choreography.children(container_id):
                event = self.choreography.events.get(child)
                if event is not None:
                    event.marking.included = marking.included
                    event.marking.pending = marking.pending
        logger.advise(f"{container.kind.value.capitalize()} {container_id} updated.")
        return True

    def change_container_type(
        self,
        container_id: str,
        kind: ContainerKind,
        nest_type: Optional[NestType] = None,
    ) -> Optional[str]:
        """Toggle group/choice or convert nest <-> subprocess.

        Returns:
            The container id after the change (a fresh one on conversion),
            or None if the edit was refused
        """
        self.choreography.containers[container_id]
        if self._frozen(f"change the type of {container_id}"):
            return None
        return containment.change_container_type(self.choreography, container_id, kind, nest_type)

    def move_node(self, node_id: str, parent: Optional[str]) -> bool:
        """Reparent a node (None moves it to the top level)."""
        self.choreography.node(node_id)
        if self._frozen(f"move {node_id}"):
            return False
        return containment.reparent(self.choreography, node_id, parent)

    def delete_nodes(self, node_ids: Iterable[str]) -> List[str]:
        """Delete nodes with their descendants and relations.

        Returns:
            Every removed node id, including cascaded empty containers
        """
        node_ids = list(node_ids)
        for node_id in node_ids:
            self.choreography.node(node_id)
        if self._frozen("delete nodes"):
            return []
        removed = containment.delete_nodes(self.choreography, node_ids)
        logger.advise(f"Deleted nodes: {', '.join(removed)}.")
        return removed

    # ---- relations ----
    def _relation_rejection(
        self, source: str, target: str, rtype: RelationType
    ) -> Optional[RejectionReason]:
        chor = self.choreography
        if chor.find_relation(source, target, rtype) is not None:
            return RejectionReason.DUPLICATE_RELATION
        if rtype is RelationType.SPAWN:
            target_node = chor.containers.get(target)
            if target_node is None or not target_node.is_subprocess:
                return RejectionReason.SPAWN_TARGET
        return None

    def create_relation(
        self,
        source: str,
        target: str,
        rtype: RelationType,
        guard: str = "",
    ) -> Optional[str]:
        """Connect two nodes with a typed relation.

        Returns:
            The relation id, or None if the edit was refused
        """
        chor = self.choreography
        chor.node(source)
        chor.node(target)
        if self._frozen("add a relation"):
            return None
        reason = self._relation_rejection(source, target, rtype)
        if reason is not None:
            self._reject(reason, f"Invalid {rtype.value} relation from {source} to {target}")
            return None

        rid = relation_id(source, target, rtype)
        guard = "" if rtype is RelationType.SPAWN else guard
        chor.relations[rid] = Relation(rid, source, target, rtype, guard)
        if source == target:
            logger.advise(f"Added self-exclusion edge to node {source}")
        else:
            logger.advise(f"Added {rtype.value} relation from {source} to {target}")
        return rid

    def update_relation(
        self,
        rel_id: str,
        rtype: Optional[RelationType] = None,
        guard: Optional[str] = None,
    ) -> Optional[str]:
        """Change a relation's type and/or guard.

        Returns:
            The relation id after the change, or None if the edit was refused
        """
        chor = self.choreography
        rel = chor.relations[rel_id]
        if self._frozen(f"update {rel_id}"):
            return None
        if rel.scope is not None:
            self._reject(RejectionReason.PROTECTED_RELATION, f"Cannot update {rel_id}")
            return None

        if rtype is not None and rtype is not rel.type:
            reason = self._relation_rejection(rel.source, rel.target, rtype)
            if reason is not None:
                self._reject(reason, f"Invalid {rtype.value} relation from {rel.source} to {rel.target}")
                return None
            del chor.relations[rel.id]
            rel.type = rtype
            rel.id = relation_id(rel.source, rel.target, rtype)
            chor.relations[rel.id] = rel
        if guard is not None:
            rel.guard = guard
        if rel.type is RelationType.SPAWN:
            rel.guard = ""

        logger.advise(f"Updated {rel.type.value} relation between {rel.source} and {rel.target}.")
        return rel.id

    def delete_relation(self, rel_id: str) -> bool:
        rel = self.choreography.relations[rel_id]
        if self._frozen(f"delete {rel_id}"):
            return False
        if rel.scope is not None:
            self._reject(RejectionReason.PROTECTED_RELATION, f"Cannot delete {rel_id}")
            return False
        del self.choreography.relations[rel_id]
        logger.advise(f"Deleted edges: {rel_id}.")
        return True

    # ---- roles and security ----
    def add_role(
        self,
        name: str,
        label: Optional[str] = None,
        parameters: Iterable[Parameter] = (),
    ) -> Optional[Role]:
        """Declare a role; the name is capitalized and the label defaults to it."""
        if self._frozen("add a role"):
            return None
        name = name[:1].upper() + name[1:]
        if self.choreography.role(name) is not None:
            self._reject(RejectionReason.DUPLICATE_ROLE, f"Cannot add role {name}")
            return None
        role = Role(name, label or name, list(parameters))
        self.choreography.roles.append(role)
        logger.advise(f"Role added: {name}.")
        return role

    def remove_role(self, name: str) -> bool:
        role = self.choreography.role(name)
        if role is None:
            raise KeyError(name)
        if self._frozen(f"remove role {name}"):
            return False
        self.choreography.roles.remove(role)
        logger.advise(f"Role removed: {name}.")
        return True

    def add_participant(self, role_name: str, bindings: Mapping[str, str]) -> Optional[str]:
        """Instantiate a role, e.g. ``{"id": "1"}`` on ``P(id:Integer)`` gives ``P(id=1)``.

        Raises:
            KeyError: Unknown role, or a parameter without a binding
        """
        role = self.choreography.role(role_name)
        if role is None:
            raise KeyError(role_name)
        if self._frozen(f"add a participant to {role_name}"):
            return None
        participant = role.participant(bindings)
        role.participants.append(participant)
        logger.advise(f"Participant added: {participant}.")
        return participant

    def remove_participant(self, role_name: str, participant: str) -> bool:
        role = self.choreography.role(role_name)
        if role is None:
            raise KeyError(role_name)
        if self._frozen(f"remove a participant from {role_name}"):
            return False
        role.participants = [p for p in role.participants if p != participant]
        logger.advise(f"Participant removed: {participant}.")
        return True

    def set_security(self, security: str) -> bool:
        if self._frozen("change the security lattice"):
            return False
        self.choreography.security = security
        logger.debug("Security lattice updated")
        return True

    def set_documentation(self, documentation: str) -> bool:
        if self._frozen("change the documentation"):
            return False
        self.choreography.documentation = documentation
        logger.debug("Documentation updated")
        return True

    # ---- simulation ----
    def start_simulation(self) -> Choreography:
        return self.simulation.start()

    def stop_simulation(self) -> None:
        self.simulation.stop()

    def fire(self, event_id: str) -> bool:
        return self.simulation.fire(event_id)

    # ---- generated text ----
    def generate(self) -> GeneratedCode:
        """Compile the committed choreography and remember the result."""
        self.last_code = generate(self.choreography)
        return self.last_code

    def rehydrate(self, text: str) -> Dict[str, EventData]:
        """Read event lines of edited text back, keyed by the last generation's ids.

        Raises:
            ParseError: An event line is malformed
        """
        rendered = self.last_code.rendered if self.last_code else ()
        return rehydrate(text, rendered)

    def apply_rehydrated(self, records: Mapping[str, EventData]) -> List[str]:
        """Write rehydrated records back as event updates.

        Returns:
            Ids of the events that were updated
        """
        updated = []
        for event_id, data in records.items():
            if event_id not in self.choreography.events:
                logger.warning(f"Skipping rehydrated record for unknown event {event_id}")
                continue
            if self.choreography.events[event_id].data() == data:
                continue
            if self.update_event(event_id, data):
                updated.append(event_id)
        return updated
