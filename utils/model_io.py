# utils/model_io.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# JSON document reader and writer for choreographies

"""JSON document format for choreographies.

Layout::

    {
      "nodes": [{"id": "e0", "kind": "event", "parent": "", "data": {...}}, ...],
      "edges": [{"id": "c-e0-e1", "source": "e0", "target": "e1", "kind": "condition"}, ...],
      "security": "Public flows P",
      "documentation": "...",
      "roles": [{"role": "Prosumer", "label": "P",
                 "types": [{"var": "id", "type": "Integer"}],
                 "participants": ["P(id=1)"]}, ...]
    }

Containers are written before events. Edges carry ``guard``, ``scope`` and
``hidden`` only when set. Generated choice exclusions are recognised by their
``x-`` identifier.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from core.containment import normalize
from model.choreography import Choreography
from model.container import Container, ContainerKind, NestType
from model.event import Event, EventKind
from model.id_pool import IdPool
from model.marking import Marking
from model.relation import GENERATED_PREFIX, Relation, RelationType
from model.role import Parameter, Role
from model.shapes import InputShape
from utils.logger import get_logger

EVENT_KIND = "event"


class ModelFormatError(Exception):
    """Exception raised when a choreography document is unreadable or invalid."""

    pass


# ---- writing ----
def _event_data(event: Event) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "label": event.label,
        "name": event.name,
        "security": event.security,
        "type": event.kind.value,
        "initiators": list(event.initiators),
        "receivers": list(event.receivers),
        "marking": event.marking.to_dict(),
    }
    if event.kind is EventKind.INPUT:
        data["input"] = event.input.to_dict()
    else:
        data["expression"] = event.expression
    return data


def _container_data(container: Container) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "label": container.label,
        "marking": container.marking.to_dict(),
    }
    if container.nest_type is not None:
        data["nestType"] = container.nest_type.value
    return data


def dump_document(chor: Choreography) -> Dict[str, Any]:
    """Serialize a choreography into a JSON-compatible dictionary."""
    nodes: List[Dict[str, Any]] = []
    for container in chor.containers.values():
        nodes.append({
            "id": container.id,
            "kind": container.kind.value,
            "parent": container.parent or "",
            "data": _container_data(container),
        })
    for event in chor.events.values():
        nodes.append({
            "id": event.id,
            "kind": EVENT_KIND,
            "parent": event.parent or "",
            "data": _event_data(event),
        })

    edges: List[Dict[str, Any]] = []
    for rel in chor.relations.values():
        edge: Dict[str, Any] = {
            "id": rel.id,
            "source": rel.source,
            "target": rel.target,
            "kind": rel.type.value,
        }
        if rel.guard:
            edge["guard"] = rel.guard
        if rel.scope:
            edge["scope"] = rel.scope
        if rel.hidden:
            edge["hidden"] = True
        edges.append(edge)

    roles = [
        {
            "role": role.name,
            "label": role.label,
            "types": [{"var": p.var, "type": p.type} for p in role.parameters],
            "participants": list(role.participants),
        }
        for role in chor.roles
    ]

    return {
        "nodes": nodes,
        "edges": edges,
        "security": chor.security,
        "documentation": chor.documentation,
        "roles": roles,
    }


def write_document(chor: Choreography, filepath: str) -> None:
    logger = get_logger()
    path = Path(filepath)
    with open(path, "w", encoding="utf-8") as file:
        json.dump(dump_document(chor), file, indent=2)
    logger.debug(f"Wrote choreography document: {filepath}")


# ---- reading ----
def _parse_event(node: Dict[str, Any]) -> Event:
    data = node["data"]
    kind = EventKind(data.get("type", EventKind.INPUT.value))
    shape = InputShape.from_dict(data["input"]) if data.get("input") else None
    return Event(
        node["id"],
        data.get("label") or node["id"],
        data.get("name", ""),
        data.get("security", ""),
        kind,
        shape,
        data.get("expression"),
        list(data.get("initiators", [])),
        list(data.get("receivers", [])),
        Marking.from_dict(data.get("marking", {})),
        node.get("parent") or None,
    )


def _parse_container(node: Dict[str, Any]) -> Container:
    data = node.get("data", {})
    kind = ContainerKind(node["kind"])
    nest_type = NestType(data["nestType"]) if data.get("nestType") else None
    return Container(
        node["id"],
        data.get("label") or node["id"],
        kind,
        nest_type,
        Marking.from_dict(data.get("marking", {})),
        node.get("parent") or None,
    )


def _parse_edge(edge: Dict[str, Any]) -> Relation:
    return Relation(
        edge["id"],
        edge["source"],
        edge["target"],
        RelationType(edge["kind"]),
        edge.get("guard", ""),
        edge.get("scope") or None,
        bool(edge.get("hidden", False)),
        edge["id"].startswith(GENERATED_PREFIX + "-"),
    )


def _parse_role(data: Dict[str, Any]) -> Role:
    return Role(
        data["role"],
        data.get("label") or data["role"],
        [Parameter(t["var"], t["type"]) for t in data.get("types", [])],
        list(data.get("participants", [])),
    )


def _rebuild_pools(chor: Choreography) -> None:
    used: Dict[str, List[int]] = {"e": [], "n": [], "s": []}
    for node in chor.nodes():
        pool = chor.pool_for(node)
        used[pool.prefix].append(pool.number(node.id))
    chor.event_ids = IdPool.from_used("e", used["e"])
    chor.nest_ids = IdPool.from_used("n", used["n"])
    chor.subprocess_ids = IdPool.from_used("s", used["s"])


def _validate(chor: Choreography) -> None:
    for node in chor.nodes():
        if node.parent is not None and node.parent not in chor.containers:
            raise ModelFormatError(f"Node {node.id} has unknown parent {node.parent}")
    seen: Dict[Tuple[str, str, RelationType], str] = {}
    for rel in chor.relations.values():
        for end in (rel.source, rel.target):
            if not chor.has_node(end):
                raise ModelFormatError(f"Relation {rel.id} references unknown node {end}")
        if rel.key in seen:
            raise ModelFormatError(f"Relation {rel.id} duplicates {seen[rel.key]}")
        seen[rel.key] = rel.id
        if rel.type is RelationType.SPAWN and not (
            rel.target in chor.containers and chor.containers[rel.target].is_subprocess
        ):
            raise ModelFormatError(f"Spawn relation {rel.id} does not target a subprocess")
        if rel.scope is not None and rel.scope not in chor.containers:
            raise ModelFormatError(f"Relation {rel.id} is scoped to unknown container {rel.scope}")


def load_document(document: Dict[str, Any]) -> Choreography:
    """Build a choreography from a document produced by ``dump_document``.

    Id pools are rebuilt from the ids in use, so gaps are handed out before
    fresh numbers. Empty containers are dropped and choice exclusions are
    recomputed.

    Raises:
        ModelFormatError: The document is structurally invalid
    """
    logger = get_logger()
    chor = Choreography()
    try:
        for node in document.get("nodes", []):
            if node["kind"] == EVENT_KIND:
                event = _parse_event(node)
                chor.events[event.id] = event
            else:
                container = _parse_container(node)
                chor.containers[container.id] = container
        for edge in document.get("edges", []):
            rel = _parse_edge(edge)
            chor.relations[rel.id] = rel
        chor.roles = [_parse_role(r) for r in document.get("roles", [])]
        chor.security = document.get("security", "")
        chor.documentation = document.get("documentation", "")
        _rebuild_pools(chor)
    except ModelFormatError:
        raise
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise ModelFormatError(f"Invalid choreography document: {e!r}") from e

    _validate(chor)
    removed = normalize(chor)
    if removed:
        logger.warning(f"Dropped empty containers on load: {', '.join(removed)}")
    logger.debug(
        f"Loaded {len(chor.events)} events, {len(chor.containers)} containers, "
        f"{len(chor.relations)} relations"
    )
    return chor


def read_document(filepath: str) -> Choreography:
    """Read a choreography document from disk.

    Raises:
        FileNotFoundError: The file does not exist
        ModelFormatError: The file is not valid JSON or not a valid document
    """
    logger = get_logger()
    path = Path(filepath)
    logger.debug(f"Reading choreography document: {filepath}")

    with open(path, "r", encoding="utf-8") as file:
        try:
            document = json.load(file)
        except json.JSONDecodeError as e:
            raise ModelFormatError(f"Invalid JSON in {filepath}: {e}") from e

    if not isinstance(document, dict):
        raise ModelFormatError(f"Document root must be an object: {filepath}")
    return load_document(document)
