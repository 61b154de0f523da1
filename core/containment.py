# core/containment.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Containment engine: parent/child membership, cascading removal of empty
# containers, and the exclusion relations owned by choice nests

"""Structural consistency engine for hierarchical containers.

Membership is derived: a container's children are the nodes whose ``parent``
names it. Every function here takes the owning ``Choreography`` and leaves it
in a state where

- no container is empty (emptied containers are removed, cascading upwards),
- every choice nest owns exactly one hidden Exclude relation per ordered pair
  of distinct children, scoped to the nest, and nothing else,
- ids freed by removals are back in their kind's pool.

Invalid reparenting is refused without raising; see ``RejectionReason``.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Set, Tuple

from model.choreography import Choreography
from model.container import Container, ContainerKind, NestType
from model.relation import Relation, RelationType, relation_id
from utils.logger import get_logger
from .rejections import RejectionReason

logger = get_logger(__name__)


def family(chor: Choreography, container_id: str) -> Set[str]:
    """Return the ids of every transitive descendant of a container."""
    found: Set[str] = set()
    frontier = [container_id]
    while frontier:
        current = frontier.pop()
        for child in chor.children(current):
            if child not in found:
                found.add(child)
                if child in chor.containers:
                    frontier.append(child)
    return found


def reparent_rejection(
    chor: Choreography, node_id: str, new_parent: Optional[str]
) -> Optional[RejectionReason]:
    """Return why moving ``node_id`` under ``new_parent`` is invalid, or None."""
    if new_parent is None:
        return None
    if new_parent == node_id:
        return RejectionReason.SELF_PARENT
    if new_parent not in chor.containers:
        return RejectionReason.NOT_A_CONTAINER
    if node_id in chor.containers and new_parent in family(chor, node_id):
        return RejectionReason.CYCLIC_PARENT
    return None


def reparent(chor: Choreography, node_id: str, new_parent: Optional[str]) -> bool:
    """Move an event or container under ``new_parent`` (None = top level).

    The old parent is removed if the move empties it, cascading upwards.
    Choice exclusions of both the old and the new parent are recomputed.

    Returns:
        False if the move was refused, True otherwise
    """
    node = chor.node(node_id)
    reason = reparent_rejection(chor, node_id, new_parent)
    if reason is not None:
        logger.rejected(
            reason.name,
            f"Invalid parent for {node_id}: {new_parent} ({reason}).",
        )
        return False

    old_parent = node.parent
    if old_parent == new_parent:
        return True

    node.parent = new_parent
    logger.debug(f"Reparented {node_id}: {old_parent or 'top level'} → {new_parent or 'top level'}")

    if old_parent is not None:
        settle(chor, old_parent)
    if new_parent is not None:
        sync_choice_exclusions(chor, new_parent)
    return True


def settle(chor: Choreography, container_id: str) -> List[str]:
    """Re-establish invariants for a container that may have lost children.

    An empty container is removed and the check moves on to its parent; the
    first non-empty ancestor gets its choice exclusions recomputed.

    Returns:
        Ids of the containers removed, innermost first
    """
    removed: List[str] = []
    current: Optional[str] = container_id
    while current is not None and current in chor.containers:
        if chor.children(current):
            sync_choice_exclusions(chor, current)
            break
        container = chor.containers[current]
        current = container.parent
        _drop_container(chor, container)
        removed.append(container.id)
    return removed


def _drop_container(chor: Choreography, container: Container) -> None:
    for rel in [r for r in chor.relations.values() if r.touches(container.id)]:
        del chor.relations[rel.id]
    del chor.containers[container.id]
    chor.pool_for(container).release(container.id)
    logger.advise(f"Removed empty {container.kind.value}: {container.id}.")


def sync_choice_exclusions(chor: Choreography, container_id: str) -> None:
    """Recompute the exclusion relations owned by a container.

    For a choice nest the owned set becomes exactly one hidden Exclude per
    ordered pair of distinct children. For any other container (or a missing
    one) the owned set becomes empty. Explicit Exclude relations that already
    connect two siblings are adopted instead of duplicated, and released back
    to plain visible relations when the pair stops being owned.
    """
    container = chor.containers.get(container_id)
    members: List[str] = []
    if container is not None and container.is_choice:
        members = chor.children(container_id)
    wanted: Set[Tuple[str, str]] = {(a, b) for a in members for b in members if a != b}

    dropped = adopted = created = 0
    for rel in chor.scoped_relations(container_id):
        pair = (rel.source, rel.target)
        if rel.type is RelationType.EXCLUDE and pair in wanted:
            wanted.discard(pair)
            continue
        if rel.generated:
            del chor.relations[rel.id]
        else:
            rel.scope = None
            rel.hidden = False
        dropped += 1

    for source in members:
        for target in members:
            if (source, target) not in wanted:
                continue
            existing = chor.find_relation(source, target, RelationType.EXCLUDE)
            if existing is not None:
                existing.scope = container_id
                existing.hidden = True
                adopted += 1
            else:
                rid = relation_id(source, target, RelationType.EXCLUDE, generated=True)
                chor.relations[rid] = Relation(
                    rid, source, target, RelationType.EXCLUDE,
                    scope=container_id, hidden=True, generated=True,
                )
                created += 1

    if dropped or adopted or created:
        logger.debug(
            f"Choice exclusions for {container_id}: "
            f"+{created} created, {adopted} adopted, -{dropped} released"
        )


def change_container_type(
    chor: Choreography,
    container_id: str,
    kind: ContainerKind,
    nest_type: Optional[NestType] = None,
) -> str:
    """Switch a nest between group/choice, or convert nest <-> subprocess.

    Converting between kinds moves the container to the destination kind's id
    pool: a fresh id is allocated there and the old id is released. Spawn
    relations pointing at a subprocess that becomes a nest are removed.

    Returns:
        The container's id after the change
    """
    container = chor.containers[container_id]

    if kind is container.kind:
        if kind is ContainerKind.NEST and nest_type and nest_type is not container.nest_type:
            container.nest_type = nest_type
            sync_choice_exclusions(chor, container_id)
        return container_id

    old_pool = chor.pool_for(container)
    container.kind = kind
    container.nest_type = (nest_type or NestType.GROUP) if kind is ContainerKind.NEST else None
    new_id = chor.pool_for(container).allocate()
    old_pool.release(container_id)

    _rename_container(chor, container_id, new_id)
    sync_choice_exclusions(chor, new_id)

    if kind is ContainerKind.NEST:
        for rel in chor.incoming(new_id):
            if rel.type is RelationType.SPAWN:
                del chor.relations[rel.id]
                logger.advise(f"Removed spawn relation from {rel.source}: {new_id} is no longer a subprocess.")

    logger.advise(f"Converted {container_id} into {kind.value} {new_id}.")
    return new_id


def _rename_container(chor: Choreography, old_id: str, new_id: str) -> None:
    container = chor.containers[old_id]
    container.id = new_id
    if container.label == old_id:
        container.label = new_id
    chor.containers = {
        (new_id if cid == old_id else cid): c for cid, c in chor.containers.items()
    }

    for node in chor.nodes():
        if node.parent == old_id:
            node.parent = new_id

    renamed: Dict[str, Relation] = {}
    for rel in chor.relations.values():
        if rel.touches(old_id):
            rel.source = new_id if rel.source == old_id else rel.source
            rel.target = new_id if rel.target == old_id else rel.target
            rel.id = relation_id(rel.source, rel.target, rel.type, rel.generated)
        if rel.scope == old_id:
            rel.scope = new_id
        renamed[rel.id] = rel
    chor.relations = renamed


def delete_nodes(chor: Choreography, node_ids: List[str]) -> List[str]:
    """Remove nodes, their descendants and every relation touching them.

    Freed ids go back to their pools in ascending order. Parents emptied by
    the removal are removed too.

    Returns:
        Every removed node id, cascaded containers included
    """
    doomed: List[str] = []
    for node_id in node_ids:
        chor.node(node_id)
        candidates = [node_id]
        if node_id in chor.containers:
            candidates += sorted(family(chor, node_id))
        doomed += [c for c in candidates if c not in doomed]
    doomed_set = set(doomed)

    orphaned_parents: List[str] = []
    for node_id in doomed:
        parent = chor.node(node_id).parent
        if parent is not None and parent not in doomed_set and parent not in orphaned_parents:
            orphaned_parents.append(parent)

    for rel in list(chor.relations.values()):
        if rel.source in doomed_set or rel.target in doomed_set:
            del chor.relations[rel.id]

    pools = {p.prefix: p for p in (chor.event_ids, chor.nest_ids, chor.subprocess_ids)}
    freed: Dict[str, List[int]] = {}
    for node_id in doomed:
        node = chor.node(node_id)
        pool = chor.pool_for(node)
        freed.setdefault(pool.prefix, []).append(pool.number(node_id))
        if node_id in chor.events:
            del chor.events[node_id]
        else:
            del chor.containers[node_id]

    for prefix, numbers in freed.items():
        for n in sorted(numbers):
            pools[prefix].release(f"{prefix}{n}")

    removed = list(doomed)
    for parent in orphaned_parents:
        removed += settle(chor, parent)

    logger.debug(f"Deleted nodes {doomed}; cascade removed {removed[len(doomed):]}")
    return removed


def normalize(chor: Choreography) -> List[str]:
    """Bring a freshly loaded choreography in line with the invariants.

    Returns:
        Ids of the empty containers that were removed
    """
    removed: List[str] = []
    for cid in list(chor.containers):
        if cid in chor.containers:
            removed += settle(chor, cid)
    return removed
