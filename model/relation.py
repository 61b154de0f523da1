# model/relation.py

"""
Typed DCR relations between events and/or containers.

At most one relation of a given type may connect an ordered (source, target)
pair, so the triple doubles as the relation's natural key. Identifiers follow
the same scheme: the type's initial, the source and the target joined by
dashes (``c-e0-e1``). Exclusions generated for choice nests use ``x-`` and a
self-exclusion uses ``se-<event>``.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class RelationType(Enum):
    CONDITION = "condition"
    RESPONSE = "response"
    INCLUDE = "include"
    EXCLUDE = "exclude"
    MILESTONE = "milestone"
    SPAWN = "spawn"

    @property
    def symbol(self) -> str:
        return RELATION_SYMBOLS[self]

    @property
    def initial(self) -> str:
        return self.value[0]


RELATION_SYMBOLS = {
    RelationType.CONDITION: "-->*",
    RelationType.RESPONSE: "*-->",
    RelationType.INCLUDE: "-->+",
    RelationType.EXCLUDE: "-->%",
    RelationType.MILESTONE: "--<>",
    RelationType.SPAWN: "-->>",
}

GENERATED_PREFIX = "x"


def relation_id(source: str, target: str, rtype: RelationType, generated: bool = False) -> str:
    if generated:
        return f"{GENERATED_PREFIX}-{source}-{target}"
    if source == target and rtype is RelationType.EXCLUDE:
        return f"se-{source}"
    return f"{rtype.initial}-{source}-{target}"


@dataclass(slots=True)
class Relation:
    id: str
    source: str
    target: str
    type: RelationType
    guard: str = ""
    scope: Optional[str] = None
    hidden: bool = False
    generated: bool = False

    @property
    def key(self) -> Tuple[str, str, RelationType]:
        return self.source, self.target, self.type

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def __str__(self) -> str:
        guard = f" [{self.guard}]" if self.guard else ""
        return f"{self.source} {self.type.symbol} {self.target}{guard}"
