# model/container.py

"""
Hierarchical containers: nests (plain groups or mutually exclusive choices)
and subprocesses (spawnable nested choreographies). A container's children are
never stored on the container; they are every node whose ``parent`` points at
it, so membership has a single source of truth.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .marking import Marking


class ContainerKind(Enum):
    NEST = "nest"
    SUBPROCESS = "subprocess"


class NestType(Enum):
    GROUP = "group"
    CHOICE = "choice"


@dataclass(slots=True)
class Container:
    id: str
    label: str
    kind: ContainerKind = ContainerKind.NEST
    nest_type: Optional[NestType] = None
    marking: Marking = field(default_factory=Marking)
    parent: Optional[str] = None

    def __post_init__(self):
        if self.kind is ContainerKind.NEST:
            self.nest_type = self.nest_type or NestType.GROUP
        else:
            self.nest_type = None

    @property
    def is_choice(self) -> bool:
        return self.kind is ContainerKind.NEST and self.nest_type is NestType.CHOICE

    @property
    def is_subprocess(self) -> bool:
        return self.kind is ContainerKind.SUBPROCESS

    def __str__(self) -> str:
        kind = self.nest_type.value if self.nest_type else self.kind.value
        return f"{self.id}<{kind}>"
