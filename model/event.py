# model/event.py

"""
Event
=====

A choreography event: one interaction (input) or local computation performed
by its initiators and, optionally, observed by its receivers. Events are
created and destroyed only through the editor; this module only defines the
record and its invariant that an input event always carries a value shape and
a computation event always carries an expression.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .marking import Marking
from .shapes import InputShape


class EventKind(Enum):
    INPUT = "i"
    COMPUTATION = "c"

    @property
    def title(self) -> str:
        return "Input" if self is EventKind.INPUT else "Computation"


@dataclass(frozen=True, slots=True)
class EventData:
    """Identity-free snapshot of everything an event line carries."""

    label: str
    name: str
    security: str
    kind: EventKind
    input: Optional[InputShape]
    expression: Optional[str]
    initiators: Tuple[str, ...]
    receivers: Tuple[str, ...]
    included: bool = True
    pending: bool = False

    @classmethod
    def build(
        cls,
        label: str,
        name: str = "",
        security: str = "",
        kind: EventKind = EventKind.INPUT,
        input: Optional[InputShape] = None,
        expression: Optional[str] = None,
        initiators: Iterable[str] = (),
        receivers: Iterable[str] = (),
        included: bool = True,
        pending: bool = False,
    ) -> EventData:
        """Create a snapshot with the kind invariant applied."""
        if kind is EventKind.INPUT:
            input, expression = input or InputShape.unit(), None
        else:
            input, expression = None, expression or ""
        return cls(
            label, name, security, kind, input, expression,
            tuple(initiators), tuple(receivers), included, pending,
        )


@dataclass(slots=True)
class Event:
    id: str
    label: str
    name: str = ""
    security: str = ""
    kind: EventKind = EventKind.INPUT
    input: Optional[InputShape] = None
    expression: Optional[str] = None
    initiators: List[str] = field(default_factory=list)
    receivers: List[str] = field(default_factory=list)
    marking: Marking = field(default_factory=Marking)
    parent: Optional[str] = None

    def __post_init__(self):
        self._normalize_kind()

    def _normalize_kind(self) -> None:
        if self.kind is EventKind.INPUT:
            self.input = self.input or InputShape.unit()
            self.expression = None
        else:
            self.expression = self.expression or ""
            self.input = None

    def data(self) -> EventData:
        """Return the event's line-level content as an immutable snapshot."""
        return EventData(
            self.label,
            self.name,
            self.security,
            self.kind,
            self.input,
            self.expression,
            tuple(self.initiators),
            tuple(self.receivers),
            self.marking.included,
            self.marking.pending,
        )

    def apply(self, data: EventData) -> None:
        """Overwrite content fields from a snapshot; id and parent are kept."""
        self.label = data.label
        self.name = data.name
        self.security = data.security
        self.kind = data.kind
        self.input = data.input
        self.expression = data.expression
        self.initiators = list(data.initiators)
        self.receivers = list(data.receivers)
        self.marking.included = data.included
        self.marking.pending = data.pending
        self._normalize_kind()

    def __str__(self) -> str:
        return f"{self.id}({self.label}:{self.name}){self.marking}"
