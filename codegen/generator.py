# codegen/generator.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Compiles a choreography into the nested textual process notation

"""Code generator for the textual choreography notation.

Output layout::

    P(id:Integer)            role block, one role per line
    Public
    ;
    Public flows P           security lattice, verbatim
    ;
    (e0:readDocument) (Public) [?:{size:Integer; name:String}] [P(id=1)]
    ;                        end of the event block
    e0 -->* e1               relations of the process
    e5 -->> {                spawn: the target subprocess's body, one tab deeper
        (e6:review) (Public) [?] [P(id=2)]
        ;
    }

Elements are partitioned by their innermost enclosing container, with
``"global"`` standing for the top level; a relation belongs to its scope when
it has one, otherwise to its source's container. Nests are transparent: a
process body includes the events and relations of the nests inside it.
Subprocess bodies only appear inside the spawn blocks that target them.

While rendering, the generator records every event line as an (event id, line)
pair in output order, repeats from multiply spawned subprocesses included, and
keeps the first line of each event keyed by its id. The rehydrator zips edited
text against the pairs.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from model.choreography import Choreography
from model.container import Container, ContainerKind
from model.event import Event, EventKind
from model.relation import Relation, RelationType
from utils.logger import get_logger

GLOBAL_SCOPE = "global"
TERMINATOR = ";"
INDENT = "\t"


@dataclass(slots=True)
class Partition:
    """Elements whose innermost enclosing container is the same."""

    events: List[Event] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    nests: List[Container] = field(default_factory=list)
    subprocesses: List[Container] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class GeneratedCode:
    """Generator output: the text, the id → first event line mapping, and
    every rendered (id, line) pair in output order."""

    text: str
    event_lines: Dict[str, str]
    rendered: Tuple[Tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return self.text


def partition(chor: Choreography) -> Dict[str, Partition]:
    """Group events, relations, nests and subprocesses by enclosing container.

    Args:
        chor: Choreography to partition

    Returns:
        Mapping from container id (or ``GLOBAL_SCOPE``) to its partition; every
        container has an entry, even when it only holds other containers
    """
    parts: Dict[str, Partition] = {GLOBAL_SCOPE: Partition()}
    for cid in chor.containers:
        parts[cid] = Partition()

    for container in chor.containers.values():
        bucket = parts[container.parent or GLOBAL_SCOPE]
        if container.kind is ContainerKind.NEST:
            bucket.nests.append(container)
        else:
            bucket.subprocesses.append(container)

    for event in chor.events.values():
        parts[event.parent or GLOBAL_SCOPE].events.append(event)

    for rel in chor.relations.values():
        home = rel.scope or chor.node(rel.source).parent
        parts[home or GLOBAL_SCOPE].relations.append(rel)

    return parts


def render_event(event: Event) -> str:
    """Render one event line (without indentation).

    Format: ``<%><!>(label:name) (security) [value] [initiators -> receivers]``
    where ``%`` marks an excluded event and ``!`` a pending one.

    The line is emitted verbatim. A computation expression that contains a
    newline therefore spans several output lines, and rehydrating such text
    fails with ``ParseError`` on the first fragment.
    """
    prefix = ("" if event.marking.included else "%") + ("!" if event.marking.pending else "")
    if event.kind is EventKind.INPUT:
        value = event.input.render()
    else:
        value = event.expression or ""
    parties = ", ".join(event.initiators)
    if event.receivers:
        parties += " -> " + ", ".join(event.receivers)
    return f"{prefix}({event.label}:{event.name}) ({event.security}) [{value}] [{parties}]"


class CodeGenerator:
    """Walks the container hierarchy of one choreography and renders it.

    A generator instance is single-use per ``generate`` call; the event-line
    mapping is rebuilt each time.
    """

    def __init__(self, chor: Choreography):
        self.chor = chor
        self._parts: Dict[str, Partition] = {}
        self._lines: List[str] = []
        self._event_lines: Dict[str, str] = {}
        self._rendered: List[Tuple[str, str]] = []
        self._active: Set[str] = set()
        self._logger = get_logger()

    def generate(self) -> GeneratedCode:
        self._parts = partition(self.chor)
        self._lines = []
        self._event_lines = {}
        self._rendered = []
        self._active = set()

        for role in self.chor.roles:
            self._lines.append(role.signature())
        self._lines.append(TERMINATOR)
        self._lines.append(self.chor.security)
        self._lines.append(TERMINATOR)

        self._render_process(GLOBAL_SCOPE, depth=0)

        self._logger.debug(
            f"Generated {len(self._lines)} lines, {len(self._rendered)} event lines"
        )
        return GeneratedCode(
            "\n".join(self._lines), dict(self._event_lines), tuple(self._rendered)
        )

    def _scope(self, scope_id: str) -> Partition:
        """A process body's partition with nested nests flattened into it."""
        own = self._parts[scope_id]
        merged = Partition(list(own.events), list(own.relations), [], list(own.subprocesses))
        for nest in own.nests:
            inner = self._scope(nest.id)
            merged.events += inner.events
            merged.relations += inner.relations
            merged.subprocesses += inner.subprocesses
        return merged

    def _render_process(self, scope_id: str, depth: int) -> None:
        indent = INDENT * depth
        body = self._scope(scope_id)
        self._active.add(scope_id)

        for event in body.events:
            line = indent + render_event(event)
            self._lines.append(line)
            self._event_lines.setdefault(event.id, line)
            self._rendered.append((event.id, line))
        self._lines.append(indent + TERMINATOR)

        for rel in body.relations:
            source = self._label(rel.source)
            if rel.type is RelationType.SPAWN:
                self._lines.append(f"{indent}{source} {rel.type.symbol} {{")
                if rel.target in self._active:
                    self._logger.warning(f"Recursive spawn of {rel.target} from {rel.source} left empty")
                elif rel.target in self._parts:
                    self._render_process(rel.target, depth + 1)
                self._lines.append(f"{indent}}}")
            else:
                guard = f" [{rel.guard}]" if rel.guard else ""
                target = self._label(rel.target)
                self._lines.append(f"{indent}{source} {rel.type.symbol} {target}{guard}")
        self._active.discard(scope_id)

    def _label(self, node_id: str) -> str:
        return self.chor.node(node_id).label


def generate(chor: Choreography) -> GeneratedCode:
    """Compile a choreography into the textual notation.

    Args:
        chor: Choreography to compile

    Returns:
        GeneratedCode with the text and the event-line mapping
    """
    return CodeGenerator(chor).generate()


def generate_text(chor: Choreography) -> str:
    return generate(chor).text
