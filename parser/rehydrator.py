# parser/rehydrator.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Maps edited event lines of generated text back onto event records

"""Best-effort inverse of the code generator for event-line edits.

Event lines are recognised by their opening ``(``, optionally preceded by the
``%`` (excluded) and ``!`` (pending) markers. They are zipped positionally
against the (event id, line) pairs recorded by the last generation, so
reordering, inserting or removing event lines misattributes content. An event
rendered more than once (a subprocess spawned twice) keeps the record of its
first line. Relation lines and the role/security blocks are not read back.
"""

import re
from typing import Dict, List, Sequence, Tuple

from model.event import EventData, EventKind
from utils.logger import get_logger
from .exceptions import ParseError
from .grammar import _ShapeParser

logger = get_logger(__name__)

EVENT_LINE = re.compile(
    r"^(%?)(!?)\(([^:()]*):([^()]*)\) \((.*?)\) \[(.*)\] \[([^\[\]]*)\]$"
)
_CANDIDATE = re.compile(r"^%?!?\(")


def parse_shape(text: str):
    """Parse a value clause (``?``, ``?:T``, ``?:{v:T; ...}``) into an InputShape.

    Raises:
        ParseError: The clause is malformed
    """
    return _ShapeParser().parse(text)


def is_event_line(line: str) -> bool:
    return bool(_CANDIDATE.match(line.strip()))


def split_participants(text: str) -> List[str]:
    """Split ``P(id=1), Q(x=a, y=b)`` on the commas outside parentheses."""
    parts: List[str] = []
    depth = 0
    current = ""
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def split_parties(text: str) -> Tuple[List[str], List[str]]:
    initiators, _, receivers = text.partition(" -> ")
    return split_participants(initiators), split_participants(receivers)


def parse_event_line(line: str) -> EventData:
    """Re-parse one generated event line into an identity-free record.

    Raises:
        ParseError: The line does not have the generated event-line layout
    """
    match = EVENT_LINE.match(line.strip())
    if match is None:
        raise ParseError(f"Malformed event line: {line.strip()!r}")

    excluded, pending, label, name, security, value, parties = match.groups()
    initiators, receivers = split_parties(parties)

    if value.startswith("?"):
        return EventData.build(
            label, name, security, EventKind.INPUT,
            input=parse_shape(value),
            initiators=initiators, receivers=receivers,
            included=not excluded, pending=bool(pending),
        )
    return EventData.build(
        label, name, security, EventKind.COMPUTATION,
        expression=value,
        initiators=initiators, receivers=receivers,
        included=not excluded, pending=bool(pending),
    )


def rehydrate(text: str, rendered: Sequence[Tuple[str, str]]) -> Dict[str, EventData]:
    """Recover event records from edited generated text.

    Args:
        text: Edited text, same number and order of event lines as generated
        rendered: (event id, line) pairs recorded by the generation, in
            output order

    Returns:
        Event records keyed by the id of the event whose line held the
        same position at generation time; the first line wins for an event
        rendered more than once

    Raises:
        ParseError: An event line cannot be split back into its fields
    """
    lines = [line for line in text.splitlines() if is_event_line(line)]
    if len(lines) != len(rendered):
        logger.warning(
            f"Rehydration found {len(lines)} event lines for {len(rendered)} generated ones; "
            "content is matched by position"
        )

    records: Dict[str, EventData] = {}
    for (event_id, _), line in zip(rendered, lines):
        data = parse_event_line(line)
        if event_id in records:
            logger.debug(f"    {event_id} repeated, kept first line")
            continue
        records[event_id] = data
        logger.debug(f"    {event_id} <- {line.strip()}")
    return records
