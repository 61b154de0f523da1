# parser/__init__.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Parsing of generated choreography text

"""Reading generated choreography text back into the model.

Core Functions:
    parse_shape: Parses an input value clause into an InputShape
    parse_event_line: Splits one event line into an EventData record
    rehydrate: Zips edited event lines against the last generation's rendered lines

Example:
    >>> from parser import parse_shape
    >>> parse_shape("?:{size:Integer; name:String}").render()
    '?:{size:Integer; name:String}'
"""

from .exceptions import ParseError
from .rehydrator import (
    EVENT_LINE,
    is_event_line,
    parse_event_line,
    parse_shape,
    rehydrate,
    split_participants,
)

__all__ = [
    "EVENT_LINE",
    "ParseError",
    "is_event_line",
    "parse_event_line",
    "parse_shape",
    "rehydrate",
    "split_participants",
]
