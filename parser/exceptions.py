# parser/exceptions.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Custom exceptions for generated-text parsing

"""Domain-specific exceptions for reading generated choreography text.

Raised by the value-shape parser and by the event-line rehydrator when a line
that looks like an event line cannot be split back into its fields.
"""


class ParseError(RuntimeError):
    """Raised when a value shape or an event line is malformed.

    Used throughout the parsing pipeline so callers (the editor and the
    command line) only need to handle a single exception type.
    """

    pass
