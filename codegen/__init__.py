# codegen/__init__.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Textual code generation for choreographies

"""Compilation of choreographies into the nested textual process notation.

Core Functions:
    generate: Renders a choreography and records the event-line mapping
    generate_text: Convenience wrapper returning only the text
    render_event: Renders a single event line

Example:
    >>> from model import build_sample_choreography
    >>> from codegen import generate
    >>> code = generate(build_sample_choreography())
    >>> code.event_lines["e1"]
    '(e1:submit) (Public) [?] [P(id=1) -> P(id=2)]'
"""

from .generator import (
    CodeGenerator,
    GeneratedCode,
    GLOBAL_SCOPE,
    Partition,
    generate,
    generate_text,
    partition,
    render_event,
)

__all__ = [
    "CodeGenerator",
    "GeneratedCode",
    "GLOBAL_SCOPE",
    "Partition",
    "generate",
    "generate_text",
    "partition",
    "render_event",
]
