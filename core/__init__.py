# core/__init__.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Core module public API for structural editing

"""Structural editing of DCR choreographies.

This module provides the containment engine, which keeps container
membership, cascading removal of empty containers and choice exclusions
consistent, and the editor facade through which every mutation and query
of the application layer goes.

Primary Components:
    ChoreographyEditor: Mutation/query surface with advisory logging
    ChoreographySummary: Event count and role names
    RejectionReason: Why an edit was refused
    family, reparent, delete_nodes, change_container_type: Containment engine

Example:
    >>> from core import ChoreographyEditor
    >>> from model import build_sample_choreography, RelationType
    >>> editor = ChoreographyEditor(build_sample_choreography())
    >>> editor.create_relation("e0", "e1", RelationType.CONDITION) is None
    True
"""

from .rejections import RejectionReason
from .containment import (
    change_container_type,
    delete_nodes,
    family,
    normalize,
    reparent,
    reparent_rejection,
    settle,
    sync_choice_exclusions,
)
from .editor import ChoreographyEditor, ChoreographySummary

__all__ = [
    "ChoreographyEditor",
    "ChoreographySummary",
    "RejectionReason",
    "change_container_type",
    "delete_nodes",
    "family",
    "normalize",
    "reparent",
    "reparent_rejection",
    "settle",
    "sync_choice_exclusions",
]
