# model/role.py

"""Roles (parameterized actor classes) and their concrete participants."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Mapping

PARAMETER_TYPES = ("Integer", "String", "Boolean")


@dataclass(frozen=True, slots=True)
class Parameter:
    var: str
    type: str

    def __str__(self) -> str:
        return f"{self.var}:{self.type}"


@dataclass(slots=True)
class Role:
    name: str
    label: str
    parameters: List[Parameter] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)

    def signature(self) -> str:
        """Role declaration line, e.g. ``P(id:Integer; name:String)``."""
        if not self.parameters:
            return self.label
        return f"{self.label}(" + "; ".join(str(p) for p in self.parameters) + ")"

    def participant(self, bindings: Mapping[str, str]) -> str:
        """Render a participant instance, binding every parameter in order.

        Raises:
            KeyError: a parameter has no binding
        """
        if not self.parameters:
            return self.label
        args = ", ".join(f"{p.var}={bindings[p.var]}" for p in self.parameters)
        return f"{self.label}({args})"
