# model/shapes.py

"""
Value-shape descriptors carried by input events.

An input event receives either nothing (Unit), a single primitive value, or a
record of named, typed fields. The textual form is the one used in generated
code: ``?``, ``?:Integer`` or ``?:{size:Integer; name:String}``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Tuple

UNIT = "Unit"
RECORD = "Record"
PRIMITIVE_TYPES = ("Integer", "String", "Boolean")


@dataclass(frozen=True, slots=True)
class Field:
    var: str
    type: str

    def __str__(self) -> str:
        return f"{self.var}:{self.type}"


@dataclass(frozen=True, slots=True)
class InputShape:
    type: str = UNIT
    record: Tuple[Field, ...] = field(default_factory=tuple)

    @classmethod
    def unit(cls) -> InputShape:
        return cls(UNIT)

    @classmethod
    def primitive(cls, type_name: str) -> InputShape:
        if type_name == UNIT:
            return cls.unit()
        return cls(type_name)

    @classmethod
    def of_record(cls, fields: Iterable[Field]) -> InputShape:
        return cls(RECORD, tuple(fields))

    @property
    def is_unit(self) -> bool:
        return self.type == UNIT

    @property
    def is_record(self) -> bool:
        return self.type == RECORD

    def render(self) -> str:
        """Render the shape as a value clause: ``?``, ``?:T`` or ``?:{v:T; ...}``."""
        if self.is_unit:
            return "?"
        if self.is_record:
            return "?:{" + "; ".join(str(f) for f in self.record) + "}"
        return f"?:{self.type}"

    def to_dict(self) -> Dict[str, Any]:
        if self.is_record:
            return {
                "type": RECORD,
                "record": [{"var": f.var, "type": f.type} for f in self.record],
            }
        return {"type": self.type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> InputShape:
        type_name = data.get("type", UNIT)
        if type_name == RECORD:
            return cls.of_record(Field(f["var"], f["type"]) for f in data.get("record", []))
        return cls.primitive(type_name)

    def __str__(self) -> str:
        return self.render()
