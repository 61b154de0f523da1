# model/marking.py

"""
Per-node DCR marking.

``included`` and ``pending`` are persistent and belong to the committed model.
``executable`` and ``executed`` are transient: they are only meaningful on the
simulation copy and are re-derived every time a run starts.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict


@dataclass(slots=True)
class Marking:
    included: bool = True
    pending: bool = False
    executable: bool = False
    executed: bool = False

    def persistent(self) -> Marking:
        """Return a copy stripped of transient run state."""
        return Marking(self.included, self.pending)

    def to_dict(self, transient: bool = False) -> Dict[str, bool]:
        data = {"included": self.included, "pending": self.pending}
        if transient:
            data["executable"] = self.executable
            data["executed"] = self.executed
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, bool]) -> Marking:
        return cls(bool(data.get("included", True)), bool(data.get("pending", False)))

    def __str__(self) -> str:
        flags = [
            "included" if self.included else "excluded",
            "pending" if self.pending else "",
            "executable" if self.executable else "",
            "executed" if self.executed else "",
        ]
        return "{" + ", ".join(f for f in flags if f) + "}"
