# model/id_pool.py

"""
Per-kind identifier pools.

Identifiers are a fixed prefix plus a number (``e3``, ``n0``, ``s1``). A pool
hands out the smallest released number first and otherwise continues the
monotonic counter. Released numbers live in a min-heap.
"""

from __future__ import annotations
import heapq
from dataclasses import dataclass, field
from typing import Iterable, List


@dataclass(slots=True)
class IdPool:
    prefix: str
    next_number: int = 0
    _free: List[int] = field(default_factory=list)

    @classmethod
    def from_used(cls, prefix: str, used: Iterable[int]) -> IdPool:
        """Rebuild a pool from the numbers already in use; gaps become free."""
        taken = set(used)
        top = max(taken) + 1 if taken else 0
        pool = cls(prefix, top)
        pool._free = [n for n in range(top) if n not in taken]
        heapq.heapify(pool._free)
        return pool

    def owns(self, ident: str) -> bool:
        rest = ident[len(self.prefix):]
        return ident.startswith(self.prefix) and rest.isdigit()

    def number(self, ident: str) -> int:
        if not self.owns(ident):
            raise ValueError(f"'{ident}' is not a '{self.prefix}' identifier")
        return int(ident[len(self.prefix):])

    def allocate(self) -> str:
        if self._free:
            n = heapq.heappop(self._free)
        else:
            n = self.next_number
            self.next_number += 1
        return f"{self.prefix}{n}"

    def release(self, ident: str) -> None:
        n = self.number(ident)
        # Never handed out, or already back in the pool.
        if n >= self.next_number or n in self._free:
            return
        heapq.heappush(self._free, n)

    def pending(self) -> List[int]:
        """Numbers the next allocations will use, smallest first, ending at the counter."""
        return sorted(self._free) + [self.next_number]
