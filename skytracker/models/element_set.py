# skytracker/models/element_set.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OrbitalElementSet:
    """
    One named two-line element set, exactly as read from the source text.
    Holding one does not mean it propagates: validation happens when the
    propagator builds its state.
    """
    name: str
    line1: str
    line2: str

    @property
    def catalog_number(self) -> Optional[int]:
        try:
            return int(self.line1[2:7])
        except ValueError:
            return None

    def as_text(self) -> str:
        return "\n".join((self.name, self.line1, self.line2))
