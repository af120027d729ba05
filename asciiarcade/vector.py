"""Integer 2D vectors used for board coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Vector:
    """A point or offset on a board grid: ``x`` is the column, ``y`` the row."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x + other.x, self.y + other.y)

    def to_dict(self) -> dict[str, int]:
        """Return the wire representation of the vector."""
        return {"X": self.x, "Y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Vector:
        """Build a vector from its wire representation; missing keys are zero."""
        return cls(int(data.get("X", 0)), int(data.get("Y", 0)))