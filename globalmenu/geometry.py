"""Integer screen geometry and the display rectangle exchanged on the bus."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

_INT16 = (-(2**15), 2**15 - 1)
_UINT16 = (0, 2**16 - 1)


def _round(value: float) -> int:
    """Round half up, the way integer screen coordinates are rounded."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class Point:
    """A point in integer screen coordinates."""

    x: int = 0
    y: int = 0

    def scaled(self, factor: float) -> Point:
        """Return the point with both coordinates multiplied by ``factor`` and rounded."""
        return Point(_round(self.x * factor), _round(self.y * factor))


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle whose right and bottom edges are inclusive."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width - 1

    @property
    def bottom(self) -> int:
        return self.y + self.height - 1

    def is_null(self) -> bool:
        """True when both width and height are zero."""
        return self.width == 0 and self.height == 0

    def center(self) -> Point:
        """The centre point, halves truncated towards zero."""
        return Point(
            int((self.left + self.right) / 2),
            int((self.top + self.bottom) / 2),
        )

    def contains(self, point: Point) -> bool:
        """True when ``point`` lies inside the rectangle or on its edge."""
        left, right = self.left, self.right
        if right < left - 1:
            left, right = right, left
        if point.x < left or point.x > right:
            return False
        top, bottom = self.top, self.bottom
        if bottom < top - 1:
            top, bottom = bottom, top
        return top <= point.y <= bottom


def _check_range(name: str, value: Any, bounds: tuple[int, int]) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{name} must lie in [{low}, {high}], got {value}")


@dataclass(frozen=True)
class DisplayRect:
    """The primary display rectangle as reported by the display service."""

    SIGNATURE = "(nnqq)"

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        _check_range("x", self.x, _INT16)
        _check_range("y", self.y, _INT16)
        _check_range("width", self.width, _UINT16)
        _check_range("height", self.height, _UINT16)

    def __str__(self) -> str:
        return f"x: {self.x} y: {self.y} width: {self.width} height: {self.height}"

    def to_rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def to_dbus(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def from_dbus(cls, value: Any) -> DisplayRect:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise TypeError(f"display rect must be a sequence, got {value!r}")
        if len(value) != 4:
            raise ValueError(f"display rect needs 4 fields, got {len(value)}")
        x, y, width, height = value
        return cls(x, y, width, height)