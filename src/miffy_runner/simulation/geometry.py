"""Axis-aligned rectangles and the overlap test used for every hit check."""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box, origin at the top-left, y grows downward."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def inset(self, left: float, top: float, shrink_w: float, shrink_h: float) -> "Rect":
        """Move the origin by (left, top) and shrink the size."""
        return Rect(self.x + left, self.y + top, self.width - shrink_w, self.height - shrink_h)


def boxes_collide(a: Rect, b: Rect) -> bool:
    """Strict overlap: boxes that only share an edge do not collide."""
    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


def union(rects: Iterable[Rect]) -> Rect:
    """Smallest rectangle containing every input rectangle."""
    rects = list(rects)
    if not rects:
        raise ValueError("union() needs at least one rectangle")
    left = min(r.x for r in rects)
    top = min(r.y for r in rects)
    right = max(r.right for r in rects)
    bottom = max(r.bottom for r in rects)
    return Rect(left, top, right - left, bottom - top)
