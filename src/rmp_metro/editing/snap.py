"""Snapping world points onto a target.

A target is either a set of rings (a picked line or polygon) or an
infinite axis-aligned line. Whether a candidate point gets corrected is
decided by a :class:`SnapPolicy`, passed explicitly to every call so
tools can share one policy (and so one threshold) or hold their own.

A miss is an ordinary result, not an error: the returned point is the
candidate unchanged and ``accepted`` is False. Callers decide whether
that blocks the action or lets the raw point through.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from rmp_metro.editing.constants import SNAP_MAX_DIST
from rmp_metro.geometry.nearest import GeometryRings, WorldPoint, closest_point_on_rings

# Optional minus sign, ASCII digits only
_INTEGER = re.compile(r"-?[0-9]+")


class Axis(Enum):
    X = "x"
    Z = "z"


@dataclass(frozen=True)
class SnapPolicy:
    """Maximum distance (world units) at which a point may be corrected."""

    threshold: float = SNAP_MAX_DIST

    def __post_init__(self) -> None:
        if not math.isfinite(self.threshold) or self.threshold < 0:
            raise ValueError(
                f"Snap threshold must be a number >= 0, got {self.threshold!r}"
            )

    @classmethod
    def parse(cls, raw: str) -> SnapPolicy:
        """Policy from user text input."""
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Snap threshold must be a number >= 0, got {raw!r}") from None
        return cls(threshold=value)

    def accepts(self, distance: float) -> bool:
        return distance <= self.threshold


@dataclass(frozen=True)
class RingTarget:
    geometry: GeometryRings
    label: str = ""


@dataclass(frozen=True)
class AxisLineTarget:
    """The infinite line ``axis = value``."""

    axis: Axis
    value: float
    label: str = ""

    @classmethod
    def from_input(cls, axis: str | Axis, raw: str) -> AxisLineTarget:
        """Fixed line from user input. Only integer coordinates are allowed."""
        try:
            axis = Axis(axis)
        except ValueError:
            raise ValueError(f"Unknown axis {axis!r}, expected 'x' or 'z'") from None
        text = str(raw).strip()
        if not _INTEGER.fullmatch(text):
            raise ValueError(f"Fixed line coordinate must be an integer, got {raw!r}")
        value = int(text)
        return cls(axis=axis, value=value, label=f"{axis.value} = {value}")


SnapTarget = Union[RingTarget, AxisLineTarget]


@dataclass(frozen=True)
class SnapResult:
    point: WorldPoint
    accepted: bool
    distance: float | None = None
    target_label: str | None = None


@dataclass(frozen=True)
class Insertion:
    """Coordinates after inserting ``point`` at ``index``."""

    coords: tuple[WorldPoint, ...]
    index: int
    point: WorldPoint
    distance: float


def snap_to_rings(
    p: WorldPoint,
    geometry: GeometryRings,
    policy: SnapPolicy,
    label: str | None = None,
) -> SnapResult:
    """Project onto the nearest ring segment if it is within the threshold."""
    best = closest_point_on_rings(p, geometry)
    if best is None:
        return SnapResult(point=p, accepted=False, distance=None, target_label=label)
    if not policy.accepts(best.dist):
        return SnapResult(point=p, accepted=False, distance=best.dist, target_label=label)
    return SnapResult(point=best.point, accepted=True, distance=best.dist, target_label=label)


def snap_to_axis(
    p: WorldPoint,
    axis: Axis,
    value: float,
    policy: SnapPolicy,
    label: str | None = None,
) -> SnapResult:
    """Replace the coordinate on ``axis`` with ``value`` when close enough.

    The other coordinate is left alone; this is not a projection.
    """
    distance = abs(p.x - value) if axis is Axis.X else abs(p.z - value)
    if not policy.accepts(distance):
        return SnapResult(point=p, accepted=False, distance=distance, target_label=label)
    snapped = WorldPoint(value, p.z) if axis is Axis.X else WorldPoint(p.x, value)
    return SnapResult(point=snapped, accepted=True, distance=distance, target_label=label)


def snap_point(
    p: WorldPoint, target: SnapTarget | None, policy: SnapPolicy
) -> SnapResult:
    """Snap ``p`` onto whatever kind of target is active."""
    if target is None:
        return SnapResult(point=p, accepted=False)
    if isinstance(target, AxisLineTarget):
        return snap_to_axis(p, target.axis, target.value, policy, target.label)
    if isinstance(target, RingTarget):
        return snap_to_rings(p, target.geometry, policy, target.label)
    raise TypeError(f"Unsupported snap target: {target!r}")


def insert_point(
    coords: Sequence[Sequence[float]],
    click: WorldPoint,
    closed: bool,
    policy: SnapPolicy,
) -> Insertion | None:
    """Insert the click's projection into a polyline or polygon.

    The new point goes right after the start of the nearest segment. On a
    closed ring the wrap-around segment (last -> first) appends at the
    end. Returns None when the click is beyond the threshold or the ring
    has no segment.
    """
    geometry = GeometryRings.from_coords(coords, closed=closed)
    ring = geometry.rings[0]
    n = len(ring)
    if n < 2:
        return None

    best = closest_point_on_rings(click, geometry)
    if best is None or not policy.accepts(best.dist):
        return None

    if closed and best.seg_index >= n - 1:
        index = n
    else:
        index = min(best.seg_index + 1, n)

    new_coords = ring[:index] + (best.point,) + ring[index:]
    return Insertion(coords=new_coords, index=index, point=best.point, distance=best.dist)
