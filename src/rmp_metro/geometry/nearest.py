"""Nearest-point queries against segments and rings in world space.

Targets are whatever is visible on screen, so a linear scan over every
segment is enough; there is no spatial index.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from rmp_metro.geometry.constants import DEGENERATE_SEGMENT_EPS, SAME_POINT_EPS


class WorldPoint(NamedTuple):
    """A 2D world point. Elevation is supplied by context, never stored."""

    x: float
    z: float


@dataclass(frozen=True)
class GeometryRings:
    """One or more polylines, each open or closed, used as a snapping target."""

    rings: tuple[tuple[WorldPoint, ...], ...] = ()
    closed: tuple[bool, ...] = ()

    def __post_init__(self) -> None:
        if len(self.rings) != len(self.closed):
            raise ValueError(
                f"Got {len(self.rings)} rings but {len(self.closed)} closed flags"
            )

    @classmethod
    def from_coords(
        cls, coords: Sequence[Sequence[float]], closed: bool = False
    ) -> GeometryRings:
        """Single ring from a coordinate list.

        A trailing point repeating the first one is dropped so closed
        rings aren't walked twice over the same wrap-around edge.
        """
        ring = [WorldPoint(float(p[0]), float(p[1])) for p in coords]
        if len(ring) >= 2 and same_point(ring[0], ring[-1]):
            ring.pop()
        return cls(rings=(tuple(ring),), closed=(closed,))


@dataclass(frozen=True)
class SegmentProjection:
    point: WorldPoint
    t: float
    dist: float


@dataclass(frozen=True)
class RingProjection:
    point: WorldPoint
    dist: float
    ring_index: int
    seg_index: int
    t: float


def same_point(a: WorldPoint, b: WorldPoint, eps: float = SAME_POINT_EPS) -> bool:
    return abs(a.x - b.x) <= eps and abs(a.z - b.z) <= eps


def closest_point_on_segment(
    p: WorldPoint, a: WorldPoint, b: WorldPoint
) -> SegmentProjection:
    """Project ``p`` onto segment a-b, clamped to the segment."""
    abx = b.x - a.x
    abz = b.z - a.z
    denom = abx * abx + abz * abz

    if not math.isfinite(denom) or denom <= DEGENERATE_SEGMENT_EPS:
        return SegmentProjection(
            point=WorldPoint(a.x, a.z), t=0.0, dist=math.hypot(p.x - a.x, p.z - a.z)
        )

    t = ((p.x - a.x) * abx + (p.z - a.z) * abz) / denom
    t = min(1.0, max(0.0, t))
    q = WorldPoint(a.x + abx * t, a.z + abz * t)
    return SegmentProjection(point=q, t=t, dist=math.hypot(p.x - q.x, p.z - q.z))


def closest_point_on_rings(
    p: WorldPoint, geometry: GeometryRings
) -> RingProjection | None:
    """Nearest projection of ``p`` over every segment of every ring.

    Open rings have n-1 segments, closed rings add the wrap-around
    segment from the last point back to the first. Returns None when no
    ring has a segment.
    """
    best: RingProjection | None = None

    for r, (ring, closed) in enumerate(zip(geometry.rings, geometry.closed)):
        n = len(ring)
        if n < 2:
            continue
        last_seg = n if closed else n - 1

        for i in range(last_seg):
            cand = closest_point_on_segment(p, ring[i], ring[(i + 1) % n])
            if best is None or cand.dist < best.dist:
                best = RingProjection(
                    point=cand.point, dist=cand.dist, ring_index=r, seg_index=i, t=cand.t
                )

    return best
