"""Edge path shapes between two diagram points.

Every builder works on diagram-space points, then hands each control
point through the region's :class:`CoordTransform` before measuring, so
lengths always come out in world units.

Shapes
------
perpendicular
    Both endpoints are pushed sideways (perpendicular to from -> to) by
    their own offsets and joined with an L. Which leg goes first depends
    on the dominant axis and ``start_from``, giving four possible elbows.
diagonal
    Same offsets, but the two endpoints are joined by straight run,
    45 degree run, straight run, with a rounded corner at each end of
    the diagonal.
simple
    A single straight segment, both ends shifted by the same offset.
straight
    Plain straight segment. Used for unknown curve types and when two
    stations have no edge between them.

Rounded corners are quadratic beziers with the corner itself as the
control point. The reach along each leg is clamped to half the shorter
leg so a corner never overshoots a short run.
"""

from __future__ import annotations

import math

from rmp_metro.geometry.constants import (
    BEZIER_SAMPLES,
    DEFAULT_ELEVATION,
    MIN_SEGMENT_LENGTH,
)
from rmp_metro.geometry.transform import CoordTransform
from rmp_metro.parser.model import (
    CurveConfig,
    DiagonalCurve,
    EdgePath,
    PathSegment,
    PerpendicularCurve,
    SegmentKind,
    SimpleCurve,
    StartFrom,
    StraightCurve,
)

Point = tuple[float, float]


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------


def _normalize(v: Point) -> Point:
    length = math.hypot(v[0], v[1])
    if length > 0:
        return (v[0] / length, v[1] / length)
    return (0.0, 0.0)


def _perpendicular(v: Point) -> Point:
    """Rotate 90 degrees counter-clockwise."""
    return (-v[1], v[0])


def _distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def _shift(p: Point, direction: Point, amount: float) -> Point:
    return (p[0] + direction[0] * amount, p[1] + direction[1] * amount)


def _offset_endpoints(
    start: Point, end: Point, offset_from: float, offset_to: float
) -> tuple[Point, Point]:
    normal = _perpendicular(_normalize((end[0] - start[0], end[1] - start[1])))
    return _shift(start, normal, offset_from), _shift(end, normal, offset_to)


def quadratic_bezier_length(
    p0: Point, p1: Point, p2: Point, samples: int = BEZIER_SAMPLES
) -> float:
    """Approximate a quadratic bezier's length by summing sampled chords."""
    length = 0.0
    prev = p0
    for i in range(1, samples + 1):
        t = i / samples
        mt = 1 - t
        curr = (
            mt * mt * p0[0] + 2 * mt * t * p1[0] + t * t * p2[0],
            mt * mt * p0[1] + 2 * mt * t * p1[1] + t * t * p2[1],
        )
        length += _distance(prev, curr)
        prev = curr
    return length


def round_corner(
    before: Point, corner: Point, after: Point, factor: float
) -> tuple[Point, Point]:
    """Return where the rounded corner leaves the incoming and joins the outgoing leg.

    The corner point itself is the bezier control point.
    """
    reach = min(factor, min(_distance(corner, before), _distance(corner, after)) * 0.5)
    start = _shift(corner, _normalize((before[0] - corner[0], before[1] - corner[1])), reach)
    end = _shift(corner, _normalize((after[0] - corner[0], after[1] - corner[1])), reach)
    return start, end


# ---------------------------------------------------------------------------
# Segment accumulation
# ---------------------------------------------------------------------------


class _PathBuilder:
    """Collects world-space segments and their lengths."""

    def __init__(self, transform: CoordTransform, elevation: float) -> None:
        self.transform = transform
        self.elevation = elevation
        self.segments: list[PathSegment] = []
        self.length = 0.0

    def _world(self, p: Point) -> Point:
        return self.transform.to_world(p[0], p[1])

    def line(self, a: Point, b: Point, keep_empty: bool = False) -> None:
        length = _distance(self._world(a), self._world(b))
        if length <= MIN_SEGMENT_LENGTH and not keep_empty:
            return
        self.segments.append(PathSegment(SegmentKind.LINE, self._coords(a, b)))
        self.length += length

    def quadratic(self, a: Point, control: Point, b: Point) -> None:
        length = quadratic_bezier_length(
            self._world(a), self._world(control), self._world(b)
        )
        if length <= MIN_SEGMENT_LENGTH:
            return
        self.segments.append(
            PathSegment(SegmentKind.QUADRATIC, self._coords(a, control, b))
        )
        self.length += length

    def _coords(self, *points: Point):
        return tuple(
            self.transform.to_coord(p[0], p[1], self.elevation) for p in points
        )

    def build(self) -> EdgePath:
        return EdgePath(tuple(self.segments), self.length)


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


def perpendicular_path(
    start: Point,
    end: Point,
    curve: PerpendicularCurve,
    transform: CoordTransform,
    elevation: float = DEFAULT_ELEVATION,
) -> EdgePath:
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    p1, p2 = _offset_endpoints(start, end, curve.offset_from, curve.offset_to)

    # Starting from the "from" end walks the dominant axis first
    horizontal_first = abs(dx) >= abs(dy)
    if curve.start_from is StartFrom.TO:
        horizontal_first = not horizontal_first
    corner = (p2[0], p1[1]) if horizontal_first else (p1[0], p2[1])

    corner_start, corner_end = round_corner(p1, corner, p2, curve.round_corner_factor)

    builder = _PathBuilder(transform, elevation)
    builder.line(p1, corner_start)
    builder.quadratic(corner_start, corner, corner_end)
    builder.line(corner_end, p2)
    return builder.build()


def diagonal_path(
    start: Point,
    end: Point,
    curve: DiagonalCurve,
    transform: CoordTransform,
    elevation: float = DEFAULT_ELEVATION,
) -> EdgePath:
    p1, p2 = _offset_endpoints(start, end, curve.offset_from, curve.offset_to)

    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    run = min(abs(dx), abs(dy))
    sign_x = math.copysign(1.0, dx) if dx else 1.0
    sign_y = math.copysign(1.0, dy) if dy else 1.0

    # The diagonal sits in the middle of the straight part, measured
    # from whichever end the bend starts at.
    if curve.start_from is StartFrom.FROM:
        mid_x = p1[0] + (dx - sign_x * run) / 2
        corner1 = (mid_x, p1[1])
        corner2 = (mid_x + sign_x * run, p1[1] + sign_y * run)
    else:
        mid_x = p2[0] - (dx - sign_x * run) / 2
        corner2 = (mid_x, p2[1])
        corner1 = (mid_x - sign_x * run, p2[1] - sign_y * run)

    first_start, first_end = round_corner(p1, corner1, corner2, curve.round_corner_factor)
    second_start, second_end = round_corner(
        corner1, corner2, p2, curve.round_corner_factor
    )

    builder = _PathBuilder(transform, elevation)
    builder.line(p1, first_start)
    builder.quadratic(first_start, corner1, first_end)
    builder.line(first_end, second_start)
    builder.quadratic(second_start, corner2, second_end)
    builder.line(second_end, p2)
    return builder.build()


def simple_path(
    start: Point,
    end: Point,
    curve: SimpleCurve,
    transform: CoordTransform,
    elevation: float = DEFAULT_ELEVATION,
) -> EdgePath:
    p1, p2 = _offset_endpoints(start, end, curve.offset, curve.offset)
    builder = _PathBuilder(transform, elevation)
    builder.line(p1, p2, keep_empty=True)
    return builder.build()


def straight_path(
    start: Point,
    end: Point,
    transform: CoordTransform,
    elevation: float = DEFAULT_ELEVATION,
) -> EdgePath:
    builder = _PathBuilder(transform, elevation)
    builder.line(start, end, keep_empty=True)
    return builder.build()


def edge_path(
    start: Point,
    end: Point,
    curve: CurveConfig,
    transform: CoordTransform,
    elevation: float = DEFAULT_ELEVATION,
) -> EdgePath:
    """Build the path for one edge according to its curve variant."""
    if isinstance(curve, PerpendicularCurve):
        return perpendicular_path(start, end, curve, transform, elevation)
    if isinstance(curve, DiagonalCurve):
        return diagonal_path(start, end, curve, transform, elevation)
    if isinstance(curve, SimpleCurve):
        return simple_path(start, end, curve, transform, elevation)
    if isinstance(curve, StraightCurve):
        return straight_path(start, end, transform, elevation)
    raise TypeError(f"Unsupported curve config: {curve!r}")
