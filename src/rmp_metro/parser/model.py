"""Data model for RMP diagrams and the metro lines built from them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union


class NodeKind(Enum):
    """What a diagram node stands for."""

    STATION = "station"
    TRANSFER = "transfer"
    BADGE = "badge"
    WAYPOINT = "waypoint"


class StartFrom(Enum):
    """Which endpoint an elbowed edge starts its bend from."""

    FROM = "from"
    TO = "to"

    def flipped(self) -> StartFrom:
        return StartFrom.TO if self is StartFrom.FROM else StartFrom.FROM


class SegmentKind(Enum):
    LINE = "line"
    QUADRATIC = "quadratic"


# ---------------------------------------------------------------------------
# Diagram input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiagramNode:
    """A node of the RMP graph, in diagram space."""

    key: str
    x: float
    y: float
    kind: NodeKind = NodeKind.WAYPOINT
    type_tag: str = ""
    names: tuple[str, ...] = ()
    # Only set on line badges
    color: str | None = None

    @property
    def name(self) -> str | None:
        return self.names[0] if self.names else None

    @property
    def is_station(self) -> bool:
        return self.kind in (NodeKind.STATION, NodeKind.TRANSFER)


@dataclass(frozen=True)
class PerpendicularCurve:
    """L-shaped edge with one rounded elbow."""

    start_from: StartFrom = StartFrom.FROM
    offset_from: float = 0.0
    offset_to: float = 0.0
    round_corner_factor: float = 0.0

    def reversed(self) -> PerpendicularCurve:
        return replace(self, start_from=self.start_from.flipped())


@dataclass(frozen=True)
class DiagonalCurve:
    """Edge with a 45 degree run between two rounded corners."""

    start_from: StartFrom = StartFrom.FROM
    offset_from: float = 0.0
    offset_to: float = 0.0
    round_corner_factor: float = 0.0

    def reversed(self) -> DiagonalCurve:
        return replace(self, start_from=self.start_from.flipped())


@dataclass(frozen=True)
class SimpleCurve:
    """Straight edge shifted sideways by a single offset."""

    offset: float = 0.0

    def reversed(self) -> SimpleCurve:
        return self


@dataclass(frozen=True)
class StraightCurve:
    """Fallback for curve types we don't understand."""

    type_tag: str = ""

    def reversed(self) -> StraightCurve:
        return self


CurveConfig = Union[PerpendicularCurve, DiagonalCurve, SimpleCurve, StraightCurve]


@dataclass(frozen=True)
class DiagramEdge:
    """An edge of the RMP graph. The color decides which line it belongs to."""

    key: str
    source: str
    target: str
    color: str
    curve: CurveConfig = field(default_factory=StraightCurve)
    visible: bool = True


@dataclass(frozen=True)
class DiagramDocument:
    """A decoded RMP export."""

    nodes: tuple[DiagramNode, ...] = ()
    edges: tuple[DiagramEdge, ...] = ()
    version: str = ""


# ---------------------------------------------------------------------------
# Built output (world space)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorldCoord:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class PathSegment:
    """A straight (2 points) or quadratic bezier (3 points) piece of a path."""

    kind: SegmentKind
    points: tuple[WorldCoord, ...]


@dataclass(frozen=True)
class EdgePath:
    """World-space geometry between two consecutive stations."""

    segments: tuple[PathSegment, ...] = ()
    length: float = 0.0

    def __add__(self, other: EdgePath) -> EdgePath:
        return EdgePath(self.segments + other.segments, self.length + other.length)


@dataclass(frozen=True)
class ParsedStation:
    """A station as seen by one line. ``index`` is 1-based within that line."""

    name: str
    coord: WorldCoord
    index: int
    is_transfer: bool = False
    lines: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedLine:
    id: str
    name: str
    color: str
    stations: tuple[ParsedStation, ...] = ()
    # edge_paths[i] runs from stations[i] to stations[i + 1]
    edge_paths: tuple[EdgePath, ...] = ()

    @property
    def length(self) -> float:
        return sum(path.length for path in self.edge_paths)


@dataclass(frozen=True)
class RailNetwork:
    """All lines built from one document, plus one merged record per station name."""

    lines: tuple[ParsedLine, ...] = ()
    stations: tuple[ParsedStation, ...] = ()

    def line_by_name(self, name: str) -> ParsedLine | None:
        for line in self.lines:
            if line.name == name:
                return line
        return None

    def station(self, name: str) -> ParsedStation | None:
        for station in self.stations:
            if station.name == name:
                return station
        return None

    def to_dict(self) -> dict:
        """Plain JSON-ready form, consumed by the renderer and search collaborators."""
        return {
            "lines": [
                {
                    "id": line.id,
                    "name": line.name,
                    "color": line.color,
                    "stations": [_station_dict(s) for s in line.stations],
                    "edgePaths": [
                        {
                            "length": path.length,
                            "segments": [
                                {
                                    "type": seg.kind.value,
                                    "points": [[p.x, p.y, p.z] for p in seg.points],
                                }
                                for seg in path.segments
                            ],
                        }
                        for path in line.edge_paths
                    ],
                }
                for line in self.lines
            ],
            "stations": [_station_dict(s) for s in self.stations],
        }


def _station_dict(station: ParsedStation) -> dict:
    return {
        "name": station.name,
        "coord": {"x": station.coord.x, "y": station.coord.y, "z": station.coord.z},
        "index": station.index,
        "isTransfer": station.is_transfer,
        "lines": list(station.lines),
    }
