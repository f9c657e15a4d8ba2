"""Drawn features and their coordinate text format.

Coordinates are typed or pasted as ``x,z;x,z;...``. Three-part items
``x,y,z`` are accepted too; the height is dropped since features live
on the flat world plane. Features are written back out as
``<polyline:x,z;x,z>`` with integer coordinates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from rmp_metro.editing.constants import MIN_POINTS
from rmp_metro.geometry.nearest import GeometryRings, WorldPoint


class FeatureMode(Enum):
    POINT = "point"
    POLYLINE = "polyline"
    POLYGON = "polygon"


@dataclass(frozen=True)
class Feature:
    """A point, line or polygon drawn by a contributor."""

    id: int
    mode: FeatureMode
    coords: tuple[WorldPoint, ...]
    color: str = "#3388ff"
    visible: bool = True

    @property
    def editable(self) -> bool:
        """Only lines and polygons have control points to move or insert."""
        return self.mode in (FeatureMode.POLYLINE, FeatureMode.POLYGON)

    def rings(self) -> GeometryRings:
        if not self.editable:
            return GeometryRings()
        return GeometryRings.from_coords(self.coords, closed=self.mode is FeatureMode.POLYGON)


_ITEM_SEPARATOR = re.compile(r"[;\n]")


def parse_coord_list(text: str) -> list[WorldPoint]:
    """Parse ``x,z;x,z`` or ``x,y,z;x,y,z`` text into world points."""
    items = [item.strip() for item in _ITEM_SEPARATOR.split(text.strip())]
    items = [item for item in items if item]
    if not items:
        raise ValueError("No coordinates given; use x,z;x,z or x,y,z;x,y,z")

    coords = []
    for item in items:
        parts = [part.strip() for part in item.split(",")]
        if len(parts) not in (2, 3):
            raise ValueError(
                f"Invalid coordinate {item!r}; use x,z;x,z or x,y,z;x,y,z"
            )
        try:
            values = [float(part) for part in parts]
        except ValueError:
            raise ValueError(f"Invalid coordinate {item!r}: not a number") from None
        # x,y,z -> drop the height
        coords.append(WorldPoint(values[0], values[-1]))
    return coords


def validate_coords(mode: FeatureMode, coords: Sequence[WorldPoint]) -> None:
    """Raise ValueError if ``coords`` can't form a feature of ``mode``."""
    count = len(coords)
    minimum = MIN_POINTS[mode.value]
    if mode is FeatureMode.POINT and count != 1:
        raise ValueError(f"A point takes exactly 1 coordinate, got {count}")
    if count < minimum:
        raise ValueError(f"A {mode.value} needs at least {minimum} coordinates, got {count}")


def format_feature(mode: FeatureMode, coords: Sequence[WorldPoint]) -> str:
    """Render coordinates as ``<mode:x,z;x,z>`` rounded to whole blocks."""
    if not coords:
        return ""
    pts = ";".join(f"{round(p.x)},{round(p.z)}" for p in coords)
    return f"<{mode.value}:{pts}>"


def feature_from_text(
    feature_id: int, mode: FeatureMode, text: str, color: str = "#3388ff"
) -> Feature:
    """Import a feature from coordinate text, checking the count for its mode."""
    coords = parse_coord_list(text)
    validate_coords(mode, coords)
    return Feature(id=feature_id, mode=mode, coords=tuple(coords), color=color)
