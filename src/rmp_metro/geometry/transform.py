"""Diagram space to world space.

RMP diagrams are drawn in their own 2D plane. Each world (region) maps
that plane onto in-world X/Z with the same affine family::

    world_x = (x * scale + offset) * multiplier
    world_z = (y * scale + offset) * multiplier

Height is not part of the diagram; callers supply it.
"""

from __future__ import annotations

from dataclasses import dataclass

from rmp_metro.geometry.constants import DEFAULT_ELEVATION
from rmp_metro.parser.model import WorldCoord


@dataclass(frozen=True)
class CoordTransform:
    scale: float = 1.0
    offset: float = 0.0
    multiplier: float = 1.0

    def to_world(self, x: float, y: float) -> tuple[float, float]:
        """Return ``(world_x, world_z)`` for a diagram point."""
        return (
            (x * self.scale + self.offset) * self.multiplier,
            (y * self.scale + self.offset) * self.multiplier,
        )

    def to_coord(
        self, x: float, y: float, elevation: float = DEFAULT_ELEVATION
    ) -> WorldCoord:
        wx, wz = self.to_world(x, y)
        return WorldCoord(wx, elevation, wz)


WORLD_COORD_CONFIGS: dict[str, CoordTransform] = {
    "zth": CoordTransform(scale=1.0, offset=0.05, multiplier=10.0),
    "houtu": CoordTransform(scale=1.0, offset=0.0, multiplier=4.0),
}

DEFAULT_COORD_CONFIG: CoordTransform = WORLD_COORD_CONFIGS["zth"]


def world_config(region: str | None) -> CoordTransform:
    """Look up a region's transform, falling back to the default."""
    if region is None:
        return DEFAULT_COORD_CONFIG
    return WORLD_COORD_CONFIGS.get(region, DEFAULT_COORD_CONFIG)


def to_world(
    x: float, y: float, config: CoordTransform | None = None
) -> tuple[float, float]:
    return (config or DEFAULT_COORD_CONFIG).to_world(x, y)
