"""Geometry subpackage: coordinate transform, edge curves and nearest-point queries.

Public API:
- CoordTransform / world_config: diagram -> world mapping per region
- edge_path: path for one diagram edge
- closest_point_on_segment / closest_point_on_rings: nearest-point queries
"""

from rmp_metro.geometry.curves import edge_path, straight_path
from rmp_metro.geometry.nearest import (
    GeometryRings,
    WorldPoint,
    closest_point_on_rings,
    closest_point_on_segment,
)
from rmp_metro.geometry.transform import CoordTransform, to_world, world_config

__all__ = [
    "CoordTransform",
    "GeometryRings",
    "WorldPoint",
    "closest_point_on_rings",
    "closest_point_on_segment",
    "edge_path",
    "straight_path",
    "to_world",
    "world_config",
]
