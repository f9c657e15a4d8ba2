"""Editing subpackage: snapping, drawn features and the snap tools.

Public API:
- SnapPolicy / snap_point / insert_point: snapping primitives
- AssistLineTool / ControlPointTool / draw_point: tool instances
- parse_coord_list / format_feature: coordinate text import/export
"""

from rmp_metro.editing.features import (
    Feature,
    FeatureMode,
    format_feature,
    parse_coord_list,
    validate_coords,
)
from rmp_metro.editing.snap import (
    Axis,
    AxisLineTarget,
    RingTarget,
    SnapPolicy,
    SnapResult,
    insert_point,
    snap_point,
)
from rmp_metro.editing.tools import AssistLineTool, ControlPointTool, draw_point

__all__ = [
    "AssistLineTool",
    "Axis",
    "AxisLineTarget",
    "ControlPointTool",
    "Feature",
    "FeatureMode",
    "RingTarget",
    "SnapPolicy",
    "SnapResult",
    "draw_point",
    "format_feature",
    "insert_point",
    "parse_coord_list",
    "snap_point",
    "validate_coords",
]
