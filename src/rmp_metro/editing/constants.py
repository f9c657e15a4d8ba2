"""Editing-tool constants."""

SNAP_MAX_DIST: float = 20.0
"""Default snap threshold in world units, shared by every snap consumer."""

MIN_POINTS: dict[str, int] = {
    "point": 1,
    "polyline": 2,
    "polygon": 3,
}
"""Minimum coordinate count per feature mode (points take exactly one)."""
