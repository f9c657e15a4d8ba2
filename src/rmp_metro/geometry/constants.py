"""Geometry constants used across geometry modules and the line builder."""

# ---------------------------------------------------------------------------
# World coordinates
# ---------------------------------------------------------------------------
DEFAULT_ELEVATION: float = 64.0
"""Y (height) given to every world coordinate produced from a 2D diagram."""

# ---------------------------------------------------------------------------
# Curves
# ---------------------------------------------------------------------------
BEZIER_SAMPLES: int = 10
"""Chords used to approximate the length of a quadratic corner."""

MIN_SEGMENT_LENGTH: float = 0.001
"""Path pieces shorter than this (world units) are not emitted."""

# ---------------------------------------------------------------------------
# Nearest-point queries
# ---------------------------------------------------------------------------
DEGENERATE_SEGMENT_EPS: float = 1e-12
"""Squared length below which a segment is treated as a single point."""

SAME_POINT_EPS: float = 1e-9
"""Per-axis tolerance for two world points being the same point."""
