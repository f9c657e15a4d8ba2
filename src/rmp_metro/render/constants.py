"""Render constants used across render modules.

Theme-dependent values remain in style.py.
"""

# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------
CANVAS_PADDING: float = 60.0
"""Default padding around the drawn network."""

TITLE_HEIGHT: float = 40.0
"""Space reserved above the network when a title is drawn."""

LEGEND_GAP: float = 30.0
"""Gap between the network and the legend below it."""

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
LABEL_OFFSET: float = 8.0
"""Distance from the station circle to its name label."""

# ---------------------------------------------------------------------------
# Legend
# ---------------------------------------------------------------------------
LEGEND_LINE_HEIGHT: float = 24.0
"""Vertical height per line entry in legend."""

LEGEND_PADDING: float = 12.0
"""Internal padding of legend box."""

LEGEND_SWATCH_WIDTH: float = 24.0
"""Width of color swatch line in legend."""

LEGEND_TEXT_GAP: float = 12.0
"""Gap between swatch end and label text."""

LEGEND_CHAR_WIDTH_RATIO: float = 0.6
"""Approximate character width as a fraction of the legend font size."""

LEGEND_BORDER_RADIUS: float = 6.0
"""Corner radius of the legend box."""
