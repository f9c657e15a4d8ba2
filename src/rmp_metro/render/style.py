"""Theme and style constants for network previews."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Theme:
    """Visual theme for a rendered network."""

    name: str
    background_color: str
    station_fill: str
    station_stroke: str
    station_radius: float
    station_stroke_width: float
    line_width: float
    label_color: str
    label_font_family: str
    label_font_size: float
    title_color: str
    title_font_size: float
    legend_background: str
    legend_text_color: str
    legend_font_size: float
    # Transfer stations are drawn larger
    transfer_radius_scale: float = 1.5
