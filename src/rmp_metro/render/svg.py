"""SVG preview of a built network using drawsvg.

The preview is drawn on the world plane: world x runs right and world z
runs down, matching the in-game map. No scaling is applied.
"""

from __future__ import annotations

import drawsvg as draw

from rmp_metro.parser.model import ParsedLine, RailNetwork, SegmentKind, WorldCoord
from rmp_metro.render.constants import (
    CANVAS_PADDING,
    LABEL_OFFSET,
    LEGEND_GAP,
    TITLE_HEIGHT,
)
from rmp_metro.render.legend import compute_legend_dimensions, render_legend
from rmp_metro.render.style import Theme

EMPTY_SVG = '<svg xmlns="http://www.w3.org/2000/svg"></svg>'


def render_network(
    network: RailNetwork,
    theme: Theme,
    width: int | None = None,
    height: int | None = None,
    title: str = "",
    padding: float = CANVAS_PADDING,
) -> str:
    """Render a built network to an SVG string."""
    coords = _all_coords(network)
    if not coords:
        return EMPTY_SVG

    min_x = min(c.x for c in coords)
    min_z = min(c.z for c in coords)
    max_x = max(c.x for c in coords)
    max_z = max(c.z for c in coords)

    top = padding + (TITLE_HEIGHT if title else 0.0)

    def project(c: WorldCoord) -> tuple[float, float]:
        return (c.x - min_x + padding, c.z - min_z + top)

    legend_w, legend_h = compute_legend_dimensions(network.lines, theme)
    legend_y = max_z - min_z + top + LEGEND_GAP

    auto_width = max(max_x - min_x + padding * 2, legend_w + padding * 2)
    auto_height = legend_y + legend_h + padding

    svg_width = width or int(auto_width)
    svg_height = height or int(auto_height)

    d = draw.Drawing(svg_width, svg_height)
    d.append(draw.Rectangle(0, 0, svg_width, svg_height, fill=theme.background_color))

    if title:
        d.append(draw.Text(
            title,
            theme.title_font_size,
            padding, padding / 2 + TITLE_HEIGHT / 2,
            fill=theme.title_color,
            font_family=theme.label_font_family,
            font_weight="bold",
        ))

    # Lines behind stations
    for line in network.lines:
        _render_line(d, line, project, theme)

    _render_stations(d, network, project, theme)
    render_legend(d, network.lines, theme, padding, legend_y)

    return d.as_svg()


def _all_coords(network: RailNetwork) -> list[WorldCoord]:
    coords = [s.coord for s in network.stations]
    for line in network.lines:
        for path in line.edge_paths:
            for seg in path.segments:
                coords.extend(seg.points)
    return coords


def _render_line(d: draw.Drawing, line: ParsedLine, project, theme: Theme) -> None:
    for edge_path in line.edge_paths:
        if not edge_path.segments:
            continue
        path = draw.Path(
            stroke=line.color,
            stroke_width=theme.line_width,
            fill="none",
            stroke_linecap="round",
            stroke_linejoin="round",
        )
        path.M(*project(edge_path.segments[0].points[0]))
        for seg in edge_path.segments:
            if seg.kind is SegmentKind.QUADRATIC:
                _start, control, end = seg.points
                path.Q(*project(control), *project(end))
            else:
                path.L(*project(seg.points[-1]))
        d.append(path)


def _render_stations(d: draw.Drawing, network: RailNetwork, project, theme: Theme) -> None:
    for station in network.stations:
        x, y = project(station.coord)
        r = theme.station_radius
        if station.is_transfer:
            r *= theme.transfer_radius_scale
        d.append(draw.Circle(
            x, y, r,
            fill=theme.station_fill,
            stroke=theme.station_stroke,
            stroke_width=theme.station_stroke_width,
        ))
        d.append(draw.Text(
            station.name,
            theme.label_font_size,
            x, y - r - LABEL_OFFSET,
            fill=theme.label_color,
            font_family=theme.label_font_family,
            text_anchor="middle",
        ))
