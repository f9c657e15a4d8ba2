"""Legend generation for network previews."""

from __future__ import annotations

import drawsvg as draw

from rmp_metro.parser.model import ParsedLine
from rmp_metro.render.constants import (
    LEGEND_BORDER_RADIUS,
    LEGEND_CHAR_WIDTH_RATIO,
    LEGEND_LINE_HEIGHT,
    LEGEND_PADDING,
    LEGEND_SWATCH_WIDTH,
    LEGEND_TEXT_GAP,
)
from rmp_metro.render.style import Theme


def compute_legend_dimensions(
    lines: tuple[ParsedLine, ...], theme: Theme
) -> tuple[float, float]:
    """Width and height of the legend box, (0, 0) when there are no lines."""
    if not lines:
        return (0.0, 0.0)

    text_offset = LEGEND_SWATCH_WIDTH + LEGEND_TEXT_GAP
    max_name_len = max(len(line.name) for line in lines)
    char_width = theme.legend_font_size * LEGEND_CHAR_WIDTH_RATIO

    width = LEGEND_PADDING * 2 + text_offset + max_name_len * char_width
    height = LEGEND_PADDING * 2 + len(lines) * LEGEND_LINE_HEIGHT
    return (width, height)


def render_legend(
    drawing: draw.Drawing,
    lines: tuple[ParsedLine, ...],
    theme: Theme,
    x: float,
    y: float,
) -> None:
    """Render one swatch and name per line, drawing downward from (x, y)."""
    if not lines:
        return

    legend_width, legend_height = compute_legend_dimensions(lines, theme)
    drawing.append(
        draw.Rectangle(
            x,
            y,
            legend_width,
            legend_height,
            rx=LEGEND_BORDER_RADIUS,
            ry=LEGEND_BORDER_RADIUS,
            fill=theme.legend_background,
        )
    )

    text_offset = LEGEND_SWATCH_WIDTH + LEGEND_TEXT_GAP
    for i, line in enumerate(lines):
        entry_y = y + LEGEND_PADDING + i * LEGEND_LINE_HEIGHT + LEGEND_LINE_HEIGHT / 2

        drawing.append(
            draw.Line(
                x + LEGEND_PADDING,
                entry_y,
                x + LEGEND_PADDING + LEGEND_SWATCH_WIDTH,
                entry_y,
                stroke=line.color,
                stroke_width=theme.line_width,
                stroke_linecap="round",
            )
        )
        drawing.append(
            draw.Text(
                line.name,
                theme.legend_font_size,
                x + LEGEND_PADDING + text_offset,
                entry_y,
                fill=theme.legend_text_color,
                font_family=theme.label_font_family,
                dominant_baseline="central",
            )
        )
