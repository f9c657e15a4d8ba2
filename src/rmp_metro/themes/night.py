"""Dark theme, close to the in-browser map at night."""

from rmp_metro.render.style import Theme

NIGHT_THEME = Theme(
    name="night",
    background_color="#1e2127",
    station_fill="#ffffff",
    station_stroke="#222222",
    station_radius=4.0,
    station_stroke_width=1.5,
    line_width=3.0,
    label_color="#e0e0e0",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=11.0,
    title_color="#ffffff",
    title_font_size=22.0,
    legend_background="rgba(0, 0, 0, 0.35)",
    legend_text_color="#e0e0e0",
    legend_font_size=13.0,
)
