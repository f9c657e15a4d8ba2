"""SVG preview rendering for built networks."""

from rmp_metro.render.svg import render_network

__all__ = ["render_network"]
