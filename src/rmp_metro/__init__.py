"""rmp-metro: Turn Rail Map Painter diagrams into world-space metro lines."""

__version__ = "0.1.0"
