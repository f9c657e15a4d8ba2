"""Theme definitions for network previews."""

from rmp_metro.themes.light import LIGHT_THEME
from rmp_metro.themes.night import NIGHT_THEME

THEMES = {
    "night": NIGHT_THEME,
    "light": LIGHT_THEME,
}

__all__ = ["THEMES", "NIGHT_THEME", "LIGHT_THEME"]
