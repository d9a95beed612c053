from collections import namedtuple

Theme = namedtuple("Theme", "name primary secondary accent background dim alert")

THEMES = [
    Theme("STARK",       "#00F0FF", "#0077BE", "#FF5F1F", "#1A1A1A", "#444444", "#FF4444"),
    Theme("ARC REACTOR", "#00D9FF", "#0099FF", "#FFFFFF", "#0A0A1A", "#334466", "#00FFFF"),
    Theme("STEALTH",     "#00FF00", "#006600", "#88FF88", "#0A0A0A", "#223322", "#FFFF00"),
    Theme("NEON CITY",   "#FF00FF", "#9B59B6", "#00FFFF", "#1A0A1A", "#442244", "#FF0099"),
    Theme("WAR MACHINE", "#C0C0C0", "#808080", "#FF0000", "#0A0A0A", "#404040", "#FF3333"),
    Theme("RESCUE",      "#FFD700", "#FFA500", "#FFFFFF", "#1A1410", "#665533", "#FF6600"),
]

# Fixed palette used outside the theme system
CYAN = "#00F0FF"
BLUE = "#0077BE"
ORANGE = "#FF5F1F"
DARK = "#1A1A1A"
DIM = "#444444"
NORD_GREEN = "#A3BE8C"
NORD_TEAL = "#8FBCBB"
ALERT_RED = "#FF4444"
ALERT_YELLOW = "#FFD700"
ALERT_GREEN = "#44FF44"
PULSE_PURPLE = "#9B59B6"
GRID_COLOR = "#004444"

def theme_names():
    return [t.name for t in THEMES]

def theme_index(name):
    """Index of a theme by (case-insensitive) name, 0 when unknown."""
    for i, t in enumerate(THEMES):
        if t.name.lower() == str(name).lower():
            return i
    return 0
