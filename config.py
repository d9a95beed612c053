import os
import json
import sys
from log import *

CONFIG_PATH = "./hud_config.json"
LOG_LIMIT = 50
STATS_REFRESH_TICKS = 10

TICK_MS = 200
FRAME_MS = 50
LOG_MIN_DELAY_MS = 200
LOG_MAX_DELAY_MS = 1200

TITLE = "STARK INDUSTRIES INTERFACE"
MODES = ["FLIGHT", "COMBAT", "STEALTH", "ANALYSIS", "NAVIGATION"]
ALERTS = [
    "DETECTING HOSTILES",
    "ENERGY SPIKE",
    "INCOMING MISSILE",
    "TARGET LOCKED",
    "SYSTEM WARNING",
]
LOG_LINES = [
    "Repulsor calibration complete",
    "Targeting array locked",
    "Scanning spectral analysis",
    "Flight systems check: PASS",
    "Incoming transmission blocked",
    "Auxiliary power rerouted",
    "Nanite density: 98%",
    "Weather pattern analyzing...",
]

PREF_DEFAULTS = {
    "theme": "STARK",
    "tick_ms": TICK_MS,
    "frame_ms": FRAME_MS,
    "seed": None,
    "show_sound_wave": True,
}

LAYOUT_DEFAULTS = {
    "col_margin": 4,     # per-panel margin subtracted from width // 3
    "cell_margin": 2,    # rain box border
    "row_margin": 14,    # reactor + radar + headers above the rain
}

def load_config(path=None):
    path = path or CONFIG_PATH
    if not os.path.exists(path):
        config = {}
    else:
        with open(path, "r", encoding="utf-8") as f:
            try:
                config = json.load(f)
            except json.JSONDecodeError:
                log(f"[bold red]ERROR[/] {path} is corrupted!")
                sys.exit(-1)

    modified = False
    for section, defaults in (("preferences", PREF_DEFAULTS), ("layout", LAYOUT_DEFAULTS)):
        if section not in config:
            config[section] = {}
            modified = True
        for key, val in defaults.items():
            if key not in config[section]:
                config[section][key] = val
                modified = True

    if modified:
        save_config(config, path)

    return config

def save_config(config, path=None):
    path = path or CONFIG_PATH
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, ensure_ascii=False, indent=4)
    except OSError as e:
        log(f"[red]Failed to save config: {e}[/]")
