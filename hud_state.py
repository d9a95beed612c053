import random
from config import MODES, ALERTS
from themes import THEMES

RESONANCE_LEN = 20
AUDIO_BANDS = 16
GLITCH_PERIOD = 50
MODE_PERIOD = 200
ALERT_CLEAR_PERIOD = 25
ALERT_CHANCE = 0.005

class HudState:
    """
    Cosmetic animation state plus the key-driven flags.

    Nothing here touches the rain grid; the runner feeds both from the same tick.
    """
    def __init__(self, rng=None, theme=0, show_sound_wave=True):
        self.rng = rng if rng is not None else random.Random()

        # flags
        self.paused = False
        self.show_help = False
        self.current_theme = theme % len(THEMES)
        self.show_sound_wave = show_sound_wave

        # animation
        self.tick_count = 0
        self.arc_reactor_phase = 0.0
        self.scanline_pos = 0
        self.target_angles = [0.0, 120.0, 240.0]
        self.audio_levels = [0.0] * AUDIO_BANDS
        self.resonance = [0.0] * RESONANCE_LEN
        self.glitch_active = False
        self.current_mode = "FLIGHT"

        # alerts
        self.alert_active = False
        self.alert_message = ""
        self.alert_severity = 0

    @property
    def theme(self):
        return THEMES[self.current_theme % len(THEMES)]

    # --- Key toggles ---
    def toggle_help(self):
        self.show_help = not self.show_help
        return self.show_help

    def toggle_pause(self):
        self.paused = not self.paused
        return self.paused

    def toggle_sound_wave(self):
        self.show_sound_wave = not self.show_sound_wave
        return self.show_sound_wave

    def cycle_theme(self):
        self.current_theme = (self.current_theme + 1) % len(THEMES)
        return self.theme

    def reboot(self):
        self.tick_count = 0
        self.scanline_pos = 0
        self.arc_reactor_phase = 0.0

    # --- Per tick ---
    def advance(self):
        rng = self.rng

        if self.resonance:
            self.resonance = self.resonance[1:] + [rng.random()]

        self.tick_count += 1
        self.scanline_pos = (self.scanline_pos + 1) % 10

        # radar sweep
        for i in range(len(self.target_angles)):
            self.target_angles[i] += 3
            if self.target_angles[i] >= 360:
                self.target_angles[i] = 0.0

        self.audio_levels = [rng.random() for _ in self.audio_levels]
        self.arc_reactor_phase += 0.1

        if self.tick_count % GLITCH_PERIOD == 0:
            self.glitch_active = not self.glitch_active

        if self.tick_count % MODE_PERIOD == 0:
            self.current_mode = rng.choice(MODES)

        if rng.random() < ALERT_CHANCE:
            self.raise_alert(rng.choice(ALERTS), rng.randint(1, 3))

        if self.alert_active and self.tick_count % ALERT_CLEAR_PERIOD == 0:
            self.alert_active = False

    def raise_alert(self, message, severity):
        self.alert_active = True
        self.alert_message = message
        self.alert_severity = severity
