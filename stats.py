import random
import psutil
from config import STATS_REFRESH_TICKS

NET_WINDOW_BYTES = 1_000_000

def _clamp(v):
    return max(0.0, min(1.0, v))

class SystemStats:
    """
    CPU / memory / network gauges, each a float in [0, 1].

    Real values come from psutil every STATS_REFRESH_TICKS ticks; in between
    the values drift a little so the bars keep moving.
    """
    def __init__(self, rng=None, refresh_ticks=STATS_REFRESH_TICKS):
        self.rng = rng if rng is not None else random.Random()
        self.refresh_ticks = refresh_ticks
        self.cpu = 0.2
        self.mem = 0.8
        self.net = 0.5

    def as_tuple(self):
        return self.cpu, self.mem, self.net

    def poll(self):
        """Read real values; a failed probe keeps the old value."""
        try:
            self.cpu = _clamp(psutil.cpu_percent(interval=None) / 100.0)
        except (psutil.Error, OSError):
            pass

        try:
            self.mem = _clamp(psutil.virtual_memory().percent / 100.0)
        except (psutil.Error, OSError):
            pass

        try:
            counters = psutil.net_io_counters()
            if counters is not None:
                total = float(counters.bytes_sent + counters.bytes_recv)
                # rough activity indicator, not a rate
                self.net = _clamp((total % NET_WINDOW_BYTES) / NET_WINDOW_BYTES)
        except (psutil.Error, OSError):
            pass

    def jitter(self):
        rng = self.rng
        self.cpu = _clamp(self.cpu + (rng.random() - 0.5) * 0.02)
        self.mem = _clamp(self.mem + (rng.random() - 0.5) * 0.01)
        self.net = _clamp(self.net + (rng.random() - 0.5) * 0.02)

    def update(self, tick_count):
        if tick_count % self.refresh_ticks == 0:
            self.poll()
        else:
            self.jitter()
