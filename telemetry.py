import random
import time
from collections import deque
from config import LOG_LIMIT, LOG_LINES, LOG_MIN_DELAY_MS, LOG_MAX_DELAY_MS

class TelemetryLog:
    """Bounded log buffer shown in the TELEMETRY STREAM panel."""
    def __init__(self, limit=LOG_LIMIT):
        self.lines = deque(maxlen=limit)
        self.scroll = 0  # lines scrolled up from the bottom

    def __len__(self):
        return len(self.lines)

    def append(self, line, *args, **kwargs):
        self.lines.append(str(line))
        # new entries jump back to the bottom
        self.scroll = 0

    def scroll_up(self, n=1):
        self.scroll = min(self.scroll + n, max(0, len(self.lines) - 1))

    def scroll_down(self, n=1):
        self.scroll = max(0, self.scroll - n)

    def visible(self, height):
        if height <= 0:
            return []
        lines = list(self.lines)
        end = len(lines) - self.scroll
        start = max(0, end - height)
        return lines[start:end]


class LogGenerator:
    """Emits a canned telemetry line after a random 200-1200 ms delay."""
    def __init__(self, rng=None, clock=time.monotonic, lines=LOG_LINES):
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.lines = list(lines)
        self.next_at = self.clock() + self._delay()

    def _delay(self):
        return self.rng.randint(LOG_MIN_DELAY_MS, LOG_MAX_DELAY_MS - 1) / 1000.0

    def poll(self):
        """Return a new line if one is due, otherwise None."""
        now = self.clock()
        if now < self.next_at:
            return None
        self.next_at = now + self._delay()
        return self.rng.choice(self.lines)
