import os
import time
import sys
import select
import threading
import termios
import tty
from rich.live import Live
from rich.markup import escape

from log import log, set_log_fn
from rain import Tick, Resize, grid_size_for_viewport
from telemetry import LogGenerator
from command_handler import registry, Context
from config import TICK_MS, FRAME_MS, LAYOUT_DEFAULTS
from commands import announce  # importing commands registers the key bindings
import ui

ARROWS = {"[A": "up", "[B": "down"}
MAX_CATCHUP_TICKS = 5

# --- 🎮 输入监听核心 (非阻塞) ---
class InputHandler:
    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.pending = ""  # keys read but not handed out yet

    def _read(self):
        try:
            fd = self.stream.fileno()
            dr, dw, de = select.select([fd], [], [], 0)
            if not dr:
                return ""
            # raw read so an escape sequence arrives in one chunk
            return os.read(fd, 32).decode("utf-8", errors="ignore")
        except (OSError, ValueError):
            return ""

    def get_key(self):
        """
        Non-blocking key read.
        Returns a single character, 'up' / 'down' for arrow keys, or None
        once nothing is left.
        """
        if not self.pending:
            self.pending = self._read()

        while self.pending:
            key, self.pending = self.pending[0], self.pending[1:]
            if key in ['\n', '\r']: continue
            if key == '\x1b':
                # arrow keys arrive as ESC [ A / ESC [ B
                seq, self.pending = self.pending[:2], self.pending[2:]
                arrow = ARROWS.get(seq)
                if arrow: return arrow
                continue
            return key
        return None


class HudApp:
    """
    Event loop body, free of any terminal handling.

    Keys, resizes and ticks are applied one at a time; a resize is fully
    applied to the rain engine before the next tick reads it.
    """
    def __init__(self, ctx: Context, tick_s=TICK_MS / 1000.0, log_gen=None, clock=time.monotonic):
        self.ctx = ctx
        self.tick_s = tick_s
        self.clock = clock
        self.log_gen = log_gen or LogGenerator(rng=ctx.hud.rng, clock=clock)
        self.width = 0
        self.height = 0
        self.next_tick = clock() + tick_s
        self.layout = dict(LAYOUT_DEFAULTS, **ctx.config.get("layout", {}))

    def handle_key(self, key):
        return registry.dispatch(key, self.ctx)

    def handle_resize(self, width, height):
        if (width, height) == (self.width, self.height):
            return False
        self.width, self.height = width, height
        columns, rows = grid_size_for_viewport(width, height, **self.layout)
        engine = self.ctx.engine
        if (columns, rows) != (engine.columns, engine.rows):
            engine.dispatch(Resize(columns, rows))
            log(f"[dim]Neural link grid {columns}x{rows}[/]")
        return True

    def step(self):
        """One simulated tick; skipped while paused."""
        ctx = self.ctx
        if ctx.hud.paused:
            return False
        ctx.stats.update(ctx.hud.tick_count)
        ctx.engine.dispatch(Tick())
        ctx.hud.advance()
        return True

    def poll(self):
        """Run every tick that is due and any pending telemetry line."""
        now = self.clock()
        ticked = 0
        if now - self.next_tick > MAX_CATCHUP_TICKS * self.tick_s:
            # stalled (suspended, slow terminal): drop the backlog
            self.next_tick = now
        while now >= self.next_tick:
            self.next_tick += self.tick_s
            if self.step():
                ticked += 1
        line = self.log_gen.poll()
        if line:
            announce(escape(line))
        return ticked

    def frame(self):
        return ui.build_dashboard(self.ctx, self.width, self.height, registry)


# --- 核心运行逻辑 ---
def run_hud(ctx: Context, stop_event=None, frame_s=FRAME_MS / 1000.0, tick_s=TICK_MS / 1000.0):
    stop_event = stop_event or threading.Event()
    console = ctx.console
    set_log_fn(ctx.logs.append)

    fd = None
    old_settings = None
    if sys.stdin.isatty():
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        # 阻止回显
        tty.setcbreak(fd)

    app = HudApp(ctx, tick_s=tick_s)
    keys = InputHandler()
    announce("Initializing J.A.R.V.I.S. Protocol...")
    try:
        with Live(console=console, screen=True, auto_refresh=False, transient=True) as live:
            while not stop_event.is_set():
                # resize first so no tick sees stale dimensions
                width, height = console.size
                app.handle_resize(width, height)

                # every key that arrived during the last frame
                for key in iter(keys.get_key, None):
                    app.handle_key(key)

                app.poll()
                live.update(app.frame(), refresh=True)
                time.sleep(frame_s)
    except (KeyboardInterrupt, SystemExit):
        pass
    finally:
        if old_settings is not None:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
            try: termios.tcflush(sys.stdin, termios.TCIFLUSH)
            except termios.error: pass
        set_log_fn(console.print)
    return app
