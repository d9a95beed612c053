from log import log
from command_handler import registry, Context

def announce(message):
    log(f"[bold #FF5F1F]>>[/] [#888888]{message}[/]")

# --- System Commands ---

@registry.register("q", "\x03")
def cmd_quit(ctx: Context):
    """Exit Application"""
    raise SystemExit

@registry.register("h", "?")
def cmd_help(ctx: Context):
    """Toggle This Help"""
    ctx.hud.toggle_help()

@registry.register("t")
def cmd_theme(ctx: Context):
    """Cycle Themes"""
    theme = ctx.hud.cycle_theme()
    announce(f"Theme switched to: {theme.name}")

@registry.register("p")
def cmd_pause(ctx: Context):
    """Pause/Resume"""
    paused = ctx.hud.toggle_pause()
    announce(f"System {'PAUSED' if paused else 'RESUMED'}")

@registry.register("s")
def cmd_sound(ctx: Context):
    """Toggle Sound Wave"""
    shown = ctx.hud.toggle_sound_wave()
    announce(f"Sound visualization {'ENABLED' if shown else 'DISABLED'}")

@registry.register("r")
def cmd_reboot(ctx: Context):
    """Reboot System"""
    ctx.hud.reboot()
    announce("System reboot initiated")

@registry.register(" ")
def cmd_scan(ctx: Context):
    """Manual Scan"""
    announce("Manual system scan initiated")

# --- Log Scrolling ---

@registry.register("up")
def cmd_scroll_up(ctx: Context):
    """Scroll Logs Up"""
    ctx.logs.scroll_up()

@registry.register("down")
def cmd_scroll_down(ctx: Context):
    """Scroll Logs Down"""
    ctx.logs.scroll_down()
