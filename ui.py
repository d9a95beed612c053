import math
import time
from rich.align import Align
from rich.console import Group
from rich.layout import Layout
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.text import Text
from rich import box

from rain import CellClass
from themes import (CYAN, ORANGE, DARK, DIM, NORD_GREEN, NORD_TEAL, ALERT_RED,
                    ALERT_YELLOW, ALERT_GREEN, PULSE_PURPLE, GRID_COLOR)
from config import TITLE
from command_handler import console

RAIN_STYLES = {
    CellClass.HEAD: "bold #FFFFFF",
    CellClass.TRAIL_NEAR: NORD_TEAL,
    CellClass.TRAIL_MID: NORD_GREEN,
    CellClass.TRAIL_FAR: DIM,
}

RESONANCE_BARS = [" ", "▂", "▃", "▄", "▅", "▆", "▇", "█"]
WAVE_BARS = [" ", "▁", "▂", "▃", "▄", "▅", "▆", "▇", "█"]
DATA_STREAM_CHARS = ["⬡", "⬢", "◈", "◇", "◆", "◊"]
HOLOGRAM_CHARS = ["█", "▓", "▒", "░", "▄", "▀"]
SCANLINE = "#00FF00"
SEVERITY = {1: "WARNING", 2: "CAUTION", 3: "CRITICAL"}

REACTOR = [
    "       ╔═══════╗",
    "     ╔═╝ ◉ ◉ ◉ ╚═╗",
    "    ║ ◉ ▓▓▓▓▓▓▓ ◉ ║",
    "    ║ ◉ ▓█████▓ ◉ ║",
    "    ║ ◉ ▓▓▓▓▓▓▓ ◉ ║",
    "     ╚═╗ ◉ ◉ ◉ ╔═╝",
    "       ╚═══════╝",
]

def _bar_index(value, n):
    return max(0, min(n - 1, int(value * (n - 1))))

# --- Rain ---
def render_rain(engine):
    """Project the rain grid to styled text. Empty cells are blank."""
    text = Text(no_wrap=True, overflow="crop")
    glitched = set(engine.last_glitches)
    for y, row in enumerate(engine.rows_view()):
        for x, (ch, cls) in enumerate(row):
            if cls is CellClass.EMPTY:
                text.append(" ")
                continue
            style = RAIN_STYLES[cls]
            if (x, y) in glitched:
                style = ALERT_YELLOW
            if cls is not CellClass.HEAD and engine.is_faint(x, y):
                style += " dim"
            text.append(ch, style=style)
        if y < engine.rows - 1:
            text.append("\n")
    return text

# --- Left panel ---
def render_clock(now=None):
    t = time.localtime(now)
    style = f"bold {CYAN}"
    return Text.assemble(
        ("╭─ SYSTEM TIME ─╮\n", style),
        (f"│ {time.strftime('%H:%M:%S', t)}      │\n", style),
        (f"│ {time.strftime('%b %d %Y', t)}   │\n", style),
        ("╰───────────────╯", style),
    )

def render_status_badges(stats, hud):
    sys_color = ALERT_GREEN
    if stats.cpu > 0.8: sys_color = ALERT_YELLOW
    if stats.cpu > 0.9: sys_color = ALERT_RED
    net_color = ALERT_YELLOW if stats.net < 0.3 else ALERT_GREEN

    mode = Text(f" {hud.current_mode} ", style=f"bold {ALERT_GREEN}")
    if hud.current_mode == "COMBAT":
        mode.stylize(f"{DARK} on {ALERT_RED}")
    elif hud.current_mode == "STEALTH":
        mode.stylize(f"{DARK} on {PULSE_PURPLE}")

    return Text.assemble(
        (" ◉ SYS ", f"{DARK} on {sys_color}"),
        (" ◉ NET ", f"{DARK} on {net_color}"),
        mode,
    )

def render_gauge_bar(label, value, width, color, complete_style):
    return Group(
        Text(label, style=color),
        ProgressBar(total=1.0, completed=value, width=max(1, width),
                    complete_style=complete_style, finished_style=complete_style),
    )

def render_circular_gauge(value, size, label):
    filled = int(value * size)
    fill = "█" * min(filled, size) + "░" * max(0, size - filled)
    return Text.assemble(
        (label + "\n", f"bold {CYAN}"),
        (f"[{fill}] {int(value * 100)}%", CYAN),
    )

def render_alert(hud):
    if not hud.alert_active:
        return Text("")
    bg = "#660000" if hud.tick_count % 10 < 5 else "#330000"
    body = Text(f"⚠ {SEVERITY.get(hud.alert_severity, '')}\n{hud.alert_message}",
                style=f"bold {ALERT_RED} on {bg}", justify="center")
    return Panel(body, width=30, box=box.HEAVY, border_style=ALERT_RED, padding=(0, 1))

def render_vitals(stats, hud, bar_width):
    parts = [
        Text(" SYSTEM VITALS ", style=f"bold {DARK} on {CYAN}"),
        Text(""),
        render_clock(),
        Text(""),
        render_status_badges(stats, hud),
        Text(""),
        render_gauge_bar("CPU INTEGRITY", stats.cpu, bar_width, CYAN, CYAN),
        Text(""),
        render_gauge_bar("THRUSTER POWER", stats.mem, bar_width, ORANGE, ORANGE),
        Text(""),
        render_gauge_bar("NETWORK STATUS", stats.net, bar_width, "#00FF00", "#00FF00"),
        Text(""),
        render_circular_gauge(stats.cpu, 15, "POWER LEVEL"),
        Text(""),
        Text("Mark LXXXV // Online", style=DIM),
    ]
    if hud.alert_active:
        parts += [Text(""), render_alert(hud)]
    return Group(*parts)

# --- Center panel ---
def render_reactor(hud):
    theme = hud.theme
    pulse = (math.sin(hud.arc_reactor_phase) + 1) / 2
    text = Text()
    for i, line in enumerate(REACTOR):
        if pulse > 0.7:
            style = f"bold {theme.accent}" if i in (0, 3, 6) else (
                f"bold {theme.primary}" if i in (1, 5) else theme.primary)
        else:
            style = theme.dim if i in (2, 4) else theme.primary
        text.append(line, style=style)
        if i < len(REACTOR) - 1:
            text.append("\n")
    return text

def render_radar(hud):
    # blips sweep through the four compass slots with the target angles
    slots = ["◉", "●", "●", "◉"]
    for angle in hud.target_angles:
        slots[int(angle // 90) % 4] = "✦"
    art = (f"     {slots[0]}\n"
           f"   ╱ | ╲\n"
           f"  {slots[3]}--R--{slots[1]}\n"
           f"   ╲ | ╱\n"
           f"     {slots[2]}")
    return Text(art, style=f"bold {ALERT_GREEN}")

def render_sound_wave(hud):
    if not hud.show_sound_wave:
        return Text("")
    theme = hud.theme
    wave = "".join(WAVE_BARS[_bar_index(v, len(WAVE_BARS))] for v in hud.audio_levels)
    return Text.assemble(
        ("AUDIO ANALYSIS\n", f"bold {theme.accent}"),
        (wave + "\n", theme.primary),
        ("Bass  Mid  High", f"dim {theme.dim}"),
    )

def render_resonance(hud):
    return Text("".join(RESONANCE_BARS[_bar_index(v, len(RESONANCE_BARS))] for v in hud.resonance),
                style=hud.theme.secondary)

def render_data_stream(hud):
    lines = []
    for i in range(3):
        lines.append("".join(
            DATA_STREAM_CHARS[(hud.tick_count + i * 8 + j) % len(DATA_STREAM_CHARS)]
            for j in range(8)))
    return Text("\n".join(lines), style=f"dim {NORD_TEAL}")

def render_center(engine, hud):
    theme = hud.theme
    top = Layout()
    top.split_row(
        Layout(Align.center(Group(
            render_reactor(hud),
            Text(""),
            Text("ARC REACTOR", style=f"bold {theme.primary}", justify="center"),
            Text("Output: 4.8 GJ/s", style=theme.dim, justify="center"),
        ))),
        Layout(Align.center(Group(
            Text("TARGETING", style=f"bold {theme.accent}", justify="center"),
            Text(""),
            render_radar(hud),
        ))),
    )
    body = Group(
        render_resonance(hud),
        render_sound_wave(hud),
        Text(""),
        Text("NEURAL LINK", style=f"bold {theme.accent}"),
        render_rain(engine),
        Text(""),
        Text("DATA STREAM", style=f"bold {PULSE_PURPLE}"),
        render_data_stream(hud),
    )
    center = Layout()
    center.split_column(Layout(top, size=10), Layout(body))
    if hud.glitch_active:
        return Panel(center, style=ALERT_YELLOW, border_style=theme.primary, box=box.ROUNDED)
    return Panel(center, border_style=theme.primary, box=box.ROUNDED)

# --- Right panel ---
def render_hologram(hud, rows=4, width=30):
    # the scanline sweeps down the feed one row per tick
    scan = hud.scanline_pos % rows
    text = Text()
    for i in range(rows):
        ch = HOLOGRAM_CHARS[(hud.tick_count + i) % len(HOLOGRAM_CHARS)]
        line = "".join(ch if (i + j) % 2 == 0 else " " for j in range(width))
        text.append(line, style=SCANLINE if i == scan else f"dim {GRID_COLOR}")
        if i < rows - 1:
            text.append("\n")
    return text

def render_logs(logs, height):
    text = Text()
    for line in logs.visible(height):
        text.append_text(Text.from_markup(line))
        text.append("\n")
    return text

def render_telemetry(logs, hud, height):
    return Group(
        Text(" TELEMETRY STREAM ", style=f"bold {DARK} on {CYAN}"),
        render_logs(logs, height),
        Text(""),
        Text("HOLOGRAPHIC FEED", style=f"bold dim {GRID_COLOR}"),
        render_hologram(hud, 4),
    )

# --- Overlay / full frame ---
def render_help(hud, registry):
    theme = hud.theme
    header = Text(
        "╔═══════════════════════════════════╗\n"
        "║    J.A.R.V.I.S. CONTROLS HELP     ║\n"
        "╚═══════════════════════════════════╝",
        style=f"bold {theme.accent}", justify="center")
    return Panel(
        Group(header, Text(""),
              registry.help_table(key_style=f"bold {theme.accent}", desc_style=theme.dim),
              Text(""),
              Text(f"Current Theme: {theme.name}", style=f"bold {theme.accent}", justify="center")),
        box=box.DOUBLE, border_style=theme.primary, style=f"{theme.primary} on {theme.background}",
        padding=(1, 2), expand=False,
    )

def render_title(hud, width):
    theme = hud.theme
    return Text(f"/// {TITLE} - {theme.name} ///", style=f"{theme.primary} on {theme.background}",
                justify="center")

def build_dashboard(ctx, width, height, registry=None):
    """Whole frame for a (width, height) terminal."""
    hud = ctx.hud
    if width == 0:
        return Text("Calibrating Suits...")

    if hud.show_help and registry is not None:
        return Align.center(render_help(hud, registry), vertical="middle", height=height)

    col_width = width // 3 - 4

    def panel(body):
        return Panel(body, border_style=CYAN, box=box.ROUNDED, padding=(0, 1))

    layout = Layout()
    layout.split_column(
        Layout(render_title(hud, width), size=1),
        Layout(name="body"),
    )
    layout["body"].split_row(
        Layout(panel(render_vitals(ctx.stats, hud, col_width - 10))),
        Layout(render_center(ctx.engine, hud)),
        Layout(panel(render_telemetry(ctx.logs, hud, max(1, height - 14)))),
    )
    return layout

def print_goodbye(theme, ticks):
    console.print(Panel.fit(
        f"[bold {theme.primary}]J.A.R.V.I.S. offline[/]\n"
        f"[dim]Palette: {theme.name}[/]\n"
        f"[dim]Ticks simulated: {ticks}[/]",
        title="/// STARK INDUSTRIES ///", border_style=theme.accent
    ))
