import argparse
import random
import questionary
from questionary import Style
from rich.markup import escape

from log import set_log_fn
from config import load_config, save_config
from rain import RainEngine
from hud_state import HudState
from stats import SystemStats
from telemetry import TelemetryLog
from themes import theme_index, theme_names
from hud_runner import run_hud

from command_handler import Context, console
import ui

PICKER_STYLE = Style([
    ('qmark', 'fg:#00F0FF bold'),
    ('question', 'bold'),
    ('answer', 'fg:#FF5F1F bold'),
])

def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="stark-hud", description="Iron-Man style terminal HUD")
    parser.add_argument("--seed", type=int, default=None, help="seed for every animation")
    parser.add_argument("--theme", choices=theme_names(), default=None, help="start-up theme")
    parser.add_argument("--pick-theme", action="store_true", help="choose the theme interactively")
    parser.add_argument("--config", default=None, help="path to the JSON config")
    return parser.parse_args(argv)

def pick_theme(current):
    choice = questionary.select(
        "Suit palette:",
        choices=theme_names(),
        default=current,
        qmark="⚙",
        style=PICKER_STYLE,
    ).ask()
    return choice or current

def build_context(config, seed=None):
    prefs = config["preferences"]
    rng = random.Random(seed)
    hud = HudState(rng=rng, theme=theme_index(prefs["theme"]), show_sound_wave=prefs["show_sound_wave"])
    return Context(
        engine=RainEngine(rng=rng),
        hud=hud,
        stats=SystemStats(rng=rng),
        logs=TelemetryLog(),
        config=config,
    )

# --- Main ---

def main(argv=None):
    set_log_fn(console.print)
    args = parse_args(argv)

    # 1. 初始化配置
    config = load_config(args.config)
    prefs = config["preferences"]

    if args.theme:
        prefs["theme"] = args.theme
    if args.pick_theme:
        prefs["theme"] = pick_theme(prefs["theme"])
        save_config(config, args.config)

    seed = args.seed if args.seed is not None else prefs.get("seed")

    # 2. 构建 Context
    ctx = build_context(config, seed)

    # 3. 主循环
    try:
        run_hud(ctx, frame_s=prefs["frame_ms"] / 1000.0, tick_s=prefs["tick_ms"] / 1000.0)
    except Exception as e:
        console.print(f"[red]Error starting J.A.R.V.I.S.: {escape(str(e))}[/]")
        raise SystemExit(1)

    ui.print_goodbye(ctx.hud.theme, ctx.hud.tick_count)

if __name__ == "__main__":
    main()
