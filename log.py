"""
Message sink for the HUD.

Before the Live screen starts (and after it stops) messages go to the
console; while the dashboard runs, hud_runner points the sink at
TelemetryLog.append so they show up in the TELEMETRY STREAM panel.
"""
import sys

def _default_log_fn(data, *args, **kwargs):
    """Nothing is wired up yet (or a test silenced us): drop it."""
    pass

_module = sys.modules[__name__]

_module._log_fn = _default_log_fn

def log(data, *args, **kwargs):
    """
    Push one telemetry line.

    Lines may carry rich markup ("[dim]Neural link grid 34x26[/]");
    positional args fill str.format fields, e.g.
    log("Display theme: {}", theme.name).
    """
    try:
        if args and isinstance(data, str):
            try:
                data = data.format(*args)
            except (IndexError, KeyError, ValueError):
                pass  # keep the raw line
            args = ()

        _module._log_fn(data, *args, **kwargs)
    except Exception:
        # a bad line must not take down the frame loop
        pass

def set_log_fn(fn):
    """Route telemetry to fn (console.print, TelemetryLog.append, a test list)."""
    if not callable(fn):
        raise TypeError("log sink must be callable")

    _module._log_fn = fn

def reset_log_fn():
    _module._log_fn = _default_log_fn
