from rich.console import Console
from rich.markup import escape
from rich.table import Table
from log import log

# 全局 Console 对象，保证输出统一
console = Console()

KEY_LABELS = {
    " ": "Space",
    "up": "↑",
    "down": "↓",
    "\x03": "Ctrl+C",
}

class Context:
    """
    Everything a key command may touch.
    Passed to every command function.
    """
    def __init__(self, engine, hud, stats, logs, config=None):
        self.engine = engine
        self.hud = hud
        self.stats = stats
        self.logs = logs
        self.config = config or {}
        self.console = console

class KeyRegistry:
    """Key binding registry and dispatcher"""
    def __init__(self):
        self.commands = {}
        self.descriptions = {}

    def register(self, *keys):
        """Decorator: bind one or more keys to a command"""
        def decorator(func):
            for key in keys:
                self.commands[key] = func
            desc = (func.__doc__ or "No description").strip().split('\n')[0]
            self.descriptions[keys] = desc
            return func
        return decorator

    def dispatch(self, key, ctx: Context):
        """Run the command bound to key. Returns True if one was found."""
        if not key:
            return False

        func = self.commands.get(key)
        if func is None and len(key) == 1:
            func = self.commands.get(key.lower())
        if func is None:
            return False

        try:
            func(ctx)
        except SystemExit:
            raise
        except Exception as e:
            log(f"[red]Command error ({escape(repr(key))}): {escape(str(e))}[/]")
        return True

    def help_rows(self):
        rows = []
        for keys, desc in self.descriptions.items():
            label = " / ".join(KEY_LABELS.get(k, k) for k in keys)
            rows.append((label, desc))
        return rows

    def help_table(self, key_style="bold", desc_style="dim"):
        t = Table(show_header=False, box=None, padding=(0, 1))
        t.add_column("Key", style=key_style, no_wrap=True)
        t.add_column("Action", style=desc_style)
        for label, desc in self.help_rows():
            t.add_row(label, f"│ {desc}")
        return t

# 全局单例注册表
registry = KeyRegistry()
