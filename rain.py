import random
from dataclasses import dataclass
from enum import Enum

# Half-width Katakana: U+FF66 .. U+FF9D (56 symbols)
KATAKANA = "".join(chr(c) for c in range(0xFF66, 0xFF9D + 1))
DIGITS = "0123456789"
ALPHABET = KATAKANA + DIGITS

# Column state ranges
INIT_TRAIL_MIN, INIT_TRAIL_SPAN = 5, 10    # [5, 14] at allocation
RESET_TRAIL_MIN, RESET_TRAIL_SPAN = 5, 15  # [5, 19] after a reset
RESET_DELAY_SPAN = 10                      # head re-enters at [-9, 0]
SPEED_CLASSES = 3
GLITCH_DENSITY = 100                       # one glitch per 100 cells


def random_matrix_char(rng=random):
    """80% katakana, 20% digits."""
    if rng.random() < 0.8:
        return KATAKANA[rng.randrange(len(KATAKANA))]
    return DIGITS[rng.randrange(len(DIGITS))]


def grid_size_for_viewport(width, height, col_margin=4, cell_margin=2, row_margin=14):
    """Terminal (width, height) -> rain (columns, rows), clamped to >= 0."""
    col_width = width // 3 - col_margin
    columns = max(0, col_width - cell_margin)
    rows = max(0, height - row_margin)
    return columns, rows


class CellClass(Enum):
    HEAD = "head"
    TRAIL_NEAR = "trail-near"
    TRAIL_MID = "trail-mid"
    TRAIL_FAR = "trail-far"
    EMPTY = "empty"


# --- Events ---
@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Resize:
    columns: int
    rows: int


class Column:
    __slots__ = ("head", "trail_length", "speed_class")

    def __init__(self, head, trail_length, speed_class):
        self.head = head
        self.trail_length = trail_length
        self.speed_class = speed_class

    def __repr__(self):
        return f"Column(head={self.head}, trail_length={self.trail_length}, speed_class={self.speed_class})"


class RainEngine:
    """
    Digital rain simulator.

    Owns the character grid (``grid[x][y]``) and one Column per grid column.
    The renderer only reads ``grid``, ``columns_state`` and ``last_glitches``.
    """

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self.columns = 0
        self.rows = 0
        self.grid = []
        self.columns_state = []
        self.last_glitches = []
        self.tick_count = 0

    def _char(self):
        return random_matrix_char(self.rng)

    # --- Resize Adapter ---
    def resize(self, columns, rows):
        columns = max(0, columns)
        rows = max(0, rows)

        if columns != len(self.columns_state):
            # 列数变化: 全部重建
            self.grid = []
            self.columns_state = []
            for _ in range(columns):
                # scattered above and within the viewport
                head = self.rng.randrange(rows * 2) - rows if rows > 0 else 0
                trail = self.rng.randrange(INIT_TRAIL_SPAN) + INIT_TRAIL_MIN
                speed = self.rng.randrange(SPEED_CLASSES) + 1
                self.columns_state.append(Column(head, trail, speed))
                self.grid.append([self._char() for _ in range(rows)])
        elif columns > 0 and rows != self.rows:
            # 仅行数变化: 保留已有内容
            for x in range(columns):
                old = self.grid[x]
                new_col = old[:rows]
                new_col.extend(self._char() for _ in range(len(old), rows))
                self.grid[x] = new_col

        self.columns = columns
        self.rows = rows
        self.last_glitches = []

    # --- Tick Engine ---
    def tick(self):
        if self.columns == 0 or self.rows == 0:
            self.last_glitches = []
            return

        rng = self.rng
        for col in self.columns_state:
            col.head += 1
            # probabilistic burst on top of the guaranteed step
            if rng.randrange(4) < col.speed_class:
                col.head += 1

            if col.head - col.trail_length > self.rows:
                col.head = -rng.randrange(RESET_DELAY_SPAN)
                col.trail_length = rng.randrange(RESET_TRAIL_SPAN) + RESET_TRAIL_MIN
                col.speed_class = rng.randrange(SPEED_CLASSES) + 1

        glitch_count = (self.columns * self.rows) // GLITCH_DENSITY
        glitches = []
        for _ in range(glitch_count):
            gx = rng.randrange(self.columns)
            gy = rng.randrange(self.rows)
            self.grid[gx][gy] = self._char()
            glitches.append((gx, gy))
        self.last_glitches = glitches
        self.tick_count += 1

    def dispatch(self, event):
        if isinstance(event, Tick):
            self.tick()
        elif isinstance(event, Resize):
            self.resize(event.columns, event.rows)
        else:
            raise TypeError(f"Unknown rain event: {event!r}")

    # --- Output ---
    def classify(self, x, y):
        col = self.columns_state[x]
        h, length = col.head, col.trail_length
        if y == h:
            return CellClass.HEAD
        if h - length < y < h:
            dist = h - y
            if dist < length // 3:
                return CellClass.TRAIL_NEAR
            if dist < (length * 2) // 3:
                return CellClass.TRAIL_MID
            return CellClass.TRAIL_FAR
        return CellClass.EMPTY

    def is_faint(self, x, y):
        col = self.columns_state[x]
        return col.head - y > col.trail_length // 2

    def rows_view(self):
        """Yield rows top to bottom as lists of (char, CellClass)."""
        for y in range(self.rows):
            yield [(self.grid[x][y], self.classify(x, y)) for x in range(self.columns)]


def dispatch(engine, event):
    engine.dispatch(event)
    return engine
