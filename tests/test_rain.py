"""
Unit tests for the digital rain engine.

Covers the character source, the resize adapter, the tick engine and the
per-cell classification handed to the renderer.
"""

import copy
import random

import pytest

from conftest import AlwaysBurstRandom, NoBurstRandom
from rain import (
    ALPHABET,
    DIGITS,
    KATAKANA,
    CellClass,
    Column,
    RainEngine,
    Resize,
    Tick,
    dispatch,
    grid_size_for_viewport,
    random_matrix_char,
)


def _snapshot_columns(engine):
    return [(c.head, c.trail_length, c.speed_class) for c in engine.columns_state]


class TestCharacterSource:
    """Tests for random_matrix_char."""

    def test_alphabet_is_half_width_katakana(self) -> None:
        """Test the decorative alphabet holds the 56 half-width katakana."""
        assert len(KATAKANA) == 56
        assert KATAKANA[0] == "ｦ"
        assert KATAKANA[-1] == "ﾝ"

    def test_draws_come_from_alphabet(self) -> None:
        """Test every draw is a katakana symbol or a digit."""
        rng = random.Random(7)
        for _ in range(2000):
            ch = random_matrix_char(rng)
            assert len(ch) == 1
            assert ch in ALPHABET

    def test_digit_share_is_about_twenty_percent(self) -> None:
        """Test roughly 20% of draws are digits."""
        rng = random.Random(99)
        n = 10000
        digits = sum(1 for _ in range(n) if random_matrix_char(rng) in DIGITS)
        assert 0.17 < digits / n < 0.23

    def test_default_random_source(self) -> None:
        """Test the module-level random source is used when none is given."""
        assert random_matrix_char() in ALPHABET


class TestViewport:
    """Tests for grid_size_for_viewport."""

    def test_typical_terminal(self) -> None:
        """Test margins are subtracted from a 120x40 terminal."""
        assert grid_size_for_viewport(120, 40) == (34, 26)

    def test_small_terminal_clamps_to_zero(self) -> None:
        """Test negative sizes clamp to zero."""
        assert grid_size_for_viewport(10, 5) == (0, 0)

    def test_custom_margins(self) -> None:
        """Test margins can be overridden."""
        assert grid_size_for_viewport(90, 20, col_margin=0, cell_margin=0, row_margin=0) == (30, 20)


class TestResize:
    """Tests for RainEngine.resize."""

    def test_new_engine_is_empty(self, engine) -> None:
        """Test a fresh engine is sized to zero."""
        assert engine.columns == 0
        assert engine.rows == 0
        assert engine.grid == []
        assert engine.columns_state == []

    def test_column_change_allocates_fresh_state(self, engine) -> None:
        """Test a column-count change allocates columns within their ranges."""
        engine.resize(30, 12)

        assert engine.columns == 30
        assert engine.rows == 12
        assert len(engine.grid) == 30
        assert len(engine.columns_state) == 30
        for col in engine.columns_state:
            assert -12 <= col.head < 12
            assert 5 <= col.trail_length <= 14
            assert col.speed_class in (1, 2, 3)
        for column in engine.grid:
            assert len(column) == 12
            assert all(ch in ALPHABET for ch in column)

    def test_column_change_discards_previous_state(self, engine) -> None:
        """Test changing the column count rebuilds every column."""
        engine.resize(8, 10)
        old_grid = engine.grid
        old_states = list(engine.columns_state)

        engine.resize(9, 10)

        assert len(engine.grid) == 9
        assert all(col not in old_states for col in engine.columns_state)
        assert all(new is not old for new, old in zip(engine.grid, old_grid))
        assert all(ch in ALPHABET for column in engine.grid for ch in column)

    def test_row_growth_preserves_content(self, engine) -> None:
        """Test 8x10 -> 8x14 keeps rows 0-9 and column state."""
        engine.resize(8, 10)
        before = copy.deepcopy(engine.grid)
        states = _snapshot_columns(engine)

        engine.resize(8, 14)

        assert engine.rows == 14
        for x in range(8):
            assert len(engine.grid[x]) == 14
            assert engine.grid[x][:10] == before[x]
            assert all(ch in ALPHABET for ch in engine.grid[x][10:])
        assert _snapshot_columns(engine) == states

    def test_row_shrink_drops_tail(self, engine) -> None:
        """Test shrinking rows keeps the overlapping prefix only."""
        engine.resize(5, 20)
        before = copy.deepcopy(engine.grid)
        states = _snapshot_columns(engine)

        engine.resize(5, 6)

        for x in range(5):
            assert engine.grid[x] == before[x][:6]
        assert _snapshot_columns(engine) == states

    def test_unchanged_dimensions_do_nothing(self, engine) -> None:
        """Test an identical resize draws no randomness and keeps the grid."""
        engine.resize(6, 6)
        grid = copy.deepcopy(engine.grid)
        state = engine.rng.getstate()

        engine.resize(6, 6)

        assert engine.grid == grid
        assert engine.rng.getstate() == state

    def test_negative_dimensions_clamp(self, engine) -> None:
        """Test negative dimensions are treated as zero."""
        engine.resize(-3, -7)
        assert engine.columns == 0
        assert engine.rows == 0
        assert engine.grid == []

    def test_zero_rows_allocates_empty_columns(self, engine) -> None:
        """Test columns=5, rows=0 allocates empty columns without error."""
        engine.resize(5, 0)
        assert engine.columns == 5
        assert engine.grid == [[], [], [], [], []]
        assert all(col.head == 0 for col in engine.columns_state)

    def test_rows_grow_from_zero(self, engine) -> None:
        """Test a zero-row grid fills in once rows appear."""
        engine.resize(4, 0)
        engine.resize(4, 3)
        assert all(len(column) == 3 for column in engine.grid)
        assert all(ch in ALPHABET for column in engine.grid for ch in column)


class TestTick:
    """Tests for RainEngine.tick."""

    def test_head_delta_is_one_or_two(self, engine) -> None:
        """Test the single-tick head delta only takes values 1 and 2."""
        engine.resize(20, 500)
        for col in engine.columns_state:
            col.head = 0

        for _ in range(100):
            before = [c.head for c in engine.columns_state]
            engine.tick()
            for old, col in zip(before, engine.columns_state):
                assert col.head - old in (1, 2)

    @pytest.mark.parametrize("speed", [1, 2, 3])
    def test_burst_frequency_tracks_speed_class(self, speed) -> None:
        """Test the extra step fires with frequency close to speed/4."""
        engine = RainEngine(rng=random.Random(speed))
        engine.resize(3, 30)
        col = engine.columns_state[0]
        col.speed_class = speed

        n = 4000
        bursts = 0
        for _ in range(n):
            col.head = 0
            engine.tick()
            bursts += col.head == 2
        assert bursts / n == pytest.approx(speed / 4, abs=0.04)

    def test_no_burst_scenario(self) -> None:
        """Test cols=10 rows=20: head -5 reaches 19 after 24 ticks without reset."""
        engine = RainEngine(rng=NoBurstRandom(3))
        engine.resize(10, 20)
        col = engine.columns_state[0]
        col.head, col.trail_length, col.speed_class = -5, 7, 1

        for _ in range(24):
            engine.tick()

        assert col.head == 19
        assert col.trail_length == 7
        assert col.speed_class == 1

    def test_reset_when_trail_leaves_bottom(self) -> None:
        """Test a column resets once head - trail exceeds rows."""
        engine = RainEngine(rng=NoBurstRandom(5))
        engine.resize(10, 20)
        col = engine.columns_state[0]
        col.head, col.trail_length, col.speed_class = 27, 7, 1

        engine.tick()  # 28 - 7 = 21 > 20

        assert -9 <= col.head <= 0
        assert 5 <= col.trail_length <= 19
        assert col.speed_class in (1, 2, 3)

    def test_no_reset_at_boundary(self) -> None:
        """Test head - trail == rows is not yet a reset."""
        engine = RainEngine(rng=NoBurstRandom(5))
        engine.resize(10, 20)
        col = engine.columns_state[0]
        col.head, col.trail_length = 26, 7

        engine.tick()

        assert col.head == 27

    def test_reset_ranges_hold_over_many_resets(self) -> None:
        """Test every reset draws head, trail and speed inside their ranges."""
        engine = RainEngine(rng=AlwaysBurstRandom(11))
        engine.resize(40, 10)
        seen_trails = set()
        for _ in range(300):
            before = [c.head for c in engine.columns_state]
            engine.tick()
            for old, col in zip(before, engine.columns_state):
                if col.head - old not in (1, 2):
                    assert -9 <= col.head <= 0
                    assert 5 <= col.trail_length <= 19
                    assert col.speed_class in (1, 2, 3)
                    seen_trails.add(col.trail_length)
        assert max(seen_trails) > 14

    def test_columns_never_stall(self, engine) -> None:
        """Test every column keeps cycling back to the top."""
        engine.resize(12, 15)
        resets = [0] * 12
        for _ in range(200):
            before = [c.head for c in engine.columns_state]
            engine.tick()
            for x, (old, col) in enumerate(zip(before, engine.columns_state)):
                if col.head < old:
                    resets[x] += 1
        assert all(r > 0 for r in resets)

    @pytest.mark.parametrize("columns,rows,expected", [
        (20, 30, 6),
        (7, 13, 0),
        (10, 10, 1),
        (34, 26, 8),
    ])
    def test_glitch_count(self, engine, columns, rows, expected) -> None:
        """Test exactly floor(columns*rows/100) glitch draws per tick."""
        engine.resize(columns, rows)
        for _ in range(5):
            engine.tick()
            assert len(engine.last_glitches) == expected
            for gx, gy in engine.last_glitches:
                assert 0 <= gx < columns
                assert 0 <= gy < rows

    def test_glitches_overwrite_with_alphabet(self, engine) -> None:
        """Test glitched cells hold characters from the alphabet."""
        engine.resize(30, 30)
        engine.tick()
        for gx, gy in engine.last_glitches:
            assert engine.grid[gx][gy] in ALPHABET

    def test_only_glitches_touch_the_grid(self, engine) -> None:
        """Test cells outside the glitch draws keep their characters."""
        engine.resize(15, 20)
        before = copy.deepcopy(engine.grid)
        engine.tick()
        hit = set(engine.last_glitches)
        for x in range(15):
            for y in range(20):
                if (x, y) not in hit:
                    assert engine.grid[x][y] == before[x][y]

    def test_zero_rows_tick_is_noop(self, engine) -> None:
        """Test columns=5, rows=0 performs no mutation and no glitches."""
        engine.resize(5, 0)
        heads = _snapshot_columns(engine)

        for _ in range(10):
            engine.tick()

        assert _snapshot_columns(engine) == heads
        assert engine.grid == [[]] * 5
        assert engine.last_glitches == []

    def test_zero_columns_tick_is_noop(self, engine) -> None:
        """Test an empty engine ticks without error."""
        engine.tick()
        assert engine.last_glitches == []

    def test_tick_is_stateful(self) -> None:
        """Test two ticks differ from one tick."""
        once = RainEngine(rng=random.Random(42))
        twice = RainEngine(rng=random.Random(42))
        for e in (once, twice):
            e.resize(10, 40)
            for col in e.columns_state:
                col.head = 0

        once.tick()
        twice.tick()
        twice.tick()

        assert _snapshot_columns(once) != _snapshot_columns(twice)
        assert twice.tick_count == 2

    def test_seeded_runs_repeat_exactly(self) -> None:
        """Test the same seed yields the same heads and glitch coordinates."""
        a = RainEngine(rng=random.Random(2024))
        b = RainEngine(rng=random.Random(2024))
        for e in (a, b):
            e.resize(25, 18)
        for _ in range(30):
            a.tick()
            b.tick()
            assert _snapshot_columns(a) == _snapshot_columns(b)
            assert a.last_glitches == b.last_glitches
        assert a.grid == b.grid


class TestDispatch:
    """Tests for event dispatch."""

    def test_resize_then_tick(self, engine) -> None:
        """Test Resize is applied before the following Tick."""
        dispatch(engine, Resize(columns=12, rows=10))
        assert (engine.columns, engine.rows) == (12, 10)

        dispatch(engine, Tick())
        assert engine.tick_count == 1
        assert len(engine.last_glitches) == 1

    def test_dispatch_returns_engine(self, engine) -> None:
        """Test the module-level dispatch hands back the engine."""
        assert dispatch(engine, Tick()) is engine

    def test_unknown_event(self, engine) -> None:
        """Test unknown events are rejected."""
        with pytest.raises(TypeError):
            engine.dispatch("tick")

    def test_events_are_frozen(self) -> None:
        """Test events are immutable values."""
        event = Resize(3, 4)
        with pytest.raises(AttributeError):
            event.rows = 5  # type: ignore
        assert event == Resize(3, 4)
        assert Tick() == Tick()


class TestClassify:
    """Tests for per-cell classification."""

    @pytest.fixture
    def classified(self) -> RainEngine:
        engine = RainEngine(rng=random.Random(0))
        engine.resize(1, 20)
        engine.columns_state[0] = Column(head=10, trail_length=9, speed_class=1)
        return engine

    @pytest.mark.parametrize("y,expected", [
        (10, CellClass.HEAD),
        (8, CellClass.TRAIL_NEAR),   # dist 2 < 3
        (7, CellClass.TRAIL_MID),    # dist 3
        (5, CellClass.TRAIL_MID),    # dist 5 < 6
        (4, CellClass.TRAIL_FAR),    # dist 6
        (2, CellClass.TRAIL_FAR),    # dist 8
        (1, CellClass.EMPTY),        # dist 9 == trail length
        (11, CellClass.EMPTY),       # below the head
        (0, CellClass.EMPTY),
    ])
    def test_bands(self, classified, y, expected) -> None:
        """Test head, trail bands and empty cells."""
        assert classified.classify(0, y) is expected

    def test_faint_past_half_trail(self, classified) -> None:
        """Test trail cells past half the trail are faint."""
        assert not classified.is_faint(0, 7)   # dist 3
        assert not classified.is_faint(0, 6)   # dist 4 == 9 // 2
        assert classified.is_faint(0, 5)       # dist 5

    def test_head_off_screen(self) -> None:
        """Test a head above the grid leaves every cell empty."""
        engine = RainEngine(rng=random.Random(0))
        engine.resize(1, 5)
        engine.columns_state[0] = Column(head=-3, trail_length=6, speed_class=2)
        assert all(engine.classify(0, y) is CellClass.EMPTY for y in range(5))

    def test_rows_view_keeps_hidden_characters(self, classified) -> None:
        """Test rows_view pairs every stored character with its class."""
        rows = list(classified.rows_view())
        assert len(rows) == 20
        assert rows[0][0] == (classified.grid[0][0], CellClass.EMPTY)
        assert rows[10][0] == (classified.grid[0][10], CellClass.HEAD)
