import numpy as np
import pytest

from flip_tetris.game import (
    Action,
    GameConfig,
    GamePhase,
    PieceState,
    TetrisEngine,
    TetrominoType,
    WALL_KICKS,
)

from helpers import fill_rows, make_engine, put_piece


def test_engine_waits_on_start_screen_until_started():
    engine = make_engine(start=False)
    assert engine.phase is GamePhase.START
    assert engine.current_piece is None
    assert engine.move_left() is False
    assert engine.tick(10_000).locked is False
    engine.start()
    assert engine.phase is GamePhase.PLAYING
    assert engine.current_piece is not None


def test_spawn_is_centered_on_top_row(engine):
    piece = engine.current_piece
    assert piece.x == (engine.grid.width - piece.width) // 2
    assert piece.y == 0
    assert engine.piece_state is PieceState.FALLING


def test_next_piece_is_consumed_on_spawn(engine):
    upcoming = engine.next_kind
    engine.hard_drop()
    assert engine.current_piece.kind == upcoming


def test_same_seed_gives_same_sequence():
    a = make_engine(random_seed=42)
    b = make_engine(random_seed=42)
    kinds_a, kinds_b = [], []
    for _ in range(5):
        kinds_a.append(a.current_piece.kind)
        kinds_b.append(b.current_piece.kind)
        a.hard_drop()
        b.hard_drop()
    assert kinds_a == kinds_b


def test_move_succeeds_over_empty_cells(engine):
    piece = put_piece(engine, TetrominoType.O, 5, 5)
    assert engine.move(1, 0)
    assert engine.move(0, 1)
    assert (piece.x, piece.y) == (6, 6)


def test_rejected_move_leaves_board_and_piece_untouched(engine):
    piece = put_piece(engine, TetrominoType.O, 0, 5)
    engine.grid.grid[5, 2] = 1
    board_before = engine.grid.clone_state()
    shape_before = piece.shape.copy()
    assert engine.move(-1, 0) is False
    assert engine.move(1, 0) is False
    assert (piece.x, piece.y) == (0, 5)
    assert np.array_equal(engine.grid.grid, board_before)
    assert np.array_equal(piece.shape, shape_before)


def test_o_piece_hard_drop_on_empty_board(engine):
    put_piece(engine, TetrominoType.O, 9, 0)
    distance = engine.hard_drop()
    assert distance == 18
    assert engine.grid.occupied_count() == 4
    assert engine.grid.grid[18:, 9:11].all()
    assert engine.lines == 0
    assert engine.score == 18 * 2


def test_vertical_i_completes_bottom_row(engine):
    fill_rows(engine, [19], gap_col=5)
    put_piece(engine, TetrominoType.I, 3, 0, turns=1)
    distance = engine.hard_drop()
    assert distance == 16
    assert engine.lines == 1
    assert engine.score == 100 * 1 + 16 * 2
    assert engine.grid.grid.shape == (20, 20)
    # the three I cells above the cleared row dropped by one
    assert engine.grid.occupied_count() == 3
    assert engine.grid.grid[17:, 5].all()


@pytest.mark.parametrize("rows,expected", [(1, 100), (2, 300), (3, 500), (4, 800)])
@pytest.mark.parametrize("level", [1, 3])
def test_line_clear_score_scaled_by_level(engine, rows, expected, level):
    engine.level = level
    fill_rows(engine, range(20 - rows, 20), gap_col=0)
    put_piece(engine, TetrominoType.I, -2, 0, turns=1)
    distance = engine.hard_drop()
    assert engine.lines == rows
    assert engine.score == expected * level + distance * 2


def test_lock_adds_piece_cells_and_releases_piece(engine):
    piece = put_piece(engine, TetrominoType.T, 4, 10)
    before = engine.grid.occupied_count()
    result = engine.lock()
    assert result.locked
    assert result.lines_cleared == 0
    assert engine.grid.occupied_count() == before + 4
    assert engine.current_piece is not piece
    assert engine.grid.grid[10, 5] == int(TetrominoType.T)


def test_blocked_spawn_ends_the_game(store):
    engine = make_engine(store=store)
    engine.score = 450
    fill_rows(engine, range(0, 4), gap_col=19)
    engine.current_piece = None
    assert engine.spawn() is None
    assert engine.phase is GamePhase.GAME_OVER
    assert engine.piece_state is PieceState.TERMINAL
    assert engine.current_piece is None
    assert store.value == 450
    assert engine.snapshot().high_score == 450


def test_game_over_is_terminal_until_restart(engine):
    fill_rows(engine, range(0, 4), gap_col=19)
    engine.current_piece = None
    engine.spawn()
    assert engine.move_left() is False
    assert engine.hold() is False
    engine.toggle_pause()
    assert engine.phase is GamePhase.GAME_OVER
    assert engine.tick(5000).locked is False
    engine.restart()
    assert engine.phase is GamePhase.PLAYING
    assert engine.grid.occupied_count() == 0
    assert (engine.score, engine.lines, engine.level) == (0, 0, 1)


def test_restart_mid_game_starts_a_fresh_session(engine):
    engine.score = 40
    fill_rows(engine, [19], gap_col=5)
    engine.restart()
    assert engine.phase is GamePhase.PLAYING
    assert engine.score == 0
    assert engine.grid.occupied_count() == 0
    assert engine.current_piece is not None


def test_spawn_keeps_an_active_piece(engine):
    piece = engine.current_piece
    upcoming = engine.next_kind
    assert engine.spawn() is None
    assert engine.current_piece is piece
    assert engine.next_kind == upcoming


def test_rotation_kicks_off_the_left_wall(engine):
    piece = put_piece(engine, TetrominoType.I, -2, 5, turns=1)
    assert engine.rotate_cw()
    # unkicked and the first five kicks stay out of bounds; (2, 0) fits
    assert (piece.x, piece.y) == (0, 5)
    assert piece.cells() == [(0, 7), (1, 7), (2, 7), (3, 7)]


def test_rotation_without_room_is_a_no_op(engine):
    engine.grid.grid[:, :] = 1
    engine.grid.grid[19, 0:4] = 0
    piece = put_piece(engine, TetrominoType.I, 0, 18)
    shape_before = piece.shape.copy()
    assert engine.rotate_cw() is False
    assert engine.rotate_ccw() is False
    assert np.array_equal(piece.shape, shape_before)
    assert (piece.x, piece.y, piece.rotation) == (0, 18, 0)


def test_rotate_in_place_when_free(engine):
    piece = put_piece(engine, TetrominoType.T, 8, 8)
    assert engine.rotate_ccw()
    assert (piece.x, piece.y, piece.rotation) == (8, 8, 3)


def test_kick_order_is_fixed():
    assert WALL_KICKS == ((1, 0), (-1, 0), (0, -1), (1, -1), (-1, -1), (2, 0), (-2, 0), (0, -2))


def test_soft_drop_awards_per_cell_and_does_not_lock(engine):
    piece = put_piece(engine, TetrominoType.O, 0, 17)
    assert engine.soft_drop()
    assert engine.score == 1
    assert engine.soft_drop() is False
    assert engine.score == 1
    assert engine.current_piece is piece
    assert engine.grid.occupied_count() == 0


def test_ghost_cells_show_landing_spot(engine):
    put_piece(engine, TetrominoType.O, 2, 0)
    assert sorted(engine.ghost_cells()) == [(2, 18), (2, 19), (3, 18), (3, 19)]


def test_hold_stores_then_swaps_once_per_spawn(engine):
    first = engine.current_piece.kind
    upcoming = engine.next_kind
    assert engine.hold()
    assert engine.hold_kind == first
    assert engine.current_piece.kind == upcoming
    assert engine.can_hold is False
    assert engine.hold() is False

    engine.hard_drop()
    assert engine.can_hold
    second = engine.current_piece.kind
    assert engine.hold()
    assert engine.current_piece.kind == first
    assert engine.hold_kind == second
    assert engine.current_piece.y == 0


def test_hold_swap_blocked_at_spawn_ends_the_game(engine):
    engine.hold_kind = TetrominoType.O
    current = engine.current_piece.kind
    fill_rows(engine, range(0, 4))
    assert engine.hold()
    assert engine.phase is GamePhase.GAME_OVER
    assert engine.current_piece is None
    assert engine.hold_kind == current


def test_hold_disabled_in_flip_variant():
    engine = TetrisEngine(GameConfig.flip(random_seed=1))
    engine.start()
    assert engine.hold() is False
    assert engine.hold_kind is None


def test_tick_moves_one_row_per_interval(engine):
    piece = engine.current_piece
    y = piece.y
    engine.tick(799)
    assert piece.y == y
    engine.tick(1)
    assert piece.y == y + 1
    # a huge frame still only advances one row
    engine.tick(10_000)
    assert piece.y == y + 2


def test_tick_locks_when_blocked(engine):
    put_piece(engine, TetrominoType.O, 0, 18)
    result = engine.tick(800)
    assert result.locked
    assert engine.grid.grid[18:, 0:2].all()


def test_resume_discards_paused_time(engine):
    piece = engine.current_piece
    y = piece.y
    engine.tick(500)
    engine.toggle_pause()
    assert engine.phase is GamePhase.PAUSED
    engine.tick(5_000)
    assert piece.y == y
    assert engine.move_left() is False
    engine.toggle_pause()
    assert engine.phase is GamePhase.PLAYING
    engine.tick(500)
    assert piece.y == y
    engine.tick(300)
    assert piece.y == y + 1


def test_clear_animation_delays_next_spawn():
    engine = make_engine(clear_delay_ms=700)
    fill_rows(engine, [19], gap_col=5)
    put_piece(engine, TetrominoType.I, 3, 0, turns=1)
    engine.hard_drop()
    assert engine.piece_state is PieceState.ANIMATING
    assert engine.current_piece is None
    assert engine.rotate_cw() is False
    engine.tick(699)
    assert engine.current_piece is None
    engine.tick(1)
    assert engine.piece_state is PieceState.FALLING
    assert engine.current_piece is not None


def test_level_up_speeds_fall(engine):
    engine.lines = 9
    fill_rows(engine, [19], gap_col=5)
    put_piece(engine, TetrominoType.I, 3, 0, turns=1)
    distance = engine.hard_drop()
    assert engine.level == 2
    assert engine.drop_interval == 750
    # scored at the level the clear happened on
    assert engine.score == 100 + distance * 2


def test_drop_interval_has_a_floor():
    config = GameConfig()
    assert config.drop_interval(1) == 800
    assert config.drop_interval(5) == 600
    assert config.drop_interval(100) == 50


@pytest.mark.parametrize("bad", [
    dict(width=2),
    dict(gravity=0),
    dict(lines_per_level=0),
    dict(min_drop_ms=0),
    dict(flip_threshold=0),
    dict(flip_band_rows=20),
])
def test_config_rejects_bad_values(bad):
    with pytest.raises(ValueError):
        GameConfig(**bad)


def test_go_home_discards_session(engine):
    engine.hard_drop()
    engine.go_home()
    assert engine.phase is GamePhase.START
    assert engine.current_piece is None
    assert engine.grid.occupied_count() == 0
    assert engine.score == 0


def test_apply_routes_actions(engine):
    piece = engine.current_piece
    x = piece.x
    assert engine.apply(Action.LEFT)
    assert piece.x == x - 1
    assert engine.apply(Action.RIGHT)
    assert piece.x == x
    assert engine.apply(Action.NONE) is False
    assert engine.apply(Action.PAUSE)
    assert engine.phase is GamePhase.PAUSED
    assert engine.apply(Action.HARD_DROP) is False
    assert engine.apply(Action.PAUSE)
    assert engine.apply(Action.HARD_DROP)
    assert engine.grid.occupied_count() == 4


def test_snapshot_and_state_overlay(engine):
    put_piece(engine, TetrominoType.O, 0, 0)
    snap = engine.snapshot()
    assert snap.phase is GamePhase.PLAYING
    assert snap.piece_kind == TetrominoType.O
    assert sorted(snap.active_cells) == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert snap.board.shape == (20, 20)
    snap.board[0, 0] = 5
    assert engine.grid.grid[0, 0] == 0
    state = engine.get_state()
    assert state[0, 0] == -int(TetrominoType.O)
