"""Tests for the Board mechanics."""

import copy
import random

import pytest
from seabattle.engine.board import MAX_PLACEMENT_ATTEMPTS, Board, CellState, ShotResult
from seabattle.engine.fleet import BOARD_SIZE, FLEET, FLEET_WEIGHT


def _ship_groups(board: Board) -> list[list[tuple[int, int]]]:
    """Ship cells grouped by 8-connectivity, so touching ships would merge."""
    ships = {
        (x, y)
        for x in range(BOARD_SIZE)
        for y in range(BOARD_SIZE)
        if board.cell(x, y) is CellState.SHIP
    }
    groups = []
    while ships:
        stack = [ships.pop()]
        group = []
        while stack:
            x, y = stack.pop()
            group.append((x, y))
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    neighbour = (x + dx, y + dy)
                    if neighbour in ships:
                        ships.remove(neighbour)
                        stack.append(neighbour)
        groups.append(sorted(group))
    return groups


def _is_straight_run(cells: list[tuple[int, int]]) -> bool:
    xs = {x for x, _ in cells}
    ys = {y for _, y in cells}
    if len(xs) == 1:
        return sorted(ys) == list(range(min(ys), min(ys) + len(cells)))
    if len(ys) == 1:
        return sorted(xs) == list(range(min(xs), min(xs) + len(cells)))
    return False


def _count(board: Board, state: CellState) -> int:
    return sum(1 for cell in board.cells if cell is state)


@pytest.mark.parametrize("seed", range(25))
def test_random_board_holds_full_fleet_without_touching(seed: int) -> None:
    board = Board.generate_random(random.Random(seed))

    assert _count(board, CellState.SHIP) == FLEET_WEIGHT == 20
    assert _count(board, CellState.EMPTY) == BOARD_SIZE * BOARD_SIZE - 20
    assert board.remaining_ship_weight == 20

    groups = _ship_groups(board)
    assert all(_is_straight_run(group) for group in groups), "Ships must be straight and apart"
    assert sorted((len(group) for group in groups), reverse=True) == [
        ship_type.length for ship_type in FLEET
    ]


def test_generation_is_deterministic_for_a_seed() -> None:
    first = Board.generate_random(random.Random(2024))
    second = Board.generate_random(random.Random(2024))
    assert first == second


def test_scripted_layout_snapshot(layout_board: Board, layout_rows: list[str]) -> None:
    assert [layout_board.render_row(y) for y in range(BOARD_SIZE)] == layout_rows


def test_generation_restarts_after_exhausting_attempts(
    scripted_random, layout_script: list[int], layout_rows: list[str]
) -> None:
    # Ship start (0, 0) pointing up never fits, so every attempt fails.
    dead_end = [0, 2] * MAX_PLACEMENT_ATTEMPTS
    rng = scripted_random(dead_end + layout_script)

    board = Board.generate_random(rng)

    assert rng.calls == len(dead_end) + len(layout_script)
    assert [board.render_row(y) for y in range(BOARD_SIZE)] == layout_rows


def test_restart_discards_ships_placed_before_the_dead_end(
    scripted_random, layout_script: list[int], layout_rows: list[str]
) -> None:
    first_ship_then_dead_end = [56, 0] + [0, 2] * MAX_PLACEMENT_ATTEMPTS
    board = Board.generate_random(scripted_random(first_ship_then_dead_end + layout_script))

    assert [board.render_row(y) for y in range(BOARD_SIZE)] == layout_rows
    assert board.remaining_ship_weight == 20


def test_single_ship_at_origin_is_killed_by_one_shot(layout_board: Board) -> None:
    assert layout_board.cell(0, 0) is CellState.SHIP

    assert layout_board.shoot(0, 0) is ShotResult.KILL
    assert layout_board.remaining_ship_weight == 19
    assert layout_board.cell(0, 0) is CellState.KILLED


def test_four_deck_ship_reports_kill_only_on_last_segment(layout_board: Board) -> None:
    # Battleship occupies column 7, rows 0-3.
    assert layout_board.shoot(7, 1) is ShotResult.HIT
    assert layout_board.shoot(7, 3) is ShotResult.HIT
    assert layout_board.shoot(7, 0) is ShotResult.HIT
    assert layout_board.shoot(7, 2) is ShotResult.KILL
    assert layout_board.remaining_ship_weight == 16


def test_horizontal_destroyer_is_sunk_by_row_scan(layout_board: Board) -> None:
    assert layout_board.shoot(4, 6) is ShotResult.HIT
    assert layout_board.shoot(3, 6) is ShotResult.KILL


def test_miss_and_repeat_shots_leave_board_unchanged(layout_board: Board) -> None:
    before = copy.deepcopy(layout_board)
    assert layout_board.shoot(2, 2) is ShotResult.MISS
    assert layout_board == before

    layout_board.shoot(1, 3)
    weight = layout_board.remaining_ship_weight
    assert layout_board.shoot(1, 3) is ShotResult.MISS
    assert layout_board.remaining_ship_weight == weight


def test_weight_drops_by_one_per_new_kill_and_never_rises(
    layout_board: Board, layout_ship_cells: list[tuple[int, int]]
) -> None:
    previous = layout_board.remaining_ship_weight
    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            was_ship = layout_board.cell(x, y) is CellState.SHIP
            layout_board.shoot(x, y)
            expected = previous - 1 if was_ship else previous
            assert layout_board.remaining_ship_weight == expected
            previous = expected
    assert layout_board.remaining_ship_weight == 0
    assert len(layout_ship_cells) == 20


def test_own_board_is_destroyed_exactly_at_last_segment(
    layout_board: Board, layout_ship_cells: list[tuple[int, int]]
) -> None:
    for x, y in layout_ship_cells[:-1]:
        layout_board.shoot(x, y)
        assert not layout_board.is_destroyed()
    last_x, last_y = layout_ship_cells[-1]
    layout_board.shoot(last_x, last_y)
    assert layout_board.is_destroyed()


def test_tracking_board_starts_unknown() -> None:
    board = Board.unknown()
    assert _count(board, CellState.UNKNOWN) == BOARD_SIZE * BOARD_SIZE
    assert board.render_row(0) == "? ? ? ? ? ? ? ?"
    assert not board.is_destroyed()


def test_mark_miss_and_hit_only_touch_unknown_cells() -> None:
    board = Board.unknown()
    board.mark_miss(1, 1)
    board.mark_hit(1, 1)
    assert board.cell(1, 1) is CellState.EMPTY
    assert board.remaining_ship_weight == 20

    board.mark_hit(2, 2)
    board.mark_miss(2, 2)
    assert board.cell(2, 2) is CellState.KILLED
    assert board.remaining_ship_weight == 19


def test_kill_of_isolated_ship_marks_its_eight_neighbours() -> None:
    board = Board.unknown()
    board.mark_kill(3, 3)

    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            if (x, y) == (3, 3):
                expected = CellState.KILLED
            elif abs(x - 3) <= 1 and abs(y - 3) <= 1:
                expected = CellState.EMPTY
            else:
                expected = CellState.UNKNOWN
            assert board.cell(x, y) is expected, (x, y)
    assert board.remaining_ship_weight == 19


def test_kill_in_corner_marks_three_neighbours() -> None:
    board = Board.unknown()
    board.mark_kill(7, 7)
    assert _count(board, CellState.EMPTY) == 3
    assert {(6, 6), (6, 7), (7, 6)} == {
        (x, y)
        for x in range(BOARD_SIZE)
        for y in range(BOARD_SIZE)
        if board.cell(x, y) is CellState.EMPTY
    }


def test_kill_leaves_known_neighbours_untouched() -> None:
    board = Board.unknown()
    board.mark_miss(2, 3)
    board.mark_kill(3, 3)
    assert board.cell(2, 3) is CellState.EMPTY
    assert _count(board, CellState.EMPTY) == 8
    assert _count(board, CellState.KILLED) == 1


@pytest.mark.parametrize(
    "hits, kill",
    [
        ([(2, 4), (3, 4)], (4, 4)),
        ([(2, 4), (4, 4)], (3, 4)),
        ([(4, 4), (3, 4)], (2, 4)),
    ],
)
def test_kill_of_horizontal_ship_marks_whole_perimeter(hits, kill) -> None:
    board = Board.unknown()
    for x, y in hits:
        board.mark_hit(x, y)
    board.mark_kill(*kill)

    ship = {(2, 4), (3, 4), (4, 4)}
    perimeter = {(x, y) for x in range(1, 6) for y in range(3, 6)} - ship
    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            if (x, y) in ship:
                assert board.cell(x, y) is CellState.KILLED
            elif (x, y) in perimeter:
                assert board.cell(x, y) is CellState.EMPTY, (x, y)
            else:
                assert board.cell(x, y) is CellState.UNKNOWN, (x, y)
    assert board.remaining_ship_weight == 17


def test_kill_of_vertical_ship_on_edge_marks_whole_perimeter() -> None:
    board = Board.unknown()
    board.mark_hit(0, 1)
    board.mark_hit(0, 2)
    board.mark_kill(0, 3)

    ship = {(0, 1), (0, 2), (0, 3)}
    perimeter = {(x, y) for x in range(0, 2) for y in range(0, 5)} - ship
    empties = {
        (x, y)
        for x in range(BOARD_SIZE)
        for y in range(BOARD_SIZE)
        if board.cell(x, y) is CellState.EMPTY
    }
    assert empties == perimeter


@pytest.mark.parametrize("mark", ["mark_miss", "mark_hit", "mark_kill"])
def test_duplicate_marks_are_idempotent(mark: str) -> None:
    once = Board.unknown()
    getattr(once, mark)(4, 5)

    twice = Board.unknown()
    getattr(twice, mark)(4, 5)
    getattr(twice, mark)(4, 5)

    assert once == twice


def test_apply_result_dispatches_to_marks() -> None:
    board = Board.unknown()
    board.apply_result(0, 0, ShotResult.MISS)
    board.apply_result(5, 5, ShotResult.HIT)
    board.apply_result(2, 2, ShotResult.KILL)

    assert board.cell(0, 0) is CellState.EMPTY
    assert board.cell(5, 5) is CellState.KILLED
    assert board.cell(2, 2) is CellState.KILLED
    assert board.cell(1, 1) is CellState.EMPTY
    assert board.remaining_ship_weight == 18


def test_tracking_board_is_destroyed_after_twenty_marked_hits() -> None:
    board = Board.unknown()
    targets = [(x, y) for y in range(BOARD_SIZE) for x in range(BOARD_SIZE)][:20]
    for x, y in targets[:-1]:
        board.mark_hit(x, y)
        assert not board.is_destroyed()
    board.mark_kill(*targets[-1])
    assert board.is_destroyed()


def test_render_row_uses_cell_symbols(layout_board: Board) -> None:
    layout_board.shoot(0, 0)
    tracking = Board.unknown()
    tracking.mark_miss(1, 0)
    tracking.mark_hit(2, 0)

    assert layout_board.render_row(0) == "x . . o . o . o"
    assert tracking.render_row(0) == "? . x ? ? ? ? ?"
    assert len(tracking.render_row(0)) == 2 * BOARD_SIZE - 1
