from flood_fill import farthest_cells, iter_fill, time_to_fill
from maze_explorer import OPEN, TARGET, WALL, GridDroid, explore, parse_maze

EXAMPLE = "\n".join(
    [
        " ##",
        "#D.##",
        "#.#..#",
        "#.O.#",
        " ###",
    ]
)


def line(length):
    return {(x, 0): OPEN for x in range(length)}


def test_line_filled_from_middle():
    assert time_to_fill(line(5), {(2, 0)}) == 2


def test_line_filled_from_end():
    assert time_to_fill(line(5), {(0, 0)}) == 4


def test_start_covering_everything_takes_no_time():
    grid = line(3)
    assert time_to_fill(grid, set(grid)) == 0
    assert time_to_fill({}, set()) == 0


def test_example_maze_from_target():
    grid, _ = parse_maze(EXAMPLE)
    assert time_to_fill(grid, {(1, 2)}) == 4
    assert farthest_cells(grid, {(1, 2)}) == {(1, 0)}


def test_walls_and_unknown_cells_stop_the_fill():
    grid = {(0, 0): OPEN, (1, 0): WALL, (2, 0): OPEN, (0, 2): OPEN}
    assert time_to_fill(grid, {(0, 0)}) == 0


def test_target_is_not_entered():
    grid = {(0, 0): OPEN, (1, 0): TARGET, (2, 0): OPEN}
    assert time_to_fill(grid, {(0, 0)}) == 0


def test_frontiers_grow_the_filled_set():
    grid, _ = parse_maze(EXAMPLE)
    open_cells = {p for p, kind in grid.items() if kind == OPEN}
    filled = {(1, 2)}
    steps = 0
    for frontier in iter_fill(grid, filled):
        assert frontier
        assert not frontier & filled
        assert frontier <= open_cells
        filled |= frontier
        steps += 1
    assert steps <= len(open_cells)
    assert filled == open_cells | {(1, 2)}


def test_grid_is_not_modified():
    grid, _ = parse_maze(EXAMPLE)
    before = dict(grid)
    time_to_fill(grid, {(1, 2)})
    assert grid == before


def test_fill_after_exploration():
    maze, start = parse_maze(EXAMPLE)
    path, grid = explore(GridDroid(maze, start), start)
    assert time_to_fill(grid, {path[-1]}) == 4
