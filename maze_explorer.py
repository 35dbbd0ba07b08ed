"""Map an unknown maze by driving a repair droid depth-first."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Tuple

from intcode import IntcodeMachine

logger = logging.getLogger(__name__)

Point = Tuple[int, int]
Grid = Dict[Point, str]

WALL = "#"
OPEN = "."
TARGET = "O"


class DroidError(RuntimeError):
    pass


class PositionDesyncError(DroidError):
    pass


class Direction(IntEnum):
    NORTH = 1
    SOUTH = 2
    WEST = 3
    EAST = 4

    @property
    def inverse(self) -> "Direction":
        return INVERSE[self]

    @property
    def delta(self) -> Tuple[int, int]:
        return DELTAS[self]

    def step(self, point: Point) -> Point:
        dx, dy = DELTAS[self]
        return (point[0] + dx, point[1] + dy)


INVERSE = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
    Direction.EAST: Direction.WEST,
}
DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
    Direction.EAST: (1, 0),
}
# Exploration order.
DIRECTIONS = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


class MoveStatus(IntEnum):
    HIT_WALL = 0
    MOVED = 1
    FOUND_TARGET = 2


def neighbors(point: Point) -> List[Point]:
    return [d.step(point) for d in DIRECTIONS]


class Droid:
    """Movement protocol on top of an Intcode machine.

    Every command sent is kept in ``commands``; the ones the droid actually
    carried out are kept in ``moves``.
    """

    def __init__(self, machine: IntcodeMachine):
        self.machine = machine
        self.commands: List[Direction] = []
        self.moves: List[Direction] = []

    def move(self, direction: Direction) -> MoveStatus:
        self.commands.append(direction)
        out = self.machine.run(int(direction))
        if out is None:
            raise DroidError(f"machine halted on command {direction.name}")
        try:
            status = MoveStatus(out)
        except ValueError:
            raise DroidError(f"unknown move status {out}") from None
        if status != MoveStatus.HIT_WALL:
            self.moves.append(direction)
        return status


class GridDroid:
    """Droid answered from a known maze; cells missing from ``grid`` are walls."""

    def __init__(self, grid: Grid, start: Point = (0, 0)):
        self.grid = grid
        self.position = start
        self.commands: List[Direction] = []
        self.moves: List[Direction] = []

    def move(self, direction: Direction) -> MoveStatus:
        self.commands.append(direction)
        nxt = direction.step(self.position)
        kind = self.grid.get(nxt, WALL)
        if kind == WALL:
            return MoveStatus.HIT_WALL
        self.position = nxt
        self.moves.append(direction)
        if kind == TARGET:
            return MoveStatus.FOUND_TARGET
        return MoveStatus.MOVED


@dataclass
class _Frame:
    point: Point
    came_from: Optional[Direction]
    next_dir: int = 0


def explore(droid, origin: Point = (0, 0)) -> Tuple[List[Point], Grid]:
    """Exhaustively map the reachable maze around ``origin``.

    The droid must stand on ``origin`` when called and is back there on
    return. Neighbours on the current path are skipped; every forward move
    is undone with the inverse command once its subtree is done. ``path``
    holds the cells stepped onto from ``origin`` to the target, so its
    length is the move count; the shortest discovered branch wins.
    """
    grid: Grid = {origin: OPEN}
    stack = [_Frame(origin, None)]
    on_path = {origin}
    best: Optional[List[Point]] = None

    while stack:
        frame = stack[-1]
        if frame.next_dir == len(DIRECTIONS):
            stack.pop()
            on_path.discard(frame.point)
            if frame.came_from is not None:
                back = frame.came_from.inverse
                logger.debug("backtrack %s from %s", back.name, frame.point)
                if droid.move(back) == MoveStatus.HIT_WALL:
                    raise PositionDesyncError(
                        f"backtrack {back.name} from {frame.point} hit a wall"
                    )
            continue

        direction = DIRECTIONS[frame.next_dir]
        frame.next_dir += 1
        nxt = direction.step(frame.point)
        if nxt in on_path:
            continue

        status = droid.move(direction)
        if status == MoveStatus.HIT_WALL:
            grid[nxt] = WALL
            continue
        if status == MoveStatus.FOUND_TARGET:
            grid[nxt] = TARGET
            found = [f.point for f in stack[1:]] + [nxt]
            if best is None or len(found) < len(best):
                logger.debug("target at %s after %d moves", nxt, len(found))
                best = found
        elif grid.get(nxt) != TARGET:
            grid[nxt] = OPEN
        stack.append(_Frame(nxt, direction))
        on_path.add(nxt)

    logger.debug("mapped %d cells, %d commands", len(grid), len(droid.commands))
    return best or [], grid


def replay_commands(moves: Iterable[Direction], origin: Point = (0, 0)) -> Point:
    point = origin
    for direction in moves:
        point = direction.step(point)
    return point


def render_grid(grid: Grid, position: Optional[Point] = None, origin: Point = (0, 0)) -> str:
    if not grid:
        return ""
    xs = [x for x, _ in grid]
    ys = [y for _, y in grid]
    if position is not None:
        xs.append(position[0])
        ys.append(position[1])
    lines = []
    for y in range(min(ys), max(ys) + 1):
        row = []
        for x in range(min(xs), max(xs) + 1):
            if (x, y) == position:
                row.append("D")
            elif (x, y) == origin:
                row.append("0")
            else:
                row.append(grid.get((x, y), " "))
        lines.append("".join(row).rstrip())
    return "\n".join(lines)


def parse_maze(text: str, origin: Point = (0, 0)) -> Tuple[Grid, Point]:
    """Parse a drawn maze; ``D`` marks the droid start and becomes ``origin``."""
    cells = {}
    start = None
    for y, line in enumerate(text.splitlines()):
        for x, ch in enumerate(line):
            if ch == " ":
                continue
            if ch == "D":
                if start is not None:
                    raise ValueError("multiple droid markers")
                start = (x, y)
                ch = OPEN
            elif ch not in (WALL, OPEN, TARGET):
                raise ValueError(f"unknown maze character {ch!r} at {x},{y}")
            cells[(x, y)] = ch
    if start is None:
        raise ValueError("maze has no droid marker")
    dx = origin[0] - start[0]
    dy = origin[1] - start[1]
    grid = {(x + dx, y + dy): ch for (x, y), ch in cells.items()}
    return grid, origin

