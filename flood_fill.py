"""Breadth-first fill of the open cells of a mapped maze."""

from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Iterator

from maze_explorer import OPEN, Grid, Point, neighbors

logger = logging.getLogger(__name__)


def iter_fill(grid: Grid, start: Iterable[Point]) -> Iterator[FrozenSet[Point]]:
    """Yield the cells newly filled at each step until the fill stops spreading.

    Only OPEN cells are entered. ``grid`` is left untouched.
    """
    filled = set(start)
    frontier = frozenset(filled)
    while True:
        added = set()
        for point in frontier:
            for nxt in neighbors(point):
                if nxt in filled or grid.get(nxt) != OPEN:
                    continue
                filled.add(nxt)
                added.add(nxt)
        if not added:
            return
        frontier = frozenset(added)
        yield frontier


def time_to_fill(grid: Grid, start: Iterable[Point]) -> int:
    steps = 0
    for _ in iter_fill(grid, start):
        steps += 1
    logger.debug("fill stopped after %d steps", steps)
    return steps


def farthest_cells(grid: Grid, start: Iterable[Point]) -> FrozenSet[Point]:
    last: FrozenSet[Point] = frozenset()
    for frontier in iter_fill(grid, start):
        last = frontier
    return last
