#!/usr/bin/env python3
"""Oxygen system helper: map the droid maze, then time the oxygen refill.

Examples:
  python3 oxygen_solver.py input.txt
  python3 oxygen_solver.py input.txt --show --origin 20,20
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from flood_fill import time_to_fill
from intcode import IntcodeError, IntcodeMachine, ProgramFormatError, load_program
from maze_explorer import Droid, DroidError, Point, explore, render_grid


def parse_point(value: str) -> Point:
    parts = value.split(",")
    if len(parts) != 2:
        raise SystemExit(f"invalid point {value!r}, expected X,Y")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise SystemExit(f"invalid point {value!r}, expected X,Y") from None


def solve(program: List[int], origin: Point = (0, 0), max_memory: Optional[int] = None):
    droid = Droid(IntcodeMachine(program, max_memory=max_memory))
    path, grid = explore(droid, origin)
    fill = time_to_fill(grid, [path[-1]]) if path else None
    return path, grid, fill


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Find the oxygen system and time the refill")
    ap.add_argument("program", help="Intcode listing driving the droid")
    ap.add_argument("--origin", default="0,0", help="coordinates given to the start cell")
    ap.add_argument("--max-memory", type=int, default=None, help="cap on machine memory cells")
    ap.add_argument("--show", action="store_true", help="draw the mapped maze")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    origin = parse_point(args.origin)
    try:
        program = load_program(args.program)
        path, grid, fill = solve(program, origin, args.max_memory)
    except (IntcodeError, ProgramFormatError, DroidError) as exc:
        raise SystemExit(f"error: {exc}")

    if args.show:
        print(render_grid(grid, position=origin, origin=origin))
    if not path:
        print("target not found")
        return
    x, y = path[-1]
    print(f"target: {x},{y}")
    print(f"moves: {len(path)}")
    print(f"fill time: {fill}")


if __name__ == "__main__":
    main()
