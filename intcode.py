#!/usr/bin/env python3
"""Intcode interpreter: resumable machine that stops at every output."""

from __future__ import annotations

import argparse
import logging
from enum import IntEnum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class IntcodeError(RuntimeError):
    pass


class DecodeError(IntcodeError):
    pass


class MachineHalted(IntcodeError):
    pass


class InputRequired(IntcodeError):
    pass


class MemoryAddressError(IntcodeError):
    pass


class MemoryLimitError(IntcodeError):
    pass


class ProgramFormatError(ValueError):
    pass


class Opcode(IntEnum):
    ADD = 1
    MULTIPLY = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_TRUE = 5
    JUMP_IF_FALSE = 6
    LESS_THAN = 7
    EQUALS = 8
    ADJUST_RELATIVE_BASE = 9
    HALT = 99


class ParameterMode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


# Operand count per opcode, destination operand included.
ARITY = {
    Opcode.ADD: 3,
    Opcode.MULTIPLY: 3,
    Opcode.INPUT: 1,
    Opcode.OUTPUT: 1,
    Opcode.JUMP_IF_TRUE: 2,
    Opcode.JUMP_IF_FALSE: 2,
    Opcode.LESS_THAN: 3,
    Opcode.EQUALS: 3,
    Opcode.ADJUST_RELATIVE_BASE: 1,
    Opcode.HALT: 0,
}


def parse_program(text: str) -> List[int]:
    entries = [tok.strip() for tok in text.strip().split(",")]
    if entries and entries[-1] == "":
        entries.pop()
    if not entries:
        raise ProgramFormatError("empty program")
    program = []
    for idx, tok in enumerate(entries):
        try:
            program.append(int(tok))
        except ValueError:
            raise ProgramFormatError(f"bad entry {tok!r} at index {idx}") from None
    return program


def load_program(path) -> List[int]:
    return parse_program(Path(path).read_text())


def decode(value: int) -> Tuple[Opcode, Tuple[ParameterMode, ...]]:
    """Split an instruction word into its opcode and per-operand modes.

    Mode digits are read right to left starting at the hundreds digit;
    missing digits are POSITION.
    """
    if value < 0:
        raise DecodeError(f"negative instruction {value}")
    try:
        opcode = Opcode(value % 100)
    except ValueError:
        raise DecodeError(f"unknown opcode {value % 100} in {value}") from None
    digits = value // 100
    modes = []
    for _ in range(ARITY[opcode]):
        try:
            modes.append(ParameterMode(digits % 10))
        except ValueError:
            raise DecodeError(f"unknown parameter mode {digits % 10} in {value}") from None
        digits //= 10
    return opcode, tuple(modes)


class Memory:
    """Zero-backed integer memory that grows on writes past its end."""

    def __init__(self, initial: Iterable[int], max_size: Optional[int] = None):
        self.cells = list(initial)
        self.max_size = max_size
        if max_size is not None and len(self.cells) > max_size:
            raise MemoryLimitError(f"program of {len(self.cells)} cells exceeds limit {max_size}")

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, address: int) -> int:
        if address < 0:
            raise MemoryAddressError(f"read at negative address {address}")
        if address >= len(self.cells):
            return 0
        return self.cells[address]

    def __setitem__(self, address: int, value: int) -> None:
        if address < 0:
            raise MemoryAddressError(f"write at negative address {address}")
        if address >= len(self.cells):
            if self.max_size is not None and address >= self.max_size:
                raise MemoryLimitError(f"write at {address} exceeds limit {self.max_size}")
            self.cells.extend([0] * (address + 1 - len(self.cells)))
        self.cells[address] = value


class IntcodeMachine:
    def __init__(self, program: Iterable[int], max_memory: Optional[int] = None):
        self.memory = Memory(program, max_size=max_memory)
        self._ip = 0
        self._relative_base = 0
        self._halted = False

    @property
    def ip(self) -> int:
        return self._ip

    @property
    def relative_base(self) -> int:
        return self._relative_base

    @property
    def halted(self) -> bool:
        return self._halted

    def peek(self, address: int) -> int:
        return self.memory[address]

    def _next_parameter(self, mode: ParameterMode) -> int:
        raw = self.memory[self._ip]
        self._ip += 1
        if mode == ParameterMode.IMMEDIATE:
            return raw
        if mode == ParameterMode.RELATIVE:
            return self.memory[raw + self._relative_base]
        return self.memory[raw]

    def _next_target(self, mode: ParameterMode) -> int:
        raw = self.memory[self._ip]
        self._ip += 1
        if mode == ParameterMode.RELATIVE:
            return raw + self._relative_base
        return raw

    def run(self, value: Optional[int] = None) -> Optional[int]:
        """Execute until the next output (returned) or halt (returns None).

        ``value`` feeds at most one INPUT instruction during this call.
        """
        if self._halted:
            raise MachineHalted("machine already halted")
        pending = value
        while True:
            start = self._ip
            opcode, modes = decode(self.memory[start])
            self._ip += 1

            if opcode == Opcode.HALT:
                self._halted = True
                logger.debug("halted at %d", start)
                return None
            if opcode == Opcode.ADD:
                a = self._next_parameter(modes[0])
                b = self._next_parameter(modes[1])
                self.memory[self._next_target(modes[2])] = a + b
            elif opcode == Opcode.MULTIPLY:
                a = self._next_parameter(modes[0])
                b = self._next_parameter(modes[1])
                self.memory[self._next_target(modes[2])] = a * b
            elif opcode == Opcode.INPUT:
                if pending is None:
                    self._ip = start
                    if value is None:
                        raise InputRequired(f"input needed at {start} but none was given")
                    raise InputRequired(f"second input needed at {start} in one run")
                self.memory[self._next_target(modes[0])] = pending
                pending = None
            elif opcode == Opcode.OUTPUT:
                return self._next_parameter(modes[0])
            elif opcode == Opcode.JUMP_IF_TRUE:
                if self._next_parameter(modes[0]) != 0:
                    self._ip = self._next_parameter(modes[1])
                else:
                    self._ip += 1
            elif opcode == Opcode.JUMP_IF_FALSE:
                if self._next_parameter(modes[0]) == 0:
                    self._ip = self._next_parameter(modes[1])
                else:
                    self._ip += 1
            elif opcode == Opcode.LESS_THAN:
                a = self._next_parameter(modes[0])
                b = self._next_parameter(modes[1])
                self.memory[self._next_target(modes[2])] = 1 if a < b else 0
            elif opcode == Opcode.EQUALS:
                a = self._next_parameter(modes[0])
                b = self._next_parameter(modes[1])
                self.memory[self._next_target(modes[2])] = 1 if a == b else 0
            elif opcode == Opcode.ADJUST_RELATIVE_BASE:
                self._relative_base += self._next_parameter(modes[0])

    def outputs(self, inputs: Iterable[int] = ()) -> List[int]:
        """Run to halt, feeding ``inputs`` one at a time as they are demanded."""
        feed = iter(inputs)
        produced = []
        value = None
        while True:
            try:
                out = self.run(value)
            except InputRequired:
                try:
                    value = next(feed)
                except StopIteration:
                    raise InputRequired("input stream exhausted") from None
                continue
            value = None
            if out is None:
                return produced
            produced.append(out)


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Run an Intcode listing and print its outputs")
    ap.add_argument("program", help="file with comma-separated integers")
    ap.add_argument("--input", type=int, action="append", default=[], help="input value (repeatable)")
    ap.add_argument("--max-memory", type=int, default=None, help="cap on memory cells")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    try:
        machine = IntcodeMachine(load_program(args.program), max_memory=args.max_memory)
        produced = machine.outputs(args.input)
    except (IntcodeError, ProgramFormatError) as exc:
        raise SystemExit(f"error: {exc}")
    for out in produced:
        print(out)


if __name__ == "__main__":
    main()
