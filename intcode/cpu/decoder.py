"""
IntCode Machine — Instruction Decoder

Turns the words at the instruction pointer into a typed Instruction.

Opcode word layout (decimal):

    ...CBA OO
       │││ └┴─ operation code   (word % 100)
       ││└──── mode of operand 1 (first digit of word // 100)
       │└───── mode of operand 2
       └────── mode of operand 3

Missing mode digits default to POSITIONAL, so 1002 reads as
OO=02, modes (0, 1, 0).

Addressing modes:
  POSITIONAL  [n]   operand is an address
  IMMEDIATE   #n    operand is the value itself (never a destination)
  RELATIVE    ~n    operand is an offset from the relative base

Instruction sets:
  BASE       opcodes 1–8, 99; modes 0–1
  EXTENDED   BASE + opcode 9 (adjust relative base) + mode 2
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from ..config import MODE_RADIX, OPCODE_MODULUS
from ..errors import DecodeError, DestinationError, IllegalMode, IllegalOpcode
from .digits import digits_reversed


# ──────────────────────────────────────────────
# Addressing modes
# ──────────────────────────────────────────────

class Mode(Enum):
    POSITIONAL = 0
    IMMEDIATE = 1
    RELATIVE = 2


_MODE_PREFIX = {
    Mode.POSITIONAL: '[{}]',
    Mode.IMMEDIATE: '#{}',
    Mode.RELATIVE: '~{}',
}


# ──────────────────────────────────────────────
# Operations
# ──────────────────────────────────────────────
# Format: member = (code, mnemonic, operand_count, writes_last_operand)

class Op(Enum):
    ADD = (1, 'ADD', 3, True)
    MULTIPLY = (2, 'MUL', 3, True)
    INPUT = (3, 'IN', 1, True)
    OUTPUT = (4, 'OUT', 1, False)
    JUMP_IF_TRUE = (5, 'JNZ', 2, False)
    JUMP_IF_FALSE = (6, 'JZ', 2, False)
    LESS_THAN = (7, 'LT', 3, True)
    EQUALS = (8, 'EQ', 3, True)
    ADJUST_RELATIVE_BASE = (9, 'ARB', 1, False)
    HALT = (99, 'HALT', 0, False)

    def __init__(self, code: int, mnemonic: str, operand_count: int, writes: bool):
        self.code = code
        self.mnemonic = mnemonic
        self.operand_count = operand_count
        self.writes = writes


OPS_BY_CODE = {op.code: op for op in Op}


class InstructionSet(Enum):
    BASE = 'base'
    EXTENDED = 'extended'

    @property
    def ops(self) -> frozenset:
        return _SET_OPS[self]

    @property
    def modes(self) -> frozenset:
        return _SET_MODES[self]


_SET_OPS = {
    InstructionSet.BASE: frozenset(op for op in Op if op is not Op.ADJUST_RELATIVE_BASE),
    InstructionSet.EXTENDED: frozenset(Op),
}

_SET_MODES = {
    InstructionSet.BASE: frozenset((Mode.POSITIONAL, Mode.IMMEDIATE)),
    InstructionSet.EXTENDED: frozenset(Mode),
}


# ──────────────────────────────────────────────
# Decoded forms
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Parameter:
    value: int
    mode: Mode = Mode.POSITIONAL

    def __str__(self) -> str:
        return _MODE_PREFIX[self.mode].format(self.value)


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction.

    params holds exactly op.operand_count entries. For ops that write,
    the last parameter is the destination and may not be IMMEDIATE.
    """
    op: Op
    params: Tuple[Parameter, ...] = ()
    address: Optional[int] = None

    def __post_init__(self):
        if len(self.params) != self.op.operand_count:
            raise DecodeError(
                f"{self.op.mnemonic} takes {self.op.operand_count} operands, "
                f"got {len(self.params)}", self.address)
        if self.op.writes and self.destination.mode is Mode.IMMEDIATE:
            raise DestinationError(
                f"{self.op.mnemonic} destination {self.destination} is immediate",
                self.address)

    @property
    def size(self) -> int:
        """Words to advance the instruction pointer by; 0 for HALT."""
        if self.op is Op.HALT:
            return 0
        return 1 + len(self.params)

    @property
    def sources(self) -> Tuple[Parameter, ...]:
        return self.params[:-1] if self.op.writes else self.params

    @property
    def destination(self) -> Optional[Parameter]:
        return self.params[-1] if self.op.writes else None

    def __str__(self) -> str:
        text = self.op.mnemonic
        if self.sources:
            text += ' ' + ', '.join(str(p) for p in self.sources)
        if self.destination is not None:
            text += f" -> {self.destination}"
        return text


# ──────────────────────────────────────────────
# Decoding
# ──────────────────────────────────────────────

def decode_instruction(memory, ip: int,
                       instruction_set: InstructionSet = InstructionSet.EXTENDED
                       ) -> Instruction:
    """Decode the instruction at ip.

    memory only needs a read(addr) method; operand words past the end of
    a growable store read as zero.

    Raises:
        IllegalOpcode: negative word or unknown operation code
        IllegalMode: mode digit not supported by instruction_set
        DestinationError: immediate mode on a write destination
    """
    word = memory.read(ip)
    if word < 0:
        raise IllegalOpcode(f"Negative opcode word {word}", ip)

    mode_field, code = divmod(word, OPCODE_MODULUS)
    op = OPS_BY_CODE.get(code)
    if op is None or op not in instruction_set.ops:
        raise IllegalOpcode(f"Unknown opcode {code} (word {word})", ip)

    modes = digits_reversed(mode_field, MODE_RADIX)
    params = []
    for k in range(op.operand_count):
        digit = next(modes, 0)
        try:
            mode = Mode(digit)
        except ValueError:
            mode = None
        if mode is None or mode not in instruction_set.modes:
            raise IllegalMode(
                f"Mode digit {digit} for operand {k + 1} of {op.mnemonic} (word {word})",
                ip)
        params.append(Parameter(memory.read(ip + 1 + k), mode))

    return Instruction(op, tuple(params), ip)


class _Words:
    """Read-only, non-growing view of memory for listings. Cells past the
    end read as 0."""

    def __init__(self, memory):
        self._words = list(memory)

    def read(self, addr: int) -> int:
        if 0 <= addr < len(self._words):
            return self._words[addr]
        return 0

    def __len__(self) -> int:
        return len(self._words)


def disassemble(memory, start: int = 0, end: Optional[int] = None,
                instruction_set: InstructionSet = InstructionSet.EXTENDED
                ) -> Iterator[Tuple[int, str]]:
    """Yield (address, text) listing lines for memory[start:end].

    Words that do not decode are listed as DATA and skipped one word at
    a time. Listing works on a copy and never grows memory.
    """
    words = _Words(memory)
    if end is None:
        end = len(words)
    addr = start
    while addr < end:
        try:
            instr = decode_instruction(words, addr, instruction_set)
        except (DecodeError, DestinationError):
            instr = None
        width = (instr.size or 1) if instr is not None else 1
        if instr is None or addr + width > end:
            yield addr, f"DATA {words.read(addr)}"
            addr += 1
            continue
        yield addr, str(instr)
        addr += width
