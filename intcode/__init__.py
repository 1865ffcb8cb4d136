"""
IntCode Machine
===============
A small virtual machine for programs encoded as comma-separated integers.

Architecture:
    ┌──────────────┐    ┌───────────┐    ┌──────────────┐    ┌────────────┐
    │ Program text │───>│  Memory   │───>│   Decoder    │───>│  Machine   │
    │ "1,0,0,0,99" │    │ (growable)│    │ (Instruction)│    │ (run/step) │
    └──────────────┘    └───────────┘    └──────────────┘    └────────────┘

    - cpu/digits.py:   base-N digit decomposition for the opcode mode field
    - cpu/decoder.py:  opcode word -> typed Instruction, plus a disassembler
    - mem/memory.py:   zero-filled, doubling, unbounded address space
    - machine.py:      fetch/decode/execute, suspend on empty input
    - amplifiers.py:   chains and feedback rings of cooperating machines
"""

__version__ = "1.0.0"

from .errors import (
    IntCodeError, ProgramParseError, DecodeError, IllegalOpcode, IllegalMode,
    DestinationError, InputUnderflow, AddressError,
)
from .cpu.digits import digits_reversed, from_digits_reversed
from .cpu.decoder import (
    Mode, Op, InstructionSet, Parameter, Instruction, decode_instruction, disassemble,
)
from .mem.memory import Memory
from .machine import IntCodeMachine, Status, parse_program
from .amplifiers import (
    PipelineStalled, run_amplifier_chain, run_feedback_loop, max_thruster_signal,
)
