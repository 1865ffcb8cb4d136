#!/usr/bin/env python3
"""
intcodekit — IntCode Machine Toolkit
====================================

One CLI for everything:
    intcodekit run     — Run a program to halt and print its output
    intcodekit disasm  — List a program as mnemonics
    intcodekit amp     — Search amplifier phase settings for the best signal

Usage:
    python intcodekit.py <command> [options]
    python intcodekit.py --help
    python intcodekit.py <command> --help

Examples:
    python intcodekit.py run day5.txt -i 5
    python intcodekit.py run day2.txt --set 1=12 --set 2=2 --peek 0 --base
    python intcodekit.py disasm day9.txt --range 0-40
    python intcodekit.py amp day7.txt --phases 5-9 --feedback
"""

import argparse
import logging
import sys

from intcode import __version__
from intcode.config import CHAIN_PHASES, DEFAULT_INSTRUCTION_SET, FEEDBACK_PHASES, LOG_FORMAT
from intcode.cpu.decoder import InstructionSet, disassemble
from intcode.errors import IntCodeError
from intcode.amplifiers import max_thruster_signal
from intcode.machine import IntCodeMachine, Status, parse_program

logger = logging.getLogger("intcodekit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intcodekit",
        description="IntCode Machine Toolkit — run, disassemble, search amplifier phases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  run        Run a program to halt and print its output log
  disasm     Disassemble a program to mnemonics
  amp        Find the phase setting order with the highest thruster signal
""",
    )
    parser.add_argument("--version", action="version", version=f"intcodekit {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", metavar="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Run a program to halt")
    p_run.add_argument("program", help="Program text file")
    p_run.add_argument("-i", "--input", action="append", default=[],
                       help="Input values, comma separated (repeatable)")
    p_run.add_argument("--set", action="append", default=[], metavar="ADDR=VALUE",
                       help="Patch memory before running (repeatable)")
    p_run.add_argument("--peek", action="append", type=int, default=[], metavar="ADDR",
                       help="Print memory cell after halt (repeatable)")
    p_run.add_argument("--base", action="store_true",
                       help="Use the base instruction set (no relative mode)")
    p_run.add_argument("--trace", action="store_true", help="Print an instruction trace")
    p_run.add_argument("--wait", action="store_true",
                       help="Stop with exit status 2 when input runs out instead of failing")

    # ── disasm ───────────────────────────────────────────────────────────
    p_dis = sub.add_parser("disasm", help="Disassemble a program")
    p_dis.add_argument("program", help="Program text file")
    p_dis.add_argument("--range", help="Address range START-END, e.g. 0-40")
    p_dis.add_argument("--base", action="store_true",
                       help="Use the base instruction set (no relative mode)")

    # ── amp ──────────────────────────────────────────────────────────────
    p_amp = sub.add_parser("amp", help="Search amplifier phase settings")
    p_amp.add_argument("program", help="Program text file")
    p_amp.add_argument("--phases", default=None,
                       help="Phase values, a range LO-HI or comma list "
                            f"(default: {_range_text(CHAIN_PHASES)}, "
                            f"or {_range_text(FEEDBACK_PHASES)} with --feedback)")
    p_amp.add_argument("--feedback", action="store_true",
                       help="Wire the amplifiers in a feedback loop")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format=LOG_FORMAT)

    if not args.command:
        parser.print_help()
        return 0

    handler = COMMANDS[args.command]
    try:
        return handler(args)
    except (IntCodeError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

def _range_text(r: range) -> str:
    return f"{r.start}-{r.stop - 1}"


def _parse_values(texts) -> list:
    """Flatten repeated comma-separated value options."""
    values = []
    for text in texts:
        values.extend(parse_program(text))
    return values


def _parse_span(text: str):
    """Parse 'LO-HI' (inclusive) into (lo, hi)."""
    lo, sep, hi = text.partition("-")
    if not sep:
        raise ValueError(f"Expected LO-HI, got {text!r}")
    return int(lo), int(hi)


def _instruction_set(args) -> InstructionSet:
    if args.base:
        return InstructionSet.BASE
    return InstructionSet(DEFAULT_INSTRUCTION_SET)


def _read_program(path: str) -> list:
    with open(path, "r", encoding="utf-8") as f:
        return parse_program(f.read())


# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args):
    machine = IntCodeMachine(_read_program(args.program), _parse_values(args.input),
                             instruction_set=_instruction_set(args),
                             wait_on_input=args.wait)
    for patch in args.set:
        addr, sep, value = patch.partition("=")
        if not sep:
            raise ValueError(f"Expected ADDR=VALUE, got {patch!r}")
        machine.memory[int(addr)] = int(value)

    machine.enable_trace(args.trace)
    status = machine.run()
    logger.debug(f"{status.value} after {machine.steps} steps")

    if args.trace:
        print(machine.get_trace())
    print(",".join(str(v) for v in machine.output))
    for addr in args.peek:
        print(f"[{addr}] = {machine.memory[addr]}")
    if status is Status.WAITING:
        logger.warning(f"Program is waiting for input at ip={machine.ip}")
        return 2
    return 0


# ── disasm ───────────────────────────────────────────────────────────────
def cmd_disasm(args):
    program = _read_program(args.program)
    start, end = 0, len(program)
    if args.range:
        start, end = _parse_span(args.range)
        end = min(end + 1, len(program))
    for addr, text in disassemble(program, start, end, _instruction_set(args)):
        print(f"{addr:6d}  {text}")
    return 0


# ── amp ──────────────────────────────────────────────────────────────────
def cmd_amp(args):
    program = _read_program(args.program)
    if args.phases is None:
        phases = FEEDBACK_PHASES if args.feedback else CHAIN_PHASES
    elif "," not in args.phases and "-" in args.phases.lstrip("-"):
        lo, hi = _parse_span(args.phases)
        phases = range(lo, hi + 1)
    else:
        phases = parse_program(args.phases)

    signal, order = max_thruster_signal(program, phases, feedback=args.feedback)
    print(f"{signal} ({','.join(str(p) for p in order)})")
    return 0


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND DISPATCH TABLE
# ═════════════════════════════════════════════════════════════════════════════

COMMANDS = {
    "run": cmd_run,
    "disasm": cmd_disasm,
    "amp": cmd_amp,
}


if __name__ == "__main__":
    sys.exit(main())
