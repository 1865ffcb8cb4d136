"""
IntCode Machine — Digit Decomposer

Splits a non-negative integer into its base-N digits, least significant
first. The decoder uses it to turn the mode field of an opcode word
(opcode // 100) into one addressing mode per operand.
"""

from typing import Iterable, Iterator


def digits_reversed(value: int, radix: int = 10) -> Iterator[int]:
    """Yield the digits of value in the given radix, least significant first.

    Zero has no digits. Radix 1 is unary: value ones. The generator is
    lazy; call again to restart from the lowest digit.

    Raises:
        ValueError: radix is 0 or negative, or value is negative.
    """
    if radix == 0:
        raise ValueError("Attempted to use radix 0, which is undefined")
    if radix < 0:
        raise ValueError(f"Negative radix {radix} is not supported")
    if value < 0:
        raise ValueError(f"Cannot decompose negative value {value}")
    return _generate(value, radix)


def _generate(value: int, radix: int) -> Iterator[int]:
    if radix == 1:
        for _ in range(value):
            yield 1
        return
    while value:
        value, digit = divmod(value, radix)
        yield digit


def from_digits_reversed(digits: Iterable[int], radix: int = 10) -> int:
    """Recompose a least-significant-first digit sequence into an integer."""
    value = 0
    scale = 1
    for digit in digits:
        value += digit * scale
        scale *= radix
    return value
