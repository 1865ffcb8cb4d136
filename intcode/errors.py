"""
IntCode Machine — Error Hierarchy

Every fatal condition raised by the machine derives from IntCodeError so a
driver can catch the whole family in one place. Input underflow is the
only condition that can also be non-fatal: with wait_on_input enabled the
machine suspends instead of raising.
"""

from typing import Optional


class IntCodeError(Exception):
    """Base class for all machine errors."""
    def __init__(self, message: str, ip: Optional[int] = None):
        self.ip = ip
        super().__init__(f"{message} at ip={ip}" if ip is not None else message)


class ProgramParseError(IntCodeError):
    """Raised when program text contains a token that is not an integer."""
    def __init__(self, message: str, token_index: Optional[int] = None):
        self.token_index = token_index
        super().__init__(
            f"Token {token_index}: {message}" if token_index is not None else message)


class DecodeError(IntCodeError):
    """Raised when the word at the instruction pointer is not a valid instruction."""
    pass


class IllegalOpcode(DecodeError):
    """Raised when an undefined operation code is encountered."""
    pass


class IllegalMode(DecodeError):
    """Raised when a mode digit is outside the active instruction set."""
    pass


class DestinationError(IntCodeError):
    """Raised when an instruction would write through an immediate operand."""
    pass


class InputUnderflow(IntCodeError):
    """Raised on an input instruction with an empty queue and suspension disabled."""
    pass


class AddressError(IntCodeError):
    """Raised when a resolved address is negative."""
    pass
