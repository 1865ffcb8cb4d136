"""
IntCode Machine — Configuration
===============================

Defaults shared by the machine, the orchestration helpers and the
intcodekit command line. Runtime overrides come from CLI flags.
"""

# =============================================================================
#  INSTRUCTION SET
# =============================================================================
# "extended" adds relative addressing (mode 2) and opcode 9.
# "base" is the first generation: positional/immediate only.
DEFAULT_INSTRUCTION_SET = "extended"

OPCODE_MODULUS = 100      # opcode word % 100 -> operation code
MODE_RADIX = 10           # opcode word // 100 -> one mode per decimal digit


# =============================================================================
#  MEMORY
# =============================================================================
MEMORY_GROWTH_FACTOR = 2  # capacity multiplier on out-of-range access


# =============================================================================
#  AMPLIFIERS
# =============================================================================
DEFAULT_SIGNAL = 0
CHAIN_PHASES = range(0, 5)      # single-pass amplifier chain
FEEDBACK_PHASES = range(5, 10)  # feedback loop


# =============================================================================
#  LOGGING
# =============================================================================
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
