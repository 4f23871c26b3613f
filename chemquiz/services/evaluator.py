import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

DEFAULT_TOLERANCE = 0.01

# Plain decimal notation only; "," is never treated as a decimal separator.
NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


class Verdict(Enum):
    """Outcome of checking one answer."""

    CORRECT = "correct"
    INVALID = "invalid"
    MISMATCH = "mismatch"


def parse_number(raw_input: str) -> Optional[Decimal]:
    """Parse a user answer as a decimal number, or return None."""
    text = raw_input.strip()
    if not NUMBER_RE.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def _exact(value: float) -> Decimal:
    # repr() gives the shortest string that round-trips, so 0.01 stays 0.01
    return Decimal(repr(float(value)))


def evaluate(raw_input: str, expected: float, tolerance: float = DEFAULT_TOLERANCE) -> Verdict:
    """
    Compare a raw answer with the expected mass.

    The difference is computed on the decimal values as typed, so binary
    floating point noise cannot move an answer across the boundary. The
    tolerance is exclusive: an answer that differs by exactly ``tolerance``
    is a mismatch.
    """
    parsed = parse_number(raw_input)
    if parsed is None:
        return Verdict.INVALID
    try:
        difference = abs(parsed - _exact(expected))
    except ArithmeticError:
        # exponent beyond the decimal context; certainly not the mass
        return Verdict.MISMATCH
    if difference < _exact(tolerance):
        return Verdict.CORRECT
    return Verdict.MISMATCH
