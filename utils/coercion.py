import math, re
from dataclasses import dataclass
from typing import Any, Union

__all__ = ["Parsed", "Unparseable", "ParseResult", "parse_int", "coerce_int", "is_number", "NAN"]

# Sentinel written for values that cannot be read as an integer. Legacy worlds
# end up with it stored, later runs leave it alone.
NAN = float("nan")

_INT_PREFIX = re.compile(r"^\s*([+-]?)(0[xX][0-9a-fA-F]+|\d+)")


@dataclass(frozen=True)
class Parsed:
    value: int
    ok = True


@dataclass(frozen=True)
class Unparseable:
    raw: Any
    ok = False


ParseResult = Union[Parsed, Unparseable]


def is_number(value: Any) -> bool:
    # bool is an int subclass but is not a number for our purposes
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_int(value: Any) -> ParseResult:
    """Read the leading integer of `value`.

    Mirrors the host's parse rules: leading whitespace and a sign are allowed,
    trailing junk is ignored ("7 dice" -> 7), "0x" prefixes read as hex.
    Numbers are truncated toward zero.
    """
    if is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return Unparseable(value)
        return Parsed(int(value))
    m = _INT_PREFIX.match(str(value))
    if not m:
        return Unparseable(value)
    sign, digits = m.groups()
    n = int(digits, 16) if digits[:2].lower() == "0x" else int(digits)
    return Parsed(-n if sign == "-" else n)


def coerce_int(value: Any, default: Any = NAN) -> Any:
    """Coerce a stored field to an int, leaving numbers untouched.

    Unparseable input falls back to `default` (NaN unless told otherwise).
    """
    if is_number(value):
        return value
    result = parse_int(value)
    return result.value if result.ok else default
