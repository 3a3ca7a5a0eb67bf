"""
Fixed-point coordinate codec.

Coordinates travel through the pipeline as "E7" digit strings: the real
value scaled by 10^7, so "506553765" is 50.6553765 degrees. They are never
converted to float, which keeps the exact digits for continuity checks.
"""

from typing import Optional

FRACTION_DIGITS = 7
DEGREE_MARK = "°"


class FormatError(ValueError):
    """A coordinate literal could not be converted."""


def to_fixed_point(value: str) -> str:
    """
    Convert a degree literal to a fixed-point string.

    Examples:
        "50.6443831°" -> "506443831"
        "-0.5"        -> "-05000000"
        "3.12345678"  -> "31234567"   (truncated, not rounded)
    """
    text = value.strip()
    if text.endswith(DEGREE_MARK):
        text = text[:-len(DEGREE_MARK)].rstrip()

    parts = text.split(".")
    if len(parts) != 2:
        raise FormatError(f"invalid coordinate {value!r}")

    integer, fraction = parts
    sign = ""
    if integer[:1] in ("-", "+"):
        sign = "-" if integer[0] == "-" else ""
        integer = integer[1:]

    if not integer:
        integer = "0"
    if not _is_digits(integer) or (fraction and not _is_digits(fraction)):
        raise FormatError(f"invalid coordinate {value!r}")

    fraction = fraction[:FRACTION_DIGITS].ljust(FRACTION_DIGITS, "0")
    return sign + integer + fraction


def split_fixed_point(value: str) -> tuple[str, str, str]:
    """Split a fixed-point string into (sign, integer digits, fraction digits)."""
    sign = ""
    if value.startswith("-"):
        sign, value = "-", value[1:]
    value = value.rjust(FRACTION_DIGITS, "0")
    return sign, value[:-FRACTION_DIGITS], value[-FRACTION_DIGITS:]


def fixed_point_to_decimal(value: str) -> str:
    """
    Render a fixed-point string as a decimal literal.

    The integer part gets at least one digit and the sign stays in front
    of the padding: "-10000000" -> "-1.0000000", "" -> "0.0000000".
    """
    sign, integer, fraction = split_fixed_point(value)
    return f"{sign}{integer or '0'}.{fraction}"


def is_fixed_point(value: Optional[str]) -> bool:
    """True for an optional '-' followed by at least 7 ASCII digits."""
    if not value:
        return False
    digits = value[1:] if value.startswith("-") else value
    return len(digits) >= FRACTION_DIGITS and _is_digits(digits)


def _is_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()

