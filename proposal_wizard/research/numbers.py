from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Union

Number = Union[int, float]

# thousands separators between digit groups: "1,234", "1 234", "1'234", "1_234"
_SEPARATORS_RE = re.compile(r"(?<=\d)[,'_\s](?=\d{3}(?!\d))")

# longest suffixes first; a latin suffix must not run into another word ("12 months")
_NUMBER_RE = re.compile(
    r"(-?\d+(?:\.\d+)?)(?:\s*(thousand|million|mln|mil|k|m|אלף|מיליון)(?![a-z]))?",
    flags=re.IGNORECASE,
)

_MULTIPLIERS = {
    "k": 1_000,
    "thousand": 1_000,
    "אלף": 1_000,
    "m": 1_000_000,
    "mil": 1_000_000,
    "mln": 1_000_000,
    "million": 1_000_000,
    "מיליון": 1_000_000,
}


def _exact(d: Decimal) -> Number:
    if d == d.to_integral_value():
        return int(d)
    return float(d)


def parse_short_number(value: Any) -> Number:
    """
    "12K" -> 12000, "3.4M" -> 3400000, "1,234" -> 1234, "2.5 ש״ח" -> 2.5.

    Takes the first numeric token (after stripping thousands separators)
    with an optional magnitude suffix. Unparseable or non-finite input yields 0, never raises.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0  # NaN, inf -> 0
    if not isinstance(value, str):
        return 0

    text = _SEPARATORS_RE.sub("", value.strip())
    m = _NUMBER_RE.search(text)
    if not m:
        return 0

    try:
        num = Decimal(m.group(1))
    except InvalidOperation:
        return 0

    suffix = (m.group(2) or "").lower()
    return _exact(num * _MULTIPLIERS.get(suffix, 1))


def parse_percent(value: Any) -> float:
    """"4.5%" -> 4.5"""
    try:
        return float(parse_short_number(value))
    except OverflowError:
        return 0.0
