from __future__ import annotations

import re
from typing import Any, Dict

from .exceptions import InvalidQuery

US_STATE_ABBREVIATIONS = frozenset(
    """
    AL AK AZ AR CA CO CT DE FL GA HI ID IL IN IA KS KY LA ME MD MA MI MN MS MO
    MT NE NV NH NJ NM NY NC ND OH OK OR PA RI SC SD TN TX UT VT VA WA WV WI WY DC
    """.split()
)

STREET_SUFFIXES = frozenset(
    """
    ALLEY ALY AVENUE AVE AV BEND BLVD BOULEVARD CIRCLE CIR COURT CT DRIVE DR
    FREEWAY FWY HIGHWAY HWY LANE LN LOOP PARKWAY PKWY PLACE PL ROAD RD SQUARE SQ
    STREET ST TERRACE TER TRAIL TRL WAY
    """.split()
)

DIRECTIONALS = frozenset(
    "N NORTH S SOUTH E EAST W WEST NE NORTHEAST NW NORTHWEST SE SOUTHEAST SW SOUTHWEST".split()
)

UNIT_DESIGNATORS = frozenset(
    "APT APARTMENT UNIT STE SUITE RM ROOM FL FLOOR BLDG BUILDING PH PENTHOUSE".split()
)

_ORDINAL_ONES = [
    "FIRST", "SECOND", "THIRD", "FOURTH", "FIFTH",
    "SIXTH", "SEVENTH", "EIGHTH", "NINTH",
]
_ORDINAL_TEENS = [
    "TENTH", "ELEVENTH", "TWELFTH", "THIRTEENTH", "FOURTEENTH",
    "FIFTEENTH", "SIXTEENTH", "SEVENTEENTH", "EIGHTEENTH", "NINETEENTH",
]
_TENS = {20: "TWENTY", 30: "THIRTY", 40: "FORTY", 50: "FIFTY"}
_TENS_ORDINAL = {20: "TWENTIETH", 30: "THIRTIETH", 40: "FORTIETH", 50: "FIFTIETH"}


def _build_ordinals() -> Dict[str, str]:
    ordinals = {word: str(n) for n, word in enumerate(_ORDINAL_ONES, start=1)}
    ordinals.update({word: str(n) for n, word in enumerate(_ORDINAL_TEENS, start=10)})
    for tens, word in _TENS_ORDINAL.items():
        ordinals[word] = str(tens)
    for tens, prefix in _TENS.items():
        if tens == 50:
            continue
        for n, word in enumerate(_ORDINAL_ONES, start=1):
            ordinals[f"{prefix}-{word}"] = str(tens + n)
    return ordinals


ORDINAL_WORDS = _build_ordinals()

ZIP_CODE_PATTERN = re.compile(r"^(\d{5})(?:-\d{4})?$")
HOUSE_NUMBER_PATTERN = re.compile(r"^(\d+)(?:[-/]\d+)?[A-Z]?$")
SUFFIXED_ORDINAL_PATTERN = re.compile(r"^(\d+)(?:ST|ND|RD|TH)$")
_NON_WORD = re.compile(r"\W")


def normalize_field(value: Any) -> str:
    """Lowercase and strip non-word characters for comparison."""
    return _NON_WORD.sub("", str(value).lower())


def coerce_number(value: Any) -> int:
    """Coerce a house number to ``int``, failing fast on non-numeric input."""
    if isinstance(value, bool):
        raise InvalidQuery(f"house number must be numeric, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidQuery(f"house number must be a whole number, got {value!r}")
        return int(value)
    text = str(value).strip()
    if not re.fullmatch(r"[+-]?\d+", text):
        raise InvalidQuery(f"house number must be numeric, got {value!r}")
    return int(text)


def canonicalize_zip(token: str) -> str:
    match = ZIP_CODE_PATTERN.match(token)
    return match.group(1) if match else ""


def normalize_ordinal(token: str) -> str:
    """Turn "FIFTH" or "5TH" into "5"; other tokens pass through."""
    if token in ORDINAL_WORDS:
        return ORDINAL_WORDS[token]
    match = SUFFIXED_ORDINAL_PATTERN.match(token)
    if match:
        return match.group(1)
    return token
