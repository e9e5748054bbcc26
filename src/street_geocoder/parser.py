from __future__ import annotations

from typing import List, Optional

from .components import Query
from .normalize import (
    DIRECTIONALS,
    HOUSE_NUMBER_PATTERN,
    STREET_SUFFIXES,
    UNIT_DESIGNATORS,
    US_STATE_ABBREVIATIONS,
    canonicalize_zip,
    normalize_ordinal,
)


def _pop_zip(tokens: List[str], start: int = 0) -> str:
    for idx in range(len(tokens) - 1, start - 1, -1):
        zip_code = canonicalize_zip(tokens[idx])
        if zip_code:
            del tokens[idx]
            return zip_code
    return ""


def _drop_unit(tokens: List[str]) -> None:
    for idx, token in enumerate(tokens):
        if token.startswith("#"):
            del tokens[idx : idx + (1 if len(token) > 1 else 2)]
            return
        if token in UNIT_DESIGNATORS and idx > 0:
            del tokens[idx : idx + 2]
            return


def parse_address(address_text: str) -> Query:
    """Split a one-line US address into a structured Query.

    Street type, directionals, unit and state are recognised so they can be
    kept out of the name and city, but only number, name, city and zip are
    returned.
    """
    if not address_text or not address_text.strip():
        return Query()

    parts = [part.split() for part in address_text.upper().split(",")]
    parts = [part for part in parts if part]
    street = parts[0]
    locality = [token for part in parts[1:] for token in part]

    zip_code = _pop_zip(locality) or _pop_zip(street, start=1)
    _drop_unit(street)

    number: Optional[int] = None
    if street:
        match = HOUSE_NUMBER_PATTERN.match(street[0])
        if match:
            number = int(match.group(1))
            street = street[1:]

    if len(street) > 1 and street[0] in DIRECTIONALS:
        street = street[1:]

    for idx, token in enumerate(street):
        if idx > 0 and token in STREET_SUFFIXES:
            locality = street[idx + 1 :] + locality
            street = street[:idx]
            break

    if locality and locality[0] in DIRECTIONALS:
        locality = locality[1:]
    if locality and locality[-1] in US_STATE_ABBREVIATIONS:
        locality = locality[:-1]

    name = " ".join(normalize_ordinal(token) for token in street)
    city = " ".join(locality)

    return Query(
        zip=zip_code or None,
        city=city or None,
        name=name or None,
        number=number,
    )
