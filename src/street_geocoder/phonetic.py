from __future__ import annotations

import re

import jellyfish

_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)
_LEADING_DIGITS = re.compile(r"^\d+")


def encode(name: str, max_len: int = 5) -> str:
    """Return the phonetic key used to pre-filter names.

    Numeric street names ("5th") keep their leading digit run verbatim;
    everything else is Metaphone-encoded and truncated to *max_len*.
    """
    cleaned = _NON_ALNUM.sub("", name or "")
    if not cleaned:
        return ""
    leading = _LEADING_DIGITS.match(cleaned)
    if leading:
        return leading.group(0)
    return jellyfish.metaphone(cleaned)[:max_len]
