from __future__ import annotations

from typing import Iterable, List, Sequence

from .components import AddressRange


def ranges_for_side(ranges: Iterable[AddressRange], side: str) -> List[AddressRange]:
    """Ranges on *side*, ordered by starting house number."""
    return sorted((r for r in ranges if r.side == side), key=lambda r: r.fromhn)


def interpolation_fraction(number: int, ranges: Sequence[AddressRange]) -> float:
    """Position of *number* within the cumulative span of *ranges*.

    Ranges starting above *number* contribute their whole length, the
    range containing it contributes the part below it. A zero total span
    gives 0.0.
    """
    interval = total = 0
    for address_range in ranges:
        fromhn, tohn = address_range.fromhn, address_range.tohn
        total += tohn - fromhn
        if fromhn > number:
            interval += tohn - fromhn
        elif fromhn <= number <= tohn:
            interval += number - fromhn
    if total == 0:
        return 0.0
    return interval / total
