from __future__ import annotations

from typing import Callable, Dict, Hashable, Iterable, List, Sequence, Tuple, TypeVar

from .components import AddressRange, Candidate, EdgeRecord, Place, Segment

T = TypeVar("T")
S = TypeVar("S")
K = TypeVar("K", bound=Hashable)


def unique_values(records: Iterable[T], key: Callable[[T], K]) -> List[K]:
    """Distinct key values in first-seen order."""
    return list(dict.fromkeys(key(record) for record in records))


def group_by(records: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    grouped: Dict[K, List[T]] = {}
    for record in records:
        grouped.setdefault(key(record), []).append(record)
    return grouped


def full_join(
    dest: Sequence[T],
    src: Iterable[S],
    dest_key: Callable[[T], K],
    src_key: Callable[[S], K],
    combine: Callable[[T, S], T],
) -> List[T]:
    """Fan each *dest* row out into one row per matching *src* row.

    Rows without a match are kept as they are.
    """
    index = group_by(src, src_key)
    joined: List[T] = []
    for row in dest:
        matches = index.get(dest_key(row))
        if matches:
            joined.extend(combine(row, match) for match in matches)
        else:
            joined.append(row)
    return joined


def merge_places(candidates: Sequence[Candidate], places: Iterable[Place]) -> List[Candidate]:
    return full_join(
        candidates,
        places,
        dest_key=lambda c: c.zip,
        src_key=lambda p: p.zip,
        combine=lambda c, p: c.with_place(p),
    )


def merge_primary(
    candidates: Sequence[Candidate], primaries: Iterable[Tuple[Segment, EdgeRecord]]
) -> List[Candidate]:
    return full_join(
        candidates,
        primaries,
        dest_key=lambda c: (c.tlid, c.zip),
        src_key=lambda pair: (pair[0].tlid, pair[0].zip),
        combine=lambda c, pair: c.with_primary(*pair),
    )


def ranges_by_segment(ranges: Iterable[AddressRange]) -> Dict[str, List[AddressRange]]:
    return group_by(ranges, lambda r: r.tlid)
