from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar, Union

from .components import AddressRange, Candidate, GeocodeResult, Query
from .datastore import Datastore
from .exceptions import InvalidQuery
from .geometry import decode_geometry, point_at
from .merge import merge_places, merge_primary, ranges_by_segment, unique_values
from .parser import parse_address
from .ranges import interpolation_fraction, ranges_for_side
from .retriever import CandidateRetriever
from .scorer import score_candidate, select_best
from .strategies import DEFAULT_STAGES, RetrievalStage

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class EngineConfig:
    stages: Sequence[RetrievalStage] = DEFAULT_STAGES
    phonetic_length: int = 5
    max_workers: Optional[int] = None


class Geocoder:
    """Resolve street address queries to interpolated coordinates."""

    def __init__(self, datastore: Datastore, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self.retriever = CandidateRetriever(
            datastore,
            stages=self.config.stages,
            phonetic_length=self.config.phonetic_length,
        )

    def geocode_address(self, address_text: str) -> List[GeocodeResult]:
        return self.geocode(parse_address(address_text))

    def geocode(self, query: Union[Query, Mapping[str, Any]]) -> List[GeocodeResult]:
        """
        Match *query* against the dataset and return the top-scoring results.

        An empty list means nothing matched. Raises InvalidQuery for an
        unusable query, MalformedGeometry or DegenerateGeometry when a matched
        segment's geometry is broken (aborting the whole call), and
        RetrievalFailure when the datastore fails.
        """
        if not isinstance(query, Query):
            query = Query.from_mapping(query)
        if not query.name or query.number is None:
            raise InvalidQuery("a street name and house number are required")

        places = self.retriever.places(query)
        zips = unique_values(places, key=lambda p: p.zip)

        candidates = self.retriever.candidates(query, zips)
        if not candidates:
            logger.info("No match for %s %r", query.number, query.name)
            return []

        candidates = merge_places(candidates, places)
        scores = self._map(lambda c: score_candidate(query, c), candidates)
        candidates = select_best(
            [replace(c, score=score) for c, score in zip(candidates, scores)]
        )
        logger.debug("Kept %d top candidate(s) at score %.3f", len(candidates), candidates[0].score)

        tlids = unique_values(candidates, key=lambda c: c.tlid)
        candidates = merge_primary(candidates, self.retriever.primary_segments(tlids))
        ranges = ranges_by_segment(self.retriever.all_ranges(tlids))

        candidates = self._map(lambda c: self._locate(c, query.number, ranges), candidates)

        zips = unique_values(candidates, key=lambda c: c.zip)
        candidates = merge_places(candidates, self.retriever.primary_places(zips))

        return [GeocodeResult.from_candidate(c) for c in candidates]

    def _locate(
        self, candidate: Candidate, number: int, ranges: Dict[str, List[AddressRange]]
    ) -> Candidate:
        side_ranges = ranges_for_side(ranges.get(candidate.tlid, []), candidate.side)
        fraction = min(max(interpolation_fraction(number, side_ranges), 0.0), 1.0)
        point = point_at(decode_geometry(candidate.geometry), fraction)
        return replace(candidate, lon=point.lon, lat=point.lat, number=number)

    def _map(self, func: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """Apply *func* to each item, in a thread pool when configured, keeping order."""
        workers = self.config.max_workers
        if not workers or workers < 2:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(func, items))
