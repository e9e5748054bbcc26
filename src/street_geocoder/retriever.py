from __future__ import annotations

import logging
from typing import Any, Callable, List, Sequence, Tuple, TypeVar

from . import phonetic
from .components import AddressRange, Candidate, EdgeRecord, Place, Query, Segment
from .datastore import Datastore
from .exceptions import GeocoderError, RetrievalFailure
from .merge import unique_values
from .strategies import DEFAULT_STAGES, RetrievalStage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CandidateRetriever:
    """Layered retrieval against a datastore, returning typed records."""

    def __init__(
        self,
        datastore: Datastore,
        stages: Sequence[RetrievalStage] = DEFAULT_STAGES,
        phonetic_length: int = 5,
    ) -> None:
        self.datastore = datastore
        self.stages = tuple(stages)
        self.phonetic_length = phonetic_length

    def places_by_zip(self, zip_code: str) -> List[Place]:
        return self._query("places_by_zip", self.datastore.places_by_zip, zip_code)

    def places_by_city(self, city: str) -> List[Place]:
        return self._query(
            "places_by_city_phonetic",
            self.datastore.places_by_city_phonetic,
            phonetic.encode(city, self.phonetic_length),
        )

    def places(self, query: Query) -> List[Place]:
        """Union of the places found by zip and by city."""
        places: List[Place] = []
        if query.zip:
            places += self.places_by_zip(query.zip)
        if query.city:
            places += self.places_by_city(query.city)
        return unique_values(places, key=lambda place: place)

    def candidates_by_name_zip_number(
        self, name_key: str, zips: Sequence[str], number: int
    ) -> List[Candidate]:
        rows = self._query(
            "segments_and_ranges_by_name_zips_number",
            self.datastore.segments_and_ranges_by_name_zips_number,
            name_key,
            zips,
            number,
        )
        return [Candidate.from_segment_range(segment, rng) for segment, rng in rows]

    def candidates_by_name_number(self, name_key: str, number: int) -> List[Candidate]:
        rows = self._query(
            "segments_and_ranges_by_name_number",
            self.datastore.segments_and_ranges_by_name_number,
            name_key,
            number,
        )
        return [Candidate.from_segment_range(segment, rng) for segment, rng in rows]

    def candidates(self, query: Query, zips: Sequence[str]) -> List[Candidate]:
        """Run each stage in turn and return the first non-empty result."""
        name_key = phonetic.encode(query.name or "", self.phonetic_length)
        for position, stage in enumerate(self.stages):
            if position:
                logger.info("No candidates for %r; falling back to %s", query.name, stage.name)
            found = stage.generate(self, name_key, query.number, zips)
            logger.debug("Stage %s found %d candidate(s) for key %r", stage.name, len(found), name_key)
            if found:
                return found
        return []

    def primary_segments(self, tlids: Sequence[str]) -> List[Tuple[Segment, EdgeRecord]]:
        rows = self._query("primary_segments", self.datastore.primary_segments, tlids)
        return unique_values([row for row in rows if row[1].paflag == "P"], key=lambda row: row)

    def all_ranges(self, tlids: Sequence[str]) -> List[AddressRange]:
        return self._query("all_ranges", self.datastore.all_ranges, tlids)

    def primary_places(self, zips: Sequence[str]) -> List[Place]:
        places = self._query("primary_places", self.datastore.primary_places, zips)
        return [place for place in places if place.paflag == "P"]

    def _query(self, operation: str, method: Callable[..., T], *args: Any) -> T:
        """Call a datastore method, reporting foreign errors as RetrievalFailure."""
        try:
            return method(*args)
        except GeocoderError:
            raise
        except Exception as exc:
            raise RetrievalFailure(operation, f"{type(exc).__name__}: {exc}") from exc
