from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, NamedTuple, Optional

from .exceptions import InvalidQuery
from .normalize import coerce_number


class Point(NamedTuple):
    lon: float
    lat: float


@dataclass(frozen=True)
class Query:
    """Structured address query. All fields are optional."""

    zip: Optional[str] = None
    city: Optional[str] = None
    name: Optional[str] = None
    number: Optional[int] = None

    def __post_init__(self) -> None:
        for key in ("zip", "city", "name"):
            value = getattr(self, key)
            if value is not None and not isinstance(value, str):
                raise InvalidQuery(f"{key} must be text, got {value!r}")
        if self.number is not None:
            object.__setattr__(self, "number", coerce_number(self.number))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Query":
        unknown = set(data) - {"zip", "city", "name", "number"}
        if unknown:
            raise InvalidQuery(f"unknown query fields: {', '.join(sorted(unknown))}")
        return cls(
            zip=data.get("zip") or None,
            city=data.get("city") or None,
            name=data.get("name") or None,
            number=data.get("number"),
        )

    def fields(self) -> Dict[str, Any]:
        """Return the non-empty fields, in comparison order."""
        values = {"zip": self.zip, "city": self.city, "name": self.name, "number": self.number}
        return {key: value for key, value in values.items() if value is not None and value != ""}


@dataclass(frozen=True)
class Place:
    """A postal area keyed by zip."""

    zip: str
    city: str
    state: str
    city_phone: str = ""
    paflag: str = ""


@dataclass(frozen=True)
class Segment:
    """A street centerline with its packed geometry."""

    tlid: str
    name: str
    name_phone: str
    zip: str
    geometry: bytes = b""


@dataclass(frozen=True)
class AddressRange:
    tlid: str
    fromhn: int
    tohn: int
    side: str
    zip: str


@dataclass(frozen=True)
class EdgeRecord:
    tlid: str
    paflag: str
    predir: str = ""
    suftype: str = ""
    sufdir: str = ""


@dataclass(frozen=True)
class Candidate:
    """Working record merged from place, segment, range and edge data."""

    tlid: str
    name: str
    zip: str
    name_phone: str = ""
    geometry: bytes = b""
    side: str = ""
    fromhn: int = 0
    tohn: int = 0
    city: Optional[str] = None
    state: Optional[str] = None
    city_phone: Optional[str] = None
    paflag: Optional[str] = None
    predir: Optional[str] = None
    suftype: Optional[str] = None
    sufdir: Optional[str] = None
    number: Optional[int] = None
    score: float = 0.0
    lon: Optional[float] = None
    lat: Optional[float] = None

    @classmethod
    def from_segment_range(cls, segment: Segment, address_range: AddressRange) -> "Candidate":
        return cls(
            tlid=segment.tlid,
            name=segment.name,
            zip=address_range.zip,
            name_phone=segment.name_phone,
            geometry=segment.geometry,
            side=address_range.side,
            fromhn=address_range.fromhn,
            tohn=address_range.tohn,
        )

    def with_place(self, place: Place) -> "Candidate":
        return replace(
            self,
            zip=place.zip,
            city=place.city,
            state=place.state,
            city_phone=place.city_phone,
            paflag=place.paflag,
        )

    def with_primary(self, segment: Segment, edge: EdgeRecord) -> "Candidate":
        return replace(
            self,
            name=segment.name,
            name_phone=segment.name_phone,
            geometry=segment.geometry,
            paflag=edge.paflag,
            predir=edge.predir,
            suftype=edge.suftype,
            sufdir=edge.sufdir,
        )

    def value_for(self, field_name: str) -> Optional[str]:
        """Return the comparable string value of *field_name*, if any."""
        value = getattr(self, field_name, None)
        if value is None or value == "":
            return None
        return str(value)


@dataclass(frozen=True)
class GeocodeResult:
    """Public result of a geocode call, with bookkeeping fields removed."""

    zip: str
    city: Optional[str]
    state: Optional[str]
    name: str
    number: Optional[int]
    lon: Optional[float]
    lat: Optional[float]
    score: float
    predir: Optional[str] = None
    suftype: Optional[str] = None
    sufdir: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "GeocodeResult":
        return cls(
            zip=candidate.zip,
            city=candidate.city,
            state=candidate.state,
            name=candidate.name,
            number=candidate.number,
            lon=candidate.lon,
            lat=candidate.lat,
            score=candidate.score,
            predir=candidate.predir,
            suftype=candidate.suftype,
            sufdir=candidate.sufdir,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "zip": self.zip,
            "city": self.city,
            "state": self.state,
            "name": self.name,
            "predir": self.predir,
            "suftype": self.suftype,
            "sufdir": self.sufdir,
            "number": self.number,
            "lon": self.lon,
            "lat": self.lat,
            "score": round(self.score, 3),
        }
