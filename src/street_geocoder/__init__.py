"""Street-range address geocoder."""

from .components import AddressRange, Candidate, EdgeRecord, GeocodeResult, Place, Point, Query, Segment
from .datastore import Datastore, SQLiteDatastore
from .engine import EngineConfig, Geocoder
from .exceptions import (
    DegenerateGeometry,
    GeocoderError,
    InvalidQuery,
    MalformedGeometry,
    RetrievalFailure,
)

__all__ = [
    "Geocoder",
    "EngineConfig",
    "Datastore",
    "SQLiteDatastore",
    "Query",
    "Place",
    "Segment",
    "AddressRange",
    "EdgeRecord",
    "Candidate",
    "Point",
    "GeocodeResult",
    "GeocoderError",
    "InvalidQuery",
    "MalformedGeometry",
    "DegenerateGeometry",
    "RetrievalFailure",
]
