"""Exception hierarchy for street_geocoder."""


class GeocoderError(Exception):
    """Base exception for all geocoder errors."""


class InvalidQuery(GeocoderError):
    """The query cannot be matched (missing or non-numeric fields)."""


class MalformedGeometry(GeocoderError):
    """A packed geometry blob is not a whole number of coordinate pairs."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"Geometry length {length} is not a multiple of 8 bytes")


class DegenerateGeometry(GeocoderError):
    """A polyline has too few points to interpolate along."""

    def __init__(self, point_count: int, fraction: float):
        self.point_count = point_count
        self.fraction = fraction
        super().__init__(
            f"Cannot interpolate at {fraction} along a polyline of {point_count} point(s)"
        )


class RetrievalFailure(GeocoderError):
    """The datastore could not answer a retrieval query."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Retrieval '{operation}' failed: {detail}")
