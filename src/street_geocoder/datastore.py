"""Read-only access to the reference street dataset."""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote

from .components import AddressRange, EdgeRecord, Place, Segment
from .exceptions import RetrievalFailure

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE place (
    zip TEXT NOT NULL,
    city TEXT NOT NULL,
    state TEXT NOT NULL,
    city_phone TEXT NOT NULL,
    paflag TEXT
);
CREATE INDEX place_zip_idx ON place (zip);
CREATE INDEX place_city_phone_idx ON place (city_phone);

CREATE TABLE feature (
    tlid TEXT NOT NULL,
    name TEXT NOT NULL,
    name_phone TEXT NOT NULL,
    zip TEXT NOT NULL,
    geometry BLOB NOT NULL
);
CREATE INDEX feature_name_phone_idx ON feature (name_phone);
CREATE INDEX feature_tlid_idx ON feature (tlid);

CREATE TABLE "range" (
    tlid TEXT NOT NULL,
    fromhn INTEGER NOT NULL,
    tohn INTEGER NOT NULL,
    side TEXT NOT NULL,
    zip TEXT NOT NULL
);
CREATE INDEX range_tlid_idx ON "range" (tlid);

CREATE TABLE edge (
    tlid TEXT NOT NULL,
    paflag TEXT,
    predir TEXT,
    suftype TEXT,
    sufdir TEXT
);
CREATE INDEX edge_tlid_idx ON edge (tlid);
"""

TABLES = ("place", "feature", "range", "edge")

SegmentRange = Tuple[Segment, AddressRange]
SegmentEdge = Tuple[Segment, EdgeRecord]


class Datastore(ABC):
    """
    Read-only queries the geocoder needs from the reference dataset.

    Implementations should report failures as RetrievalFailure. Any other
    exception is wrapped in RetrievalFailure by CandidateRetriever.
    """

    @abstractmethod
    def places_by_zip(self, zip_code: str) -> List[Place]:
        raise NotImplementedError

    @abstractmethod
    def places_by_city_phonetic(self, city_phone: str) -> List[Place]:
        raise NotImplementedError

    @abstractmethod
    def segments_and_ranges_by_name_zips_number(
        self, name_phone: str, zips: Sequence[str], number: int
    ) -> List[SegmentRange]:
        raise NotImplementedError

    @abstractmethod
    def segments_and_ranges_by_name_number(
        self, name_phone: str, number: int
    ) -> List[SegmentRange]:
        raise NotImplementedError

    @abstractmethod
    def primary_segments(self, tlids: Sequence[str]) -> List[SegmentEdge]:
        raise NotImplementedError

    @abstractmethod
    def all_ranges(self, tlids: Sequence[str]) -> List[AddressRange]:
        raise NotImplementedError

    @abstractmethod
    def primary_places(self, zips: Sequence[str]) -> List[Place]:
        raise NotImplementedError


def _placeholders(values: Sequence[object]) -> str:
    return ",".join("?" * len(values))


_PLACE_COLUMNS = "place.zip, place.city, place.state, place.city_phone, place.paflag"
_SEGMENT_COLUMNS = (
    "feature.tlid, feature.name, feature.name_phone, feature.zip, feature.geometry"
)
_RANGE_COLUMNS = '"range".tlid, "range".fromhn, "range".tohn, "range".side, "range".zip'
_EDGE_COLUMNS = "edge.tlid, edge.paflag, edge.predir, edge.suftype, edge.sufdir"


def _place(row: tuple) -> Place:
    zip_code, city, state, city_phone, paflag = row
    return Place(zip=zip_code, city=city, state=state, city_phone=city_phone, paflag=paflag or "")


def _segment(row: tuple) -> Segment:
    tlid, name, name_phone, zip_code, geometry = row
    return Segment(
        tlid=str(tlid), name=name, name_phone=name_phone, zip=zip_code, geometry=bytes(geometry)
    )


def _range(row: tuple) -> AddressRange:
    tlid, fromhn, tohn, side, zip_code = row
    return AddressRange(tlid=str(tlid), fromhn=int(fromhn), tohn=int(tohn), side=side, zip=zip_code)


def _edge(row: tuple) -> EdgeRecord:
    tlid, paflag, predir, suftype, sufdir = row
    return EdgeRecord(
        tlid=str(tlid),
        paflag=paflag or "",
        predir=predir or "",
        suftype=suftype or "",
        sufdir=sufdir or "",
    )


class SQLiteDatastore(Datastore):
    """
    Datastore backed by a read-only SQLite file.

    The connection is opened on first use and reused for later queries.
    Every sqlite3 error is reported as RetrievalFailure; nothing is retried.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._conn: Optional[sqlite3.Connection] = None

    # ── Collaborator queries ─────────────────────────────────────

    def places_by_zip(self, zip_code: str) -> List[Place]:
        rows = self._fetch(
            "places_by_zip",
            f"SELECT {_PLACE_COLUMNS} FROM place WHERE zip = ? ORDER BY rowid",
            (zip_code,),
        )
        return [_place(row) for row in rows]

    def places_by_city_phonetic(self, city_phone: str) -> List[Place]:
        rows = self._fetch(
            "places_by_city_phonetic",
            f"SELECT {_PLACE_COLUMNS} FROM place WHERE city_phone = ? ORDER BY rowid",
            (city_phone,),
        )
        return [_place(row) for row in rows]

    def segments_and_ranges_by_name_zips_number(
        self, name_phone: str, zips: Sequence[str], number: int
    ) -> List[SegmentRange]:
        if not zips:
            return []
        sql = (
            f"SELECT {_SEGMENT_COLUMNS}, {_RANGE_COLUMNS} "
            'FROM feature JOIN "range" '
            'ON "range".tlid = feature.tlid AND "range".zip = feature.zip '
            f"WHERE feature.name_phone = ? AND feature.zip IN ({_placeholders(zips)}) "
            'AND "range".fromhn <= ? AND "range".tohn >= ? '
            'ORDER BY feature.rowid, "range".rowid'
        )
        rows = self._fetch(
            "segments_and_ranges_by_name_zips_number",
            sql,
            (name_phone, *zips, number, number),
        )
        return [(_segment(row[:5]), _range(row[5:])) for row in rows]

    def segments_and_ranges_by_name_number(
        self, name_phone: str, number: int
    ) -> List[SegmentRange]:
        sql = (
            f"SELECT {_SEGMENT_COLUMNS}, {_RANGE_COLUMNS} "
            'FROM feature JOIN "range" '
            'ON "range".tlid = feature.tlid AND "range".zip = feature.zip '
            "WHERE feature.name_phone = ? "
            'AND "range".fromhn <= ? AND "range".tohn >= ? '
            'ORDER BY feature.rowid, "range".rowid'
        )
        rows = self._fetch(
            "segments_and_ranges_by_name_number", sql, (name_phone, number, number)
        )
        return [(_segment(row[:5]), _range(row[5:])) for row in rows]

    def primary_segments(self, tlids: Sequence[str]) -> List[SegmentEdge]:
        if not tlids:
            return []
        # the edge table can hold duplicate rows for one tlid after import
        sql = (
            f"SELECT DISTINCT {_SEGMENT_COLUMNS}, {_EDGE_COLUMNS} "
            "FROM feature JOIN edge ON edge.tlid = feature.tlid "
            f"WHERE feature.tlid IN ({_placeholders(tlids)}) AND edge.paflag = 'P' "
            "ORDER BY feature.tlid"
        )
        rows = self._fetch("primary_segments", sql, tuple(tlids))
        return [(_segment(row[:5]), _edge(row[5:])) for row in rows]

    def all_ranges(self, tlids: Sequence[str]) -> List[AddressRange]:
        if not tlids:
            return []
        sql = (
            f'SELECT {_RANGE_COLUMNS} FROM "range" '
            f'WHERE "range".tlid IN ({_placeholders(tlids)}) ORDER BY "range".rowid'
        )
        rows = self._fetch("all_ranges", sql, tuple(tlids))
        return [_range(row) for row in rows]

    def primary_places(self, zips: Sequence[str]) -> List[Place]:
        if not zips:
            return []
        sql = (
            f"SELECT {_PLACE_COLUMNS} FROM place "
            f"WHERE zip IN ({_placeholders(zips)}) AND paflag = 'P' ORDER BY rowid"
        )
        rows = self._fetch("primary_places", sql, tuple(zips))
        return [_place(row) for row in rows]

    # ── Connection management ────────────────────────────────────

    def validate_tables(self, expected: Iterable[str] = TABLES) -> None:
        """Raise RetrievalFailure if any expected table is missing."""
        rows = self._fetch(
            "validate_tables", "SELECT name FROM sqlite_master WHERE type='table'", ()
        )
        missing = set(expected) - {row[0] for row in rows}
        if missing:
            raise RetrievalFailure(
                "validate_tables", f"missing tables: {', '.join(sorted(missing))}"
            )

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SQLiteDatastore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _connection(self, operation: str) -> sqlite3.Connection:
        if self._conn is None:
            if not self._path.is_file():
                raise RetrievalFailure(operation, f"database not found at {self._path}")
            try:
                self._conn = sqlite3.connect(f"file:{quote(str(self._path))}?mode=ro", uri=True)
                self._conn.execute("PRAGMA query_only = ON")
            except sqlite3.Error as exc:
                raise RetrievalFailure(operation, str(exc)) from exc
        return self._conn

    def _fetch(self, operation: str, sql: str, params: tuple) -> List[tuple]:
        conn = self._connection(operation)
        try:
            rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            if not self._path.is_file():
                logger.warning("Database %s disappeared; dropping connection", self._path)
                self.close()
            raise RetrievalFailure(operation, str(exc)) from exc
        logger.debug("%s returned %d row(s)", operation, len(rows))
        return rows
