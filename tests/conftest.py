"""Shared fixtures: small SQLite street datasets built under tmp_path."""

import sqlite3
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import pytest

from street_geocoder import phonetic
from street_geocoder.datastore import SCHEMA, SQLiteDatastore
from street_geocoder.geometry import encode_geometry

MAIN_LINE = [(-71.10, 42.36), (-71.12, 42.38)]
BACK_MAIN_LINE = [(-71.12, 42.375), (-71.13, 42.376)]
ELM_LINE = [(-71.06, 42.36), (-71.061, 42.361), (-71.062, 42.363)]
OAK_NORTH_LINE = [(-71.09, 42.35), (-71.09, 42.36)]
OAK_SOUTH_LINE = [(-71.08, 42.35), (-71.08, 42.36)]


def feature(tlid: str, name: str, zip_code: str, points, name_phone: Optional[str] = None):
    if name_phone is None:
        name_phone = phonetic.encode(name)
    geometry = points if isinstance(points, bytes) else encode_geometry(points)
    return (tlid, name, name_phone, zip_code, geometry)


def place(zip_code: str, city: str, state: str, paflag: str = "P"):
    return (zip_code, city, state, phonetic.encode(city), paflag)


def write_database(
    path: Path,
    places: Iterable[Sequence] = (),
    features: Iterable[Sequence] = (),
    ranges: Iterable[Sequence] = (),
    edges: Iterable[Sequence] = (),
) -> Path:
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA)
    conn.executemany("INSERT INTO place VALUES (?, ?, ?, ?, ?)", list(places))
    conn.executemany("INSERT INTO feature VALUES (?, ?, ?, ?, ?)", list(features))
    conn.executemany('INSERT INTO "range" VALUES (?, ?, ?, ?, ?)', list(ranges))
    conn.executemany("INSERT INTO edge VALUES (?, ?, ?, ?, ?)", list(edges))
    conn.commit()
    conn.close()
    return path


@pytest.fixture()
def build_db(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory that writes a dataset and gives back its path."""
    counter = iter(range(1000))

    def _build(**tables) -> Path:
        return write_database(tmp_path / f"streets_{next(counter)}.db", **tables)

    return _build


@pytest.fixture()
def street_db(build_db) -> Path:
    return build_db(
        places=[
            place("02139", "Cambridge", "MA"),
            place("02138", "Cambridge", "MA"),
            place("02114", "Boston", "MA"),
            place("02114", "West End", "MA", paflag=""),
        ],
        features=[
            feature("1001", "Main", "02139", MAIN_LINE),
            feature("1002", "Main", "02138", BACK_MAIN_LINE),
            feature("2001", "Elm", "02114", ELM_LINE),
            feature("3001", "Oak", "02139", OAK_NORTH_LINE),
            feature("3002", "Oak", "02139", OAK_SOUTH_LINE),
        ],
        ranges=[
            ("1001", 100, 200, "E", "02139"),
            ("1001", 101, 199, "O", "02139"),
            ("1002", 2, 98, "E", "02138"),
            ("2001", 10, 50, "E", "02114"),
            ("2001", 52, 100, "E", "02114"),
            ("3001", 2, 20, "E", "02139"),
            ("3002", 2, 20, "E", "02139"),
        ],
        edges=[
            ("1001", "P", "", "St", ""),
            ("1001", "P", "", "St", ""),
            ("1002", "P", "", "St", ""),
            ("1002", "", "", "Ave", ""),
            ("2001", "P", "", "St", ""),
            ("3001", "P", "N", "Rd", ""),
            ("3002", "P", "S", "Rd", ""),
        ],
    )


@pytest.fixture()
def datastore(street_db: Path):
    store = SQLiteDatastore(street_db)
    yield store
    store.close()
