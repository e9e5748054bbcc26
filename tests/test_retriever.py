import logging
from typing import List

import pytest

from street_geocoder.components import Candidate, Query
from street_geocoder.datastore import SQLiteDatastore
from street_geocoder.exceptions import RetrievalFailure
from street_geocoder.retriever import CandidateRetriever
from street_geocoder.strategies import NameOnlyStage, RetrievalStage, ZipScopedStage


class RecordingStage(RetrievalStage):
    def __init__(self, name: str, result: List[Candidate]):
        self.name = name
        self.result = result
        self.calls = 0

    def generate(self, retriever, name_key, number, zips):
        self.calls += 1
        return self.result


def test_places_union_is_deduplicated(datastore: SQLiteDatastore):
    retriever = CandidateRetriever(datastore)
    places = retriever.places(Query(zip="02139", city="Cambridge"))
    assert [p.zip for p in places] == ["02139", "02138"]


def test_places_without_zip_or_city(datastore: SQLiteDatastore):
    assert CandidateRetriever(datastore).places(Query(name="Main", number=1)) == []


def test_zip_scoped_stage_wins(datastore: SQLiteDatastore):
    retriever = CandidateRetriever(datastore)
    candidates = retriever.candidates(Query(name="Main", number=150), ["02139"])
    assert [(c.tlid, c.side, c.fromhn) for c in candidates] == [("1001", "E", 100), ("1001", "O", 101)]


def test_falls_back_to_name_only(datastore: SQLiteDatastore, caplog):
    retriever = CandidateRetriever(datastore)
    with caplog.at_level(logging.INFO, logger="street_geocoder.retriever"):
        candidates = retriever.candidates(Query(name="Main", number=150), ["02114"])
    assert [c.zip for c in candidates] == ["02139", "02139"]
    assert "falling back to name_only" in caplog.text


def test_no_candidates_anywhere(datastore: SQLiteDatastore):
    retriever = CandidateRetriever(datastore)
    assert retriever.candidates(Query(name="Nowhere", number=150), ["02139"]) == []


def test_stages_stop_at_first_result(datastore: SQLiteDatastore):
    hit = Candidate(tlid="x", name="Main", zip="02139")
    first = RecordingStage("first", [hit])
    second = RecordingStage("second", [])
    retriever = CandidateRetriever(datastore, stages=[first, second])
    assert retriever.candidates(Query(name="Main", number=1), []) == [hit]
    assert (first.calls, second.calls) == (1, 0)


def test_zip_scoped_stage_skips_without_zips(datastore: SQLiteDatastore):
    retriever = CandidateRetriever(datastore)
    assert ZipScopedStage().generate(retriever, "MN", 150, []) == []
    assert NameOnlyStage().generate(retriever, "MN", 150, []) != []


def test_primary_segments_and_places(datastore: SQLiteDatastore):
    retriever = CandidateRetriever(datastore)
    segments = retriever.primary_segments(["1001"])
    assert len(segments) == 1
    assert segments[0][1].paflag == "P"
    assert [p.city for p in retriever.primary_places(["02114"])] == ["Boston"]


def test_foreign_datastore_errors_become_retrieval_failures(datastore: SQLiteDatastore):
    class UnreachableDatastore(SQLiteDatastore):
        def places_by_zip(self, zip_code):
            raise ConnectionError("socket closed")

    retriever = CandidateRetriever(UnreachableDatastore(datastore._path))
    with pytest.raises(RetrievalFailure) as exc_info:
        retriever.places(Query(zip="02139", name="Main", number=1))
    assert exc_info.value.operation == "places_by_zip"
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_retrieval_failures_pass_through_unchanged(tmp_path):
    retriever = CandidateRetriever(SQLiteDatastore(tmp_path / "missing.db"))
    with pytest.raises(RetrievalFailure) as exc_info:
        retriever.all_ranges(["1001"])
    assert "database not found" in exc_info.value.detail
