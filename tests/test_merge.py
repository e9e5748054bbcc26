from street_geocoder.components import AddressRange, Candidate, EdgeRecord, Place, Segment
from street_geocoder.merge import full_join, group_by, merge_places, merge_primary, ranges_by_segment, unique_values


def test_unique_values_preserves_first_seen_order():
    assert unique_values(["b", "a", "b", "c", "a"], key=lambda v: v) == ["b", "a", "c"]


def test_group_by():
    grouped = group_by([1, 2, 3, 4, 5], key=lambda v: v % 2)
    assert grouped == {1: [1, 3, 5], 0: [2, 4]}


def test_full_join_fans_out_and_keeps_unmatched():
    joined = full_join(
        [("a", 1), ("b", 2)],
        [("a", "x"), ("a", "y")],
        dest_key=lambda row: row[0],
        src_key=lambda row: row[0],
        combine=lambda row, other: (row[0], row[1], other[1]),
    )
    assert joined == [("a", 1, "x"), ("a", 1, "y"), ("b", 2)]


def test_merge_places_returns_new_candidates():
    candidate = Candidate(tlid="1", name="Main", zip="02139")
    places = [
        Place(zip="02139", city="Cambridge", state="MA", paflag="P"),
        Place(zip="02139", city="Cambridgeport", state="MA"),
    ]
    merged = merge_places([candidate], places)
    assert [c.city for c in merged] == ["Cambridge", "Cambridgeport"]
    assert candidate.city is None


def test_merge_primary_matches_segment_and_zip():
    candidates = [
        Candidate(tlid="1", name="Main", zip="02139"),
        Candidate(tlid="1", name="Main", zip="02138"),
    ]
    segment = Segment(tlid="1", name="Main", name_phone="MN", zip="02139", geometry=b"")
    edge = EdgeRecord(tlid="1", paflag="P", suftype="St")
    merged = merge_primary(candidates, [(segment, edge)])
    assert [(c.zip, c.suftype) for c in merged] == [("02139", "St"), ("02138", None)]


def test_ranges_by_segment():
    ranges = [
        AddressRange(tlid="1", fromhn=2, tohn=10, side="E", zip="02139"),
        AddressRange(tlid="2", fromhn=1, tohn=9, side="O", zip="02139"),
        AddressRange(tlid="1", fromhn=1, tohn=9, side="O", zip="02139"),
    ]
    grouped = ranges_by_segment(ranges)
    assert [r.side for r in grouped["1"]] == ["E", "O"]
    assert len(grouped["2"]) == 1
