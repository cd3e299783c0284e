import pytest

from markerlift.lift.mapper import Ambiguous, Mapped, Unmapped
from markerlift.lift.partition import MappedRecord, UnmappedRecord, partition


def test_partition_is_stable_and_covering():
    ids = ["rs1", "rs2", "rs3", "rs4", "rs5"]
    outcomes = [
        Mapped("chr1", 10, 11),
        Unmapped("no overlap"),
        Mapped("chrX", 20, 21),
        Ambiguous((Mapped("chr1", 1, 2), Mapped("chr2", 1, 2))),
        Mapped("chrM", 5, 6),
    ]

    parts = partition(ids, outcomes)

    assert parts.mapped == [
        MappedRecord("rs1", "1", 11),
        MappedRecord("rs3", "X", 21),
        MappedRecord("rs5", "MT", 6),
    ]
    assert parts.unmapped == [UnmappedRecord("rs2", "no overlap"), UnmappedRecord("rs4", "ambiguous")]
    mapped_ids = {r.identifier for r in parts.mapped}
    unmapped_ids = {r.identifier for r in parts.unmapped}
    assert mapped_ids.isdisjoint(unmapped_ids)
    assert mapped_ids | unmapped_ids == set(ids)
    assert len(parts) == len(ids)
    assert [r.index for r in parts.mapped] == [0, 2, 4]
    assert [r.index for r in parts.unmapped] == [1, 3]


def test_summary_counts_reasons():
    parts = partition(["a", "b", "c"], [Unmapped("no overlap"), Unmapped("no overlap"), Mapped("chr1", 0, 1)])

    assert parts.summary() == {"mapped": 1, "no overlap": 2}


def test_length_mismatch():
    with pytest.raises(ValueError):
        partition(["a"], [])
