import numpy as np
import pytest

from markerlift.io_.chain import ChainSet, parse_chain_table, parse_ucsc_chain
from markerlift.lift.index import IntervalIndex
from markerlift.lift.mapper import (
    REASON_DELETED,
    REASON_NO_OVERLAP,
    REASON_SPLIT,
    Ambiguous,
    ChainMapper,
    Mapped,
    Unmapped,
)
from markerlift.lift.translate import Interval


def _mapper_from_ucsc(text: str) -> ChainMapper:
    return ChainMapper(ChainSet.from_rules(parse_ucsc_chain(text.splitlines(keepends=True))))


def _mapper_from_table(text: str) -> ChainMapper:
    return ChainMapper(ChainSet.from_rules(parse_chain_table(text.splitlines(keepends=True))))


GAPPED = """\
chain 1000 chr1 10000 + 0 300 chr1 10000 + 1000 1350 7
100 50 100
150
"""


def test_forward_block_offset():
    mapper = _mapper_from_ucsc(GAPPED)

    assert mapper.map_interval(Interval("chr1", 0, 1)) == Mapped("chr1", 1000, 1001, "+")
    out = mapper.map_interval(Interval("chr1", 150, 151))
    assert out == Mapped("chr1", 1200, 1201, "+")
    assert out.position == 1201


def test_gap_inside_chain_is_deleted_region():
    mapper = _mapper_from_ucsc(GAPPED)

    assert mapper.map_interval(Interval("chr1", 119, 120)) == Unmapped(REASON_DELETED)


def test_outside_any_chain_is_no_overlap():
    mapper = _mapper_from_ucsc(GAPPED)

    assert mapper.map_interval(Interval("chr1", 5000, 5001)) == Unmapped(REASON_NO_OVERLAP)
    assert mapper.map_interval(Interval("chr2", 10, 11)) == Unmapped(REASON_NO_OVERLAP)


def test_reverse_strand_arithmetic():
    mapper = _mapper_from_ucsc("chain 1 chr1 1000 + 100 200 chr1 1000 - 300 400 1\n100\n")

    # First source base lands on the last base of the forward target block [600, 700).
    assert mapper.map_interval(Interval("chr1", 100, 101)) == Mapped("chr1", 699, 700, "-")
    assert mapper.map_interval(Interval("chr1", 199, 200)) == Mapped("chr1", 600, 601, "-")
    assert mapper.map_interval(Interval("chr1", 110, 120)) == Mapped("chr1", 680, 690, "-")


def test_interval_across_block_boundary_is_split():
    mapper = _mapper_from_table("chr1\t0\t100\tchr1\t1000\t1100\t+\nchr1\t100\t200\tchr1\t5000\t5100\t+\n")

    assert mapper.map_interval(Interval("chr1", 90, 110)) == Unmapped(REASON_SPLIT)
    assert mapper.map_interval(Interval("chr1", 150, 250)) == Unmapped(REASON_SPLIT)


def test_overlapping_rules_are_ambiguous():
    mapper = _mapper_from_table("chr1\t0\t200\tchr1\t0\t200\t+\nchr1\t50\t150\tchr2\t0\t100\t+\n")

    out = mapper.map_interval(Interval("chr1", 99, 100))

    assert isinstance(out, Ambiguous)
    assert out.candidates == (Mapped("chr1", 99, 100, "+"), Mapped("chr2", 49, 50, "+"))
    # Only the wide rule covers this base.
    assert mapper.map_interval(Interval("chr1", 10, 11)) == Mapped("chr1", 10, 11, "+")


def test_parallel_mapping_preserves_input_order():
    mapper = _mapper_from_table(
        "chr1\t0\t1000\tchr1\t100\t1100\t+\n"
        "chr2\t0\t1000\tchr3\t0\t1000\t-\n"
        "chrX\t0\t1000\tchrX\t500\t1500\t+\n"
    )
    rng = np.random.default_rng(3)
    chroms = ["chr1", "chr2", "chrX", "chrY"]
    intervals = [Interval(chroms[c], int(p), int(p) + 1) for c, p in zip(rng.integers(0, 4, 200), rng.integers(0, 1200, 200))]

    serial = mapper.map_intervals(intervals)
    threaded = mapper.map_intervals(intervals, workers=4)

    assert threaded == serial
    assert len(serial) == len(intervals)


def test_interval_index_overlap_queries():
    index = IntervalIndex.build([(0, 100, "a"), (10, 20, "b"), (50, 60, "c"), (200, 300, "d")])

    assert index.overlapping(15, 16) == ["a", "b"]
    assert index.overlapping(55, 210) == ["a", "c", "d"]
    assert index.overlapping(100, 200) == []
    assert index.covers(60, 100)
    assert not index.covers(150, 160)


@pytest.mark.parametrize("start", [0, 999])
def test_identity_rule_edges(start):
    mapper = _mapper_from_table("chr1\t0\t1000\tchr1\t0\t1000\t+\n")

    assert mapper.map_interval(Interval("chr1", start, start + 1)) == Mapped("chr1", start, start + 1, "+")
