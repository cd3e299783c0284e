"""Chain-based interval mapping and the per-marker decision policy."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..io_.chain import ChainRule, ChainSet
from ..logging_ import get_logger
from .index import ChainIndex
from .translate import Interval

LOGGER = get_logger(__name__)

REASON_NO_OVERLAP = "no overlap"
REASON_SPLIT = "split mapping"
REASON_DELETED = "deleted region"
REASON_AMBIGUOUS = "ambiguous"


@dataclass(slots=True, frozen=True)
class Mapped:
    """Query lifted through exactly one rule."""

    chrom: str
    start: int
    end: int
    strand: str = "+"

    @property
    def position(self) -> int:
        """1-based position of a point interval."""

        return self.end


@dataclass(slots=True, frozen=True)
class Unmapped:
    reason: str


@dataclass(slots=True, frozen=True)
class Ambiguous:
    """Query fully contained by more than one rule; candidates in source order."""

    candidates: Tuple[Mapped, ...]


Outcome = Union[Mapped, Unmapped, Ambiguous]


def project(rule: ChainRule, start: int, end: int) -> Mapped:
    """Project ``[start, end)`` (inside ``rule``'s source block) onto the target build."""

    if rule.strand == "-":
        return Mapped(
            chrom=rule.target_chrom,
            start=rule.target_end - (end - rule.source_start),
            end=rule.target_end - (start - rule.source_start),
            strand="-",
        )
    offset = rule.target_start - rule.source_start
    return Mapped(chrom=rule.target_chrom, start=start + offset, end=end + offset, strand="+")


class ChainMapper:
    """Apply a loaded chain to query intervals.

    Parameters
    ----------
    chains:
        Rules loaded by :func:`markerlift.io_.chain.load_chain`. Never mutated.
    """

    def __init__(self, chains: Union[ChainSet, ChainIndex]) -> None:
        self.index = chains if isinstance(chains, ChainIndex) else ChainIndex(chains)

    def map_interval(self, interval: Interval) -> Outcome:
        hits = self.index.rules_overlapping(interval.chrom, interval.start, interval.end)
        if not hits:
            if self.index.within_chain(interval.chrom, interval.start, interval.end):
                return Unmapped(REASON_DELETED)
            return Unmapped(REASON_NO_OVERLAP)

        containing = [r for r in hits if r.source_start <= interval.start and interval.end <= r.source_end]
        if not containing:
            return Unmapped(REASON_SPLIT)
        if len(hits) == 1:
            return project(containing[0], interval.start, interval.end)

        candidates = []
        for rule in hits:
            lo = max(rule.source_start, interval.start)
            hi = min(rule.source_end, interval.end)
            candidates.append(project(rule, lo, hi))
        return Ambiguous(tuple(candidates))

    def map_intervals(self, intervals: Sequence[Interval], workers: int = 1) -> List[Outcome]:
        """Map intervals, returning one outcome per input in input order.

        With ``workers > 1`` chromosomes are mapped concurrently and the
        results are merged back by input index.
        """

        if workers <= 1:
            return [self.map_interval(iv) for iv in intervals]

        groups: Dict[str, List[int]] = {}
        for idx, iv in enumerate(intervals):
            groups.setdefault(iv.chrom, []).append(idx)

        def run(indices: List[int]) -> List[Tuple[int, Outcome]]:
            return [(i, self.map_interval(intervals[i])) for i in indices]

        outcomes: List[Optional[Outcome]] = [None] * len(intervals)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for chunk in pool.map(run, groups.values()):
                for idx, outcome in chunk:
                    outcomes[idx] = outcome
        LOGGER.debug("Mapped %s intervals across %s chromosomes", len(intervals), len(groups))
        return outcomes  # type: ignore[return-value]


__all__ = [
    "REASON_NO_OVERLAP",
    "REASON_SPLIT",
    "REASON_DELETED",
    "REASON_AMBIGUOUS",
    "Mapped",
    "Unmapped",
    "Ambiguous",
    "Outcome",
    "project",
    "ChainMapper",
]
