"""Interval indexes over chain rules for overlap queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, List, Sequence, Tuple, TypeVar

import numpy as np

from ..io_.chain import ChainRule, ChainSet, ChainSpan

T = TypeVar("T")


@dataclass(slots=True)
class IntervalIndex(Generic[T]):
    """Sorted half-open intervals on one chromosome.

    ``max_end[i]`` is the largest end among the first ``i + 1`` intervals, so
    it is non-decreasing and can be binary searched even when intervals nest
    or overlap.
    """

    starts: np.ndarray
    ends: np.ndarray
    max_end: np.ndarray
    items: Tuple[T, ...]

    @classmethod
    def build(cls, spans: Sequence[Tuple[int, int, T]]) -> "IntervalIndex[T]":
        ordered = sorted(spans, key=lambda s: (s[0], s[1]))
        starts = np.fromiter((s[0] for s in ordered), dtype=np.int64, count=len(ordered))
        ends = np.fromiter((s[1] for s in ordered), dtype=np.int64, count=len(ordered))
        max_end = np.maximum.accumulate(ends) if len(ends) else ends.copy()
        return cls(starts=starts, ends=ends, max_end=max_end, items=tuple(s[2] for s in ordered))

    def __len__(self) -> int:
        return len(self.items)

    def overlapping(self, start: int, end: int) -> List[T]:
        """Items whose interval shares at least one base with ``[start, end)``."""

        lo = int(np.searchsorted(self.max_end, start, side="right"))
        hi = int(np.searchsorted(self.starts, end, side="left"))
        if lo >= hi:
            return []
        hits = np.nonzero(self.ends[lo:hi] > start)[0]
        return [self.items[lo + i] for i in hits]

    def covers(self, start: int, end: int) -> bool:
        """True if some interval fully contains ``[start, end)``."""

        hi = int(np.searchsorted(self.starts, start, side="right"))
        if hi == 0:
            return False
        return bool(self.max_end[hi - 1] >= end)


class ChainIndex:
    """Per-chromosome rule and span indexes built once from a :class:`ChainSet`.

    Read-only after construction, so it can be shared between worker threads.
    """

    def __init__(self, chains: ChainSet) -> None:
        self.chains = chains
        rules: Dict[str, List[Tuple[int, int, ChainRule]]] = {}
        for rule in chains.rules:
            rules.setdefault(rule.source_chrom, []).append((rule.source_start, rule.source_end, rule))
        spans: Dict[str, List[Tuple[int, int, ChainSpan]]] = {}
        for span in chains.spans:
            spans.setdefault(span.source_chrom, []).append((span.start, span.end, span))

        self._rules = {chrom: IntervalIndex.build(items) for chrom, items in rules.items()}
        self._spans = {chrom: IntervalIndex.build(items) for chrom, items in spans.items()}

    def has_chrom(self, chrom: str) -> bool:
        return chrom in self._rules

    def rules_overlapping(self, chrom: str, start: int, end: int) -> List[ChainRule]:
        index = self._rules.get(chrom)
        if index is None:
            return []
        return index.overlapping(start, end)

    def within_chain(self, chrom: str, start: int, end: int) -> bool:
        """True if ``[start, end)`` lies inside the span of some chain, gaps included."""

        index = self._spans.get(chrom)
        if index is None:
            return False
        return index.covers(start, end)


__all__ = ["IntervalIndex", "ChainIndex"]
