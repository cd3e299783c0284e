"""Stable split of mapping outcomes into mapped and unmapped streams."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..io_.table import MappedRecord, UnmappedRecord
from .mapper import REASON_AMBIGUOUS, Ambiguous, Mapped, Outcome, Unmapped
from .translate import to_canonical


@dataclass(slots=True)
class Partition:
    mapped: List[MappedRecord] = field(default_factory=list)
    unmapped: List[UnmappedRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.mapped) + len(self.unmapped)

    def summary(self) -> Dict[str, int]:
        """Counts of mapped markers and of unmapped markers per reason."""

        counts: Dict[str, int] = {"mapped": len(self.mapped)}
        counts.update(Counter(r.reason for r in self.unmapped))
        return counts


def partition(identifiers: Sequence[str], outcomes: Sequence[Outcome]) -> Partition:
    """Route each outcome to the mapped or unmapped stream, preserving order.

    Target chromosomes are written with canonical labels (``chr1`` -> ``1``).
    """

    if len(identifiers) != len(outcomes):
        raise ValueError(f"{len(identifiers)} identifiers but {len(outcomes)} outcomes")

    result = Partition()
    for index, (identifier, outcome) in enumerate(zip(identifiers, outcomes)):
        if isinstance(outcome, Mapped):
            result.mapped.append(MappedRecord(identifier, to_canonical(outcome.chrom), outcome.position, index))
        elif isinstance(outcome, Ambiguous):
            result.unmapped.append(UnmappedRecord(identifier, REASON_AMBIGUOUS, index))
        elif isinstance(outcome, Unmapped):
            result.unmapped.append(UnmappedRecord(identifier, outcome.reason, index))
        else:
            raise TypeError(f"Unexpected outcome {outcome!r} for {identifier}")
    return result


__all__ = ["MappedRecord", "UnmappedRecord", "Partition", "partition"]
