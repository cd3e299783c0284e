"""Coordinate lift stages."""

from .mapper import Ambiguous, ChainMapper, Mapped, Outcome, Unmapped
from .partition import MappedRecord, Partition, UnmappedRecord, partition
from .pipeline import LiftResult, lift_dataset, run_lift
from .translate import Interval, Translator, normalize_chrom
from .update import update_dataset

__all__ = [
    "Ambiguous",
    "ChainMapper",
    "Mapped",
    "Outcome",
    "Unmapped",
    "MappedRecord",
    "Partition",
    "UnmappedRecord",
    "partition",
    "LiftResult",
    "lift_dataset",
    "run_lift",
    "Interval",
    "Translator",
    "normalize_chrom",
    "update_dataset",
]
