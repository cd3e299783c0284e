"""BED file helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

BED_COLUMNS = ["chrom", "start", "end", "name"]


def write_bed(path: str | Path, df: pd.DataFrame) -> None:
    """Write a BED-like table with enforced columns."""

    missing = [col for col in BED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"DataFrame missing columns: {missing}")
    df = df[BED_COLUMNS]
    df.to_csv(path, sep="\t", header=False, index=False)


def intervals_frame(intervals: Sequence, names: Sequence[str]) -> pd.DataFrame:
    """Tabulate translated intervals with marker identifiers as BED names."""

    if len(intervals) != len(names):
        raise ValueError("intervals and names must align")
    return pd.DataFrame(
        {
            "chrom": [iv.chrom for iv in intervals],
            "start": [iv.start for iv in intervals],
            "end": [iv.end for iv in intervals],
            "name": list(names),
        },
        columns=BED_COLUMNS,
    )


__all__ = ["BED_COLUMNS", "write_bed", "intervals_frame"]
