"""Marker annotation table IO."""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..errors import FormatError

TABLE_COLUMNS = ["chrom", "position", "identifier"]
MAPPED_COLUMNS = ["identifier", "position"]
UNMAPPED_COLUMNS = ["identifier", "reason"]

PathLike = Union[str, Path]

_PARSER_LINE = re.compile(r"line (\d+)")


@dataclass(slots=True, frozen=True)
class Marker:
    """A single genotyped position. ``position`` is 1-based."""

    identifier: str
    chrom: str
    position: int
    extra: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class MappedRecord:
    """One lifted marker; ``index`` is its row in the source dataset."""

    identifier: str
    chrom: str
    position: int
    index: Optional[int] = field(default=None, compare=False)


@dataclass(slots=True, frozen=True)
class UnmappedRecord:
    identifier: str
    reason: str
    index: Optional[int] = field(default=None, compare=False)


@dataclass(slots=True, frozen=True)
class Dataset:
    """Ordered markers sharing one coordinate system.

    ``columns`` holds the input header verbatim when the table had one.
    """

    markers: Tuple[Marker, ...]
    build: Optional[str] = None
    columns: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.markers)

    def __iter__(self) -> Iterator[Marker]:
        return iter(self.markers)

    @property
    def identifiers(self) -> List[str]:
        return [m.identifier for m in self.markers]

    def with_markers(self, markers: Iterable[Marker], build: Optional[str] = None) -> "Dataset":
        """Return a new dataset carrying ``markers`` and this dataset's schema."""

        return replace(self, markers=tuple(markers), build=build if build is not None else self.build)

    def to_frame(self) -> pd.DataFrame:
        """Tabulate markers using the input table's column order and names."""

        if self.columns:
            names = list(self.columns)
        else:
            n_extra = max((len(m.extra) for m in self.markers), default=0)
            names = TABLE_COLUMNS + [f"extra_{i}" for i in range(n_extra)]
        rows = [(m.chrom, m.position, m.identifier, *m.extra) for m in self.markers]
        return pd.DataFrame(rows, columns=names)


def read_frame(path: PathLike, sep: str = "\t") -> pd.DataFrame:
    """Read a headerless delimited file as strings, indexed by 1-based line number.

    Blank lines are dropped. Rows shorter than the first row keep ``NaN`` in
    their missing trailing fields; longer rows raise :class:`FormatError`.
    """

    try:
        df = pd.read_csv(
            path,
            sep=sep,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[],
            compression="infer",
            skip_blank_lines=False,
            quoting=csv.QUOTE_NONE,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except pd.errors.ParserError as exc:
        match = _PARSER_LINE.search(str(exc))
        line = int(match.group(1)) if match else None
        raise FormatError(path, line, f"inconsistent column count ({str(exc).strip()})") from None

    df.index = pd.RangeIndex(1, len(df) + 1)
    blank = df.fillna("").apply(lambda col: col.str.strip() == "").all(axis=1)
    return df[~blank]


def check_complete(df: pd.DataFrame, path: PathLike) -> None:
    """Raise :class:`FormatError` on the first row with missing trailing fields."""

    missing = df.isna().sum(axis=1)
    short = missing[missing > 0]
    if not short.empty:
        line = int(short.index[0])
        width = df.shape[1]
        raise FormatError(path, line, f"expected {width} columns, found {width - int(short.iloc[0])}")


def parse_positions(values: pd.Series, path: PathLike) -> pd.Series:
    """Validate 1-based integer positions, naming the first offending line."""

    stripped = values.str.strip()
    numeric = stripped.str.fullmatch(r"[+-]?\d+")
    if not numeric.all():
        line = int(numeric[~numeric].index[0])
        raise FormatError(path, line, f"non-numeric position '{values[line]}'")
    positions = stripped.astype("int64")
    bad = positions[positions < 1]
    if not bad.empty:
        raise FormatError(
            path, int(bad.index[0]), f"position must be a positive 1-based integer, got {int(bad.iloc[0])}"
        )
    return positions


def check_unique(identifiers: pd.Series, path: PathLike) -> None:
    dup = identifiers[identifiers.duplicated()]
    if not dup.empty:
        line = int(dup.index[0])
        first = int(identifiers[identifiers == dup.iloc[0]].index[0])
        raise FormatError(path, line, f"duplicate identifier '{dup.iloc[0]}' (first seen on line {first})")


def read_table(
    path: PathLike,
    header: bool = False,
    check_duplicates: bool = True,
    build: Optional[str] = None,
) -> Dataset:
    """Read a tab-delimited chrom/position/identifier table into a :class:`Dataset`.

    Any columns after the identifier are kept verbatim on each marker. Every
    row must have the column count of the first row.
    """

    df = read_frame(path)
    if df.empty:
        return Dataset(markers=(), build=build)
    if df.shape[1] < len(TABLE_COLUMNS):
        raise FormatError(path, int(df.index[0]), f"expected at least 3 columns, found {df.shape[1]}")
    check_complete(df, path)

    columns: Tuple[str, ...] = ()
    if header:
        columns = tuple(df.iloc[0])
        df = df.iloc[1:]

    chrom = df[0].str.strip()
    identifier = df[2].str.strip()
    empty = (chrom == "") | (identifier == "")
    if empty.any():
        raise FormatError(path, int(empty[empty].index[0]), "empty chromosome or identifier")
    positions = parse_positions(df[1], path)
    if check_duplicates:
        check_unique(identifier, path)

    extra = df.iloc[:, len(TABLE_COLUMNS):].to_numpy().tolist()
    markers = tuple(
        Marker(i, c, int(p), tuple(e)) for i, c, p, e in zip(identifier, chrom, positions, extra)
    )
    return Dataset(markers=markers, build=build, columns=columns)


def write_table(path: PathLike, dataset: Dataset, header: bool = False) -> None:
    """Write a dataset back out with the same schema it was read with."""

    df = dataset.to_frame()
    df.to_csv(path, sep="\t", header=header, index=False)


def write_mapped(path: PathLike, records: Sequence[Tuple[str, int]]) -> None:
    """Write identifier/new-position pairs (two columns, no header)."""

    df = pd.DataFrame(list(records), columns=MAPPED_COLUMNS)
    df.to_csv(path, sep="\t", header=False, index=False)


def write_unmapped(path: PathLike, records: Sequence[Tuple[str, str]]) -> None:
    """Write identifier/reason pairs (two columns, no header)."""

    df = pd.DataFrame(list(records), columns=UNMAPPED_COLUMNS)
    df.to_csv(path, sep="\t", header=False, index=False)


__all__ = [
    "TABLE_COLUMNS",
    "MAPPED_COLUMNS",
    "UNMAPPED_COLUMNS",
    "Marker",
    "MappedRecord",
    "UnmappedRecord",
    "Dataset",
    "read_frame",
    "check_complete",
    "parse_positions",
    "check_unique",
    "read_table",
    "write_table",
    "write_mapped",
    "write_unmapped",
]
