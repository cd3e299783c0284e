"""Helpers for PLINK ``.map``/``.bim`` variant tables."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Sequence, Union

import pandas as pd

from ..errors import FormatError, JoinError
from ..logging_ import get_logger
from .table import Dataset, MappedRecord, Marker, check_complete, check_unique, parse_positions, read_frame

LOGGER = get_logger(__name__)

PLINK_CODES = {"X": "23", "Y": "24", "XY": "25", "MT": "26"}

# PLINK accepts space separated .map files as well as tabs.
_PLINK_SEP = r"\s+"


def _read_plink_frame(path: Union[str, Path]) -> pd.DataFrame:
    df = read_frame(path, sep=_PLINK_SEP)
    if df.empty:
        return df
    if df.shape[1] not in (4, 6):
        raise FormatError(path, int(df.index[0]), f"expected 4 (.map) or 6 (.bim) columns, found {df.shape[1]}")
    check_complete(df, path)
    return df


def read_plink_map(path: Union[str, Path], check_duplicates: bool = True, build: str | None = None) -> Dataset:
    """Read a PLINK ``.map``/``.bim`` file (chrom, id, cM, bp[, a1, a2]) as markers.

    The cM and allele columns are carried in :attr:`Marker.extra`.
    """

    df = _read_plink_frame(path)
    if df.empty:
        return Dataset(markers=(), build=build)
    positions = parse_positions(df[3], path)
    if check_duplicates:
        check_unique(df[1], path)

    extra = df.drop(columns=[0, 1, 3]).to_numpy().tolist()
    markers = tuple(Marker(i, c, int(p), tuple(e)) for c, i, p, e in zip(df[0], df[1], positions, extra))
    return Dataset(markers=markers, build=build)


def plink_chrom(canonical: str, original: str) -> str:
    """Render a lifted chromosome in the numbering style of the original row."""

    if original.isdigit():
        return PLINK_CODES.get(canonical, canonical)
    return canonical


def _rows_by_index(df: pd.DataFrame, mapped: Sequence[MappedRecord], src: Union[str, Path]) -> Dict[int, MappedRecord]:
    """Key records by their data row, checking each row holds the record's identifier."""

    ids = df[1].tolist()
    rows: Dict[int, MappedRecord] = {}
    for record in mapped:
        row = record.index
        if row is None or not 0 <= row < len(ids) or ids[row] != record.identifier:
            raise JoinError(record.identifier, f"input row {row} of {src} does not hold this identifier")
        if row in rows:
            raise JoinError(record.identifier, "marker appears more than once in mapped stream")
        rows[row] = record
    return rows


def _rows_by_id(df: pd.DataFrame, mapped: Sequence[MappedRecord], src: Union[str, Path]) -> Dict[int, MappedRecord]:
    """Key records by the single row of ``src`` carrying their identifier."""

    positions: Dict[str, list] = {}
    for row, identifier in enumerate(df[1]):
        positions.setdefault(identifier, []).append(row)

    rows: Dict[int, MappedRecord] = {}
    for record in mapped:
        found = positions.get(record.identifier)
        if not found:
            raise JoinError(record.identifier, f"identifier not present in {src}")
        if len(found) > 1:
            raise JoinError(record.identifier, f"identifier occurs on {len(found)} rows of {src}")
        if found[0] in rows:
            raise JoinError(record.identifier, "marker appears more than once in mapped stream")
        rows[found[0]] = record
    return rows


def rewrite_plink_map(
    src: Union[str, Path],
    dst: Union[str, Path],
    mapped: Sequence[MappedRecord],
    by_index: bool = False,
) -> int:
    """Write ``src`` to ``dst`` keeping only mapped rows, with new chrom/bp.

    With ``by_index`` each record's :attr:`MappedRecord.index` names its data
    row in ``src`` (``src`` is the file the markers were read from). Otherwise
    records are joined by identifier, which must then be unique in ``src``.
    Join failures raise :class:`JoinError` before ``dst`` is created. Returns
    the number of rows written.
    """

    df = _read_plink_frame(src)
    if df.empty:
        df = pd.DataFrame(columns=[0, 1, 2, 3])
    df = df.reset_index(drop=True)
    rows = _rows_by_index(df, mapped, src) if by_index else _rows_by_id(df, mapped, src)

    keep = sorted(rows)
    out = df.iloc[keep].copy()
    out[0] = [plink_chrom(rows[r].chrom, orig) for r, orig in zip(keep, out[0])]
    out[3] = [rows[r].position for r in keep]
    out.to_csv(dst, sep="\t", header=False, index=False)
    LOGGER.info("Rewrote %s of %s rows from %s into %s", len(out), len(df), src, dst)
    return len(out)


def write_extract(path: Union[str, Path], identifiers: Iterable[str]) -> None:
    """Write one identifier per line, as consumed by ``plink --extract``."""

    with open(path, "w", encoding="utf-8") as handle:
        for identifier in identifiers:
            handle.write(f"{identifier}\n")


__all__ = ["PLINK_CODES", "read_plink_map", "plink_chrom", "rewrite_plink_map", "write_extract"]
