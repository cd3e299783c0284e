"""Join mapped positions back onto the original dataset."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..errors import JoinError
from ..io_.table import Dataset, MappedRecord, Marker


def resolve_rows(dataset: Dataset, mapped: Sequence[MappedRecord]) -> Dict[int, MappedRecord]:
    """Key mapped records by the dataset row they lift.

    Records carrying an input ``index`` are joined on it, so repeated
    identifiers stay distinct. Records without one are joined by identifier,
    which must then be unique in the dataset.
    """

    rows_by_id: Dict[str, List[int]] = {}
    for row, marker in enumerate(dataset.markers):
        rows_by_id.setdefault(marker.identifier, []).append(row)

    rows: Dict[int, MappedRecord] = {}
    for record in mapped:
        candidates = rows_by_id.get(record.identifier)
        if candidates is None:
            raise JoinError(record.identifier)
        if record.index is None:
            if len(candidates) > 1:
                raise JoinError(record.identifier, "identifier is not unique in dataset and record has no input index")
            row = candidates[0]
        else:
            row = record.index
            if row not in candidates:
                raise JoinError(record.identifier, f"input row {row} does not hold this identifier")
        if row in rows:
            raise JoinError(record.identifier, "marker appears more than once in mapped stream")
        rows[row] = record
    return rows


def update_dataset(dataset: Dataset, mapped: Sequence[MappedRecord], build: Optional[str] = None) -> Dataset:
    """Return a new dataset holding only mapped markers, repositioned.

    Markers keep their original order, identifier and passthrough fields. The
    input dataset is not modified. Raises :class:`JoinError` before building
    anything if ``mapped`` names an identifier the dataset does not contain.
    """

    rows = resolve_rows(dataset, mapped)

    lifted: List[Marker] = []
    for row, marker in enumerate(dataset.markers):
        record = rows.get(row)
        if record is None:
            continue
        lifted.append(replace(marker, chrom=record.chrom, position=record.position))
    return dataset.with_markers(lifted, build=build)


__all__ = ["resolve_rows", "update_dataset"]
