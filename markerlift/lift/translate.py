"""Marker to half-open interval translation and chromosome label normalisation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..config import TranslateConfig
from ..io_.table import Marker
from ..logging_ import get_logger

LOGGER = get_logger(__name__)

CANONICAL_CHROMS = tuple(str(i) for i in range(1, 23)) + ("X", "Y", "MT")

# PLINK numeric sex-chromosome codes and common mitochondrial spelling.
DEFAULT_ALIASES: Dict[str, str] = {"23": "X", "24": "Y", "M": "MT"}


@dataclass(slots=True, frozen=True)
class Interval:
    """0-based half-open interval ``[start, end)``."""

    chrom: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.start >= self.end:
            raise ValueError(f"Invalid interval {self.chrom}:{self.start}-{self.end}")

    def __len__(self) -> int:
        return self.end - self.start


def _strip_prefix(label: str) -> str:
    if label[:3].lower() == "chr":
        return label[3:]
    return label


def normalize_chrom(label: str, aliases: Optional[Mapping[str, str]] = None) -> Tuple[str, bool]:
    """Map a chromosome label onto the canonical set.

    Returns ``(label, recognized)``. Unrecognised labels come back unchanged
    with ``recognized=False``.
    """

    table = dict(DEFAULT_ALIASES)
    if aliases:
        table.update(aliases)

    if label in table:
        return table[label], True
    bare = _strip_prefix(label)
    bare = table.get(bare, bare)
    if bare.upper() in ("X", "Y", "MT"):
        bare = bare.upper()
    if bare in CANONICAL_CHROMS:
        return bare, True
    return label, False


def add_prefix(label: str) -> str:
    """Apply the UCSC ``chr`` naming (``MT`` becomes ``chrM``)."""

    if label == "MT":
        return "chrM"
    return f"chr{label}"


def to_canonical(label: str) -> str:
    """Undo :func:`add_prefix` for canonical labels; pass anything else through."""

    canonical, recognized = normalize_chrom(label)
    return canonical if recognized else label


class Translator:
    """Turns 1-based markers into the interval convention used by chain rules.

    Unrecognised chromosome labels are never dropped: they are passed through
    unchanged and collected in :attr:`warnings`.
    """

    def __init__(self, cfg: Optional[TranslateConfig] = None) -> None:
        self.cfg = cfg or TranslateConfig()
        self.warnings: List[str] = []
        self._warned: set[str] = set()

    def chrom_label(self, chrom: str) -> str:
        canonical, recognized = normalize_chrom(chrom, self.cfg.aliases)
        if not recognized:
            if chrom not in self._warned:
                self._warned.add(chrom)
                message = f"unrecognised chromosome code '{chrom}' passed through unchanged"
                self.warnings.append(message)
                LOGGER.warning(message)
            return chrom
        return add_prefix(canonical) if self.cfg.chr_prefix else canonical

    def to_interval(self, marker: Marker) -> Interval:
        return Interval(self.chrom_label(marker.chrom), marker.position - 1, marker.position)

    def translate(self, markers: Sequence[Marker]) -> List[Interval]:
        return [self.to_interval(m) for m in markers]


__all__ = [
    "CANONICAL_CHROMS",
    "DEFAULT_ALIASES",
    "Interval",
    "normalize_chrom",
    "add_prefix",
    "to_canonical",
    "Translator",
]
