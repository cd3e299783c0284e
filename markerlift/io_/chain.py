"""Chain file parsing.

Two layouts are understood:

``ucsc``
    The UCSC liftOver chain format. Each chain starts with a header line::

        chain score tName tSize tStrand tStart tEnd qName qSize qStrand qStart qEnd id

    followed by ``size dt dq`` block lines and a closing ``size`` line. ``t``
    is the source build and ``q`` the target build. Query coordinates on the
    ``-`` strand are converted to forward-strand coordinates at load time.

``table``
    One gapless block per line::

        source_chrom source_start source_end target_chrom target_start target_end strand [chain_id]

    with 0-based half-open coordinates on the forward strand of both builds.
"""

from __future__ import annotations

import gzip
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Dict, Iterable, Iterator, List, Literal, Optional, Sequence, Tuple, Union

from ..errors import ChainFormatError
from ..logging_ import get_logger

LOGGER = get_logger(__name__)

ChainFormat = Literal["auto", "ucsc", "table"]
OverlapPolicy = Literal["ambiguous", "reject"]

_STRANDS = ("+", "-")


@dataclass(slots=True, frozen=True)
class ChainRule:
    """One gapless aligned block between the source and target builds."""

    source_chrom: str
    source_start: int
    source_end: int
    target_chrom: str
    target_start: int
    target_end: int
    strand: str = "+"
    chain_id: str = ""
    line: int = field(default=0, compare=False)

    @property
    def length(self) -> int:
        return self.source_end - self.source_start


@dataclass(slots=True, frozen=True)
class ChainSpan:
    """Full source extent covered by one chain, gaps included."""

    source_chrom: str
    start: int
    end: int
    chain_id: str


@dataclass(slots=True, frozen=True)
class ChainSet:
    """Immutable collection of chain rules loaded for one run."""

    rules: Tuple[ChainRule, ...]
    spans: Tuple[ChainSpan, ...]
    source: Optional[str] = None

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def source_chroms(self) -> List[str]:
        return sorted({r.source_chrom for r in self.rules})

    @classmethod
    def from_rules(cls, rules: Iterable[ChainRule], source: Optional[str] = None) -> "ChainSet":
        """Bundle rules with per-chain spans derived from their extents."""

        rules = tuple(rules)
        extents: Dict[Tuple[str, str], List[int]] = {}
        for rule in rules:
            key = (rule.chain_id, rule.source_chrom)
            if key in extents:
                extents[key][0] = min(extents[key][0], rule.source_start)
                extents[key][1] = max(extents[key][1], rule.source_end)
            else:
                extents[key] = [rule.source_start, rule.source_end]
        spans = tuple(ChainSpan(chrom, lo, hi, cid) for (cid, chrom), (lo, hi) in extents.items())
        return cls(rules=rules, spans=spans, source=source)


def open_text(path: Union[str, Path]) -> IO[str]:
    """Open a plain or gzip-compressed chain file for reading."""

    path = Path(path)
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, "r", encoding="utf-8")


def _to_int(value: str, what: str, path: Union[str, Path], lineno: int) -> int:
    try:
        return int(value)
    except ValueError:
        raise ChainFormatError(path, lineno, f"non-integer {what} '{value}'") from None


def _iter_lines(handle: Iterable[str]) -> Iterator[Tuple[int, List[str]]]:
    for lineno, line in enumerate(handle, start=1):
        if not line.strip() or line.startswith("#"):
            continue
        yield lineno, line.split()


@dataclass(slots=True)
class _OpenChain:
    chain_id: str
    header_line: int
    t_name: str
    t_start: int
    t_end: int
    q_name: str
    q_size: int
    q_strand: str
    q_start: int
    q_end: int
    t_pos: int = 0
    q_pos: int = 0

    def __post_init__(self) -> None:
        self.t_pos = self.t_start
        self.q_pos = self.q_start


def _parse_header(fields: Sequence[str], path: Union[str, Path], lineno: int, counter: int) -> _OpenChain:
    if len(fields) not in (12, 13):
        raise ChainFormatError(path, lineno, f"chain header has {len(fields)} fields, expected 12 or 13")
    t_size = _to_int(fields[3], "tSize", path, lineno)
    t_strand = fields[4]
    t_start = _to_int(fields[5], "tStart", path, lineno)
    t_end = _to_int(fields[6], "tEnd", path, lineno)
    q_size = _to_int(fields[8], "qSize", path, lineno)
    q_strand = fields[9]
    q_start = _to_int(fields[10], "qStart", path, lineno)
    q_end = _to_int(fields[11], "qEnd", path, lineno)
    chain_id = fields[12] if len(fields) == 13 else str(counter)

    if t_strand != "+":
        raise ChainFormatError(path, lineno, f"source strand must be '+', got '{t_strand}'")
    if q_strand not in _STRANDS:
        raise ChainFormatError(path, lineno, f"invalid target strand '{q_strand}'")
    if not 0 <= t_start < t_end <= t_size:
        raise ChainFormatError(path, lineno, f"source span {t_start}-{t_end} outside 0-{t_size}")
    if not 0 <= q_start < q_end <= q_size:
        raise ChainFormatError(path, lineno, f"target span {q_start}-{q_end} outside 0-{q_size}")

    return _OpenChain(
        chain_id=chain_id,
        header_line=lineno,
        t_name=fields[2],
        t_start=t_start,
        t_end=t_end,
        q_name=fields[7],
        q_size=q_size,
        q_strand=q_strand,
        q_start=q_start,
        q_end=q_end,
    )


def _emit_block(chain: _OpenChain, size: int, path: Union[str, Path], lineno: int) -> ChainRule:
    if size <= 0:
        raise ChainFormatError(path, lineno, f"block size must be positive, got {size}")
    t_block_end = chain.t_pos + size
    q_block_end = chain.q_pos + size
    if t_block_end > chain.t_end or q_block_end > chain.q_end:
        raise ChainFormatError(path, lineno, f"block runs past the span declared on line {chain.header_line}")

    if chain.q_strand == "+":
        target_start, target_end = chain.q_pos, q_block_end
    else:
        target_start, target_end = chain.q_size - q_block_end, chain.q_size - chain.q_pos

    return ChainRule(
        source_chrom=chain.t_name,
        source_start=chain.t_pos,
        source_end=t_block_end,
        target_chrom=chain.q_name,
        target_start=target_start,
        target_end=target_end,
        strand=chain.q_strand,
        chain_id=chain.chain_id,
        line=lineno,
    )


def parse_ucsc_chain(handle: Iterable[str], path: Union[str, Path] = "<stream>") -> List[ChainRule]:
    """Parse UCSC chain records into forward-strand :class:`ChainRule` blocks."""

    rules: List[ChainRule] = []
    chain: Optional[_OpenChain] = None
    counter = 0

    for lineno, fields in _iter_lines(handle):
        if fields[0] == "chain":
            if chain is not None:
                raise ChainFormatError(path, lineno, f"chain opened on line {chain.header_line} was not terminated")
            counter += 1
            chain = _parse_header(fields, path, lineno, counter)
            continue

        if chain is None:
            raise ChainFormatError(path, lineno, "block line outside of a chain")

        if len(fields) == 3:
            size = _to_int(fields[0], "block size", path, lineno)
            dt = _to_int(fields[1], "source gap", path, lineno)
            dq = _to_int(fields[2], "target gap", path, lineno)
            if dt < 0 or dq < 0:
                raise ChainFormatError(path, lineno, "negative gap between blocks")
            rules.append(_emit_block(chain, size, path, lineno))
            chain.t_pos += size + dt
            chain.q_pos += size + dq
        elif len(fields) == 1:
            size = _to_int(fields[0], "block size", path, lineno)
            rules.append(_emit_block(chain, size, path, lineno))
            if chain.t_pos + size != chain.t_end or chain.q_pos + size != chain.q_end:
                raise ChainFormatError(
                    path, lineno, f"blocks do not end at the span declared on line {chain.header_line}"
                )
            chain = None
        else:
            raise ChainFormatError(path, lineno, f"block line has {len(fields)} fields, expected 1 or 3")

    if chain is not None:
        raise ChainFormatError(path, chain.header_line, "chain not terminated before end of file")
    return rules


def parse_chain_table(handle: Iterable[str], path: Union[str, Path] = "<stream>") -> List[ChainRule]:
    """Parse a flat block table; rows must be sorted by start within each source chromosome."""

    rules: List[ChainRule] = []
    last_start: Dict[str, Tuple[int, int]] = {}

    for lineno, fields in _iter_lines(handle):
        if len(fields) not in (7, 8):
            raise ChainFormatError(path, lineno, f"expected 7 or 8 columns, found {len(fields)}")
        s_chrom, t_chrom, strand = fields[0], fields[3], fields[6]
        s_start = _to_int(fields[1], "source start", path, lineno)
        s_end = _to_int(fields[2], "source end", path, lineno)
        t_start = _to_int(fields[4], "target start", path, lineno)
        t_end = _to_int(fields[5], "target end", path, lineno)

        if strand not in _STRANDS:
            raise ChainFormatError(path, lineno, f"invalid strand '{strand}'")
        if not 0 <= s_start < s_end or not 0 <= t_start < t_end:
            raise ChainFormatError(path, lineno, "intervals must satisfy 0 <= start < end")
        if s_end - s_start != t_end - t_start:
            raise ChainFormatError(path, lineno, "source and target intervals differ in length")
        if s_chrom in last_start and s_start < last_start[s_chrom][0]:
            raise ChainFormatError(
                path,
                lineno,
                f"rules for {s_chrom} are not sorted by start (line {last_start[s_chrom][1]} starts later)",
            )
        last_start[s_chrom] = (s_start, lineno)

        rules.append(
            ChainRule(
                source_chrom=s_chrom,
                source_start=s_start,
                source_end=s_end,
                target_chrom=t_chrom,
                target_start=t_start,
                target_end=t_end,
                strand=strand,
                chain_id=fields[7] if len(fields) == 8 else f"row{lineno}",
                line=lineno,
            )
        )
    return rules


def detect_format(path: Union[str, Path]) -> str:
    """Return ``"ucsc"`` if the first record is a chain header, else ``"table"``."""

    with open_text(path) as handle:
        for _lineno, fields in _iter_lines(handle):
            return "ucsc" if fields[0] == "chain" else "table"
    return "table"


def check_overlaps(rules: Sequence[ChainRule], path: Union[str, Path]) -> None:
    """Raise :class:`ChainFormatError` if any two rules overlap on a source chromosome."""

    by_chrom: Dict[str, List[ChainRule]] = defaultdict(list)
    for rule in rules:
        by_chrom[rule.source_chrom].append(rule)

    for chrom, chrom_rules in by_chrom.items():
        chrom_rules.sort(key=lambda r: (r.source_start, r.source_end))
        reach: Optional[ChainRule] = None
        for rule in chrom_rules:
            if reach is not None and rule.source_start < reach.source_end:
                raise ChainFormatError(
                    path,
                    rule.line,
                    f"{chrom}:{rule.source_start}-{rule.source_end} overlaps the rule on line {reach.line}",
                )
            if reach is None or rule.source_end > reach.source_end:
                reach = rule


def load_chain(
    path: Union[str, Path],
    fmt: ChainFormat = "auto",
    overlap_policy: OverlapPolicy = "ambiguous",
) -> ChainSet:
    """Load and validate a chain file into a :class:`ChainSet`."""

    if fmt == "auto":
        fmt = detect_format(path)  # type: ignore[assignment]
    if fmt not in ("ucsc", "table"):
        raise ValueError(f"Unknown chain format '{fmt}'")

    with open_text(path) as handle:
        if fmt == "ucsc":
            rules = parse_ucsc_chain(handle, path)
        else:
            rules = parse_chain_table(handle, path)

    if not rules:
        raise ChainFormatError(path, None, "no chain rules found")
    if overlap_policy == "reject":
        check_overlaps(rules, path)

    chains = ChainSet.from_rules(rules, source=str(path))
    LOGGER.info(
        "Loaded %s chain blocks (%s chains) over %s source chromosomes from %s",
        len(chains.rules),
        len({r.chain_id for r in chains.rules}),
        len(chains.source_chroms),
        path,
    )
    return chains


__all__ = [
    "ChainRule",
    "ChainSpan",
    "ChainSet",
    "parse_ucsc_chain",
    "parse_chain_table",
    "detect_format",
    "check_overlaps",
    "load_chain",
]
