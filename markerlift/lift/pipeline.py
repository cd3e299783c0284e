"""End-to-end coordinate lift: read, translate, map, partition, update, write."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..config import LiftConfig
from ..io_.bed import intervals_frame, write_bed
from ..io_.chain import ChainSet, load_chain
from ..io_.plink import read_plink_map, rewrite_plink_map, write_extract
from ..io_.table import Dataset, read_table, write_mapped, write_table, write_unmapped
from ..logging_ import get_logger
from .mapper import ChainMapper, Outcome
from .partition import Partition, partition
from .translate import Interval, Translator
from .update import update_dataset

LOGGER = get_logger(__name__)

PLINK_SUFFIXES = (".map", ".bim")


@dataclass(slots=True)
class LiftResult:
    """Everything produced by one lift run."""

    source: Dataset
    lifted: Dataset
    partition: Partition
    intervals: List[Interval]
    outcomes: List[Outcome]
    warnings: List[str] = field(default_factory=list)
    paths: Dict[str, Path] = field(default_factory=dict)


def is_plink_map(path: Union[str, Path]) -> bool:
    name = Path(path).name
    if name.endswith(".gz"):
        name = name[:-3]
    return name.endswith(PLINK_SUFFIXES)


def read_markers(path: Union[str, Path], cfg: LiftConfig) -> Dataset:
    """Read markers from an annotation table or a PLINK variant file."""

    if is_plink_map(path):
        return read_plink_map(path, check_duplicates=cfg.table.check_duplicates, build=cfg.table.build)
    return read_table(path, header=cfg.table.header, check_duplicates=cfg.table.check_duplicates, build=cfg.table.build)


def lift_dataset(dataset: Dataset, chains: ChainSet, cfg: Optional[LiftConfig] = None) -> LiftResult:
    """Lift ``dataset`` through ``chains`` in memory; nothing is written."""

    cfg = cfg or LiftConfig()
    translator = Translator(cfg.translate)
    intervals = translator.translate(dataset.markers)

    mapper = ChainMapper(chains)
    outcomes = mapper.map_intervals(intervals, workers=cfg.workers)

    parts = partition(dataset.identifiers, outcomes)
    lifted = update_dataset(dataset, parts.mapped, build=cfg.chain.target_build)

    for key, count in parts.summary().items():
        LOGGER.info("%s: %s markers", key, count)
    return LiftResult(
        source=dataset,
        lifted=lifted,
        partition=parts,
        intervals=intervals,
        outcomes=outcomes,
        warnings=list(translator.warnings),
    )


def write_outputs(result: LiftResult, cfg: LiftConfig, table_path: Optional[Union[str, Path]] = None) -> Dict[str, Path]:
    """Write mapped/unmapped/lifted/extract (and optional BED, PLINK) files."""

    out_dir = Path(cfg.output.directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    prefix = cfg.output.prefix
    paths: Dict[str, Path] = {
        "mapped": out_dir / f"{prefix}.mapped.tsv",
        "unmapped": out_dir / f"{prefix}.unmapped.tsv",
        "extract": out_dir / f"{prefix}.extract.txt",
    }
    parts = result.partition

    write_mapped(paths["mapped"], [(r.identifier, r.position) for r in parts.mapped])
    write_unmapped(paths["unmapped"], [(r.identifier, r.reason) for r in parts.unmapped])
    write_extract(paths["extract"], (r.identifier for r in parts.mapped))

    if table_path is not None and is_plink_map(table_path):
        suffix = ".bim" if ".bim" in Path(table_path).suffixes else ".map"
        paths["lifted"] = out_dir / f"{prefix}.lifted{suffix}"
        rewrite_plink_map(table_path, paths["lifted"], parts.mapped, by_index=True)
    else:
        paths["lifted"] = out_dir / f"{prefix}.lifted.tsv"
        write_table(paths["lifted"], result.lifted, header=cfg.table.header)

    if cfg.output.write_bed:
        paths["bed"] = out_dir / f"{prefix}.bed"
        write_bed(paths["bed"], intervals_frame(result.intervals, result.source.identifiers))

    if cfg.output.plink_map:
        plink_path = Path(cfg.output.plink_map)
        suffix = ".bim" if ".bim" in plink_path.suffixes else ".map"
        paths["plink"] = out_dir / f"{prefix}.plink{suffix}"
        rewrite_plink_map(plink_path, paths["plink"], parts.mapped)

    result.paths = paths
    return paths


def run_lift(cfg: LiftConfig) -> LiftResult:
    """Run a complete lift described by ``cfg``.

    Input files are fully loaded and validated before any output is written.
    """

    if not cfg.table.path:
        raise ValueError("table.path is required")
    if not cfg.chain.path:
        raise ValueError("chain.path is required")

    dataset = read_markers(cfg.table.path, cfg)
    LOGGER.info("Read %s markers from %s", len(dataset), cfg.table.path)
    chains = load_chain(cfg.chain.path, fmt=cfg.chain.format, overlap_policy=cfg.chain.overlap_policy)

    result = lift_dataset(dataset, chains, cfg)
    paths = write_outputs(result, cfg, table_path=cfg.table.path)
    LOGGER.info(
        "Lifted %s/%s markers; outputs in %s",
        len(result.partition.mapped),
        len(dataset),
        paths["mapped"].parent,
    )
    return result


__all__ = ["LiftResult", "is_plink_map", "read_markers", "lift_dataset", "write_outputs", "run_lift"]
