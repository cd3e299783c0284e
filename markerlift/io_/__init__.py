"""Input/Output helpers for markerlift."""

from . import bed, chain, plink, table
from .bed import BED_COLUMNS, intervals_frame, write_bed
from .chain import ChainRule, ChainSet, ChainSpan, load_chain
from .plink import read_plink_map, rewrite_plink_map, write_extract
from .table import Dataset, Marker, read_table, write_mapped, write_table, write_unmapped

__all__ = [
    "BED_COLUMNS",
    "intervals_frame",
    "write_bed",
    "ChainRule",
    "ChainSet",
    "ChainSpan",
    "load_chain",
    "read_plink_map",
    "rewrite_plink_map",
    "write_extract",
    "Dataset",
    "Marker",
    "read_table",
    "write_mapped",
    "write_table",
    "write_unmapped",
    "bed",
    "chain",
    "plink",
    "table",
]
