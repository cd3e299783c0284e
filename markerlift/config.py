"""Configuration schemas and helpers for markerlift."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, MutableMapping, Optional, Type, TypeVar, Union

import yaml


@dataclass(slots=True)
class TableConfig:
    """How the marker annotation table is read."""

    path: Optional[str] = None
    header: bool = False
    check_duplicates: bool = True
    build: Optional[str] = None


@dataclass(slots=True)
class TranslateConfig:
    """Chromosome label normalisation applied before mapping."""

    chr_prefix: bool = True
    aliases: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ChainConfig:
    """Chain file location, format and overlap handling."""

    path: Optional[str] = None
    format: Literal["auto", "ucsc", "table"] = "auto"
    overlap_policy: Literal["ambiguous", "reject"] = "ambiguous"
    target_build: Optional[str] = None


@dataclass(slots=True)
class OutputConfig:
    """Where lift results are written."""

    directory: str = "."
    prefix: str = "lifted"
    write_bed: bool = False
    plink_map: Optional[str] = None


@dataclass(slots=True)
class LiftConfig:
    """Top-level configuration container."""

    table: TableConfig = field(default_factory=TableConfig)
    translate: TranslateConfig = field(default_factory=TranslateConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    workers: int = 1


T = TypeVar("T")


def _asdict_dataclass(obj: Any) -> Dict[str, Any]:
    if hasattr(obj, "__dataclass_fields__"):
        return {k: _asdict_dataclass(v) for k, v in asdict(obj).items()}
    return obj


def to_dict(cfg: LiftConfig) -> Dict[str, Any]:
    """Convert a config object into a dict for logging/serialization."""

    return _asdict_dataclass(cfg)


def _merge_dict(base: MutableMapping[str, Any], override: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), MutableMapping):
            _merge_dict(base[key], value)  # type: ignore[index]
        else:
            base[key] = value
    return base


def _build_dataclass(cls: Type[T], payload: Mapping[str, Any]) -> T:
    field_names = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
    kwargs = {k: v for k, v in payload.items() if k in field_names}
    return cls(**kwargs)  # type: ignore[arg-type]


def from_dict(raw: Mapping[str, Any]) -> LiftConfig:
    """Build a :class:`LiftConfig` from a (possibly partial) mapping."""

    base = to_dict(LiftConfig())
    merged = _merge_dict(base, raw)

    translate = merged.get("translate") or {}
    workers = merged.get("workers")
    aliases = {str(k): str(v) for k, v in (translate.get("aliases") or {}).items()}

    cfg = LiftConfig(
        table=_build_dataclass(TableConfig, merged.get("table") or {}),
        translate=_build_dataclass(TranslateConfig, {**translate, "aliases": aliases}),
        chain=_build_dataclass(ChainConfig, merged.get("chain") or {}),
        output=_build_dataclass(OutputConfig, merged.get("output") or {}),
        workers=1 if workers is None else int(workers),
    )
    if cfg.chain.format not in ("auto", "ucsc", "table"):
        raise ValueError(f"Unknown chain format '{cfg.chain.format}'")
    if cfg.chain.overlap_policy not in ("ambiguous", "reject"):
        raise ValueError(f"Unknown overlap policy '{cfg.chain.overlap_policy}'")
    if cfg.workers < 1:
        raise ValueError("workers must be >= 1")
    return cfg


def load_yaml_config(path: Union[str, Path]) -> LiftConfig:
    """Load a :class:`LiftConfig` from a YAML file."""

    with open(path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"expected a mapping at the top level, found {type(raw).__name__}")

    return from_dict(raw)


__all__ = [
    "TableConfig",
    "TranslateConfig",
    "ChainConfig",
    "OutputConfig",
    "LiftConfig",
    "from_dict",
    "load_yaml_config",
    "to_dict",
]
