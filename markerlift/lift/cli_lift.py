"""Command line interface for lifting marker tables between genome builds."""

from __future__ import annotations

import logging
from typing import Optional

import click
import yaml

from ..config import LiftConfig, load_yaml_config
from ..errors import MarkerLiftError
from ..logging_ import get_logger, set_level
from .pipeline import run_lift

LOGGER = get_logger(__name__)


@click.command()
@click.option("--config", "config_path", type=click.Path(exists=True), help="YAML config file")
@click.option("--table", "table_path", type=click.Path(exists=True), help="Marker table or PLINK .map/.bim")
@click.option("--chain", "chain_path", type=click.Path(exists=True), help="Chain file (UCSC or block table)")
@click.option("--out", "out_dir", type=click.Path(), help="Output directory")
@click.option("--prefix", type=str, help="Output file prefix")
@click.option("--chain-format", type=click.Choice(["auto", "ucsc", "table"]), help="Chain file layout")
@click.option("--chr-prefix/--no-chr-prefix", default=None, help="Prefix chromosome labels with 'chr'")
@click.option("--plink-map", type=click.Path(exists=True), help="PLINK .map/.bim to rewrite alongside")
@click.option("--workers", type=int, help="Map chromosomes on this many threads")
@click.option("--bed/--no-bed", "write_bed", default=None, help="Also write translated intervals as BED")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli_lift(
    config_path: Optional[str],
    table_path: Optional[str],
    chain_path: Optional[str],
    out_dir: Optional[str],
    prefix: Optional[str],
    chain_format: Optional[str],
    chr_prefix: Optional[bool],
    plink_map: Optional[str],
    workers: Optional[int],
    write_bed: Optional[bool],
    verbose: bool,
) -> None:
    """Lift marker positions through a chain file."""

    if verbose:
        set_level(logging.DEBUG)

    try:
        cfg = load_yaml_config(config_path) if config_path else LiftConfig()
    except (ValueError, yaml.YAMLError) as exc:
        raise click.ClickException(f"{config_path}: {exc}") from exc

    if table_path:
        cfg.table.path = table_path
    if chain_path:
        cfg.chain.path = chain_path
    if out_dir:
        cfg.output.directory = out_dir
    if prefix:
        cfg.output.prefix = prefix
    if chain_format:
        cfg.chain.format = chain_format  # type: ignore[assignment]
    if chr_prefix is not None:
        cfg.translate.chr_prefix = chr_prefix
    if plink_map:
        cfg.output.plink_map = plink_map
    if workers is not None:
        if workers < 1:
            raise click.BadParameter("must be >= 1", param_hint="--workers")
        cfg.workers = workers
    if write_bed is not None:
        cfg.output.write_bed = write_bed

    if not cfg.table.path:
        raise click.UsageError("a marker table is required (--table or table.path in --config)")
    if not cfg.chain.path:
        raise click.UsageError("a chain file is required (--chain or chain.path in --config)")

    try:
        result = run_lift(cfg)
    except MarkerLiftError as exc:
        raise click.ClickException(str(exc)) from exc

    for message in result.warnings:
        click.echo(f"warning: {message}", err=True)
    summary = result.partition.summary()
    click.echo("\t".join(f"{key}={value}" for key, value in summary.items()))


if __name__ == "__main__":
    cli_lift()
