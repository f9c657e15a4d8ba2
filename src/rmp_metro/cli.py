"""CLI for rmp-metro."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from rmp_metro import __version__
from rmp_metro.lines import build_document
from rmp_metro.parser import load_rmp, rmp_stats
from rmp_metro.parser.model import DiagramDocument
from rmp_metro.render import render_network
from rmp_metro.themes import THEMES


def _load(input_file: Path) -> DiagramDocument:
    """Read and decode an RMP export, exiting with status 1 on failure."""
    try:
        return load_rmp(input_file.read_text(encoding="utf-8"))
    except (ValueError, OSError) as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True,
              help="Log progress (repeat for debug output)")
def cli(verbose: int) -> None:
    """rmp-metro: Turn Rail Map Painter exports into in-game rail lines."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--region", default=None,
              help="World region selecting the coordinate transform (default: zth)")
def info(input_file: Path, region: str | None) -> None:
    """Show information about an RMP export."""
    document = _load(input_file)
    stats = rmp_stats(document)
    network = build_document(document, region=region)

    click.echo(f"Version: {document.version or '(none)'}")
    click.echo(f"Nodes: {stats.total_nodes} ({stats.station_count} stations)")
    click.echo(f"Edges: {stats.edge_count}")
    click.echo(f"Colors: {stats.line_count}")
    click.echo(f"Lines: {len(network.lines)}")
    for line in network.lines:
        click.echo(f"  {line.name} ({line.color}): "
                   f"{len(line.stations)} stations, {line.length:.1f} blocks")
    transfers = [s.name for s in network.stations if s.is_transfer]
    click.echo(f"Transfers: {len(transfers)}")
    for name in transfers:
        click.echo(f"  {name}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Validate an RMP export."""
    document = _load(input_file)
    stats = rmp_stats(document)
    network = build_document(document)
    click.echo(f"Valid: {stats.total_nodes} nodes, "
               f"{stats.edge_count} edges, "
               f"{len(network.lines)} lines, "
               f"{len(network.stations)} stations")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--region", default=None,
              help="World region selecting the coordinate transform (default: zth)")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON file path. Defaults to <input>.lines.json")
def build(input_file: Path, region: str | None, output: Path | None) -> None:
    """Build lines and stations from an RMP export and write them as JSON."""
    document = _load(input_file)
    network = build_document(document, region=region)

    if output is None:
        output = input_file.with_suffix(".lines.json")

    output.write_text(json.dumps(network.to_dict(), ensure_ascii=False, indent=2),
                      encoding="utf-8")
    click.echo(f"Built {len(network.lines)} lines, "
               f"{len(network.stations)} stations -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--region", default=None,
              help="World region selecting the coordinate transform (default: zth)")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="night",
              help="Visual theme (default: night)")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--width", type=int, default=None, help="SVG width in pixels")
@click.option("--height", type=int, default=None, help="SVG height in pixels")
@click.option("--title", default="", help="Title drawn above the network")
def render(
    input_file: Path,
    region: str | None,
    theme: str,
    output: Path | None,
    width: int | None,
    height: int | None,
    title: str,
) -> None:
    """Render a preview of the built lines to SVG."""
    document = _load(input_file)
    network = build_document(document, region=region)

    svg = render_network(network, THEMES[theme], width=width, height=height, title=title)

    if output is None:
        output = input_file.with_suffix(".svg")

    output.write_text(svg, encoding="utf-8")
    click.echo(f"Rendered {len(network.stations)} stations, "
               f"{len(network.lines)} lines -> {output}")
