"""Build metro lines from an RMP diagram graph.

Edges are grouped by color, one group per candidate line. Each group is
walked depth-first from a line endpoint to get the node order, and the
edge crossed at every step is kept so paths through intermediate bend
or label nodes can be stitched back together between stations.

Station identity across lines is by name. Transfer flags and line
membership can only be known once every line is built, so that happens
in a second pass that produces new station records instead of patching
the per-line ones.
"""

from __future__ import annotations

__all__ = ["build_document", "build_network", "merge_transfers", "order_line_nodes"]

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Iterable

import networkx as nx

from rmp_metro.geometry.constants import DEFAULT_ELEVATION
from rmp_metro.geometry.curves import edge_path, straight_path
from rmp_metro.geometry.transform import CoordTransform, world_config
from rmp_metro.parser.model import (
    DiagramDocument,
    DiagramEdge,
    DiagramNode,
    EdgePath,
    NodeKind,
    ParsedLine,
    ParsedStation,
    RailNetwork,
)
from rmp_metro.parser.rmp import FALLBACK_COLOR

logger = logging.getLogger(__name__)

LINE_ID_PREFIX = "RMP"


@dataclass(frozen=True)
class TraversalStep:
    """One move of the walk: from ``source`` to ``target`` over ``edge``."""

    source: str
    target: str
    edge: DiagramEdge


def build_network(
    nodes: Iterable[DiagramNode],
    edges: Iterable[DiagramEdge],
    region: str | None = None,
    transform: CoordTransform | None = None,
    elevation: float = DEFAULT_ELEVATION,
) -> RailNetwork:
    """Group, order and measure every line in the graph.

    Args:
        nodes: Diagram nodes (stations, badges, waypoints).
        edges: Diagram edges. Invisible ones are ignored.
        region: World identifier selecting the coordinate transform.
            Unknown regions use the default transform.
        transform: Explicit transform, overriding ``region``.
        elevation: Height given to every produced world coordinate.
    """
    transform = transform or world_config(region)
    node_map = {node.key: node for node in nodes}
    badges = _line_badges(node_map.values())

    groups: dict[str, list[DiagramEdge]] = defaultdict(list)
    for edge in edges:
        if edge.visible:
            groups[edge.color].append(edge)

    lines: list[ParsedLine] = []
    for color, color_edges in groups.items():
        line_number = len(lines) + 1
        line = _build_line(
            color,
            color_edges,
            node_map,
            line_id=f"{LINE_ID_PREFIX}-{line_number}",
            name=badges.get(color) or f"Line {line_number}",
            transform=transform,
            elevation=elevation,
        )
        if line is None:
            logger.debug("Dropping line group %s: fewer than 2 named stations", color)
            continue
        lines.append(line)

    network = merge_transfers(lines)
    logger.info(
        "Built %d lines, %d stations (%d transfers)",
        len(network.lines),
        len(network.stations),
        sum(1 for s in network.stations if s.is_transfer),
    )
    return network


def build_document(
    document: DiagramDocument, region: str | None = None, **kwargs
) -> RailNetwork:
    return build_network(document.nodes, document.edges, region=region, **kwargs)


# ---------------------------------------------------------------------------
# Phase 1: per-line construction
# ---------------------------------------------------------------------------


def _line_badges(nodes: Iterable[DiagramNode]) -> dict[str, str]:
    """Map line color -> display name from badge nodes. Later badges override earlier ones."""
    badges: dict[str, str] = {}
    for node in nodes:
        if node.kind is NodeKind.BADGE and node.name:
            badges[node.color or FALLBACK_COLOR] = node.name
    return badges


def order_line_nodes(edges: list[DiagramEdge]) -> tuple[list[str], list[TraversalStep]]:
    """Walk one line's edges depth-first.

    Starts from the first node with a single neighbour (a line end); a
    loop has none, in which case the first edge's source is used.
    Each node is visited once. ``steps[i]`` is the move that reached
    ``order[i + 1]``.
    """
    if not edges:
        return [], []

    G = nx.Graph()
    for edge in edges:
        G.add_edge(edge.source, edge.target, edge=edge)

    start = next((n for n in G if len(G[n]) == 1), None)
    if start is None:
        logger.debug("No line end found, starting at %s", edges[0].source)
        start = edges[0].source

    order = [start]
    steps: list[TraversalStep] = []
    for u, v in nx.dfs_edges(G, source=start):
        order.append(v)
        steps.append(TraversalStep(u, v, G.edges[u, v]["edge"]))
    return order, steps


def _step_path(
    step: TraversalStep,
    node_map: dict[str, DiagramNode],
    transform: CoordTransform,
    elevation: float,
) -> EdgePath | None:
    src = node_map.get(step.source)
    tgt = node_map.get(step.target)
    if not src or not tgt:
        return None
    curve = step.edge.curve
    # Walking the edge backwards: flip which end the bend starts from
    if step.edge.source != step.source:
        curve = curve.reversed()
    return edge_path((src.x, src.y), (tgt.x, tgt.y), curve, transform, elevation)


def _build_line(
    color: str,
    edges: list[DiagramEdge],
    node_map: dict[str, DiagramNode],
    line_id: str,
    name: str,
    transform: CoordTransform,
    elevation: float,
) -> ParsedLine | None:
    order, steps = order_line_nodes(edges)

    # Named stations with their position in the unfiltered order
    stops: list[tuple[int, DiagramNode]] = []
    for pos, key in enumerate(order):
        node = node_map.get(key)
        if node and node.is_station and node.name:
            stops.append((pos, node))

    if len(stops) < 2:
        return None

    stations = tuple(
        ParsedStation(
            name=node.name,
            coord=transform.to_coord(node.x, node.y, elevation),
            index=i + 1,
            is_transfer=node.kind is NodeKind.TRANSFER,
            lines=(name,),
        )
        for i, (_pos, node) in enumerate(stops)
    )

    edge_paths = []
    for (from_pos, from_node), (to_pos, to_node) in zip(stops, stops[1:]):
        combined = EdgePath()
        for step in steps[from_pos:to_pos]:
            path = _step_path(step, node_map, transform, elevation)
            if path is not None:
                combined = combined + path
        if not combined.segments:
            combined = straight_path(
                (from_node.x, from_node.y), (to_node.x, to_node.y), transform, elevation
            )
        edge_paths.append(combined)

    return ParsedLine(
        id=line_id,
        name=name,
        color=color,
        stations=stations,
        edge_paths=tuple(edge_paths),
    )


# ---------------------------------------------------------------------------
# Phase 2: transfer merge
# ---------------------------------------------------------------------------


def merge_transfers(lines: list[ParsedLine]) -> RailNetwork:
    """Union line membership per station name and stamp it on every copy.

    A station is a transfer iff it belongs to more than one line. The
    global station list keeps the first occurrence of each name.
    """
    membership: dict[str, list[str]] = {}
    first_seen: dict[str, ParsedStation] = {}
    for line in lines:
        for station in line.stations:
            names = membership.setdefault(station.name, [])
            if line.name not in names:
                names.append(line.name)
            first_seen.setdefault(station.name, station)

    def merged(station: ParsedStation) -> ParsedStation:
        line_names = tuple(membership[station.name])
        return replace(station, lines=line_names, is_transfer=len(line_names) > 1)

    merged_lines = tuple(
        replace(line, stations=tuple(merged(s) for s in line.stations))
        for line in lines
    )
    stations = tuple(merged(s) for s in first_seen.values())
    return RailNetwork(lines=merged_lines, stations=stations)
