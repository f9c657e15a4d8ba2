"""Decoder for Rail Map Painter (RMP) JSON exports.

An export carries ``graph.nodes`` and ``graph.edges``. Both put their
details under ``attributes``, with a type tag followed by a payload
keyed by that same tag::

    {"key": "stn_1", "attributes": {"x": 10, "y": 0, "type": "bjsubway-basic",
                                    "bjsubway-basic": {"names": ["Foo"]}}}

Exports routinely contain decorative or legacy entries, so a malformed
node or edge is skipped rather than failing the whole document. Only a
document that is not JSON, or has no graph at all, raises.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from rmp_metro.parser.model import (
    CurveConfig,
    DiagonalCurve,
    DiagramDocument,
    DiagramEdge,
    DiagramNode,
    NodeKind,
    PerpendicularCurve,
    SimpleCurve,
    StartFrom,
    StraightCurve,
)

logger = logging.getLogger(__name__)

FALLBACK_COLOR = "#888888"

STATION_TYPES: dict[str, NodeKind] = {
    "bjsubway-basic": NodeKind.STATION,
    "suzhourt-basic": NodeKind.STATION,
    "bjsubway-int": NodeKind.TRANSFER,
    "shmetro-int": NodeKind.TRANSFER,
}

LINE_BADGE_TYPE = "bjsubway-text-line-badge"

DEFAULT_EDGE_STYLE = "single-color"


class RmpFormatError(ValueError):
    """The input is not an RMP export at all."""


@dataclass
class RmpStats:
    total_nodes: int
    station_count: int
    edge_count: int
    line_count: int
    colors: list[str] = field(default_factory=list)


def load_rmp(text: str) -> DiagramDocument:
    """Decode RMP JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RmpFormatError(f"Not valid JSON: {e}") from e
    return parse_rmp_document(data)


def parse_rmp_document(data: Any) -> DiagramDocument:
    """Convert a decoded RMP export into diagram nodes and edges."""
    graph = data.get("graph") if isinstance(data, dict) else None
    if not isinstance(graph, dict):
        raise RmpFormatError("RMP document has no 'graph' object")

    raw_nodes = graph.get("nodes")
    raw_edges = graph.get("edges")
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise RmpFormatError("RMP graph must have 'nodes' and 'edges' lists")

    nodes = []
    for raw in raw_nodes:
        node = _parse_node(raw)
        if node is None:
            logger.debug("Skipping malformed node: %r", _key_of(raw))
            continue
        nodes.append(node)

    edges = []
    for raw in raw_edges:
        edge = _parse_edge(raw)
        if edge is None:
            logger.debug("Skipping malformed edge: %r", _key_of(raw))
            continue
        edges.append(edge)

    version = data.get("version")
    return DiagramDocument(
        nodes=tuple(nodes),
        edges=tuple(edges),
        version=str(version) if version is not None else "",
    )


def rmp_stats(document: DiagramDocument) -> RmpStats:
    """Summarise a document: node/edge counts and distinct line colors."""
    colors: list[str] = []
    for edge in document.edges:
        if edge.color not in colors:
            colors.append(edge.color)
    return RmpStats(
        total_nodes=len(document.nodes),
        station_count=sum(1 for n in document.nodes if n.is_station),
        edge_count=len(document.edges),
        line_count=len(colors),
        colors=colors,
    )


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def _parse_node(raw: Any) -> DiagramNode | None:
    if not isinstance(raw, dict):
        return None
    key = raw.get("key")
    attrs = raw.get("attributes")
    if not isinstance(key, str) or not isinstance(attrs, dict):
        return None

    x = _number(attrs.get("x"))
    y = _number(attrs.get("y"))
    if x is None or y is None:
        return None

    type_tag = attrs.get("type") if isinstance(attrs.get("type"), str) else ""
    payload = attrs.get(type_tag)
    payload = payload if isinstance(payload, dict) else {}
    names = tuple(n for n in _list(payload.get("names")) if isinstance(n, str) and n)

    if type_tag in STATION_TYPES:
        return DiagramNode(key, x, y, STATION_TYPES[type_tag], type_tag, names)
    if type_tag == LINE_BADGE_TYPE:
        return DiagramNode(
            key, x, y, NodeKind.BADGE, type_tag, names, color=_third_color(payload)
        )
    return DiagramNode(key, x, y, NodeKind.WAYPOINT, type_tag, names)


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


def _parse_edge(raw: Any) -> DiagramEdge | None:
    if not isinstance(raw, dict):
        return None
    source = raw.get("source")
    target = raw.get("target")
    if not isinstance(source, str) or not isinstance(target, str):
        return None

    attrs = raw.get("attributes")
    attrs = attrs if isinstance(attrs, dict) else {}
    key = raw.get("key")

    return DiagramEdge(
        key=key if isinstance(key, str) else f"{source}->{target}",
        source=source,
        target=target,
        color=_edge_color(attrs),
        curve=_parse_curve(attrs),
        visible=attrs.get("visible", True) is not False,
    )


def _edge_color(attrs: dict) -> str:
    """Line color from the edge's style payload (``color[2]`` is the hex value)."""
    style = attrs.get("style")
    for tag in (style, DEFAULT_EDGE_STYLE):
        if not isinstance(tag, str):
            continue
        payload = attrs.get(tag)
        if isinstance(payload, dict) and (color := _third_color(payload)):
            return color
    return FALLBACK_COLOR


def _parse_curve(attrs: dict) -> CurveConfig:
    curve_type = attrs.get("type")
    payload = attrs.get(curve_type) if isinstance(curve_type, str) else None
    if not isinstance(payload, dict):
        return StraightCurve(type_tag=curve_type if isinstance(curve_type, str) else "")

    if curve_type in ("perpendicular", "diagonal"):
        start_from = StartFrom.TO if payload.get("startFrom") == "to" else StartFrom.FROM
        cls = PerpendicularCurve if curve_type == "perpendicular" else DiagonalCurve
        return cls(
            start_from=start_from,
            offset_from=_number(payload.get("offsetFrom")) or 0.0,
            offset_to=_number(payload.get("offsetTo")) or 0.0,
            round_corner_factor=_number(payload.get("roundCornerFactor")) or 0.0,
        )
    if curve_type == "simple":
        return SimpleCurve(offset=_number(payload.get("offset")) or 0.0)

    logger.debug("Unknown curve type %r, using a straight path", curve_type)
    return StraightCurve(type_tag=curve_type)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _third_color(payload: dict) -> str | None:
    colors = _list(payload.get("color"))
    if len(colors) >= 3 and isinstance(colors[2], str):
        return colors[2]
    return None


def _key_of(raw: Any) -> Any:
    return raw.get("key") if isinstance(raw, dict) else raw
