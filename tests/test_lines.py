"""Tests for line construction and transfer merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from rmp_metro.geometry.transform import CoordTransform
from rmp_metro.lines import build_document, build_network, merge_transfers, order_line_nodes
from rmp_metro.parser import load_rmp
from rmp_metro.parser.model import (
    DiagramEdge,
    DiagramNode,
    NodeKind,
    PerpendicularCurve,
    SegmentKind,
    SimpleCurve,
    StartFrom,
)

FIXTURES = Path(__file__).parent / "fixtures"
IDENTITY = CoordTransform()


def _station(key, x, y, name=None, kind=NodeKind.STATION):
    return DiagramNode(key, x, y, kind, names=(name or key,))


def _edge(source, target, color="#ff0000", curve=None, visible=True):
    return DiagramEdge(
        key=f"{source}-{target}",
        source=source,
        target=target,
        color=color,
        curve=curve or SimpleCurve(),
        visible=visible,
    )


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


class TestOrderLineNodes:
    def test_starts_at_line_end(self):
        edges = [_edge("b", "c"), _edge("a", "b")]
        order, steps = order_line_nodes(edges)
        assert order == ["c", "b", "a"] or order == ["a", "b", "c"]
        assert len(steps) == 2

    def test_first_end_in_edge_order(self):
        edges = [_edge("a", "b"), _edge("b", "c")]
        order, _ = order_line_nodes(edges)
        assert order == ["a", "b", "c"]

    def test_steps_follow_order(self):
        edges = [_edge("a", "b"), _edge("c", "b")]
        order, steps = order_line_nodes(edges)
        for i, step in enumerate(steps):
            assert step.target == order[i + 1]

    def test_loop_starts_at_first_source(self):
        edges = [_edge("b", "c"), _edge("c", "a"), _edge("a", "b")]
        order, steps = order_line_nodes(edges)
        assert order[0] == "b"
        assert sorted(order) == ["a", "b", "c"]
        assert len(steps) == 2

    def test_each_node_once(self):
        # A branch: every node still appears exactly once
        edges = [_edge("a", "b"), _edge("b", "c"), _edge("b", "d")]
        order, _ = order_line_nodes(edges)
        assert sorted(order) == ["a", "b", "c", "d"]

    def test_empty(self):
        assert order_line_nodes([]) == ([], [])


# ---------------------------------------------------------------------------
# Building lines
# ---------------------------------------------------------------------------


class TestBuildNetwork:
    def test_three_collinear_stations(self):
        nodes = [_station("A", 0, 0), _station("B", 10, 0), _station("C", 20, 0)]
        edges = [_edge("A", "B"), _edge("B", "C")]
        network = build_network(nodes, edges, transform=IDENTITY)

        assert len(network.lines) == 1
        line = network.lines[0]
        assert [s.name for s in line.stations] == ["A", "B", "C"]
        assert [s.index for s in line.stations] == [1, 2, 3]
        assert len(line.edge_paths) == 2
        for path in line.edge_paths:
            assert path.length == pytest.approx(10)
            assert all(s.kind is SegmentKind.LINE for s in path.segments)
        b = line.stations[1].coord
        assert (b.x, b.z) == (10, 0)
        assert b.y == 64

    def test_edge_paths_one_fewer_than_stations(self):
        nodes = [_station(k, i * 10, 0) for i, k in enumerate("ABCDE")]
        edges = [_edge(a, b) for a, b in zip("ABCD", "BCDE")]
        line = build_network(nodes, edges, transform=IDENTITY).lines[0]
        assert len(line.edge_paths) == len(line.stations) - 1

    def test_line_ids_and_default_names(self):
        nodes = [_station("A", 0, 0), _station("B", 10, 0), _station("C", 0, 10), _station("D", 10, 10)]
        edges = [_edge("A", "B", "#ff0000"), _edge("C", "D", "#0000ff")]
        network = build_network(nodes, edges, transform=IDENTITY)
        assert [line.id for line in network.lines] == ["RMP-1", "RMP-2"]
        assert [line.name for line in network.lines] == ["Line 1", "Line 2"]
        assert [line.color for line in network.lines] == ["#ff0000", "#0000ff"]

    def test_later_badge_names_line(self):
        nodes = [
            _station("A", 0, 0),
            _station("B", 10, 0),
            DiagramNode("badge", -5, 0, NodeKind.BADGE, names=("Old Name",), color="#ff0000"),
            DiagramNode("badge2", -5, 5, NodeKind.BADGE, names=("Airport Express",), color="#ff0000"),
        ]
        line = build_network(nodes, [_edge("A", "B")], transform=IDENTITY).lines[0]
        assert line.name == "Airport Express"

    def test_short_group_dropped(self):
        nodes = [_station("A", 0, 0), _station("B", 10, 0), DiagramNode("w", 5, 5), _station("C", 20, 0)]
        edges = [_edge("A", "B", "#ff0000"), _edge("C", "w", "#00ff00")]
        network = build_network(nodes, edges, transform=IDENTITY)
        assert [line.color for line in network.lines] == ["#ff0000"]
        # Numbering counts only kept lines
        assert network.lines[0].id == "RMP-1"

    def test_invisible_edges_ignored(self):
        nodes = [_station("A", 0, 0), _station("B", 10, 0)]
        network = build_network(nodes, [_edge("A", "B", visible=False)], transform=IDENTITY)
        assert network.lines == ()
        assert network.stations == ()

    def test_waypoints_stitched_between_stations(self):
        nodes = [_station("A", 0, 0), DiagramNode("w", 10, 0), _station("B", 10, 10)]
        edges = [_edge("A", "w"), _edge("w", "B")]
        line = build_network(nodes, edges, transform=IDENTITY).lines[0]
        assert [s.name for s in line.stations] == ["A", "B"]
        assert len(line.edge_paths) == 1
        assert line.edge_paths[0].length == pytest.approx(20)
        assert len(line.edge_paths[0].segments) == 2

    def test_unnamed_station_is_not_a_stop(self):
        nodes = [_station("A", 0, 0), DiagramNode("x", 10, 0, NodeKind.STATION), _station("B", 20, 0)]
        edges = [_edge("A", "x"), _edge("x", "B")]
        line = build_network(nodes, edges, transform=IDENTITY).lines[0]
        assert [s.name for s in line.stations] == ["A", "B"]
        assert line.length == pytest.approx(20)

    def test_missing_node_falls_back_to_straight(self):
        nodes = [_station("A", 0, 0), _station("B", 30, 40)]
        edges = [_edge("A", "ghost"), _edge("ghost", "B")]
        line = build_network(nodes, edges, transform=IDENTITY).lines[0]
        assert line.edge_paths[0].length == pytest.approx(50)

    def test_region_transform(self):
        nodes = [_station("A", 0, 0), _station("B", 10, 0)]
        line = build_network(nodes, [_edge("A", "B")], region="houtu").lines[0]
        assert line.stations[1].coord.x == pytest.approx(40)
        assert line.length == pytest.approx(40)

    def test_default_region(self):
        nodes = [_station("A", 0, 0), _station("B", 10, 0)]
        line = build_network(nodes, [_edge("A", "B")]).lines[0]
        assert line.stations[0].coord.x == pytest.approx(0.5)
        assert line.length == pytest.approx(100)

    def test_reversed_edge_keeps_elbow(self):
        nodes = [_station("A", 0, 0), _station("B", 20, 10), _station("C", 40, 10)]
        curve = PerpendicularCurve(StartFrom.FROM, round_corner_factor=2)
        forward = [_edge("A", "B", curve=curve), _edge("B", "C")]
        # Edges stored the other way round, still walked from A
        backward = [_edge("B", "A", curve=curve.reversed()), _edge("C", "B")]

        def corners(edges):
            line = build_network(nodes, edges, transform=IDENTITY).lines[0]
            path = next(p for p in line.edge_paths if any(
                s.kind is SegmentKind.QUADRATIC for s in p.segments))
            seg = next(s for s in path.segments if s.kind is SegmentKind.QUADRATIC)
            return (seg.points[1].x, seg.points[1].z)

        assert corners(forward) == pytest.approx((20, 0))
        assert corners(backward) == pytest.approx(corners(forward))

    def test_rebuild_is_identical(self):
        nodes = [
            _station("A", 0, 0),
            DiagramNode("w", 10, 0),
            _station("B", 10, 10, kind=NodeKind.TRANSFER),
            _station("C", 30, 10),
            _station("D", 10, -10, "B"),
        ]
        edges = [
            _edge("A", "w", curve=PerpendicularCurve(round_corner_factor=3)),
            _edge("w", "B"),
            _edge("C", "B", curve=PerpendicularCurve(StartFrom.TO, round_corner_factor=3)),
            _edge("D", "A", "#00ff00"),
        ]
        first = build_network(nodes, edges, region="houtu")
        second = build_network(nodes, edges, region="houtu")
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_document_rebuild_is_identical(self):
        document = load_rmp((FIXTURES / "simple.json").read_text(encoding="utf-8"))
        assert build_document(document) == build_document(document)


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------


class TestTransfers:
    def _two_lines(self):
        nodes = [
            _station("a1", 0, 0, "West"),
            _station("a2", 10, 0, "Central"),
            _station("b1", 10, -10, "North"),
            _station("b2", 10, 5, "Central"),
        ]
        edges = [_edge("a1", "a2", "#ff0000"), _edge("b1", "b2", "#0000ff")]
        return build_network(nodes, edges, transform=IDENTITY)

    def test_shared_name_merged(self):
        network = self._two_lines()
        assert [s.name for s in network.stations] == ["West", "Central", "North"]
        central = network.station("Central")
        assert central.is_transfer
        assert central.lines == ("Line 1", "Line 2")
        # First occurrence wins for position
        assert (central.coord.x, central.coord.z) == (10, 0)

    def test_per_line_copies_updated(self):
        network = self._two_lines()
        for line in network.lines:
            central = next(s for s in line.stations if s.name == "Central")
            assert central.is_transfer
            assert len(central.lines) == 2

    def test_transfer_iff_multiple_lines(self):
        network = self._two_lines()
        for station in network.stations:
            assert station.is_transfer == (len(station.lines) > 1)

    def test_interchange_node_alone_is_not_transfer(self):
        nodes = [_station("A", 0, 0, kind=NodeKind.TRANSFER), _station("B", 10, 0)]
        network = build_network(nodes, [_edge("A", "B")], transform=IDENTITY)
        assert not network.station("A").is_transfer

    def test_merge_is_idempotent(self):
        network = self._two_lines()
        again = merge_transfers(list(network.lines))
        assert again == network

    def test_unique_names(self):
        network = self._two_lines()
        names = [s.name for s in network.stations]
        assert len(names) == len(set(names))

    def test_line_by_name(self):
        network = self._two_lines()
        assert network.line_by_name("Line 2").color == "#0000ff"
        assert network.line_by_name("Line 9") is None


# ---------------------------------------------------------------------------
# Fixture document
# ---------------------------------------------------------------------------


class TestFixtureDocument:
    @pytest.fixture
    def network(self):
        document = load_rmp((FIXTURES / "simple.json").read_text(encoding="utf-8"))
        return build_document(document, transform=IDENTITY)

    def test_lines(self, network):
        assert [(line.name, line.color) for line in network.lines] == [
            ("Line 1", "#c23a30"),
            ("Line 2", "#006098"),
        ]

    def test_stations(self, network):
        assert [s.name for s in network.lines[1].stations] == ["Dongmen", "Baiyun", "Fenghuang"]
        assert [s.name for s in network.stations] == [
            "Anting", "Baiyun", "Chengnan", "Dongmen", "Fenghuang",
        ]
        assert [s.name for s in network.stations if s.is_transfer] == ["Baiyun"]

    def test_to_dict(self, network):
        data = network.to_dict()
        assert data["lines"][0]["id"] == "RMP-1"
        assert data["lines"][0]["edgePaths"][0]["segments"][0]["type"] == "line"
        assert data["stations"][1]["isTransfer"] is True
        assert data["stations"][1]["coord"] == {"x": 10, "y": 64, "z": 0}
        assert data["stations"][1]["lines"] == ["Line 1", "Line 2"]
