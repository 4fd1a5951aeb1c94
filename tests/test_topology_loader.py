from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fibgen.errors import TopologyParseError
from fibgen.model.topology import Link, Topology, load_topology, parse_link_line, parse_topology_lines


def test_parse_topology_lines_builds_both_maps() -> None:
    topology = parse_topology_lines(
        [
            "node1 Ethernet0/3 node4 Ethernet0/1",
            "node4 Ethernet0/1 node1 Ethernet0/3",
        ]
    )
    assert topology.nodes() == ["node1", "node4"]
    assert topology.egress_iface("node1", "node4") == "Ethernet0/3"
    assert topology.peer_iface("node1", "node4") == "Ethernet0/1"
    assert topology.egress_iface("node4", "node1") == "Ethernet0/1"
    assert topology.peer_iface("node4", "node1") == "Ethernet0/3"


def test_parse_topology_lines_only_records_stated_direction() -> None:
    topology = parse_topology_lines(["a eth1 b eth7"])
    assert topology.nodes() == ["a", "b"]
    assert topology.has_link("a", "b")
    assert not topology.has_link("b", "a")
    assert topology.neighbors("b") == {}


def test_parse_topology_lines_skips_malformed_and_blank_lines(caplog: pytest.LogCaptureFixture) -> None:
    lines = [
        "",
        "node1 Ethernet0/1 node2 Ethernet0/1",
        "node1 Ethernet0/2 node3",
        "   ",
        "node2 Ethernet0/1 node1 Ethernet0/1 extra",
        "\tnode2   Ethernet0/1\tnode1 Ethernet0/1  ",
    ]
    with caplog.at_level(logging.WARNING, logger="fibgen.topology"):
        topology = parse_topology_lines(lines)

    assert topology.nodes() == ["node1", "node2"]
    assert topology.links() == [
        Link("node1", "Ethernet0/1", "node2", "Ethernet0/1"),
        Link("node2", "Ethernet0/1", "node1", "Ethernet0/1"),
    ]
    skipped = [r for r in caplog.records if "skip invalid topology line" in r.getMessage()]
    assert len(skipped) == 2
    assert "line 3" in skipped[0].getMessage()


def test_parse_link_line_rejects_wrong_field_count() -> None:
    assert parse_link_line("   ") is None
    with pytest.raises(TopologyParseError):
        parse_link_line("a eth1 b")


def test_empty_topology_is_not_an_error() -> None:
    topology = parse_topology_lines(["bad line", ""])
    assert topology.is_empty()
    assert topology.nodes() == []
    assert len(topology) == 0


def test_repeated_pair_keeps_last_interfaces() -> None:
    topology = parse_topology_lines(
        [
            "a eth1 b eth1",
            "a eth2 b eth3",
        ]
    )
    assert topology.egress_iface("a", "b") == "eth2"
    assert topology.peer_iface("a", "b") == "eth3"


def test_interface_reuse_is_accepted_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="fibgen.topology"):
        topology = parse_topology_lines(["a eth1 b eth1", "a eth1 c eth1"])
    assert topology.egress_iface("a", "b") == "eth1"
    assert topology.egress_iface("a", "c") == "eth1"
    assert any("already reaches" in r.getMessage() for r in caplog.records)


def test_topology_accessors_return_copies() -> None:
    topology = Topology.from_links([Link("a", "eth1", "b", "eth1")])
    nbrs = topology.neighbors("a")
    nbrs.clear()
    assert topology.neighbors("a") == {"b": "eth1"}
    assert "a" in topology
    assert "z" not in topology


def test_load_topology_reads_file(tmp_path: Path) -> None:
    topo_file = tmp_path / "topo.txt"
    topo_file.write_text(
        "node1 Ethernet0/1 node2 Ethernet0/1\n"
        "node2 Ethernet0/1 node1 Ethernet0/1\n"
        "\n",
        encoding="utf-8",
    )
    topology = load_topology(topo_file)
    assert topology == parse_topology_lines(topo_file.read_text(encoding="utf-8").splitlines())
    assert len(topology.links()) == 2


def test_load_topology_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        load_topology(tmp_path / "missing.txt")
