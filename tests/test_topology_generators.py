from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fibgen.model.addresses import load_address_table
from fibgen.model.topology import load_topology
from fibgen.runtime.config import GeneratorConfig
from fibgen.topology.generators import full_mesh, generate_from_config, mesh_2d, write_generated


def test_full_mesh_assigns_sequential_interfaces_and_addresses() -> None:
    generated = full_mesh(4)
    lines = generated.topology_lines()
    assert len(lines) == 12
    assert lines[:4] == [
        "node1 Ethernet0/1 node2 Ethernet0/1",
        "node2 Ethernet0/1 node1 Ethernet0/1",
        "node1 Ethernet0/2 node3 Ethernet0/1",
        "node3 Ethernet0/1 node1 Ethernet0/2",
    ]
    assert lines[-2:] == [
        "node3 Ethernet0/3 node4 Ethernet0/3",
        "node4 Ethernet0/3 node3 Ethernet0/3",
    ]
    assert generated.address_lines()[:4] == [
        "node1,Ethernet0/1,10.1.1.1",
        "node2,Ethernet0/1,10.2.1.1",
        "node1,Ethernet0/2,10.1.2.1",
        "node3,Ethernet0/1,10.3.1.1",
    ]


def test_full_mesh_interfaces_unique_per_node() -> None:
    generated = full_mesh(6)
    seen: set[tuple[str, str]] = set()
    for record in generated.addresses:
        key = (record.node, record.iface)
        assert key not in seen
        seen.add(key)
    assert len(seen) == 6 * 5


def test_mesh_2d_rows_then_columns() -> None:
    generated = mesh_2d(2, 2)
    assert generated.topology_lines() == [
        "node_0_0 Ethernet0/1 node_0_1 Ethernet0/1",
        "node_0_1 Ethernet0/1 node_0_0 Ethernet0/1",
        "node_1_0 Ethernet0/1 node_1_1 Ethernet0/1",
        "node_1_1 Ethernet0/1 node_1_0 Ethernet0/1",
        "node_0_0 Ethernet0/2 node_1_0 Ethernet0/2",
        "node_1_0 Ethernet0/2 node_0_0 Ethernet0/2",
        "node_0_1 Ethernet0/2 node_1_1 Ethernet0/2",
        "node_1_1 Ethernet0/2 node_0_1 Ethernet0/2",
    ]
    assert generated.address_lines()[:2] == [
        "node_0_0,Ethernet0/1,10.0.0.1",
        "node_0_1,Ethernet0/1,10.0.1.1",
    ]
    assert "node_1_1,Ethernet0/2,10.1.1.2" in generated.address_lines()


def test_mesh_2d_has_no_diagonal_links() -> None:
    topology = mesh_2d(3, 3).to_topology()
    assert not topology.has_link("node_0_0", "node_1_1")
    assert topology.has_link("node_0_0", "node_0_2")
    assert topology.has_link("node_0_0", "node_2_0")
    assert len(topology.neighbors("node_1_1")) == 4


def test_mesh_2d_single_row_is_a_full_mesh() -> None:
    topology = mesh_2d(1, 4).to_topology()
    assert len(topology.links()) == 12
    assert all(len(topology.neighbors(node)) == 3 for node in topology.nodes())


@pytest.mark.parametrize("n_nodes", [0, 1])
def test_full_mesh_too_small_is_noop(n_nodes: int, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="fibgen.generators"):
        generated = full_mesh(n_nodes)
    assert generated.is_empty()
    assert generated.addresses == []
    assert caplog.records


@pytest.mark.parametrize("rows,cols", [(1, 1), (0, 3), (3, 0)])
def test_mesh_2d_without_links_is_noop(rows: int, cols: int) -> None:
    assert mesh_2d(rows, cols).is_empty()


def test_generate_from_config_dispatch() -> None:
    assert len(generate_from_config(GeneratorConfig(type="fullmesh", n_nodes=3)).links) == 6
    assert len(generate_from_config(GeneratorConfig(type="grid", rows=2, cols=2)).links) == 8
    with pytest.raises(ValueError):
        generate_from_config(GeneratorConfig(type="ring"))


def test_write_generated_round_trips_through_loaders(tmp_path: Path) -> None:
    generated = mesh_2d(2, 3)
    topo_file = tmp_path / "topo.txt"
    ports_file = tmp_path / "ports.txt"

    assert write_generated(generated, topo_file, ports_file) is True
    assert load_topology(topo_file) == generated.to_topology()
    assert load_address_table(ports_file).records() == generated.to_address_table().records()


def test_write_generated_skips_empty(tmp_path: Path) -> None:
    topo_file = tmp_path / "topo.txt"
    ports_file = tmp_path / "ports.txt"
    assert write_generated(full_mesh(1), topo_file, ports_file) is False
    assert not topo_file.exists()
    assert not ports_file.exists()
