from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from fibgen.model.addresses import AddressRecord, AddressTable
from fibgen.model.topology import Link, Topology
from fibgen.runtime.config import GeneratorConfig
from fibgen.utils.io import write_lines

IFACE_PREFIX = "Ethernet0/"

AddressRule = Callable[[str, int], str]


@dataclass
class GeneratedTopology:
    links: List[Link] = field(default_factory=list)
    addresses: List[AddressRecord] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.links

    def topology_lines(self) -> List[str]:
        return [link.to_line() for link in self.links]

    def address_lines(self) -> List[str]:
        return [record.to_line() for record in self.addresses]

    def to_topology(self) -> Topology:
        return Topology.from_links(self.links)

    def to_address_table(self) -> AddressTable:
        return AddressTable(self.addresses)


class _Builder:
    """Hands out interfaces per node, numbered from 1 in connection order."""

    def __init__(self, nodes: List[str], address_rule: AddressRule) -> None:
        self._next_port: Dict[str, int] = {node: 1 for node in nodes}
        self._address_rule = address_rule
        self.result = GeneratedTopology()

    def connect(self, left: str, right: str) -> None:
        port_l = self._next_port[left]
        port_r = self._next_port[right]
        self._next_port[left] = port_l + 1
        self._next_port[right] = port_r + 1

        link = Link(
            src_node=left,
            src_iface=f"{IFACE_PREFIX}{port_l}",
            dst_node=right,
            dst_iface=f"{IFACE_PREFIX}{port_r}",
        )
        self.result.links.append(link)
        self.result.links.append(link.reversed())
        self.result.addresses.append(
            AddressRecord(node=left, iface=link.src_iface, ip=self._address_rule(left, port_l))
        )
        self.result.addresses.append(
            AddressRecord(node=right, iface=link.dst_iface, ip=self._address_rule(right, port_r))
        )


def full_mesh(n_nodes: int, logger: logging.Logger | None = None) -> GeneratedTopology:
    """Connect every pair of ``node1..nodeN`` once, in both directions.

    Interface ``k`` of ``node<i>`` gets ``10.<i>.<k>.1``.
    """
    log = logger or logging.getLogger("fibgen.generators")
    if n_nodes < 2:
        log.warning("full mesh needs at least 2 nodes, got %s; nothing generated", n_nodes)
        return GeneratedTopology()

    nodes = [f"node{i}" for i in range(1, n_nodes + 1)]
    index = {node: i for i, node in enumerate(nodes, start=1)}
    builder = _Builder(nodes, lambda node, port: f"10.{index[node]}.{port}.1")
    for i in range(n_nodes):
        for j in range(i + 1, n_nodes):
            builder.connect(nodes[i], nodes[j])

    log.info("full mesh generated: nodes=%d links=%d", n_nodes, len(builder.result.links))
    return builder.result


def mesh_2d(rows: int, cols: int, logger: logging.Logger | None = None) -> GeneratedTopology:
    """Fully connect every row and every column of a ``rows x cols`` grid.

    Nodes are ``node_<r>_<c>`` (0-based); no diagonal links. Row links are
    emitted before column links. Interface ``k`` of ``node_<r>_<c>`` gets
    ``10.<r>.<c>.<k>``.
    """
    log = logger or logging.getLogger("fibgen.generators")
    if rows < 1 or cols < 1:
        log.warning("2D mesh needs rows >= 1 and cols >= 1, got %sx%s; nothing generated", rows, cols)
        return GeneratedTopology()
    if rows == 1 and cols == 1:
        log.warning("2D mesh of a single node has no links; nothing generated")
        return GeneratedTopology()

    def name(r: int, c: int) -> str:
        return f"node_{r}_{c}"

    positions: Dict[str, Tuple[int, int]] = {
        name(r, c): (r, c) for r in range(rows) for c in range(cols)
    }

    def address(node: str, port: int) -> str:
        r, c = positions[node]
        return f"10.{r}.{c}.{port}"

    builder = _Builder(list(positions), address)
    for r in range(rows):
        for c in range(cols):
            for c2 in range(c + 1, cols):
                builder.connect(name(r, c), name(r, c2))
    for c in range(cols):
        for r in range(rows):
            for r2 in range(r + 1, rows):
                builder.connect(name(r, c), name(r2, c))

    log.info(
        "2D mesh generated: rows=%d cols=%d links=%d",
        rows,
        cols,
        len(builder.result.links),
    )
    return builder.result


def generate_from_config(
    cfg: GeneratorConfig,
    logger: logging.Logger | None = None,
) -> GeneratedTopology:
    tp = cfg.type.lower()
    if tp == "fullmesh":
        return full_mesh(cfg.n_nodes, logger=logger)
    if tp in {"mesh2d", "grid"}:
        return mesh_2d(cfg.rows, cfg.cols, logger=logger)
    raise ValueError(f"Unsupported topology type: {cfg.type}")


def write_generated(
    generated: GeneratedTopology,
    topology_path: str | Path,
    address_path: str | Path,
    logger: logging.Logger | None = None,
) -> bool:
    log = logger or logging.getLogger("fibgen.generators")
    if generated.is_empty():
        log.warning("empty topology, not writing %s / %s", topology_path, address_path)
        return False
    write_lines(topology_path, generated.topology_lines())
    write_lines(address_path, generated.address_lines())
    log.info("topology written to %s, addresses written to %s", topology_path, address_path)
    return True
