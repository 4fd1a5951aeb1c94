from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from fibgen.errors import TopologyParseError
from fibgen.utils.io import read_lines

NodeId = str
IfaceName = str


@dataclass(frozen=True)
class Link:
    src_node: NodeId
    src_iface: IfaceName
    dst_node: NodeId
    dst_iface: IfaceName

    def reversed(self) -> "Link":
        return Link(
            src_node=self.dst_node,
            src_iface=self.dst_iface,
            dst_node=self.src_node,
            dst_iface=self.src_iface,
        )

    def to_line(self) -> str:
        return f"{self.src_node} {self.src_iface} {self.dst_node} {self.dst_iface}"


class Topology:
    """Directed link-level view of a network.

    Two maps share the same ``src -> dst`` keys: ``adjacency`` gives the local
    interface on ``src`` that reaches ``dst`` and ``peers`` gives the interface
    on ``dst`` at the far end of that link. Instances are never mutated after
    construction; every accessor hands out copies.
    """

    def __init__(
        self,
        nodes: Iterable[NodeId],
        adjacency: Dict[NodeId, Dict[NodeId, IfaceName]],
        peers: Dict[NodeId, Dict[NodeId, IfaceName]],
    ) -> None:
        self._nodes = frozenset(nodes)
        self._adj = {src: dict(nbrs) for src, nbrs in adjacency.items()}
        self._peers = {src: dict(nbrs) for src, nbrs in peers.items()}

    def nodes(self) -> List[NodeId]:
        return sorted(self._nodes)

    def neighbors(self, node: NodeId) -> Dict[NodeId, IfaceName]:
        return dict(self._adj.get(node, {}))

    def egress_iface(self, src: NodeId, dst: NodeId) -> Optional[IfaceName]:
        return self._adj.get(src, {}).get(dst)

    def peer_iface(self, src: NodeId, dst: NodeId) -> Optional[IfaceName]:
        return self._peers.get(src, {}).get(dst)

    def has_link(self, src: NodeId, dst: NodeId) -> bool:
        return dst in self._adj.get(src, {})

    def links(self) -> List[Link]:
        out: List[Link] = []
        for src in sorted(self._adj):
            for dst, iface in sorted(self._adj[src].items()):
                out.append(
                    Link(
                        src_node=src,
                        src_iface=iface,
                        dst_node=dst,
                        dst_iface=self._peers[src][dst],
                    )
                )
        return out

    def is_empty(self) -> bool:
        return not self._adj

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._nodes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Topology):
            return NotImplemented
        return (
            self._nodes == other._nodes
            and self._adj == other._adj
            and self._peers == other._peers
        )

    def __repr__(self) -> str:
        n_links = sum(len(nbrs) for nbrs in self._adj.values())
        return f"Topology(nodes={len(self._nodes)}, links={n_links})"

    @classmethod
    def from_links(
        cls,
        links: Iterable[Link],
        logger: logging.Logger | None = None,
    ) -> "Topology":
        log = logger or logging.getLogger("fibgen.topology")
        nodes: set[NodeId] = set()
        adjacency: Dict[NodeId, Dict[NodeId, IfaceName]] = {}
        peers: Dict[NodeId, Dict[NodeId, IfaceName]] = {}
        iface_owner: Dict[tuple[NodeId, IfaceName], NodeId] = {}

        for link in links:
            nodes.add(link.src_node)
            nodes.add(link.dst_node)

            out = adjacency.setdefault(link.src_node, {})
            if link.dst_node in out:
                log.debug(
                    "link %s->%s redefined: %s/%s replaces %s/%s",
                    link.src_node,
                    link.dst_node,
                    link.src_iface,
                    link.dst_iface,
                    out[link.dst_node],
                    peers[link.src_node][link.dst_node],
                )
            owner = iface_owner.get((link.src_node, link.src_iface))
            if owner is not None and owner != link.dst_node:
                log.warning(
                    "interface %s on %s already reaches %s, now also %s",
                    link.src_iface,
                    link.src_node,
                    owner,
                    link.dst_node,
                )
            iface_owner[(link.src_node, link.src_iface)] = link.dst_node

            out[link.dst_node] = link.src_iface
            peers.setdefault(link.src_node, {})[link.dst_node] = link.dst_iface

        return cls(nodes=nodes, adjacency=adjacency, peers=peers)


def parse_link_line(line: str) -> Optional[Link]:
    """Parse one ``src src_iface dst dst_iface`` line; ``None`` for blanks."""
    text = line.strip()
    if not text:
        return None
    parts = text.split()
    if len(parts) != 4:
        raise TopologyParseError(line, f"expected 4 fields, got {len(parts)}")
    return Link(src_node=parts[0], src_iface=parts[1], dst_node=parts[2], dst_iface=parts[3])


def parse_topology_lines(
    lines: Iterable[str],
    logger: logging.Logger | None = None,
) -> Topology:
    log = logger or logging.getLogger("fibgen.topology")
    links: List[Link] = []
    skipped = 0
    for lineno, line in enumerate(lines, start=1):
        try:
            link = parse_link_line(line)
        except TopologyParseError as exc:
            skipped += 1
            log.warning("skip invalid topology line %d: %s", lineno, exc)
            continue
        if link is not None:
            links.append(link)

    topology = Topology.from_links(links, logger=log)
    log.info(
        "topology parsed: nodes=%d links=%d skipped=%d",
        len(topology),
        len(links),
        skipped,
    )
    return topology


def load_topology(path: str | Path, logger: logging.Logger | None = None) -> Topology:
    return parse_topology_lines(read_lines(path), logger=logger)
