from __future__ import annotations

from collections import deque
from typing import Deque, Dict

from fibgen.model.routing import PathInfo
from fibgen.model.topology import Topology


def resolve_paths(topology: Topology, source: str) -> Dict[str, PathInfo]:
    """Minimum-hop paths from ``source`` to every reachable node.

    Neighbours are expanded in sorted order, so among equal-length paths the
    one through the lexicographically smallest first hop wins. The egress
    interface is always the one on ``source`` toward the first hop; the peer
    interface is the far end of the edge over which a node was discovered.
    """
    paths: Dict[str, PathInfo] = {
        source: PathInfo(
            destination=source,
            next_hop=source,
            egress_iface="",
            peer_iface="",
            hop_count=0,
        )
    }
    frontier: Deque[str] = deque([source])
    visited = {source}

    while frontier:
        current = frontier.popleft()
        current_path = paths[current]
        for neighbor in sorted(topology.neighbors(current)):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            frontier.append(neighbor)

            next_hop = neighbor if current == source else current_path.next_hop
            egress = topology.egress_iface(source, next_hop)
            peer = topology.peer_iface(current, neighbor)
            paths[neighbor] = PathInfo(
                destination=neighbor,
                next_hop=next_hop,
                egress_iface=egress or "",
                peer_iface=peer or "",
                hop_count=current_path.hop_count + 1,
            )
    return paths
