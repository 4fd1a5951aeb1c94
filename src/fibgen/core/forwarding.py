from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from fibgen.core.ipcodec import format_ip, is_dotted_quad
from fibgen.core.resolver import resolve_paths
from fibgen.errors import PreconditionError, ResolutionMiss
from fibgen.model.addresses import AddressTable
from fibgen.model.routing import HOST_PREFIX_LEN, ForwardingEntry, PathInfo
from fibgen.model.topology import Topology
from fibgen.runtime.config import ForwardingConfig
from fibgen.utils.io import write_lines


@dataclass
class ForwardingSummary:
    path: str
    ip_format: str
    sources: int = 0
    entries: int = 0
    unreachable: int = 0
    unresolved: int = 0

    def as_dict(self) -> dict:
        return {
            "path": self.path,
            "ip_format": self.ip_format,
            "sources": self.sources,
            "entries": self.entries,
            "unreachable": self.unreachable,
            "unresolved": self.unresolved,
        }


def check_inputs(topology: Topology, addresses: AddressTable) -> None:
    if topology.is_empty():
        raise PreconditionError("Topology has no links; load a topology file first")
    if addresses.is_empty():
        raise PreconditionError("Address table is empty; load an address file first")


def resolve_destination_addresses(
    source: str,
    path: PathInfo,
    addresses: AddressTable,
    address_mode: str,
) -> List[str]:
    if address_mode == "all":
        found = [ip for ip in addresses.addresses_of(path.destination) if is_dotted_quad(ip)]
        if not found:
            raise ResolutionMiss(source, path.destination, "no valid address on any interface")
        return found
    ip = addresses.lookup(path.destination, path.peer_iface)
    if ip is None:
        raise ResolutionMiss(
            source,
            path.destination,
            f"no address for {path.destination},{path.peer_iface}",
        )
    if not is_dotted_quad(ip):
        raise ResolutionMiss(
            source,
            path.destination,
            f"invalid address {ip!r} for {path.destination},{path.peer_iface}",
        )
    return [ip]


def build_forwarding_table(
    topology: Topology,
    addresses: AddressTable,
    config: ForwardingConfig,
    logger: logging.Logger | None = None,
    summary: ForwardingSummary | None = None,
) -> List[ForwardingEntry]:
    log = logger or logging.getLogger("fibgen.forwarding")
    check_inputs(topology, addresses)
    stats = summary or ForwardingSummary(path="", ip_format=config.ip_format)

    entries: List[ForwardingEntry] = []
    nodes = topology.nodes()
    for source in nodes:
        paths = resolve_paths(topology, source)
        stats.sources += 1
        entries.append(ForwardingEntry.self_route(source))

        for destination in nodes:
            if destination == source:
                continue
            path = paths.get(destination)
            if path is None:
                stats.unreachable += 1
                log.warning("no path %s->%s, skip route", source, destination)
                continue
            try:
                dest_ips = resolve_destination_addresses(
                    source, path, addresses, config.address_mode
                )
            except ResolutionMiss as exc:
                stats.unresolved += 1
                log.warning("skip route %s", exc)
                continue

            metric = path.hop_count * config.metric_scale
            for ip in dest_ips:
                entries.append(
                    ForwardingEntry(
                        source=source,
                        destination=ip,
                        prefix_len=HOST_PREFIX_LEN,
                        egress_iface=path.egress_iface,
                        metric=metric,
                    )
                )

    stats.entries = len(entries)
    return entries


def render_entry(entry: ForwardingEntry, as_integer: bool) -> str:
    if entry.is_self:
        destination = entry.destination
    else:
        destination = format_ip(entry.destination, as_integer)
    return (
        f"+ fwd {entry.source} {destination} {entry.prefix_len} "
        f"{entry.egress_iface} {entry.metric}"
    )


def render_table(entries: Iterable[ForwardingEntry], as_integer: bool) -> List[str]:
    return [render_entry(entry, as_integer) for entry in entries]


def write_forwarding_table(
    path: str | Path,
    topology: Topology,
    addresses: AddressTable,
    config: ForwardingConfig,
    logger: logging.Logger | None = None,
) -> ForwardingSummary:
    log = logger or logging.getLogger("fibgen.forwarding")
    summary = ForwardingSummary(path=str(path), ip_format=config.ip_format)
    entries = build_forwarding_table(topology, addresses, config, logger=log, summary=summary)
    lines = render_table(entries, config.as_integer)
    write_lines(path, lines)
    log.info(
        "forwarding table written: path=%s entries=%d unreachable=%d unresolved=%d",
        path,
        summary.entries,
        summary.unreachable,
        summary.unresolved,
    )
    return summary
