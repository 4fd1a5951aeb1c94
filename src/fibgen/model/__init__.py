"""Topology, addressing and forwarding models."""

from fibgen.model.addresses import (
    AddressRecord,
    AddressTable,
    InterfaceKey,
    load_address_table,
    parse_address_lines,
)
from fibgen.model.routing import ForwardingEntry, PathInfo
from fibgen.model.topology import Link, Topology, load_topology, parse_topology_lines

__all__ = [
    "AddressRecord",
    "AddressTable",
    "ForwardingEntry",
    "InterfaceKey",
    "Link",
    "PathInfo",
    "Topology",
    "load_address_table",
    "load_topology",
    "parse_address_lines",
    "parse_topology_lines",
]
