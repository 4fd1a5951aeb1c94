from __future__ import annotations

from dataclasses import dataclass

SELF_DESTINATION = "0"
SELF_PREFIX_LEN = 8
SELF_IFACE = "self"
SELF_METRIC = 8
HOST_PREFIX_LEN = 32


@dataclass(frozen=True)
class PathInfo:
    destination: str
    next_hop: str
    egress_iface: str
    peer_iface: str
    hop_count: int


@dataclass(frozen=True)
class ForwardingEntry:
    source: str
    destination: str
    prefix_len: int
    egress_iface: str
    metric: int

    @property
    def is_self(self) -> bool:
        return self.destination == SELF_DESTINATION

    @classmethod
    def self_route(cls, source: str) -> "ForwardingEntry":
        return cls(
            source=source,
            destination=SELF_DESTINATION,
            prefix_len=SELF_PREFIX_LEN,
            egress_iface=SELF_IFACE,
            metric=SELF_METRIC,
        )
