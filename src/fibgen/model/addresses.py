from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from fibgen.core.ipcodec import ip_to_int
from fibgen.errors import TopologyParseError
from fibgen.utils.io import read_lines


@dataclass(frozen=True, order=True)
class InterfaceKey:
    node: str
    iface: str


@dataclass(frozen=True)
class AddressRecord:
    node: str
    iface: str
    ip: str

    @property
    def key(self) -> InterfaceKey:
        return InterfaceKey(self.node, self.iface)

    def to_line(self) -> str:
        return f"{self.node},{self.iface},{self.ip}"


class AddressTable:
    """Read-only ``(node, iface) -> IPv4`` lookup."""

    def __init__(self, records: Iterable[AddressRecord] = ()) -> None:
        by_key: Dict[InterfaceKey, str] = {}
        for record in records:
            by_key[record.key] = record.ip
        self._by_key = by_key
        self._by_node: Dict[str, List[InterfaceKey]] = {}
        for key in sorted(by_key):
            self._by_node.setdefault(key.node, []).append(key)

    def lookup(self, node: str, iface: str) -> Optional[str]:
        return self._by_key.get(InterfaceKey(node, iface))

    def addresses_of(self, node: str) -> List[str]:
        return [self._by_key[key] for key in self._by_node.get(node, [])]

    def records(self) -> List[AddressRecord]:
        return [
            AddressRecord(node=key.node, iface=key.iface, ip=self._by_key[key])
            for key in sorted(self._by_key)
        ]

    def is_empty(self) -> bool:
        return not self._by_key

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __repr__(self) -> str:
        return f"AddressTable(records={len(self._by_key)})"


def parse_address_line(line: str) -> Optional[AddressRecord]:
    text = line.strip()
    if not text:
        return None
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 3:
        raise TopologyParseError(line, f"expected 3 comma-separated fields, got {len(parts)}")
    if not all(parts):
        raise TopologyParseError(line, "empty field")
    try:
        ip_to_int(parts[2])
    except ValueError as exc:
        raise TopologyParseError(line, str(exc)) from exc
    return AddressRecord(node=parts[0], iface=parts[1], ip=parts[2])


def parse_address_lines(
    lines: Iterable[str],
    logger: logging.Logger | None = None,
) -> AddressTable:
    log = logger or logging.getLogger("fibgen.addresses")
    records: List[AddressRecord] = []
    skipped = 0
    for lineno, line in enumerate(lines, start=1):
        try:
            record = parse_address_line(line)
        except TopologyParseError as exc:
            skipped += 1
            log.warning("skip invalid address line %d: %s", lineno, exc)
            continue
        if record is not None:
            records.append(record)

    table = AddressTable(records)
    log.info("address table parsed: records=%d skipped=%d", len(table), skipped)
    return table


def load_address_table(path: str | Path, logger: logging.Logger | None = None) -> AddressTable:
    return parse_address_lines(read_lines(path), logger=logger)
