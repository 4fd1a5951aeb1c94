from __future__ import annotations

import ipaddress


def ip_to_int(dotted: str) -> int:
    """Pack a dotted-quad into an int, most significant octet first.

    Octet range is not checked; only the shape (four decimal fields) is.
    """
    parts = dotted.strip().split(".")
    if len(parts) != 4:
        raise ValueError(f"Expected 4 octets in IPv4 address: {dotted!r}")
    result = 0
    for idx, part in enumerate(parts):
        if not part.isdigit():
            raise ValueError(f"Invalid octet {part!r} in IPv4 address: {dotted!r}")
        result += int(part) << (24 - idx * 8)
    return result


def int_to_ip(value: int) -> str:
    return str(ipaddress.IPv4Address(int(value)))


def format_ip(dotted: str, as_integer: bool) -> str:
    return str(ip_to_int(dotted)) if as_integer else dotted


def is_dotted_quad(text: str) -> bool:
    try:
        ip_to_int(text)
    except ValueError:
        return False
    return True
