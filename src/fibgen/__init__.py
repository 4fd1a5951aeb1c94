"""Synthetic topology and static forwarding-table generation."""

__version__ = "0.1.0"
