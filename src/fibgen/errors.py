from __future__ import annotations


class TopologyParseError(ValueError):
    """A single input line could not be parsed."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class PreconditionError(RuntimeError):
    """Generation inputs are missing; nothing was written."""


class ResolutionMiss(LookupError):
    def __init__(self, source: str, destination: str, reason: str) -> None:
        super().__init__(f"{source}->{destination}: {reason}")
        self.source = source
        self.destination = destination
        self.reason = reason
