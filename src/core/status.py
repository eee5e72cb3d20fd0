"""Load status models - Pure data structures.

Failures raised by the shell (network, parse, geocoder misses) are
recorded as plain values so the map state can carry the last error
without any exception crossing into the presentation layer.
"""

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    """Why a fetch did not produce usable data."""
    NETWORK = "network"
    PARSE = "parse"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class LoadError:
    """A failed load, kept on state for display and diagnostics.

    Attributes:
        source: What was being loaded ('events', 'boundaries', 'geocode')
        kind: Failure category
        message: Human-readable description
    """
    source: str
    kind: FailureKind
    message: str

    def describe(self) -> str:
        """One-line description for logs and notices."""
        return f"{self.source} {self.kind.value} failure: {self.message}"
