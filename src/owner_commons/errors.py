"""Library-specific exceptions shared across owner components."""

from __future__ import annotations

import os

UNREACHABLE_MESSAGE = "this code should never be reached"


class OwnerError(Exception):
    """Base class for owner-specific failures."""


class AtomicReplaceError(OwnerError, OSError):
    """Raised when a staged temp file could not replace its target."""

    def __init__(self, source: os.PathLike[str] | str, destination: os.PathLike[str] | str) -> None:
        self.source = os.fspath(source)
        self.destination = os.fspath(destination)
        super().__init__(f"Failed to overwrite {self.source} to {self.destination}")


class UnreachableError(AssertionError):
    """Raised when a code path that must never execute is reached."""

    def __init__(self) -> None:
        super().__init__(UNREACHABLE_MESSAGE)


__all__ = [
    "AtomicReplaceError",
    "OwnerError",
    "UNREACHABLE_MESSAGE",
    "UnreachableError",
]
