"""Port describing access to process-global system state."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from owner_commons.domain.snapshot import SystemSnapshot


class SystemAccessPort(Protocol):
    """Reads system properties and environment variables."""

    def current_properties(self) -> Mapping[str, str]:
        """Return the live property mapping."""

    def current_environment(self) -> Mapping[str, str]:
        """Return the live environment mapping."""

    def property_value(self, key: str) -> str | None:
        """Return the property ``key`` or ``None`` when unset."""

    def environment_value(self, key: str) -> str | None:
        """Return the environment variable ``key`` or ``None`` when unset."""

    def replace(self, snapshot: SystemSnapshot | None) -> SystemSnapshot | None:
        """Install ``snapshot`` and return the one it replaced.

        ``None`` stands for the live process state on both sides.
        """


__all__ = ["SystemAccessPort"]
