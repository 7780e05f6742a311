"""Process-backed implementation of the system access port."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType

from owner_commons.application.ports.system_access import SystemAccessPort
from owner_commons.domain.snapshot import SystemSnapshot, process_properties, process_property

logger = logging.getLogger(__name__)


class ProcessSystemAccess(SystemAccessPort):
    """Reads the running process unless a snapshot has been installed.

    Swapping is not synchronized; install and restore snapshots from a single
    thread (test setup/teardown).
    """

    def __init__(
        self,
        snapshot: SystemSnapshot | None = None,
        *,
        extra_properties: Mapping[str, str] | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._extra_properties = dict(extra_properties or {})

    @property
    def snapshot(self) -> SystemSnapshot | None:
        """Installed snapshot, ``None`` while reading live state."""
        return self._snapshot

    def current_properties(self) -> Mapping[str, str]:
        if self._snapshot is not None:
            return self._snapshot.properties
        properties = process_properties()
        properties.update(self._extra_properties)
        return MappingProxyType(properties)

    def current_environment(self) -> Mapping[str, str]:
        if self._snapshot is not None:
            return self._snapshot.environment
        return MappingProxyType(dict(os.environ))

    def property_value(self, key: str) -> str | None:
        if self._snapshot is not None:
            return self._snapshot.property_value(key)
        if key in self._extra_properties:
            return self._extra_properties[key]
        return process_property(key)

    def environment_value(self, key: str) -> str | None:
        if self._snapshot is not None:
            return self._snapshot.environment_value(key)
        return os.environ.get(key)

    def replace(self, snapshot: SystemSnapshot | None) -> SystemSnapshot | None:
        previous = self._snapshot
        self._snapshot = snapshot
        logger.debug(
            "system snapshot replaced",
            extra={"data": {"installed": snapshot is not None, "previous": previous is not None}},
        )
        return previous


_default: SystemAccessPort = ProcessSystemAccess()


def default_system() -> SystemAccessPort:
    """Return the process-wide system access used when none is passed."""
    return _default


def set_default_system(system: SystemAccessPort) -> SystemAccessPort:
    """Swap the process-wide system access and return the previous one."""
    global _default
    previous = _default
    _default = system
    return previous


def resolve_system(system: SystemAccessPort | None) -> SystemAccessPort:
    return system if system is not None else _default


@contextmanager
def override(
    snapshot: SystemSnapshot | None,
    *,
    system: SystemAccessPort | None = None,
) -> Iterator[SystemAccessPort]:
    """Install ``snapshot`` for the duration of the block, then restore."""

    target = resolve_system(system)
    previous = target.replace(snapshot)
    try:
        yield target
    finally:
        target.replace(previous)


__all__ = [
    "ProcessSystemAccess",
    "default_system",
    "override",
    "resolve_system",
    "set_default_system",
]
