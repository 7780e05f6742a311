"""Immutable view of process-global system properties and environment."""

from __future__ import annotations

import getpass
import os
import platform
import tempfile
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

USER_HOME = "user.home"
OS_NAME = "os.name"


def _frozen(data: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(data or {}))


def _home() -> str:
    return str(Path.home())


def _cwd() -> str:
    return str(Path.cwd())


# Each source is evaluated only when its property is asked for.
_PROPERTY_SOURCES: dict[str, Callable[[], str]] = {
    OS_NAME: platform.system,
    "os.arch": platform.machine,
    USER_HOME: _home,
    "user.dir": _cwd,
    "user.name": getpass.getuser,
    "file.separator": lambda: os.sep,
    "path.separator": lambda: os.pathsep,
    "line.separator": lambda: os.linesep,
    "tmp.dir": tempfile.gettempdir,
}

# Raised when the process has no resolvable home or working directory.
_UNRESOLVABLE = (KeyError, OSError, RuntimeError)


def process_property(key: str) -> str | None:
    """Resolve a single derived property; ``None`` when unknown or unresolvable."""

    source = _PROPERTY_SOURCES.get(key)
    if source is None:
        return None
    try:
        return source()
    except _UNRESOLVABLE:
        return None


def process_properties() -> dict[str, str]:
    """Return the property table derived from the running interpreter.

    Properties that cannot be resolved in this process are left out.
    """

    properties: dict[str, str] = {}
    for key in _PROPERTY_SOURCES:
        value = process_property(key)
        if value is not None:
            properties[key] = value
    return properties


@dataclass(frozen=True, slots=True)
class SystemSnapshot:
    """Pairing of system properties and environment variables."""

    properties: Mapping[str, str] = field(default_factory=dict)
    environment: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _frozen(self.properties))
        object.__setattr__(self, "environment", _frozen(self.environment))

    @classmethod
    def capture(cls, extra_properties: Mapping[str, str] | None = None) -> SystemSnapshot:
        """Copy the live process state into a snapshot."""

        properties = process_properties()
        properties.update(extra_properties or {})
        return cls(properties=properties, environment=dict(os.environ))

    def property_value(self, key: str) -> str | None:
        return self.properties.get(key)

    def environment_value(self, key: str) -> str | None:
        return self.environment.get(key)

    def __repr__(self) -> str:  # pragma: no cover - trivial representation
        return (
            f"SystemSnapshot(properties={dict(self.properties)!r}, "
            f"environment=<{len(self.environment)} vars>)"
        )


__all__ = ["OS_NAME", "SystemSnapshot", "USER_HOME", "process_properties", "process_property"]
