from __future__ import annotations

from collections.abc import Callable, Generator, Mapping

import pytest

from owner_commons.domain.snapshot import SystemSnapshot
from owner_commons.infrastructure.system.access import default_system

InstallSnapshot = Callable[..., SystemSnapshot]


@pytest.fixture
def install_snapshot() -> Generator[InstallSnapshot, None, None]:
    """Install fake snapshots on the default system access; restore the first replaced one afterwards."""

    system = default_system()
    saved: list[SystemSnapshot | None] = []

    def install(
        properties: Mapping[str, str] | None = None,
        environment: Mapping[str, str] | None = None,
    ) -> SystemSnapshot:
        snapshot = SystemSnapshot(properties=properties or {}, environment=environment or {})
        previous = system.replace(snapshot)
        if not saved:
            saved.append(previous)
        return snapshot

    yield install
    if saved:
        system.replace(saved[0])


@pytest.fixture
def unix_system(install_snapshot: InstallSnapshot) -> SystemSnapshot:
    return install_snapshot({"os.name": "Linux", "user.home": "/home/john"})


@pytest.fixture
def windows_system(install_snapshot: InstallSnapshot) -> SystemSnapshot:
    return install_snapshot({"os.name": "Windows 10", "user.home": "C:\\Users\\John"})
