"""Filesystem-backed persistence of configuration mappings."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Mapping
from contextlib import suppress
from pathlib import Path

from owner_commons import properties
from owner_commons.application.ports.system_access import SystemAccessPort
from owner_commons.config.storage import AtomicReplaceMode, StorageSettings
from owner_commons.domain.snapshot import OS_NAME
from owner_commons.errors import AtomicReplaceError
from owner_commons.infrastructure.system.access import resolve_system
from owner_commons.util import ensure_parent

logger = logging.getLogger(__name__)

_NO_ATOMIC_REPLACE_MARKER = "windows"


def supports_atomic_replace(
    system: SystemAccessPort | None = None,
    mode: AtomicReplaceMode = "auto",
) -> bool:
    """Return whether a temp file may be renamed over its target.

    In ``auto`` mode the ``os.name`` property decides: Windows hosts write in place.
    """

    if mode == "always":
        return True
    if mode == "never":
        return False
    os_name = resolve_system(system).property_value(OS_NAME) or ""
    return _NO_ATOMIC_REPLACE_MARKER not in os_name.lower()


class PropertiesFileStore:
    """Persist configuration mappings as property files.

    Where atomic replace is supported, readers of the target see either the
    previous complete file or the new one. Where it is not, the target is
    overwritten in place and a failed write can leave it truncated.
    Concurrent writers are not serialized; the last replace wins.
    """

    def __init__(
        self,
        *,
        system: SystemAccessPort | None = None,
        settings: StorageSettings | None = None,
    ) -> None:
        self._system = system
        self._settings = settings or StorageSettings()

    # ------------------------------------------------------------------
    # public API

    def persist(self, target: os.PathLike[str] | str, data: Mapping[str, str]) -> Path:
        """Write ``data`` to ``target`` and return the target path."""

        path = Path(target)
        ensure_parent(path)
        atomic = supports_atomic_replace(self._system, self._settings.atomic_replace)
        logger.debug(
            "persisting properties",
            extra={"data": {"path": str(path), "entries": len(data), "atomic": atomic}},
        )
        if atomic:
            self._write_atomic(path, data)
        else:
            self._write_in_place(path, data)
        return path

    def load(self, target: os.PathLike[str] | str) -> dict[str, str]:
        """Read a previously persisted file back into a mapping."""
        return properties.read_file(Path(target))

    # ------------------------------------------------------------------
    # helpers

    def _write_in_place(self, path: Path, data: Mapping[str, str]) -> None:
        with path.open("w", encoding=properties.ENCODING, newline="") as handle:
            properties.dump(data, handle, comment=self._settings.comment)

    def _write_atomic(self, path: Path, data: Mapping[str, str]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=path.name,
            suffix=self._settings.temp_suffix,
            dir=path.parent,
        )
        tmp_path = Path(tmp_name)
        try:
            os.chmod(tmp_path, _target_mode(path))
            with os.fdopen(fd, "w", encoding=properties.ENCODING, newline="") as handle:
                properties.dump(data, handle, comment=self._settings.comment)
                handle.flush()
                if self._settings.fsync:
                    os.fsync(handle.fileno())
        except Exception:
            with suppress(FileNotFoundError):
                tmp_path.unlink()
            raise
        self._replace(tmp_path, path)

    def _replace(self, source: Path, target: Path) -> None:
        # The staged file stays behind on failure; the target keeps its prior content.
        try:
            os.replace(source, target)
        except OSError as exc:
            raise AtomicReplaceError(source, target) from exc


def _target_mode(path: Path) -> int:
    """Permission bits the target keeps: its current ones, or the umask default for a new file."""

    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save(
    target: os.PathLike[str] | str,
    data: Mapping[str, str],
    *,
    system: SystemAccessPort | None = None,
    settings: StorageSettings | None = None,
) -> Path:
    """Persist ``data`` at ``target`` with the default store configuration."""
    return PropertiesFileStore(system=system, settings=settings).persist(target, data)


__all__ = ["PropertiesFileStore", "save", "supports_atomic_replace"]
