"""Single-entry jar (ZIP) archives holding a configuration mapping."""

from __future__ import annotations

import logging
import os
import zipfile
from collections.abc import Mapping
from pathlib import Path

from owner_commons import properties
from owner_commons.config.storage import StorageSettings
from owner_commons.util import ensure_parent

logger = logging.getLogger(__name__)


def pack_entry(
    target: os.PathLike[str] | str,
    entry_name: str,
    data: Mapping[str, str],
    *,
    settings: StorageSettings | None = None,
) -> Path:
    """Write a new archive at ``target`` containing ``entry_name`` only.

    The archive is truncated and written in place; a failure mid-write leaves
    a partial archive behind. The header comment comes from ``settings``
    (``OWNER_STORE_COMMENT``), as for property files.
    """

    if not entry_name:
        raise ValueError("entry_name must be provided")
    path = Path(target)
    ensure_parent(path)
    payload = properties.to_bytes(data, comment=(settings or StorageSettings()).comment)
    with zipfile.ZipFile(path, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(entry_name, payload)
    logger.debug(
        "packed archive entry",
        extra={"data": {"path": str(path), "entry": entry_name, "size_bytes": len(payload)}},
    )
    return path


def read_entry(target: os.PathLike[str] | str, entry_name: str) -> dict[str, str]:
    """Parse ``entry_name`` from the archive at ``target``.

    Raises:
        KeyError: when the archive has no such entry.
    """

    with zipfile.ZipFile(Path(target)) as archive:
        return properties.from_bytes(archive.read(entry_name))


save_jar = pack_entry


__all__ = ["pack_entry", "read_entry", "save_jar"]
