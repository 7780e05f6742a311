"""Small helpers shared across owner components."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import NoReturn

from owner_commons.errors import UnreachableError

logger = logging.getLogger(__name__)


def unreachable() -> NoReturn:
    """Signal a logic defect: the calling branch must never execute."""
    raise UnreachableError()


def delete(target: os.PathLike[str] | str) -> bool:
    """Best-effort removal of ``target``; returns whether a file was removed."""

    path = Path(target)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.debug("delete failed", extra={"data": {"path": str(path), "error": str(exc)}})
        return False
    return True


def ensure_parent(target: Path) -> None:
    """Create the parent directories of ``target``; failures surface on the write that follows."""

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.debug(
            "parent directory creation failed",
            extra={"data": {"path": str(target.parent), "error": str(exc)}},
        )


__all__ = ["delete", "ensure_parent", "unreachable"]
