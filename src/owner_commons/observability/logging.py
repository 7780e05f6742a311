"""Shared logging helpers (formatter + base config builder)."""

from __future__ import annotations

import json
import logging
import os
import time
import traceback
from collections.abc import Mapping
from logging.config import dictConfig
from typing import Any

from owner_commons.config.observability import ObservabilitySettings


def _running_in_managed_runtime() -> bool:
    # Cloud Run and Kubernetes log ingestion parse JSON log lines into structured payloads.
    return bool(os.getenv("K_SERVICE") or os.getenv("KUBERNETES_SERVICE_HOST"))


def _jsonable(value: Any, depth: int = 8) -> Any:
    """Copy of a ``data`` extra that ``json.dumps`` accepts; paths become strings."""

    if depth <= 0:
        return "<depth_exceeded>"
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes len={len(value)}>"
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item, depth - 1) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item, depth - 1) for item in value]
    return str(value)


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def _structured_payload(record: logging.LogRecord) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "message": record.getMessage(),
        "severity": record.levelname,
        "logger": record.name,
        "timestamp": (
            f"{time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(record.created))}"
            f".{int(record.msecs):03d}Z"
        ),
    }
    if record.exc_info:
        payload["exception"] = "".join(traceback.format_exception(*record.exc_info)).rstrip("\n")
    if record.stack_info:
        payload["stack_info"] = str(record.stack_info)
    record_data = record.__dict__.get("data")
    if record_data:
        payload["data"] = _jsonable(record_data)
    return payload


class ExtrasFormatter(logging.Formatter):
    """Append structured `data` payloads when present."""

    def __init__(self, *args: Any, json_payload: bool = False, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._json_payload = json_payload

    def format(self, record: logging.LogRecord) -> str:
        if self._json_payload or _running_in_managed_runtime():
            return _dumps(_structured_payload(record))

        formatted = super().format(record)
        record_data = record.__dict__.get("data")
        if record_data:
            return f"{formatted} | data={_dumps(_jsonable(record_data))}"
        return formatted


def build_log_config(
    *,
    settings: ObservabilitySettings | None = None,
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a dictConfig-compatible logging configuration."""

    settings = settings or ObservabilitySettings()
    loggers: dict[str, dict[str, Any]] = {
        "owner_commons": {
            "level": settings.log_level,
            "handlers": ["console"],
            "propagate": False,
        },
    }
    if extra_loggers:
        loggers.update(extra_loggers)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _formatters(settings.log_json),
        "handlers": _handlers(),
        "root": {"level": settings.log_level, "handlers": ["console"]},
        "loggers": loggers,
    }


def _formatters(json_payload: bool) -> dict[str, Any]:
    return {
        "console": {
            "()": ExtrasFormatter,
            "json_payload": json_payload,
            "fmt": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S",
        }
    }


def _handlers() -> dict[str, Any]:
    return {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        }
    }


def configure_logging(
    *,
    settings: ObservabilitySettings | None = None,
    extra_loggers: Mapping[str, dict[str, Any]] | None = None,
) -> None:
    """Apply the shared logging config."""
    settings = settings or ObservabilitySettings()
    dictConfig(build_log_config(settings=settings, extra_loggers=extra_loggers))
    logging.getLogger("owner_commons.observability.logging").debug(
        "configured logging",
        extra={"data": {"level": settings.log_level, "json": settings.log_json}},
    )


__all__ = ["ExtrasFormatter", "build_log_config", "configure_logging"]
