"""Home-directory expansion and URL-to-path helpers."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from owner_commons.application.ports.system_access import SystemAccessPort
from owner_commons.domain.snapshot import USER_HOME
from owner_commons.infrastructure.system.access import resolve_system

# Optional scheme, then a lone "~" or "~" followed by either slash style.
# "~name/..." is left alone.
_HOME_MARKER = re.compile(r"^(?P<scheme>jar:file:|file:)?~(?=[/\\]|$)")
_LOCAL_HOSTS = ("", "localhost")


def expand_user_home(text: str, *, system: SystemAccessPort | None = None) -> str:
    """Replace a leading ``~`` (after an optional ``file:``/``jar:file:``) with ``user.home``.

    The remainder of ``text`` is copied verbatim, so a Windows home followed by a
    ``/``-separated suffix yields mixed separators.

    Raises:
        KeyError: when the marker is present but ``user.home`` is unset.
    """

    match = _HOME_MARKER.match(text)
    if match is None:
        return text
    home = resolve_system(system).property_value(USER_HOME)
    if home is None:
        raise KeyError(USER_HOME)
    return f"{match.group('scheme') or ''}{home}{text[match.end():]}"


def file_from_url(url: str) -> Path | None:
    """Return the local path named by a ``file:`` URL, ``None`` for other schemes.

    A single-letter scheme is a Windows drive (``C:/conf``), not a protocol.

    Raises:
        ValueError: when ``url`` carries no scheme, or names a remote host.
    """

    parts = urlsplit(url)
    if len(parts.scheme) < 2:
        raise ValueError(f"no protocol: {url}")
    if parts.scheme.lower() != "file":
        return None
    if parts.netloc.lower() not in _LOCAL_HOSTS:
        raise ValueError(f"file URL names a remote host: {url}")
    return Path(url2pathname(parts.path))


__all__ = ["expand_user_home", "file_from_url"]
