"""Line-oriented ``key=value`` text format used for persisted configuration.

The format is the one read and written by ``java.util.Properties``: one entry
per line, ``#``/``!`` comment lines, backslash line continuation and backslash
escapes. Output is pure ASCII; characters outside the printable ASCII range
are written as ``\\uXXXX`` (UTF-16 code units), so files are also valid
ISO-8859-1 and UTF-8.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from io import StringIO
from pathlib import Path
from typing import TextIO

ENCODING = "latin-1"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_CONTROL_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_CONTROL_UNESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


# ----------------------------------------------------------------------
# writing


def _unicode_escape(char: str) -> str:
    code = ord(char)
    if code <= 0xFFFF:
        return f"\\u{code:04X}"
    code -= 0x10000
    high = 0xD800 + (code >> 10)
    low = 0xDC00 + (code & 0x3FF)
    return f"\\u{high:04X}\\u{low:04X}"


def _escape(text: str, *, is_key: bool) -> str:
    out: list[str] = []
    for index, char in enumerate(text):
        if char == " ":
            out.append("\\ " if is_key or index == 0 else " ")
        elif char == "\\":
            out.append("\\\\")
        elif char in _CONTROL_ESCAPES:
            out.append(_CONTROL_ESCAPES[char])
        elif char in "=:#!":
            out.append("\\" + char)
        elif " " < char < "\x7f":
            out.append(char)
        else:
            out.append(_unicode_escape(char))
    return "".join(out)


def _comment_lines(comment: str) -> Iterator[str]:
    for index, line in enumerate(_LINE_BREAK.split(comment)):
        escaped = "".join(c if c < "\x7f" else _unicode_escape(c) for c in line)
        if index == 0 or not escaped.startswith(("#", "!")):
            escaped = "#" + escaped
        yield escaped


def dump(data: Mapping[str, str], fp: TextIO, *, comment: str | None = None) -> None:
    """Write ``data`` to the text stream ``fp`` in mapping order."""

    if comment is not None:
        for line in _comment_lines(comment):
            fp.write(line + "\n")
    for key, value in data.items():
        fp.write(f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}\n")


def dumps(data: Mapping[str, str], *, comment: str | None = None) -> str:
    with StringIO() as buffer:
        dump(data, buffer, comment=comment)
        return buffer.getvalue()


def to_bytes(data: Mapping[str, str], *, comment: str | None = None) -> bytes:
    """Serialize ``data`` into the bytes that would be stored on disk."""
    return dumps(data, comment=comment).encode(ENCODING)


# ----------------------------------------------------------------------
# reading


def _logical_lines(text: str) -> Iterator[str]:
    pending: str | None = None
    for natural in _LINE_BREAK.split(text):
        line = natural.lstrip(_WHITESPACE)
        if pending is None and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    out: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        index += 1
        if char != "\\":
            out.append(char)
            continue
        if index >= length:
            break
        char = text[index]
        index += 1
        if char == "u":
            digits = text[index : index + 4]
            if not _HEX4.fullmatch(digits):
                raise ValueError(f"Malformed \\uxxxx encoding: {text!r}")
            out.append(chr(int(digits, 16)))
            index += 4
        else:
            out.append(_CONTROL_UNESCAPES.get(char, char))
    result = "".join(out)
    if any("\ud800" <= c <= "\udfff" for c in result):
        result = result.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    return result


def _split_entry(line: str) -> tuple[str, str]:
    key_end = len(line)
    value_start = len(line)
    has_separator = False
    escaped = False
    for index, char in enumerate(line):
        if not escaped and (char in _SEPARATORS or char in _WHITESPACE):
            key_end = index
            value_start = index + 1
            has_separator = char in _SEPARATORS
            break
        escaped = char == "\\" and not escaped

    while value_start < len(line):
        char = line[value_start]
        if char not in _WHITESPACE:
            if has_separator or char not in _SEPARATORS:
                break
            has_separator = True
        value_start += 1

    return _unescape(line[:key_end]), _unescape(line[value_start:])


def loads(text: str) -> dict[str, str]:
    """Parse ``text``; later duplicates of a key win."""

    result: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        result[key] = value
    return result


def load(fp: TextIO) -> dict[str, str]:
    return loads(fp.read())


def from_bytes(data: bytes) -> dict[str, str]:
    return loads(data.decode(ENCODING))


def read_file(path: Path) -> dict[str, str]:
    """Read a persisted properties file back into a mapping."""
    with path.open("r", encoding=ENCODING, newline="") as handle:
        return load(handle)


__all__ = [
    "ENCODING",
    "dump",
    "dumps",
    "from_bytes",
    "load",
    "loads",
    "read_file",
    "to_bytes",
]
