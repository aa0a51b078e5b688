"""
Parsers for pacman's textual output.

Pure functions, no I/O. Two shapes are understood:

- ``pacman -Qi`` info blocks: one ``Key : Value`` field per line, in any
  order, possibly with indented continuation lines.
- ``pacman -Q`` listings: ``<name> <version>`` per line.

When the tool's output format changes, this is the only module that
should need to follow.
"""

from __future__ import annotations

import re

VERSION_FIELD = "Version"

_LIST_LINE_RE = re.compile(r"^(\S+)\s+(\S+)")


def parse_info_fields(text: str) -> dict[str, str]:
    """Split an info block into ``{key: value}``.

    Lines without a ``:`` delimiter (continuations, blanks) are ignored.
    When a key repeats, the first occurrence wins.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        if key and key not in fields:
            fields[key] = value.strip()
    return fields


def parse_info_version(text: str) -> str | None:
    """Return the trimmed ``Version`` value of an info block, or None."""
    if not text:
        return None
    return parse_info_fields(text).get(VERSION_FIELD)


def parse_list_line(line: str) -> tuple[str, str] | None:
    """Parse one ``<name> <version>`` listing line.

    Returns None for lines that don't have that shape; never raises.
    """
    m = _LIST_LINE_RE.match(line.strip())
    if not m:
        return None
    return m.group(1), m.group(2)
