"""
Install-source classification.

Turns the ``source`` attribute of a package resource into an install
strategy:

    None                  → install from the configured repositories
    /abs/path             → pacman -U <path>
    http:// or ftp:// URL → pacman -U <url>  (pacman fetches it)
    file:// URL           → pacman -U <path component>
    anything else         → ConfigurationError

Classification happens before any command is issued, so a bad source
never leaves a half-applied change behind.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pacstate.core.errors import ConfigurationError
from pacstate.core.models.package import ResolvedSource, SourceKind

# Schemes pacman downloads by itself
_DIRECT_SCHEMES = frozenset({"http", "ftp"})


def resolve_source(source: str | None) -> ResolvedSource:
    """Classify an install source.

    Raises:
        ConfigurationError: The source is malformed or its scheme is
            not supported.
    """
    if source is None:
        return ResolvedSource(kind=SourceKind.REPOSITORY)

    if source.startswith("/"):
        return ResolvedSource(kind=SourceKind.DIRECT, target=source)

    try:
        parts = urlsplit(source)
    except ValueError as e:
        raise ConfigurationError(f"Invalid source {source!r}: {e}") from e

    scheme = parts.scheme.lower()

    if scheme in _DIRECT_SCHEMES:
        if not parts.netloc:
            raise ConfigurationError(f"Invalid source {source!r}: URL has no host")
        return ResolvedSource(kind=SourceKind.DIRECT, target=source)

    if scheme == "file":
        if not parts.path.startswith("/"):
            raise ConfigurationError(f"Invalid source {source!r}: file URL needs an absolute path")
        return ResolvedSource(kind=SourceKind.LOCAL_FILE, target=parts.path)

    if scheme == "puppet":
        raise ConfigurationError("puppet:// URLs are not supported")

    raise ConfigurationError(
        f"Invalid source {source!r}: expected an absolute path or an "
        "http://, ftp:// or file:// URL"
    )
