"""
Filename classification helpers: extension allow-lists and content types
"""

from __future__ import annotations

from typing import Iterable, Mapping

from media_migrator.constants import CONTENT_TYPES, DEFAULT_CONTENT_TYPE


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    """Lower-case the extensions and make sure each one starts with a dot."""
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        normalized.append(ext)
    return tuple(normalized)


def has_allowed_extension(file_name: str, extensions: Iterable[str]) -> bool:
    """Case-insensitive suffix match of ``file_name`` against an allow-list."""
    lowered = file_name.lower()
    return any(lowered.endswith(ext) for ext in normalize_extensions(extensions))


def content_type_for(
    file_name: str,
    table: Mapping[str, str] = CONTENT_TYPES,
    default: str = DEFAULT_CONTENT_TYPE,
) -> str:
    """
    Resolve the MIME type to upload ``file_name`` with.

    The extension is everything after the last dot, compared lower-case
    against ``table``; anything unmapped falls back to ``default``.
    """
    if "." not in file_name:
        return default
    ext = file_name.rsplit(".", 1)[1].lower()
    return table.get(ext, default)
